"""Text-to-description stages of the text-to-sign branch.

``text_to_animation_description`` turns plain text into a camera-agnostic
description of the signing sequence. ``description_to_frame_prompt`` condenses
that description into a prompt for one representative frame.
"""

from __future__ import annotations

import logging

from signweave.errors import EmptyDescription
from signweave.services.generation_client import GenerationClientInterface
from signweave.telemetry import time_stage

from .prompts import build_description_prompt, build_frame_prompt, truncate_for_log

logger = logging.getLogger("signweave.pipelines.translation")


async def text_to_animation_description(
    client: GenerationClientInterface,
    text: str,
) -> str:
    """Describe how ``text`` is signed, sign by sign."""

    with time_stage("text_to_animation_description"):
        raw_description = await client.generate_text(build_description_prompt(text))

    description = (raw_description or "").strip()
    if not description:
        logger.warning("Animation description came back empty")
        raise EmptyDescription("The model returned no animation description.")

    logger.info("Animation description: %s", truncate_for_log(description))
    return description


async def description_to_frame_prompt(
    client: GenerationClientInterface,
    description: str,
) -> str:
    """Rewrite a signing description as an image prompt for a single frame."""

    with time_stage("description_to_frame_prompt"):
        raw_prompt = await client.generate_text(build_frame_prompt(description))

    frame_prompt = (raw_prompt or "").strip()
    if not frame_prompt:
        logger.warning("Frame prompt came back empty")
        raise EmptyDescription("The model returned no frame prompt.")

    logger.info("Frame prompt: %s", truncate_for_log(frame_prompt))
    return frame_prompt


__all__ = ["description_to_frame_prompt", "text_to_animation_description"]
