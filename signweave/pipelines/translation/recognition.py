"""Video-to-text stage: read the signing in a recorded clip."""

from __future__ import annotations

import logging

from signweave.errors import EmptyTranslation
from signweave.services.generation_client import GenerationClientInterface
from signweave.telemetry import time_stage

from .prompts import build_recognition_prompt, truncate_for_log

logger = logging.getLogger("signweave.pipelines.translation")


async def video_to_text(
    client: GenerationClientInterface,
    video_data_uri: str,
) -> str:
    """Ask the text+vision model what the clip signs and return that text."""

    with time_stage("video_to_text"):
        raw_text = await client.generate_text(build_recognition_prompt(video_data_uri))

    text = (raw_text or "").strip()
    if not text:
        logger.warning("Video-to-text returned no text")
        raise EmptyTranslation("The model returned no translation for the video.")

    logger.info("Video-to-text: %s", truncate_for_log(text))
    return text


__all__ = ["video_to_text"]
