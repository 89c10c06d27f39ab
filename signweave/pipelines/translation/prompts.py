"""Prompt templates for the translation stages."""

from __future__ import annotations

from signweave.services.generation_client import PromptPart

SIGN_RECOGNITION_INSTRUCTIONS = (
    "You are a sign language expert. You will watch the following video and "
    "translate the sign language into text. Reply with the translated text only."
)

ANIMATION_DESCRIPTION_TEMPLATE = """You are an expert animator of sign language.

Given the text: "{text}", describe the animation to display the text in sign language.
Be as detailed as possible in terms of sequence of sign and transitions.
The description should not contain any information about the viewpoint or camera movements.
The description should only describe the sequence of signs. Do not include anything else."""

FRAME_PROMPT_TEMPLATE = """You are an expert image generator.

Given the animation description: "{description}", create a prompt suitable for image generation of a single frame representing the sign language.

The prompt description should be about a frame of an animation in sign language with a neutral background.
Do not include anything else."""


def build_recognition_prompt(video_data_uri: str) -> list[PromptPart]:
    """Instructions first, then the recorded clip."""

    return [
        PromptPart.of_text(SIGN_RECOGNITION_INSTRUCTIONS),
        PromptPart.of_media(video_data_uri),
    ]


def build_description_prompt(text: str) -> list[PromptPart]:
    return [PromptPart.of_text(ANIMATION_DESCRIPTION_TEMPLATE.format(text=text))]


def build_frame_prompt(description: str) -> list[PromptPart]:
    return [PromptPart.of_text(FRAME_PROMPT_TEMPLATE.format(description=description))]


def truncate_for_log(value: str, max_length: int = 120) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


__all__ = [
    "ANIMATION_DESCRIPTION_TEMPLATE",
    "FRAME_PROMPT_TEMPLATE",
    "SIGN_RECOGNITION_INSTRUCTIONS",
    "build_description_prompt",
    "build_frame_prompt",
    "build_recognition_prompt",
    "truncate_for_log",
]
