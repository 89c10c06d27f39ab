"""Pydantic schemas for the translation endpoints and the action boundary."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from signweave.config.settings import settings
from signweave.errors import MediaFormatError
from signweave.services.media import parse_data_uri

INVALID_VIDEO_MESSAGE = "Invalid video format. Expected a WebM video data URI."
EMPTY_TEXT_MESSAGE = "Text cannot be empty."


def video_data_uri_prefix() -> str:
    return f"data:{settings.translation.video_mime_type};base64,"


class SignVideoRequest(BaseModel):
    """Request body for the video-driven flows; checked by the action boundary."""

    video_data_uri: Any = Field(default=None, alias="videoDataUri")

    model_config = ConfigDict(populate_by_name=True)


class TextToSignRequest(BaseModel):
    """Request body for the text-to-sign flow; checked by the action boundary."""

    text: Any = None


class SignVideoInput(BaseModel):
    """Validated video input: a base64 WebM data URI with a non-empty payload."""

    video_data_uri: str = Field(alias="videoDataUri")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("video_data_uri")
    @classmethod
    def check_video_data_uri(cls, value: str) -> str:
        if not value.startswith(video_data_uri_prefix()):
            raise PydanticCustomError("video_format", INVALID_VIDEO_MESSAGE)
        try:
            media = parse_data_uri(value)
        except MediaFormatError:
            raise PydanticCustomError(
                "video_payload", "The video payload is not valid base64."
            ) from None
        if not media.payload:
            raise PydanticCustomError("video_empty", "The recorded video is empty.")
        return value


class TextInput(BaseModel):
    """Validated free-text input for text-to-sign."""

    text: str

    model_config = ConfigDict(frozen=True)

    @field_validator("text")
    @classmethod
    def check_text(cls, value: str) -> str:
        limit = settings.translation.max_text_length
        if not value.strip():
            raise PydanticCustomError("text_empty", EMPTY_TEXT_MESSAGE)
        if len(value) > limit:
            raise PydanticCustomError(
                "text_too_long",
                "Text must be {limit} characters or less.",
                {"limit": limit},
            )
        return value


class TextTranslationView(BaseModel):
    text: str


class SignAnimationView(BaseModel):
    animation_data_uri: str = Field(alias="animationDataUri")
    audio_data_uri: str = Field(alias="audioDataUri")

    model_config = ConfigDict(populate_by_name=True)


class ActionState(BaseModel):
    """Uniform result of an action: either ``data`` or an ``error`` message."""

    data: Optional[Union[SignAnimationView, TextTranslationView]] = None
    error: Optional[str] = None
    field_errors: Optional[dict[str, list[str]]] = Field(default=None, alias="fieldErrors")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


class PipelineStageView(BaseModel):
    order: int
    name: str
    module: str
    summary: str
    flows: list[str]


__all__ = [
    "ActionState",
    "EMPTY_TEXT_MESSAGE",
    "INVALID_VIDEO_MESSAGE",
    "PipelineStageView",
    "SignAnimationView",
    "SignVideoInput",
    "SignVideoRequest",
    "TextInput",
    "TextToSignRequest",
    "TextTranslationView",
    "video_data_uri_prefix",
]
