"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse, HealthResponse
from .translation import (
    ActionState,
    PipelineStageView,
    SignAnimationView,
    SignVideoInput,
    SignVideoRequest,
    TextInput,
    TextToSignRequest,
    TextTranslationView,
)

__all__ = [
    "ActionState",
    "ErrorResponse",
    "HealthResponse",
    "PipelineStageView",
    "SignAnimationView",
    "SignVideoInput",
    "SignVideoRequest",
    "TextInput",
    "TextToSignRequest",
    "TextTranslationView",
]
