"""Typed results shared across the translation pipeline.

Kept apart from the stage modules so ``orchestration`` and the controllers can
import them without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FlowKind(str, Enum):
    """The three user-facing translation flows."""

    SIGN_TO_TEXT = "sign-to-text"
    TEXT_TO_SIGN = "text-to-sign"
    SIGN_TO_SIGN = "sign-to-sign"


@dataclass(frozen=True)
class TextTranslation:
    """Result of the sign-to-text flow."""

    text: str


@dataclass(frozen=True)
class SignAnimation:
    """Result of the text-to-sign and sign-to-sign flows.

    ``animation_data_uri`` is a single representative frame (an inline image),
    ``audio_data_uri`` is always a ``data:audio/wav;base64,...`` URI.
    """

    animation_data_uri: str
    audio_data_uri: str


__all__ = ["FlowKind", "SignAnimation", "TextTranslation"]
