"""Failure taxonomy shared by the generation client, stages and flows.

Stages raise these typed failures and the flows let them propagate; only the
action boundary in ``signweave.controllers.actions`` catches them and turns
them into user-facing messages.
"""

from __future__ import annotations

from typing import Mapping, Sequence


class TranslationError(RuntimeError):
    """Root of every failure raised by the translation core."""


class ValidationError(TranslationError, ValueError):
    """Untrusted input failed shape validation; no upstream call was made."""

    def __init__(
        self,
        message: str,
        field_errors: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field_errors: dict[str, list[str]] = {
            field: list(messages) for field, messages in (field_errors or {}).items()
        }


class GenerationError(TranslationError):
    """The hosted generation service returned nothing usable."""


class UpstreamUnavailable(GenerationError):
    """Raised for any failed call to the generation service."""


class EmptyResponse(GenerationError):
    """The generation service answered, but without usable content."""


class TranslationFailed(TranslationError):
    """A composed flow could not produce a meaningful result."""


class EmptyTranslation(EmptyResponse, TranslationFailed):
    """The video-to-text stage produced no text."""


class EmptyDescription(EmptyResponse):
    """The animation description (or frame prompt) stage produced no text."""


class NoImageReturned(EmptyResponse):
    """The image model answered without an image."""


class NoAudioReturned(EmptyResponse):
    """The speech model answered without audio samples."""


class EncodingError(TranslationError):
    """Raw audio samples could not be assembled into a container."""


class MediaFormatError(TranslationError, ValueError):
    """A string is not a well-formed base64 data URI."""


__all__ = [
    "TranslationError",
    "ValidationError",
    "GenerationError",
    "UpstreamUnavailable",
    "EmptyResponse",
    "TranslationFailed",
    "EmptyTranslation",
    "EmptyDescription",
    "NoImageReturned",
    "NoAudioReturned",
    "EncodingError",
    "MediaFormatError",
]
