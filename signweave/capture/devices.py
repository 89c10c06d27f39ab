"""Contracts for the camera a capture session records from."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

ChunkCallback = Callable[[bytes], None]


class CaptureUnsupported(RuntimeError):
    """The environment has no way to open a camera stream."""


class CapturePermissionDenied(RuntimeError):
    """The user (or platform) refused camera access."""


class VideoStream(ABC):
    """A live camera stream with an attached chunked recorder."""

    @abstractmethod
    def start(self, on_chunk: ChunkCallback) -> None:
        """Begin recording; encoded chunks are handed to ``on_chunk``."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop recording, flushing any pending chunk before returning."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying device."""


class CaptureDevice(ABC):
    """Source of camera streams."""

    @abstractmethod
    async def open(self, mime_type: str) -> VideoStream:
        """Open a stream recording ``mime_type``.

        Raises :class:`CaptureUnsupported` or :class:`CapturePermissionDenied`.
        """


__all__ = [
    "CaptureDevice",
    "CapturePermissionDenied",
    "CaptureUnsupported",
    "ChunkCallback",
    "VideoStream",
]
