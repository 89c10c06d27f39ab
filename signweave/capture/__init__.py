"""Client-side capture of signing clips."""

from .devices import (
    CaptureDevice,
    CapturePermissionDenied,
    CaptureUnsupported,
    VideoStream,
)
from .session import (
    CaptureEvent,
    CaptureMode,
    CaptureSession,
    IllegalTransition,
    RecordingState,
    local_submitter,
)

__all__ = [
    "CaptureDevice",
    "CaptureEvent",
    "CaptureMode",
    "CapturePermissionDenied",
    "CaptureSession",
    "CaptureUnsupported",
    "IllegalTransition",
    "RecordingState",
    "VideoStream",
    "local_submitter",
]
