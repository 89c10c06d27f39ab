"""Capture state machine feeding recorded clips to the translation actions.

States and the events that move between them live in one table per mode;
the public methods are no-ops when their event is not legal from the current
state, and :meth:`CaptureSession._transition` refuses anything else outright.

    idle --request_access--> requesting --granted--> ready
                                        --denied---> denied --request_access--> requesting
    ready --start--> recording --stop--> processing --failed--> ready
                                                    --succeeded--> ready (sign-to-text)
                                                    --succeeded--> done  (sign-to-sign)
    done --reset--> ready
    any --close--> idle
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, Mapping, Optional, Union

from signweave.config.settings import settings
from signweave.controllers.actions import ACTION_HANDLERS
from signweave.pipelines.translation import FlowKind, TranslationFlows
from signweave.services.media import build_data_uri
from signweave.views.translation import ActionState, SignAnimationView, TextTranslationView

from .devices import CaptureDevice, CapturePermissionDenied, CaptureUnsupported, VideoStream

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "Webcam access is not supported on this device."
DENIED_MESSAGE = "Webcam access was denied. Please enable it in your settings."
RECORDING_FAILED_MESSAGE = "The recording could not be completed. Please try again."

Submitter = Callable[[str], Awaitable[ActionState]]


class RecordingState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    READY = "ready"
    DENIED = "denied"
    RECORDING = "recording"
    PROCESSING = "processing"
    DONE = "done"


class CaptureEvent(str, Enum):
    REQUEST_ACCESS = "request_access"
    ACCESS_GRANTED = "access_granted"
    ACCESS_DENIED = "access_denied"
    START = "start"
    STOP = "stop"
    SUBMIT_FAILED = "submit_failed"
    SUBMIT_SUCCEEDED = "submit_succeeded"
    RESET = "reset"


class CaptureMode(str, Enum):
    """Which flow a session submits to; values match :class:`FlowKind`."""

    SIGN_TO_TEXT = FlowKind.SIGN_TO_TEXT.value
    SIGN_TO_SIGN = FlowKind.SIGN_TO_SIGN.value


_COMMON_TRANSITIONS: dict[tuple[RecordingState, CaptureEvent], RecordingState] = {
    (RecordingState.IDLE, CaptureEvent.REQUEST_ACCESS): RecordingState.REQUESTING,
    (RecordingState.DENIED, CaptureEvent.REQUEST_ACCESS): RecordingState.REQUESTING,
    (RecordingState.REQUESTING, CaptureEvent.ACCESS_GRANTED): RecordingState.READY,
    (RecordingState.REQUESTING, CaptureEvent.ACCESS_DENIED): RecordingState.DENIED,
    (RecordingState.READY, CaptureEvent.START): RecordingState.RECORDING,
    (RecordingState.RECORDING, CaptureEvent.STOP): RecordingState.PROCESSING,
    (RecordingState.PROCESSING, CaptureEvent.SUBMIT_FAILED): RecordingState.READY,
}

TRANSITIONS: dict[CaptureMode, Mapping[tuple[RecordingState, CaptureEvent], RecordingState]] = {
    CaptureMode.SIGN_TO_TEXT: {
        **_COMMON_TRANSITIONS,
        (RecordingState.PROCESSING, CaptureEvent.SUBMIT_SUCCEEDED): RecordingState.READY,
    },
    CaptureMode.SIGN_TO_SIGN: {
        **_COMMON_TRANSITIONS,
        (RecordingState.PROCESSING, CaptureEvent.SUBMIT_SUCCEEDED): RecordingState.DONE,
        (RecordingState.DONE, CaptureEvent.RESET): RecordingState.READY,
    },
}


class IllegalTransition(RuntimeError):
    """An event was fired from a state that does not accept it."""


def local_submitter(mode: CaptureMode, flows: TranslationFlows) -> Submitter:
    """Submit clips straight to the in-process action for ``mode``."""

    handler = ACTION_HANDLERS[FlowKind(mode.value)]

    async def submit(video_data_uri: str) -> ActionState:
        return await handler(video_data_uri, flows)

    return submit


class CaptureSession:
    """One camera, one recording at a time, one submission per recording."""

    def __init__(
        self,
        device: CaptureDevice,
        submit: Submitter,
        *,
        mode: CaptureMode = CaptureMode.SIGN_TO_TEXT,
        mime_type: str | None = None,
    ) -> None:
        self._device = device
        self._submit = submit
        self._mode = mode
        self._transitions = TRANSITIONS[mode]
        self._mime_type = mime_type or settings.translation.video_mime_type
        self._state = RecordingState.IDLE
        self._stream: Optional[VideoStream] = None
        self._chunks: list[bytes] = []
        self._closes = 0
        self.error: Optional[str] = None
        self.result: Optional[Union[TextTranslationView, SignAnimationView]] = None

    @property
    def state(self) -> RecordingState:
        return self._state

    @property
    def mode(self) -> CaptureMode:
        return self._mode

    @property
    def recorded_bytes(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def can(self, event: CaptureEvent) -> bool:
        return (self._state, event) in self._transitions

    def _transition(self, event: CaptureEvent) -> RecordingState:
        target = self._transitions.get((self._state, event))
        if target is None:
            raise IllegalTransition(
                f"{event.value} is not allowed from {self._state.value} ({self._mode.value})"
            )
        logger.debug("Capture %s: %s -> %s", event.value, self._state.value, target.value)
        self._state = target
        return target

    async def request_access(self) -> RecordingState:
        """Open the camera and arm the recorder."""

        if not self.can(CaptureEvent.REQUEST_ACCESS):
            return self._state

        self._transition(CaptureEvent.REQUEST_ACCESS)
        self.error = None
        self.result = None
        try:
            stream = await self._device.open(self._mime_type)
        except CaptureUnsupported:
            logger.warning("Camera capture is not supported")
            self.error = UNSUPPORTED_MESSAGE
            return self._transition(CaptureEvent.ACCESS_DENIED)
        except CapturePermissionDenied as exc:
            logger.warning("Camera access denied: %s", exc)
            self.error = DENIED_MESSAGE
            return self._transition(CaptureEvent.ACCESS_DENIED)

        self._stream = stream
        return self._transition(CaptureEvent.ACCESS_GRANTED)

    def start(self) -> bool:
        """Begin a new recording; returns ``False`` when not ready."""

        if self._stream is None or not self.can(CaptureEvent.START):
            return False

        self._chunks.clear()
        self.result = None
        self.error = None
        self._stream.start(self._on_chunk)
        self._transition(CaptureEvent.START)
        return True

    def _on_chunk(self, data: bytes) -> None:
        if not data:
            return
        if self._state not in (RecordingState.RECORDING, RecordingState.PROCESSING):
            logger.debug("Dropping %s-byte chunk received while %s", len(data), self._state.value)
            return
        self._chunks.append(bytes(data))

    async def stop(self) -> Optional[ActionState]:
        """Finish the recording and submit it; ``None`` when not recording.

        A session closed while this is in flight stays closed: the outcome is
        returned but not applied.
        """

        if self._stream is None or not self.can(CaptureEvent.STOP):
            return None

        self._transition(CaptureEvent.STOP)
        closes = self._closes
        try:
            await self._stream.stop()
        except Exception:
            logger.exception("Recorder failed to stop cleanly")
            return self._finish(ActionState(error=RECORDING_FAILED_MESSAGE), closes)

        if closes != self._closes:
            logger.info("Session closed while the recorder was stopping; nothing submitted")
            return None

        video_data_uri = build_data_uri(self._mime_type, b"".join(self._chunks))
        logger.info(
            "Submitting %s-byte recording for %s",
            self.recorded_bytes,
            self._mode.value,
        )
        try:
            outcome = await self._submit(video_data_uri)
        except Exception:
            logger.exception("Submitting the recording failed")
            outcome = ActionState(error=RECORDING_FAILED_MESSAGE)
        return self._finish(outcome, closes)

    def _finish(self, outcome: ActionState, closes: int) -> ActionState:
        if closes != self._closes:
            # close() ran while the recording was in flight; the outcome is dropped.
            logger.info("Discarding %s outcome for a closed session", self._mode.value)
            return outcome
        if outcome.error:
            self.error = outcome.error
            self._transition(CaptureEvent.SUBMIT_FAILED)
        else:
            self.result = outcome.data
            self._transition(CaptureEvent.SUBMIT_SUCCEEDED)
        return outcome

    def reset(self) -> bool:
        """Leave ``done`` for another recording (sign-to-sign only)."""

        if not self.can(CaptureEvent.RESET):
            return False
        self.result = None
        self.error = None
        self._transition(CaptureEvent.RESET)
        return True

    def close(self) -> None:
        """Release the camera and return to ``idle`` from any state."""

        if self._stream is not None:
            self._stream.close()
            self._stream = None
        self._chunks.clear()
        self.result = None
        self.error = None
        self._state = RecordingState.IDLE
        self._closes += 1


__all__ = [
    "CaptureEvent",
    "CaptureMode",
    "CaptureSession",
    "IllegalTransition",
    "RecordingState",
    "Submitter",
    "TRANSITIONS",
    "local_submitter",
]
