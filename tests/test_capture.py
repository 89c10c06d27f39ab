"""Tests for the capture state machine."""

from __future__ import annotations

import asyncio
import base64
from typing import Optional

import pytest

from signweave.capture import (
    CaptureDevice,
    CaptureEvent,
    CaptureMode,
    CapturePermissionDenied,
    CaptureSession,
    CaptureUnsupported,
    IllegalTransition,
    RecordingState,
    VideoStream,
    local_submitter,
)
from signweave.capture.session import DENIED_MESSAGE, UNSUPPORTED_MESSAGE
from signweave.pipelines.translation import TranslationFlows
from signweave.views import ActionState, SignAnimationView, TextTranslationView


class FakeStream(VideoStream):
    def __init__(self, tail: bytes = b"") -> None:
        self.tail = tail
        self.on_chunk = None
        self.started = 0
        self.closed = False

    def start(self, on_chunk) -> None:
        self.started += 1
        self.on_chunk = on_chunk

    def emit(self, data: bytes) -> None:
        self.on_chunk(data)

    async def stop(self) -> None:
        if self.tail:
            self.on_chunk(self.tail)

    def close(self) -> None:
        self.closed = True


class FakeDevice(CaptureDevice):
    def __init__(self, error: Optional[Exception] = None, stream: Optional[FakeStream] = None) -> None:
        self.error = error
        self.stream = stream or FakeStream()
        self.opened_with: list[str] = []

    async def open(self, mime_type: str) -> VideoStream:
        self.opened_with.append(mime_type)
        if self.error is not None:
            raise self.error
        return self.stream


class RecordingSubmitter:
    def __init__(self, outcome: ActionState) -> None:
        self.outcome = outcome
        self.received: list[str] = []

    async def __call__(self, video_data_uri: str) -> ActionState:
        self.received.append(video_data_uri)
        return self.outcome


TEXT_SUCCESS = ActionState(data=TextTranslationView(text="hello"))
SIGN_SUCCESS = ActionState(
    data=SignAnimationView(animation_data_uri="data:image/png;base64,AA==", audio_data_uri="data:audio/wav;base64,AA==")
)
FAILURE = ActionState(error="translation failed")


def _ready_session(mode=CaptureMode.SIGN_TO_TEXT, outcome=TEXT_SUCCESS, stream=None):
    device = FakeDevice(stream=stream)
    submit = RecordingSubmitter(outcome)
    session = CaptureSession(device, submit, mode=mode)
    asyncio.run(session.request_access())
    return session, device, submit


def test_session_starts_idle_and_ignores_start_and_stop():
    session = CaptureSession(FakeDevice(), RecordingSubmitter(TEXT_SUCCESS))

    assert session.state is RecordingState.IDLE
    assert session.start() is False
    assert asyncio.run(session.stop()) is None
    assert session.state is RecordingState.IDLE


def test_granted_access_arms_recorder():
    session, device, _ = _ready_session()

    assert session.state is RecordingState.READY
    assert device.opened_with == ["video/webm"]


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (CapturePermissionDenied("blocked"), DENIED_MESSAGE),
        (CaptureUnsupported(), UNSUPPORTED_MESSAGE),
    ],
)
def test_refused_access_moves_to_denied_with_reason(error, message):
    session = CaptureSession(FakeDevice(error=error), RecordingSubmitter(TEXT_SUCCESS))

    state = asyncio.run(session.request_access())

    assert state is RecordingState.DENIED
    assert session.error == message
    assert session.start() is False


def test_denied_session_can_retry_access():
    device = FakeDevice(error=CapturePermissionDenied("blocked"))
    session = CaptureSession(device, RecordingSubmitter(TEXT_SUCCESS))
    asyncio.run(session.request_access())

    device.error = None
    state = asyncio.run(session.request_access())

    assert state is RecordingState.READY
    assert session.error is None


def test_sign_to_text_submits_concatenated_chunks_and_returns_to_ready():
    stream = FakeStream(tail=b"-tail")
    session, _, submit = _ready_session(stream=stream)

    assert session.start() is True
    assert session.state is RecordingState.RECORDING
    stream.emit(b"first")
    stream.emit(b"")
    stream.emit(b"-second")
    outcome = asyncio.run(session.stop())

    expected = "data:video/webm;base64," + base64.b64encode(b"first-second-tail").decode()
    assert submit.received == [expected]
    assert outcome is TEXT_SUCCESS
    assert session.state is RecordingState.READY
    assert session.result == TextTranslationView(text="hello")


def test_start_is_ignored_while_recording():
    session, _, _ = _ready_session()
    session.start()

    assert session.start() is False
    assert session.state is RecordingState.RECORDING


def test_new_recording_discards_previous_chunks():
    stream = FakeStream()
    session, _, submit = _ready_session(stream=stream)

    session.start()
    stream.emit(b"old")
    asyncio.run(session.stop())
    session.start()
    stream.emit(b"new")
    asyncio.run(session.stop())

    assert submit.received[-1] == "data:video/webm;base64," + base64.b64encode(b"new").decode()


def test_failed_submission_returns_to_ready_with_error():
    session, _, _ = _ready_session(outcome=FAILURE)
    session.start()

    asyncio.run(session.stop())

    assert session.state is RecordingState.READY
    assert session.error == "translation failed"
    assert session.result is None


def test_sign_to_sign_success_is_done_until_reset():
    session, _, _ = _ready_session(mode=CaptureMode.SIGN_TO_SIGN, outcome=SIGN_SUCCESS)
    session.start()
    asyncio.run(session.stop())

    assert session.state is RecordingState.DONE
    assert session.start() is False
    assert session.reset() is True
    assert session.state is RecordingState.READY
    assert session.result is None


def test_sign_to_sign_failure_returns_to_ready():
    session, _, _ = _ready_session(mode=CaptureMode.SIGN_TO_SIGN, outcome=FAILURE)
    session.start()
    asyncio.run(session.stop())

    assert session.state is RecordingState.READY
    assert session.error == "translation failed"


def test_reset_is_not_available_in_sign_to_text():
    session, _, _ = _ready_session()

    assert session.reset() is False
    assert session.state is RecordingState.READY


def test_close_releases_stream_from_any_state():
    stream = FakeStream()
    session, _, _ = _ready_session(stream=stream)
    session.start()

    session.close()

    assert stream.closed
    assert session.state is RecordingState.IDLE
    assert session.start() is False


@pytest.mark.parametrize("outcome", [TEXT_SUCCESS, FAILURE])
def test_close_during_submission_keeps_session_closed(outcome):
    device = FakeDevice()
    session = None

    async def closing_submit(video_data_uri):
        session.close()
        return outcome

    session = CaptureSession(device, closing_submit)
    asyncio.run(session.request_access())
    session.start()

    returned = asyncio.run(session.stop())

    assert returned is outcome
    assert session.state is RecordingState.IDLE
    assert session.result is None
    assert session.error is None
    assert device.stream.closed


def test_close_while_recorder_stops_skips_submission():
    session = None

    class ClosingStream(FakeStream):
        async def stop(self):
            session.close()

    submit = RecordingSubmitter(TEXT_SUCCESS)
    session = CaptureSession(FakeDevice(stream=ClosingStream()), submit)
    asyncio.run(session.request_access())
    session.start()

    assert asyncio.run(session.stop()) is None
    assert session.state is RecordingState.IDLE
    assert submit.received == []


def test_stale_submission_does_not_touch_a_reopened_session():
    async def scenario():
        release = asyncio.Event()
        submissions = 0
        stream = FakeStream()

        async def submit(video_data_uri):
            nonlocal submissions
            submissions += 1
            if submissions == 1:
                await release.wait()
                return FAILURE
            return TEXT_SUCCESS

        session = CaptureSession(FakeDevice(stream=stream), submit)
        await session.request_access()
        session.start()
        stale = asyncio.ensure_future(session.stop())
        await asyncio.sleep(0)

        session.close()
        await session.request_access()
        session.start()
        stream.emit(b"fresh")
        await session.stop()
        release.set()
        await stale
        return session

    session = asyncio.run(scenario())

    assert session.state is RecordingState.READY
    assert session.result == TextTranslationView(text="hello")
    assert session.error is None


def test_illegal_transitions_are_refused():
    session = CaptureSession(FakeDevice(), RecordingSubmitter(TEXT_SUCCESS))

    assert not session.can(CaptureEvent.STOP)
    with pytest.raises(IllegalTransition):
        session._transition(CaptureEvent.STOP)


def test_local_submitter_runs_the_real_action(fake_client):
    flows = TranslationFlows(fake_client)
    stream = FakeStream()
    device = FakeDevice(stream=stream)
    session = CaptureSession(
        device,
        local_submitter(CaptureMode.SIGN_TO_TEXT, flows),
        mode=CaptureMode.SIGN_TO_TEXT,
    )
    asyncio.run(session.request_access())
    session.start()
    stream.emit(b"\x1aE\xdf\xa3clip")

    asyncio.run(session.stop())

    assert session.state is RecordingState.READY
    assert session.result == TextTranslationView(text="hello world")
    assert fake_client.calls["text"] == 1


def test_empty_recording_is_rejected_before_translation(fake_client):
    flows = TranslationFlows(fake_client)
    session = CaptureSession(
        FakeDevice(),
        local_submitter(CaptureMode.SIGN_TO_SIGN, flows),
        mode=CaptureMode.SIGN_TO_SIGN,
    )
    asyncio.run(session.request_access())
    session.start()

    asyncio.run(session.stop())

    assert session.state is RecordingState.READY
    assert session.error == "The recorded video is empty."
    assert fake_client.total_calls == 0
