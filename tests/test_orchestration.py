"""Tests for the sign-to-text, text-to-sign and sign-to-sign flows."""

from __future__ import annotations

import asyncio
import time

import pytest

from conftest import PNG_DATA_URI, WEBM_DATA_URI, FakeGenerationClient
from signweave.errors import NoAudioReturned, TranslationFailed, UpstreamUnavailable
from signweave.pipelines.translation import (
    SignAnimation,
    TextTranslation,
    TranslationFlows,
    gather_fail_fast,
)


def test_sign_to_text_returns_text(flows):
    result = asyncio.run(flows.sign_to_text(WEBM_DATA_URI))

    assert result == TextTranslation(text="hello world")


def test_sign_to_text_never_succeeds_with_empty_text():
    flows = TranslationFlows(FakeGenerationClient(recognized_text=""))

    with pytest.raises(TranslationFailed):
        asyncio.run(flows.sign_to_text(WEBM_DATA_URI))


def test_text_to_sign_returns_frame_and_wav(flows, fake_client):
    result = asyncio.run(flows.text_to_sign("good morning"))

    assert isinstance(result, SignAnimation)
    assert result.animation_data_uri == PNG_DATA_URI
    assert result.audio_data_uri.startswith("data:audio/wav;base64,")
    # description + frame prompt, one image, one speech call
    assert fake_client.calls == {"text": 2, "image": 1, "speech": 1}
    assert fake_client.image_requests[0][0] == fake_client.frame_prompt
    assert fake_client.speech_requests == [("good morning", "TestVoice")]


def test_text_to_sign_without_frame_prompt_refinement(fake_client):
    flows = TranslationFlows(fake_client, refine_frame_prompt=False)

    asyncio.run(flows.text_to_sign("good morning"))

    assert fake_client.calls["text"] == 1
    assert fake_client.image_requests[0][0] == fake_client.description


@pytest.mark.parametrize("failing", ["image", "speech"])
def test_text_to_sign_has_no_partial_results(failing):
    flows = TranslationFlows(FakeGenerationClient(fail_on={failing}))

    with pytest.raises(UpstreamUnavailable):
        asyncio.run(flows.text_to_sign("good morning"))


def test_text_to_sign_fails_fast_and_abandons_the_slow_branch():
    client = FakeGenerationClient(samples=b"", delays={"image": 5.0})
    flows = TranslationFlows(client, refine_frame_prompt=False)

    started = time.perf_counter()
    with pytest.raises(NoAudioReturned):
        asyncio.run(flows.text_to_sign("good morning"))

    assert time.perf_counter() - started < 2.0
    assert client.cancelled == ["image"]


def test_text_to_sign_runs_both_branches_concurrently():
    speech_started = asyncio.Event()

    class RendezvousClient(FakeGenerationClient):
        async def generate_text(self, parts):
            # Only completes if the speech branch is already running.
            await asyncio.wait_for(speech_started.wait(), timeout=1.0)
            return await super().generate_text(parts)

        async def generate_speech(self, prompt, voice):
            speech_started.set()
            return await super().generate_speech(prompt, voice)

    async def scenario():
        flows = TranslationFlows(RendezvousClient(), refine_frame_prompt=False)
        return await flows.text_to_sign("good morning")

    result = asyncio.run(scenario())

    assert result.animation_data_uri == PNG_DATA_URI


def test_sign_to_sign_composes_both_flows(flows, fake_client):
    result = asyncio.run(flows.sign_to_sign(WEBM_DATA_URI))

    assert result.animation_data_uri == PNG_DATA_URI
    assert result.audio_data_uri.startswith("data:audio/wav;base64,")
    assert fake_client.speech_requests[0][0] == "hello world"
    assert '"hello world"' in fake_client.text_prompts[1][0].text


def test_sign_to_sign_short_circuits_on_empty_recognition():
    client = FakeGenerationClient(recognized_text="")
    flows = TranslationFlows(client)

    with pytest.raises(TranslationFailed):
        asyncio.run(flows.sign_to_sign(WEBM_DATA_URI))

    assert client.calls == {"text": 1, "image": 0, "speech": 0}


def test_sign_to_sign_never_calls_text_to_sign_with_blank_text(flows, monkeypatch):
    calls: list[str] = []

    async def blank_sign_to_text(video_data_uri):
        return TextTranslation(text="   ")

    async def record_text_to_sign(text):
        calls.append(text)

    monkeypatch.setattr(flows, "sign_to_text", blank_sign_to_text)
    monkeypatch.setattr(flows, "text_to_sign", record_text_to_sign)

    with pytest.raises(TranslationFailed):
        asyncio.run(flows.sign_to_sign(WEBM_DATA_URI))

    assert calls == []


def test_gather_fail_fast_keeps_argument_order():
    async def value(result, delay):
        await asyncio.sleep(delay)
        return result

    results = asyncio.run(gather_fail_fast(value("slow", 0.05), value("fast", 0)))

    assert results == ["slow", "fast"]
