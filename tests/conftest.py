"""Shared pytest fixtures and deterministic stand-ins for the generation service."""

from __future__ import annotations

import asyncio
import base64
from typing import Iterable, Optional, Sequence

import pytest

from signweave.errors import UpstreamUnavailable
from signweave.pipelines.translation import TranslationFlows
from signweave.services.generation_client import (
    GenerationClientInterface,
    Modality,
    PromptPart,
)

WEBM_BYTES = b"\x1aE\xdf\xa3fake-webm-clip"
WEBM_DATA_URI = "data:video/webm;base64," + base64.b64encode(WEBM_BYTES).decode("ascii")
PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake frame").decode("ascii")
PCM_SAMPLES = bytes(range(32))


class FakeGenerationClient(GenerationClientInterface):
    """Answers every request with fixed payloads and counts the calls.

    ``fail_on`` names operations (``text``, ``image``, ``speech``) that raise
    :class:`UpstreamUnavailable`; ``delays`` holds per-operation sleeps.
    """

    def __init__(
        self,
        *,
        recognized_text: Optional[str] = "hello world",
        description: Optional[str] = "Sign HELLO with an open palm, then WORLD.",
        frame_prompt: Optional[str] = "A signer mid-HELLO on a neutral background.",
        image_uri: Optional[str] = PNG_DATA_URI,
        samples: bytes = PCM_SAMPLES,
        fail_on: Iterable[str] = (),
        delays: Optional[dict[str, float]] = None,
    ) -> None:
        self.recognized_text = recognized_text
        self.description = description
        self.frame_prompt = frame_prompt
        self.image_uri = image_uri
        self.samples = samples
        self.fail_on = set(fail_on)
        self.delays = delays or {}
        self.calls = {"text": 0, "image": 0, "speech": 0}
        self.text_prompts: list[list[PromptPart]] = []
        self.image_requests: list[tuple[str, frozenset[Modality]]] = []
        self.speech_requests: list[tuple[str, str]] = []
        self.cancelled: list[str] = []

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    async def _enter(self, operation: str) -> None:
        self.calls[operation] += 1
        try:
            if self.delays.get(operation):
                await asyncio.sleep(self.delays[operation])
        except asyncio.CancelledError:
            self.cancelled.append(operation)
            raise
        if operation in self.fail_on:
            raise UpstreamUnavailable(f"{operation} generation failed")

    async def generate_text(self, parts: Sequence[PromptPart]) -> Optional[str]:
        self.text_prompts.append(list(parts))
        await self._enter("text")
        if any(part.media_uri for part in parts):
            return self.recognized_text
        if (parts[0].text or "").startswith("You are an expert animator"):
            return self.description
        return self.frame_prompt

    async def generate_image(
        self,
        prompt: str,
        modalities: Iterable[Modality],
    ) -> Optional[str]:
        self.image_requests.append((prompt, frozenset(modalities)))
        await self._enter("image")
        return self.image_uri

    async def generate_speech(self, prompt: str, voice: str) -> bytes:
        self.speech_requests.append((prompt, voice))
        await self._enter("speech")
        return self.samples


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def flows(fake_client: FakeGenerationClient) -> TranslationFlows:
    return TranslationFlows(fake_client, refine_frame_prompt=True, voice="TestVoice")
