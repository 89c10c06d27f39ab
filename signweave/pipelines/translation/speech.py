"""Text-to-speech stage: narrate the text as a WAV data URI."""

from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool

from signweave.config.settings import settings
from signweave.errors import NoAudioReturned
from signweave.services.generation_client import GenerationClientInterface
from signweave.services.media import WAV_MEDIA_TYPE, encode_audio_container
from signweave.telemetry import time_stage

logger = logging.getLogger("signweave.pipelines.translation")


async def text_to_speech(
    client: GenerationClientInterface,
    text: str,
    *,
    voice: str | None = None,
    sample_rate: int | None = None,
) -> str:
    """Synthesize ``text`` and wrap the raw PCM in a WAV container.

    The speech model only ever returns raw 16-bit mono samples, so the
    container is always assembled here.
    """

    voice_id = voice or settings.polly.voice_id
    rate = sample_rate or settings.polly.sample_rate

    with time_stage("text_to_speech"):
        samples = await client.generate_speech(text, voice_id)
        if not samples:
            logger.warning("Speech model returned no audio voice=%s", voice_id)
            raise NoAudioReturned("The model returned no audio.")

        encoded = await run_in_threadpool(
            encode_audio_container,
            samples,
            channels=1,
            sample_rate=rate,
            bit_depth=16,
        )

    logger.info("Speech synthesized voice=%s pcm_bytes=%s", voice_id, len(samples))
    return f"data:{WAV_MEDIA_TYPE};base64,{encoded}"


__all__ = ["text_to_speech"]
