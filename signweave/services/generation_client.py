"""Boundary to the hosted multimodal generation service.

The rest of the application only sees :class:`GenerationClientInterface`.
The Bedrock implementation maps each operation onto one AWS call:

* ``generate_text`` -> Bedrock ``converse`` on the text+vision model.
* ``generate_image`` -> Bedrock ``invoke_model`` on the image model.
* ``generate_speech`` -> Polly ``synthesize_speech`` returning raw PCM.

Every failure is reported as :class:`UpstreamUnavailable`; callers cannot and
should not tell throttling, safety filtering and malformed prompts apart.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Iterable, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool
from pydantic import SecretStr

from signweave.config.settings import settings
from signweave.errors import MediaFormatError, UpstreamUnavailable
from signweave.services.aws import create_boto3_client
from signweave.services.media import parse_data_uri

logger = logging.getLogger(__name__)

_MAX_IMAGE_PROMPT_CHARS = 1024  # Nova Canvas rejects longer prompts.


class Modality(str, Enum):
    """Response modalities a generation request can ask for."""

    TEXT = "TEXT"
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"


IMAGE_RESPONSE_MODALITIES = frozenset({Modality.TEXT, Modality.IMAGE})


@dataclass(frozen=True)
class PromptPart:
    """One ordered element of a prompt: either text or a media data URI."""

    text: str | None = None
    media_uri: str | None = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.media_uri is None):
            raise ValueError("A prompt part holds exactly one of text or media_uri.")

    @classmethod
    def of_text(cls, text: str) -> "PromptPart":
        return cls(text=text)

    @classmethod
    def of_media(cls, media_uri: str) -> "PromptPart":
        return cls(media_uri=media_uri)


class GenerationClientInterface(ABC):
    """Contract consumed by the stage functions."""

    @abstractmethod
    async def generate_text(self, parts: Sequence[PromptPart]) -> Optional[str]:
        ...

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        modalities: Iterable[Modality],
    ) -> Optional[str]:
        ...

    @abstractmethod
    async def generate_speech(self, prompt: str, voice: str) -> bytes:
        ...


def _bedrock_credentials(api_key: Optional[SecretStr]) -> dict[str, str]:
    """Static Bedrock credentials from ``BEDROCK_API_KEY``, if one is configured.

    The key is ``ACCESS_KEY:SECRET_KEY``, either plain or base64-encoded. An
    empty or malformed key falls back to the default boto3 credential chain.
    """

    if api_key is None:
        return {}
    raw = api_key.get_secret_value().strip()
    try:
        decoded = base64.b64decode(raw, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError):
        decoded = raw

    access_key, separator, secret_key = decoded.partition(":")
    if not (separator and access_key and secret_key):
        if raw:
            logger.warning("BEDROCK_API_KEY is not ACCESS_KEY:SECRET_KEY; using default credentials")
        return {}
    return {"aws_access_key_id": access_key, "aws_secret_access_key": secret_key}


def _content_block(part: PromptPart) -> dict[str, Any]:
    """Translate a prompt part into a Bedrock ``converse`` content block."""

    if part.text is not None:
        return {"text": part.text}

    try:
        media = parse_data_uri(part.media_uri or "")
    except MediaFormatError as exc:
        raise UpstreamUnavailable(f"Malformed media reference: {exc}") from exc

    if media.media_class not in ("video", "image"):
        raise UpstreamUnavailable(f"Unsupported media type for prompt: {media.mime_type}")
    return {media.media_class: {"format": media.subtype, "source": {"bytes": media.payload}}}


class BedrockGenerationClient(GenerationClientInterface):
    """Bedrock + Polly implementation of the generation contract."""

    def __init__(self) -> None:
        self._text_model_id = settings.bedrock.text_model_id
        self._image_model_id = settings.bedrock.image_model_id

        self._bedrock = create_boto3_client(
            "bedrock-runtime",
            region_name=settings.bedrock.region,
            **_bedrock_credentials(settings.bedrock.api_key),
        )
        self._polly = create_boto3_client("polly", region_name=settings.polly.region)

    async def generate_text(self, parts: Sequence[PromptPart]) -> Optional[str]:
        """Run a ``converse`` call and return the aggregate text output."""

        content = [_content_block(part) for part in parts]
        inference_cfg = {
            "maxTokens": settings.bedrock.max_tokens,
            "temperature": settings.bedrock.temperature,
            "topP": settings.bedrock.top_p,
        }

        def _call() -> str:
            response = self._bedrock.converse(
                modelId=self._text_model_id,
                messages=[{"role": "user", "content": content}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Bedrock converse failed model=%s: %s", self._text_model_id, exc)
            raise UpstreamUnavailable("Text generation failed.") from exc

        return result or None

    async def generate_image(
        self,
        prompt: str,
        modalities: Iterable[Modality],
    ) -> Optional[str]:
        """Generate a single frame and return it as an image data URI."""

        requested = frozenset(Modality(value) for value in modalities)
        if not IMAGE_RESPONSE_MODALITIES <= requested:
            # The image model refuses IMAGE-only requests.
            raise UpstreamUnavailable(
                "Image generation requires both TEXT and IMAGE response modalities."
            )

        body = json.dumps(
            {
                "taskType": "TEXT_IMAGE",
                "textToImageParams": {"text": prompt[:_MAX_IMAGE_PROMPT_CHARS]},
                "imageGenerationConfig": {
                    "numberOfImages": 1,
                    "width": settings.bedrock.image_width,
                    "height": settings.bedrock.image_height,
                    "cfgScale": settings.bedrock.image_cfg_scale,
                },
            }
        )

        def _call() -> dict[str, Any]:
            response = self._bedrock.invoke_model(
                modelId=self._image_model_id,
                body=body,
                contentType="application/json",
                accept="application/json",
            )
            return json.loads(response["body"].read())

        try:
            payload = await run_in_threadpool(_call)
        except (BotoCoreError, ClientError, ValueError, KeyError) as exc:
            logger.warning("Bedrock image generation failed model=%s: %s", self._image_model_id, exc)
            raise UpstreamUnavailable("Image generation failed.") from exc

        if payload.get("error"):
            logger.warning("Image model reported an error: %s", payload["error"])
            raise UpstreamUnavailable("Image generation failed.")

        images = payload.get("images") or []
        if not images or not images[0]:
            return None
        return f"data:image/png;base64,{images[0]}"

    async def generate_speech(self, prompt: str, voice: str) -> bytes:
        """Synthesize raw 16-bit mono PCM with a fixed Polly voice."""

        def _call() -> bytes:
            response = self._polly.synthesize_speech(
                Text=prompt,
                VoiceId=voice,
                Engine=settings.polly.engine,
                OutputFormat="pcm",
                SampleRate=str(settings.polly.sample_rate),
            )
            audio_stream = response.get("AudioStream")
            if audio_stream is None:
                return b""
            # The stream is read over the network, so it can time out too.
            return audio_stream.read()

        try:
            return await run_in_threadpool(_call)
        except (BotoCoreError, ClientError) as exc:
            logger.warning("Polly synth failed for voice '%s': %s", voice, exc)
            raise UpstreamUnavailable("Speech generation failed.") from exc


@lru_cache(maxsize=1)
def get_generation_client() -> GenerationClientInterface:
    """Return the process-wide generation client."""

    return BedrockGenerationClient()


__all__ = [
    "BedrockGenerationClient",
    "GenerationClientInterface",
    "IMAGE_RESPONSE_MODALITIES",
    "Modality",
    "PromptPart",
    "get_generation_client",
]
