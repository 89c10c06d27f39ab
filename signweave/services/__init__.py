"""Service layer helpers for external integrations."""

from .generation_client import (
    BedrockGenerationClient,
    GenerationClientInterface,
    IMAGE_RESPONSE_MODALITIES,
    Modality,
    PromptPart,
    get_generation_client,
)
from .media import (
    MediaDataUri,
    WAV_MEDIA_TYPE,
    build_data_uri,
    encode_audio_container,
    parse_data_uri,
)

__all__ = [
    "BedrockGenerationClient",
    "GenerationClientInterface",
    "IMAGE_RESPONSE_MODALITIES",
    "Modality",
    "PromptPart",
    "get_generation_client",
    "MediaDataUri",
    "WAV_MEDIA_TYPE",
    "build_data_uri",
    "encode_audio_container",
    "parse_data_uri",
]
