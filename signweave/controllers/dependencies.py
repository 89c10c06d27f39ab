"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from signweave.pipelines.translation import TranslationFlows
from signweave.services.generation_client import (
    GenerationClientInterface,
    get_generation_client,
)


def get_translation_flows(
    client: Annotated[GenerationClientInterface, Depends(get_generation_client)],
) -> TranslationFlows:
    """Bind the flows to the request's generation client."""

    return TranslationFlows(client)


FlowsDep = Annotated[TranslationFlows, Depends(get_translation_flows)]


__all__ = ["FlowsDep", "get_translation_flows"]
