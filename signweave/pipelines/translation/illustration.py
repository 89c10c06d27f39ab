"""Description-to-image stage: render one representative frame."""

from __future__ import annotations

import logging

from signweave.errors import NoImageReturned
from signweave.services.generation_client import (
    IMAGE_RESPONSE_MODALITIES,
    GenerationClientInterface,
)
from signweave.telemetry import time_stage

logger = logging.getLogger("signweave.pipelines.translation")


async def description_to_image(
    client: GenerationClientInterface,
    description: str,
) -> str:
    """Generate an image data URI for ``description``.

    Both TEXT and IMAGE modalities are requested even though only the image
    is used; the image model rejects IMAGE-only requests.
    """

    with time_stage("description_to_image"):
        image_uri = await client.generate_image(description, IMAGE_RESPONSE_MODALITIES)

    if not image_uri:
        logger.warning("Image model returned no image")
        raise NoImageReturned("The model returned no image.")

    logger.info("Frame generated (%s chars)", len(image_uri))
    return image_uri


__all__ = ["description_to_image"]
