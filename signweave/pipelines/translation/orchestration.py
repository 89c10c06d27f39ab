"""Flow orchestrators composing the translation stages.

* ``sign_to_text``: video -> text.
* ``text_to_sign``: text -> (description -> frame prompt -> image) alongside
  text -> speech, joined fail-fast.
* ``sign_to_sign``: ``sign_to_text`` followed by ``text_to_sign``.

Stage failures propagate untouched. The only check made here is the
sign-to-sign short-circuit on empty intermediate text.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable

from signweave.config.settings import settings
from signweave.errors import TranslationFailed
from signweave.services.generation_client import GenerationClientInterface

from .description import description_to_frame_prompt, text_to_animation_description
from .illustration import description_to_image
from .recognition import video_to_text
from .speech import text_to_speech
from .types import SignAnimation, TextTranslation

logger = logging.getLogger("signweave.pipelines.translation")


async def gather_fail_fast(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently; return results in order or raise the first failure.

    Branches still pending when another one fails are cancelled and their
    results discarded.
    """

    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        for next_done in asyncio.as_completed(tasks):
            await next_done
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
            elif not task.cancelled():
                # Mark sibling failures as retrieved so asyncio does not warn.
                task.exception()
        raise
    return [task.result() for task in tasks]


class TranslationFlows:
    """The three product flows bound to one generation client."""

    def __init__(
        self,
        client: GenerationClientInterface,
        *,
        refine_frame_prompt: bool | None = None,
        voice: str | None = None,
    ) -> None:
        self._client = client
        self._refine_frame_prompt = (
            settings.translation.refine_frame_prompt
            if refine_frame_prompt is None
            else refine_frame_prompt
        )
        self._voice = voice

    async def sign_to_text(self, video_data_uri: str) -> TextTranslation:
        """Translate a recorded signing clip into text."""

        logger.info("sign-to-text started (%s chars of video)", len(video_data_uri))
        text = await video_to_text(self._client, video_data_uri)
        return TextTranslation(text=text)

    async def text_to_sign(self, text: str) -> SignAnimation:
        """Render ``text`` as a signing frame plus narrated audio.

        Both branches must succeed; there is no frame-without-audio result.
        """

        logger.info("text-to-sign started (%s chars)", len(text))
        animation_uri, audio_uri = await gather_fail_fast(
            self._render_frame(text),
            text_to_speech(self._client, text, voice=self._voice),
        )
        return SignAnimation(animation_data_uri=animation_uri, audio_data_uri=audio_uri)

    async def sign_to_sign(self, video_data_uri: str) -> SignAnimation:
        """Read the signing in a clip, then render it back as a signing frame."""

        translation = await self.sign_to_text(video_data_uri)
        if not translation.text or not translation.text.strip():
            raise TranslationFailed("Failed to translate sign to text.")
        return await self.text_to_sign(translation.text)

    async def _render_frame(self, text: str) -> str:
        description = await text_to_animation_description(self._client, text)
        if self._refine_frame_prompt:
            description = await description_to_frame_prompt(self._client, description)
        return await description_to_image(self._client, description)


__all__ = ["TranslationFlows", "gather_fail_fast"]
