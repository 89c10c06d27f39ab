"""Sign-language translation pipeline package.

Modules follow the order in which the stages run:

1. `recognition` – video -> text.
2. `description` – text -> signing description -> frame prompt.
3. `illustration` – frame prompt -> image data URI.
4. `speech` – text -> WAV data URI.
5. `orchestration` – the three product flows built from the stages.

`flow` documents the stages for the `/translate/stages` endpoint.
"""

from .description import description_to_frame_prompt, text_to_animation_description
from .flow import PipelineStage, TranslationPipeline
from .illustration import description_to_image
from .orchestration import TranslationFlows, gather_fail_fast
from .recognition import video_to_text
from .speech import text_to_speech
from .types import FlowKind, SignAnimation, TextTranslation

__all__ = [
    "FlowKind",
    "PipelineStage",
    "SignAnimation",
    "TextTranslation",
    "TranslationFlows",
    "TranslationPipeline",
    "description_to_frame_prompt",
    "description_to_image",
    "gather_fail_fast",
    "text_to_animation_description",
    "text_to_speech",
    "video_to_text",
]
