"""Ordered map of the translation stages.

The orchestrators in ``orchestration`` hold the actual choreography; this
module describes each stage so the ``/translate/stages`` endpoint and
contributors can see which module implements what:

1. ``recognition`` – video -> text.
2. ``description`` – text -> signing-sequence description.
3. ``description`` – description -> single-frame image prompt (optional).
4. ``illustration`` – prompt -> inline image.
5. ``speech`` – text -> raw PCM -> WAV data URI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .types import FlowKind


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the translation pipeline."""

    order: int
    name: str
    module: str
    summary: str
    flows: tuple[FlowKind, ...]


class TranslationPipeline:
    """Utility wrapper for documenting the translation flows."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Video to Text",
            "signweave.pipelines.translation.recognition",
            "Send the recorded WebM clip to the text+vision model and read back the signed text.",
            (FlowKind.SIGN_TO_TEXT, FlowKind.SIGN_TO_SIGN),
        ),
        PipelineStage(
            2,
            "Animation Description",
            "signweave.pipelines.translation.description",
            "Describe the sequence of signs and transitions, without camera or viewpoint details.",
            (FlowKind.TEXT_TO_SIGN, FlowKind.SIGN_TO_SIGN),
        ),
        PipelineStage(
            3,
            "Frame Prompt",
            "signweave.pipelines.translation.description",
            "Condense the description into an image prompt for one frame on a neutral background.",
            (FlowKind.TEXT_TO_SIGN, FlowKind.SIGN_TO_SIGN),
        ),
        PipelineStage(
            4,
            "Frame Image",
            "signweave.pipelines.translation.illustration",
            "Generate the frame with the image model, requesting TEXT and IMAGE modalities.",
            (FlowKind.TEXT_TO_SIGN, FlowKind.SIGN_TO_SIGN),
        ),
        PipelineStage(
            5,
            "Speech",
            "signweave.pipelines.translation.speech",
            "Synthesize raw PCM with the fixed voice and wrap it as a WAV data URI, alongside stages 2-4.",
            (FlowKind.TEXT_TO_SIGN, FlowKind.SIGN_TO_SIGN),
        ),
    ]

    @classmethod
    def describe(cls, flow: FlowKind | None = None) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages, optionally for one flow only."""

        if flow is None:
            return tuple(cls._STAGES)
        return tuple(stage for stage in cls._STAGES if flow in stage.flows)


__all__ = ["PipelineStage", "TranslationPipeline"]
