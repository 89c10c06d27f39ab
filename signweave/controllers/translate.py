"""Translation endpoints.

Each POST hands its body to the matching action in
``signweave.controllers.actions`` and mirrors the outcome in the status
code: 200 with ``data``, 422 with ``fieldErrors``, or 502 with a generic
``error``.
"""

from typing import Optional

from fastapi import APIRouter, Response, status

from signweave.controllers.actions import (
    handle_sign_to_sign,
    handle_sign_to_text,
    handle_text_to_sign,
)
from signweave.controllers.dependencies import FlowsDep
from signweave.pipelines.translation import FlowKind, TranslationPipeline
from signweave.views import (
    ActionState,
    PipelineStageView,
    SignVideoRequest,
    TextToSignRequest,
)

router = APIRouter(prefix="/translate", tags=["translate"])


def _with_status(state: ActionState, response: Response) -> ActionState:
    if state.field_errors:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif state.error:
        response.status_code = status.HTTP_502_BAD_GATEWAY
    return state


@router.post("/sign-to-text", response_model=ActionState, response_model_exclude_none=True)
async def sign_to_text(
    payload: SignVideoRequest,
    flows: FlowsDep,
    response: Response,
) -> ActionState:
    """Translate a recorded WebM clip of signing into text."""

    state = await handle_sign_to_text(payload.video_data_uri, flows)
    return _with_status(state, response)


@router.post("/text-to-sign", response_model=ActionState, response_model_exclude_none=True)
async def text_to_sign(
    payload: TextToSignRequest,
    flows: FlowsDep,
    response: Response,
) -> ActionState:
    """Render text as a signing frame with narrated WAV audio."""

    state = await handle_text_to_sign(payload.text, flows)
    return _with_status(state, response)


@router.post("/sign-to-sign", response_model=ActionState, response_model_exclude_none=True)
async def sign_to_sign(
    payload: SignVideoRequest,
    flows: FlowsDep,
    response: Response,
) -> ActionState:
    """Translate a recorded clip and render the result back as signing."""

    state = await handle_sign_to_sign(payload.video_data_uri, flows)
    return _with_status(state, response)


@router.get("/stages", response_model=list[PipelineStageView])
async def list_stages(flow: Optional[FlowKind] = None) -> list[PipelineStageView]:
    """Describe the pipeline stages, optionally filtered by flow."""

    return [
        PipelineStageView(
            order=stage.order,
            name=stage.name,
            module=stage.module,
            summary=stage.summary,
            flows=[kind.value for kind in stage.flows],
        )
        for stage in TranslationPipeline.describe(flow)
    ]
