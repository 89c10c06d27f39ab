"""Action boundary between untrusted input and the translation flows.

Each ``handle_*`` coroutine validates its input before anything expensive
runs, delegates to the matching flow, and always returns an
:class:`ActionState`. Internal failures are logged and replaced by a generic
message; they never reach the caller as exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from signweave.errors import ValidationError
from signweave.pipelines.translation import (
    FlowKind,
    SignAnimation,
    TextTranslation,
    TranslationFlows,
)
from signweave.telemetry import record_flow
from signweave.views.translation import (
    ActionState,
    SignAnimationView,
    SignVideoInput,
    TextInput,
    TextTranslationView,
)

logger = logging.getLogger(__name__)

FAILURE_MESSAGES = {
    FlowKind.SIGN_TO_TEXT: (
        "Failed to translate video. The AI model may be unavailable or the video may be unclear."
    ),
    FlowKind.TEXT_TO_SIGN: (
        "Failed to generate the sign language animation. Please try again."
    ),
    FlowKind.SIGN_TO_SIGN: (
        "Failed to translate video. The AI model may be unavailable or the video may be unclear."
    ),
}

InputT = TypeVar("InputT", bound=BaseModel)


def _validate(model: type[InputT], payload: dict[str, Any]) -> InputT:
    """Validate ``payload`` against ``model``, collecting messages per field."""

    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        field_errors: dict[str, list[str]] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            field_errors.setdefault(field, []).append(error["msg"])
        message = ", ".join(msg for messages in field_errors.values() for msg in messages)
        raise ValidationError(message, field_errors) from None


def validate_video_input(video_data_uri: Any) -> SignVideoInput:
    """Check a recorded clip is a base64 WebM data URI."""

    return _validate(SignVideoInput, {"videoDataUri": video_data_uri})


def validate_text_input(text: Any) -> TextInput:
    """Check free text is non-empty and within the configured length."""

    return _validate(TextInput, {"text": text})


def _to_view(result: TextTranslation | SignAnimation) -> TextTranslationView | SignAnimationView:
    if isinstance(result, TextTranslation):
        return TextTranslationView(text=result.text)
    return SignAnimationView(
        animation_data_uri=result.animation_data_uri,
        audio_data_uri=result.audio_data_uri,
    )


async def _run_action(
    kind: FlowKind,
    validate: Callable[[], Any],
    run: Callable[[Any], Awaitable[TextTranslation | SignAnimation]],
) -> ActionState:
    try:
        validated = validate()
    except ValidationError as exc:
        logger.info("%s rejected: %s", kind.value, exc.field_errors)
        record_flow(kind.value, "validation")
        return ActionState(error=exc.message, field_errors=exc.field_errors)

    try:
        result = await run(validated)
    except Exception:
        logger.exception("%s translation failed", kind.value)
        record_flow(kind.value, "failure")
        return ActionState(error=FAILURE_MESSAGES[kind])

    record_flow(kind.value, "success")
    return ActionState(data=_to_view(result))


async def handle_sign_to_text(video_data_uri: Any, flows: TranslationFlows) -> ActionState:
    return await _run_action(
        FlowKind.SIGN_TO_TEXT,
        lambda: validate_video_input(video_data_uri),
        lambda validated: flows.sign_to_text(validated.video_data_uri),
    )


async def handle_text_to_sign(text: Any, flows: TranslationFlows) -> ActionState:
    return await _run_action(
        FlowKind.TEXT_TO_SIGN,
        lambda: validate_text_input(text),
        lambda validated: flows.text_to_sign(validated.text),
    )


async def handle_sign_to_sign(video_data_uri: Any, flows: TranslationFlows) -> ActionState:
    return await _run_action(
        FlowKind.SIGN_TO_SIGN,
        lambda: validate_video_input(video_data_uri),
        lambda validated: flows.sign_to_sign(validated.video_data_uri),
    )


ACTION_HANDLERS: dict[FlowKind, Callable[[Any, TranslationFlows], Awaitable[ActionState]]] = {
    FlowKind.SIGN_TO_TEXT: handle_sign_to_text,
    FlowKind.TEXT_TO_SIGN: handle_text_to_sign,
    FlowKind.SIGN_TO_SIGN: handle_sign_to_sign,
}


__all__ = [
    "ACTION_HANDLERS",
    "FAILURE_MESSAGES",
    "handle_sign_to_sign",
    "handle_sign_to_text",
    "handle_text_to_sign",
    "validate_text_input",
    "validate_video_input",
]
