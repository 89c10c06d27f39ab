"""Per-request log lines for the translation API."""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("signweave.middleware.structured")

REQUEST_ID_HEADER = "X-Request-ID"
_TRANSLATE_PREFIX = "/translate/"

_STATUS_COLORS = (
    (500, "\u001b[31m"),
    (400, "\u001b[33m"),
    (200, "\u001b[32m"),
)
_DEFAULT_COLOR = "\u001b[36m"
_RESET = "\u001b[0m"


def _flow_for_path(path: str) -> Optional[str]:
    """Name the translation flow a path targets, if any."""

    if not path.startswith(_TRANSLATE_PREFIX):
        return None
    return path[len(_TRANSLATE_PREFIX):].strip("/") or None


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log one colourised summary line per request and a JSON record at debug.

    Bodies are never logged; video and audio data URIs can run to megabytes,
    so only the declared content length is recorded. Every response carries
    an ``X-Request-ID`` that also appears in the log line.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        record: dict[str, Any] = {
            "request_id": request_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "path": request.url.path,
            "flow": _flow_for_path(request.url.path),
            "client_ip": request.client.host if request.client else None,
            "content_length": request.headers.get("content-length"),
        }

        try:
            response = await call_next(request)
        except Exception as exc:
            record.update(status=500, duration_ms=self._elapsed_ms(started), error=repr(exc))
            logger.exception(self._summary(record))
            raise

        record.update(status=response.status_code, duration_ms=self._elapsed_ms(started))
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(self._summary(record))
        logger.debug(json.dumps(record, default=str, separators=(",", ":")))
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    @staticmethod
    def _summary(record: dict[str, Any]) -> str:
        status = record.get("status") or 0
        color = next(
            (code for floor, code in _STATUS_COLORS if status >= floor),
            _DEFAULT_COLOR,
        )
        keys = ("request_id", "method", "path", "flow", "client_ip", "status", "duration_ms")
        message = " ".join(
            f"{key}={record[key] if record.get(key) is not None else '-'}" for key in keys
        )
        return f"{color}{message}{_RESET}"


__all__ = ["REQUEST_ID_HEADER", "StructuredLoggingMiddleware"]
