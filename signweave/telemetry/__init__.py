"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    FLOW_COUNTER,
    IN_FLIGHT_REQUESTS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_LATENCY,
    observe_request,
    record_flow,
    time_stage,
)

__all__ = [
    "ERROR_COUNTER",
    "FLOW_COUNTER",
    "IN_FLIGHT_REQUESTS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_LATENCY",
    "observe_request",
    "record_flow",
    "time_stage",
]
