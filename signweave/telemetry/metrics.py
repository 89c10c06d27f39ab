"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

IN_FLIGHT_REQUESTS = Gauge(
    "http_requests_in_flight",
    "HTTP requests currently being processed",
    ("path",),
)

FLOW_COUNTER = Counter(
    "translation_flows_total",
    "Translation flow invocations by outcome",
    ("flow", "outcome"),
)

STAGE_LATENCY = Histogram(
    "translation_stage_duration_seconds",
    "Duration of individual translation stages in seconds",
    ("stage",),
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 40.0, 80.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def record_flow(flow: str, outcome: str) -> None:
    """Count one finished flow invocation (``success``/``validation``/``failure``)."""

    FLOW_COUNTER.labels(flow=flow, outcome=outcome).inc()


@contextmanager
def time_stage(stage: str) -> Iterator[None]:
    """Observe the wall-clock duration of a stage, successful or not."""

    start_time = time.perf_counter()
    try:
        yield
    finally:
        STAGE_LATENCY.labels(stage=stage).observe(time.perf_counter() - start_time)
