"""Prometheus metrics helpers for the screener service."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


SCREEN_RUNS = Counter(
    "screen_runs_total",
    "Screening invocations broken out by mode and outcome.",
    labelnames=("mode", "outcome"),
)

SCREEN_DURATION_MS = Histogram(
    "screen_duration_ms",
    "Latency of a full screening pass in milliseconds.",
    labelnames=("mode",),
    buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500),
)

SCREEN_KEPT_ROWS = Histogram(
    "screen_kept_rows",
    "Number of rows surviving the filters per screening pass.",
    labelnames=("mode",),
    buckets=(0, 1, 5, 10, 25, 50, 100, 250, 1000, 5000),
)

PLANS_BUILT = Counter(
    "plans_built_total",
    "Trade plans derived from selected candidates.",
    labelnames=("side",),
)

DATASETS_LOADED = Counter(
    "datasets_loaded_total",
    "CSV uploads parsed into a dataset.",
)


def record_screen(mode: str, outcome: str, duration_ms: float | None = None, kept: int | None = None) -> None:
    """Record one screening pass."""

    SCREEN_RUNS.labels(mode=mode, outcome=outcome).inc()
    if duration_ms is not None:
        SCREEN_DURATION_MS.labels(mode=mode).observe(max(float(duration_ms), 0.0))
    if kept is not None:
        SCREEN_KEPT_ROWS.labels(mode=mode).observe(max(int(kept), 0))


def record_plan(side: str) -> None:
    PLANS_BUILT.labels(side=side).inc()


def record_dataset_loaded() -> None:
    DATASETS_LOADED.inc()


def prometheus_response() -> tuple[bytes, str]:
    """Return the current metrics payload and content type."""

    payload = generate_latest()
    return payload, CONTENT_TYPE_LATEST


__all__ = [
    "record_screen",
    "record_plan",
    "record_dataset_loaded",
    "prometheus_response",
]
