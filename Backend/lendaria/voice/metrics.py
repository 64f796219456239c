"""Prometheus counters for voice capture on text fields."""
from __future__ import annotations

from typing import Literal

from prometheus_client import Counter  # type: ignore

CaptureResult = Literal["started", "start_failed", "unsupported", "transcript", "empty", "error", "stopped"]

# Counters
VOICE_CAPTURE_EVENTS = Counter(
    "voice_capture_events_total",
    "Voice capture lifecycle events observed by field controllers",
    labelnames=("result",),
)
VOICE_FIELD_FLUSHES = Counter(
    "voice_field_flushes_total",
    "Values propagated from buffered speech fields to their host",
    labelnames=("reason",),
)


def capture_event(result: CaptureResult) -> None:
    VOICE_CAPTURE_EVENTS.labels(result=result).inc()


def field_flushed(reason: Literal["debounce", "transcript"]) -> None:
    VOICE_FIELD_FLUSHES.labels(reason=reason).inc()
