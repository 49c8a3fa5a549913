"""Prometheus metrics for sticker conversion."""

from __future__ import annotations

import logging

from prometheus_client import Counter, start_http_server

logger = logging.getLogger(__name__)

TRANSCODE_ATTEMPTS = Counter(
    "sticker_transcode_attempts_total",
    "Codec invocations made while walking the quality ladder",
    labelnames=("outcome",),
)
TRANSCODE_RESULTS = Counter(
    "sticker_transcodes_total",
    "Completed adaptive transcodes",
    labelnames=("status",),
)
STICKERS_BUILT = Counter(
    "stickers_built_total",
    "Stickers assembled",
    labelnames=("kind", "status"),
)

_metrics_started = False


def ensure_metrics_server(port: int) -> None:
    global _metrics_started
    if _metrics_started:
        return
    start_http_server(port)
    _metrics_started = True
    logger.info("Prometheus metrics server started", extra={"port": port})


def record_attempt(outcome: str) -> None:
    TRANSCODE_ATTEMPTS.labels(outcome=outcome).inc()


def record_transcode(status: str) -> None:
    TRANSCODE_RESULTS.labels(status=status).inc()


def record_sticker_built(kind: str, status: str) -> None:
    STICKERS_BUILT.labels(kind=kind, status=status).inc()
