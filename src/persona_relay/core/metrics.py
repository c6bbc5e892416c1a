"""Prometheus metrics for the relay.

Custom business metrics that complement the auto-instrumented HTTP
metrics provided by ``prometheus-fastapi-instrumentator``.

All metrics use the ``relay_`` prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from persona_relay.configs.config import AppConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Chat metrics
# ---------------------------------------------------------------------------

CHAT_REPLIES_TOTAL = Counter(
    "relay_chat_replies_total",
    "Total chat replies returned, by how they were produced",
    ["mode"],  # "provider" | "degraded" | "fallback"
)

CHAT_REJECTIONS_TOTAL = Counter(
    "relay_chat_rejections_total",
    "Total chat requests rejected as invalid (400 responses)",
)

# ---------------------------------------------------------------------------
# Provider metrics
# ---------------------------------------------------------------------------

PROVIDER_CALLS_TOTAL = Counter(
    "relay_provider_calls_total",
    "Total completion provider calls, by outcome",
    ["status"],  # "ok" | "error" | "timeout"
)

PROVIDER_LATENCY_SECONDS = Histogram(
    "relay_provider_latency_seconds",
    "Latency of completion provider calls",
    buckets=(0.25, 0.5, 1, 2, 5, 10, 30, 60),
)

# ---------------------------------------------------------------------------
# Session metrics
# ---------------------------------------------------------------------------

SESSIONS_ACTIVE = Gauge(
    "relay_sessions_active",
    "Number of sessions currently held in memory",
)

SESSION_EVICTIONS_TOTAL = Counter(
    "relay_session_evictions_total",
    "Total sessions evicted from the session map",
    ["reason"],  # "capacity" | "idle"
)


def init_metrics(app: FastAPI, config: AppConfig) -> None:
    """Attach HTTP instrumentation and the ``/metrics`` endpoint.

    Adds middleware, so it must run before the application starts.
    """
    if not config.metrics.enabled:
        logger.info("Prometheus metrics disabled.")
        return

    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
