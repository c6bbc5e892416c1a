"""OpenTelemetry tracing for the relay.

Spans are opened through the module-level ``tracer`` whether or not an
exporter is configured; without ``init_telemetry`` they are
non-recording and cost next to nothing.

Usage::

    from persona_relay.infra.telemetry import SPAN_RELAY_MESSAGE, tracer

    with tracer.start_as_current_span(SPAN_RELAY_MESSAGE) as span:
        span.set_attribute(ATTR_RELAY_SESSION_ID, session_id)
"""

from __future__ import annotations

import base64
import logging

from opentelemetry import trace
from opentelemetry.trace import format_trace_id

from persona_relay.configs.system import TracingConfig

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("persona_relay")

# Span names
SPAN_RELAY_MESSAGE = "relay.handle_message"
SPAN_PROVIDER_COMPLETE = "provider.complete"

# Span attributes
ATTR_RELAY_SESSION_ID = "relay.session_id"
ATTR_RELAY_MODE = "relay.mode"
ATTR_RELAY_HISTORY_LEN = "relay.history_len"
ATTR_PROVIDER_MODEL = "provider.model"
ATTR_PROVIDER_MESSAGE_COUNT = "provider.message_count"
ATTR_PROVIDER_ERROR = "provider.error"


def _exporter_headers(settings: TracingConfig) -> dict[str, str]:
    if not (settings.username and settings.password):
        return {}
    token = base64.b64encode(
        f"{settings.username}:{settings.password}".encode()
    ).decode()
    return {"Authorization": f"Basic {token}"}


def init_telemetry(app=None, settings: TracingConfig | None = None) -> None:
    """Install an OTLP-exporting tracer provider and instrument HTTP.

    Inbound requests are traced through the FastAPI instrumentor (which
    adds ASGI middleware, hence this runs in the app factory) and the
    outbound provider call through the httpx instrumentor.  Does nothing
    unless tracing is enabled and an endpoint is set.
    """
    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return
    if not settings.endpoint:
        logger.warning("Tracing enabled without an endpoint, not exporting spans.")
        return

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    provider = TracerProvider(
        resource=Resource.create({"service.name": settings.service_name}),
        sampler=ParentBased(root=TraceIdRatioBased(settings.sample_rate)),
    )
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=settings.endpoint, headers=_exporter_headers(settings)
            )
        )
    )
    trace.set_tracer_provider(provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(
            app, excluded_urls=",".join(settings.excluded_urls)
        )
    HTTPXClientInstrumentor().instrument()

    logger.info("Tracing to %s as %s", settings.endpoint, settings.service_name)


def get_current_trace_id() -> str | None:
    """Hex id of the active trace, if any."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None
    return format_trace_id(ctx.trace_id)
