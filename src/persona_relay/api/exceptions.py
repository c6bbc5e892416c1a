"""Global exception handlers.

Every failure leaves the service as ``{"error": "..."}`` with a 4xx/5xx
status; nothing escapes a request.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from persona_relay.core.metrics import CHAT_REJECTIONS_TOTAL
from persona_relay.core.relay.models import InvalidRequest, ProviderError
from persona_relay.infra.telemetry import get_current_trace_id

from .cors import HEADER_ALLOW_ORIGIN

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI, cors_allow_origin: str = "*") -> None:
    """Register custom exception handlers on ``app``.

    The catch-all handler runs in Starlette's outermost error middleware,
    outside the CORS ``http`` middleware, so it stamps the allow-origin
    header itself.
    """

    @app.exception_handler(InvalidRequest)
    async def handle_invalid_request(
        request: Request, exc: InvalidRequest
    ) -> JSONResponse:
        CHAT_REJECTIONS_TOTAL.inc()
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        CHAT_REJECTIONS_TOTAL.inc()
        return JSONResponse(
            status_code=400, content={"error": _format_validation_error(exc)}
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # 404 for unknown paths, 405 for e.g. GET /api/chat
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(ProviderError)
    async def handle_provider_error(
        request: Request, exc: ProviderError
    ) -> JSONResponse:
        logger.error("Chat error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s (trace_id=%s)",
            request.method,
            request.url.path,
            get_current_trace_id(),
        )
        return JSONResponse(
            status_code=500,
            content={"error": INTERNAL_ERROR_MESSAGE},
            headers={HEADER_ALLOW_ORIGIN: cors_allow_origin},
        )
