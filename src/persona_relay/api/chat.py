"""Chat API endpoint implementation."""

import logging

from fastapi import APIRouter, Response

from persona_relay.core.relay.models import DEGRADED_NOTE, ProviderError

from .cors import preflight_headers
from .deps import AppConfigDep, RelayDep, SessionStoreDep
from .models import ChatRequest, ChatResponse, ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])
health_router = APIRouter(tags=["health"])

PROVIDER_CONNECTED = "connected"
PROVIDER_DEGRADED = "degraded"


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(chat_request: ChatRequest, relay: RelayDep) -> ChatResponse:
    """
    Relay one message and return the in-character reply.

    - No provider credential: a fixed persona line plus a ``note``.
    - Provider failure: a fixed persona failure line, when the persona
      has one; otherwise the ``ProviderError`` becomes a 500.
    - Blank or missing message: 400 (raised by the relay).
    """
    try:
        reply = await relay.handle_message(
            chat_request.session_id, chat_request.message
        )
    except ProviderError as exc:
        fallback = relay.fallback_reply()
        if fallback is None:
            raise
        logger.warning(
            "Provider call failed for session %s, serving fallback line: %s",
            relay.resolve_session_id(chat_request.session_id),
            exc,
        )
        return ChatResponse(response=fallback.content)

    if reply.degraded:
        return ChatResponse(response=reply.content, note=DEGRADED_NOTE)
    return ChatResponse(response=reply.content)


@router.options("/chat")
async def chat_preflight(config: AppConfigDep) -> Response:
    """CORS preflight: 200 with an empty body."""
    return Response(
        status_code=200, headers=preflight_headers(config.api.cors_allow_origin)
    )


@health_router.get("/health", response_model=HealthResponse)
async def health(relay: RelayDep, store: SessionStoreDep) -> HealthResponse:
    return HealthResponse(
        provider=PROVIDER_DEGRADED if relay.degraded else PROVIDER_CONNECTED,
        persona=relay.persona.name,
        sessions=await store.size(),
    )
