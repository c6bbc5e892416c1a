"""FastAPI application entry point."""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, FastAPI
from fastapi.staticfiles import StaticFiles

from persona_relay.api.chat import health_router
from persona_relay.api.chat import router as chat_router
from persona_relay.api.cors import cors_middleware
from persona_relay.api.exceptions import register_exception_handlers
from persona_relay.configs.config import AppConfig, get_app_config
from persona_relay.configs.persona import PersonaConfig
from persona_relay.core.metrics import init_metrics
from persona_relay.core.provider.deps import build_completion_provider
from persona_relay.core.relay.deps import get_persona
from persona_relay.infra.lifespan import inject
from persona_relay.infra.logging import setup_logging
from persona_relay.infra.sessions.store import build_session_store
from persona_relay.infra.telemetry import init_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _store: Annotated[None, Depends(build_session_store)],
    _provider: Annotated[None, Depends(build_completion_provider)],
    persona: Annotated[PersonaConfig, Depends(get_persona)],
) -> AsyncGenerator[None, None]:
    """Application lifespan: shared session store and provider client.

    Resolving the persona here makes a bad persona name or file fail at
    startup rather than on the first chat request.
    """
    logger.info("Persona relay ready (persona=%s).", persona.name)
    yield
    logger.info("Shutting down persona relay...")


def get_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Passing *config* pins it for every ``get_app_config`` dependency of
    this app, lifespan included.
    """
    if config is None:
        config = get_app_config()

    setup_logging(config.logging)

    app = FastAPI(
        title="Persona Relay",
        description="In-character chat relay for a 3D avatar front end",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.dependency_overrides[get_app_config] = lambda: config

    init_telemetry(app, config.tracing)
    init_metrics(app, config)
    app.middleware("http")(cors_middleware(config.api.cors_allow_origin))
    register_exception_handlers(app, config.api.cors_allow_origin)

    app.include_router(chat_router)
    app.include_router(health_router)

    # Mounted last so the API routes win over same-named files.
    static_dir = config.api.static_dir
    if static_dir is not None:
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
            logger.info("Serving static files from %s", static_dir)
        else:
            logger.warning("Static directory %s does not exist, not mounted", static_dir)

    return app


app = get_app()
