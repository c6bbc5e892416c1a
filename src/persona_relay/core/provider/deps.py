"""Provider lifespan and request dependencies."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from persona_relay.configs.config import AppConfig, get_app_config
from persona_relay.infra.lifespan import get_app

from .client import CompletionProvider

logger = logging.getLogger(__name__)


async def build_completion_provider(
    app: Annotated[FastAPI, Depends(get_app)],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> AsyncGenerator[None, None]:
    """Create the provider client when a credential is configured.

    Without a credential ``app.state.completion_provider`` is ``None``
    and the relay answers in degraded mode.
    """
    provider: CompletionProvider | None = None
    if config.has_credential:
        provider = CompletionProvider(config.provider, config.openai_api_key.strip())
        logger.info(
            "AI status: connected (model=%s, endpoint=%s)",
            config.provider.model_name,
            config.provider.endpoint,
        )
    else:
        logger.warning(
            "AI status: no API key -- add OPENAI_API_KEY to the environment "
            "or .env for real AI responses. Serving fixed replies."
        )

    app.state.completion_provider = provider
    yield
    if provider is not None:
        await provider.aclose()


def get_completion_provider(request: Request) -> CompletionProvider | None:
    """FastAPI dependency -- reads from ``app.state``."""
    return request.app.state.completion_provider
