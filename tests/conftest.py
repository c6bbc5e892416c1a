"""Shared fixtures: config factory, stub provider, in-memory store."""

import asyncio
from datetime import timedelta

import pytest

from persona_relay.configs.config import AppConfig
from persona_relay.configs.persona import PersonaConfig
from persona_relay.configs.system import MetricsConfig
from persona_relay.core.relay.models import ProviderError
from persona_relay.infra.sessions import LocalHistoryBackend, SessionStore

TEST_PERSONA = PersonaConfig(
    name="tester",
    system_prompt="You are a test persona.",
    degraded_replies=["offline one", "offline two", "offline three"],
    failure_replies=["glitch one", "glitch two"],
)


def make_config(**overrides) -> AppConfig:
    """Build an ``AppConfig`` that ignores any local ``.env`` file.

    Metrics stay off: the Prometheus instrumentator registers its
    collectors globally and cannot be attached to a second app.
    """
    overrides.setdefault("openai_api_key", "")
    overrides.setdefault("metrics", MetricsConfig(enabled=False))
    return AppConfig(_env_file=None, **overrides)


class StubProvider:
    """Stands in for ``CompletionProvider``; records every call."""

    model_name = "stub-model"

    def __init__(
        self,
        replies: list[str] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.replies = list(replies or ["stub reply"])
        self.error = error
        self.delay = delay
        self.calls: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append([dict(m) for m in messages])
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]

    async def aclose(self) -> None:
        pass


@pytest.fixture
def persona() -> PersonaConfig:
    return TEST_PERSONA


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(
        LocalHistoryBackend(max_sessions=100, idle_ttl=timedelta(0))
    )


@pytest.fixture
def failing_provider() -> StubProvider:
    return StubProvider(error=ProviderError("upstream exploded"))
