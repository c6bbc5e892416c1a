"""CompletionProvider -- async client for an OpenAI-compatible chat endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from persona_relay.configs.system import ProviderConfig
from persona_relay.core.metrics import PROVIDER_CALLS_TOTAL, PROVIDER_LATENCY_SECONDS
from persona_relay.core.relay.models import ProviderError
from persona_relay.infra.telemetry import (
    ATTR_PROVIDER_ERROR,
    ATTR_PROVIDER_MESSAGE_COUNT,
    ATTR_PROVIDER_MODEL,
    SPAN_PROVIDER_COMPLETE,
    tracer,
)

logger = logging.getLogger(__name__)

_AUTH_HEADER = "Authorization"
_BEARER = "Bearer {key}"


def extract_reply(data: Any) -> str:
    """Pull the first choice's text out of a chat-completion payload.

    Raises ``ProviderError`` for an ``{"error": {...}}`` payload, which
    some gateways return with status 200, and for any other shape.
    """
    if not isinstance(data, dict):
        raise ProviderError("Provider returned a non-object JSON body")

    error = data.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ProviderError(message or "Provider returned an error payload")

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise ProviderError("Provider response has no choices[0].message.content") from None

    if not isinstance(content, str) or not content.strip():
        raise ProviderError("Provider returned an empty reply")
    return content


class CompletionProvider:
    """Issues one chat-completion request per relayed message.

    Public API
    ----------
    ``complete(messages)``
        POSTs the ordered message list and returns the reply text.
        Every failure mode surfaces as ``ProviderError``.

    ``aclose()``
        Closes the pooled ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        config: ProviderConfig,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            timeout=config.timeout.total_seconds(),
            headers={_AUTH_HEADER: _BEARER.format(key=api_key)},
            transport=transport,
        )

    @property
    def model_name(self) -> str:
        return self._config.model_name

    def build_payload(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        return {
            "model": self._config.model_name,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
        }

    async def complete(self, messages: list[dict[str, str]]) -> str:
        """Send *messages* (system prompt first) and return the reply text."""
        with tracer.start_as_current_span(SPAN_PROVIDER_COMPLETE) as span:
            span.set_attribute(ATTR_PROVIDER_MODEL, self._config.model_name)
            span.set_attribute(ATTR_PROVIDER_MESSAGE_COUNT, len(messages))
            start = time.monotonic()
            status = "error"
            try:
                reply = await self._post(messages)
                status = "ok"
                return reply
            except httpx.TimeoutException as exc:
                status = "timeout"
                span.set_attribute(ATTR_PROVIDER_ERROR, "timeout")
                raise ProviderError(
                    f"Provider timed out after {self._config.timeout.total_seconds():g}s"
                ) from exc
            except httpx.HTTPError as exc:
                span.set_attribute(ATTR_PROVIDER_ERROR, type(exc).__name__)
                raise ProviderError(f"Provider request failed: {exc}") from exc
            except ProviderError as exc:
                span.set_attribute(ATTR_PROVIDER_ERROR, str(exc))
                raise
            finally:
                PROVIDER_CALLS_TOTAL.labels(status=status).inc()
                PROVIDER_LATENCY_SECONDS.observe(time.monotonic() - start)

    async def _post(self, messages: list[dict[str, str]]) -> str:
        response = await self._client.post(
            self._config.endpoint, json=self.build_payload(messages)
        )

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            detail = response.reason_phrase
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                detail = data["error"].get("message") or detail
            raise ProviderError(
                f"Provider returned HTTP {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        if data is None:
            raise ProviderError("Provider returned a non-JSON body")
        return extract_reply(data)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
