"""API client for the persona relay chat endpoint."""

import logging

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class ChatAPIClient:
    """Client for interacting with ``POST /api/chat``."""

    def __init__(
        self,
        config: CLIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the API client."""
        self.config = config
        self.client = httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def chat(self, message: str) -> dict:
        """Send one message and return the parsed reply.

        Returns
        -------
        dict
            ``{"response": ..., "note"?: ...}`` on success, or
            ``{"error": ..., "code": ...}`` on any failure.
        """
        url = self.config.chat_url
        payload = {"message": message, "sessionId": self.config.session_id}

        logger.debug("Making request to %s with payload: %s", url, payload)

        try:
            response = await self.client.post(url, json=payload)
        except httpx.TimeoutException:
            return {"error": "Request timed out.", "code": "TIMEOUT"}
        except httpx.HTTPError as e:
            return {"error": f"Connection error: {e}", "code": "CONNECTION_ERROR"}

        logger.debug("Response status: %s", response.status_code)

        try:
            data = response.json()
        except ValueError:
            return {
                "error": f"HTTP {response.status_code}: {response.text}",
                "code": "HTTP_ERROR",
            }

        if not isinstance(data, dict):
            data = {}
        if response.status_code != 200 or "response" not in data:
            return {
                "error": data.get("error") or f"HTTP {response.status_code}",
                "code": "HTTP_ERROR",
            }
        return data

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
