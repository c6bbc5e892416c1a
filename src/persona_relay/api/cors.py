"""Permissive cross-origin headers for the browser front end."""

from collections.abc import Awaitable, Callable

from fastapi import Request, Response

HEADER_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
HEADER_ALLOW_METHODS = "Access-Control-Allow-Methods"
HEADER_ALLOW_HEADERS = "Access-Control-Allow-Headers"

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


def preflight_headers(allow_origin: str) -> dict[str, str]:
    return {
        HEADER_ALLOW_ORIGIN: allow_origin,
        HEADER_ALLOW_METHODS: ALLOWED_METHODS,
        HEADER_ALLOW_HEADERS: ALLOWED_HEADERS,
    }


def cors_middleware(
    allow_origin: str,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """Build an ``http`` middleware stamping the allow-origin header.

    Unlike Starlette's ``CORSMiddleware`` this applies whether or not
    the request carries an ``Origin`` header, matching what the front
    end was built against.
    """

    async def add_cors_headers(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        response.headers.setdefault(HEADER_ALLOW_ORIGIN, allow_origin)
        return response

    return add_cors_headers
