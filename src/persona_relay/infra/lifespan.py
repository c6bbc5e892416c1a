"""Dependency injection for the application lifespan.

FastAPI resolves ``Depends()`` only for requests.  ``inject`` runs the
same resolver over a lifespan function's signature against a synthetic
request, so startup resources (session store, provider client) are
declared as ordinary generator dependencies and share ``get_app_config``
with the routes.

Adapted from https://github.com/fastapi/fastapi/discussions/11742
"""

from contextlib import AsyncExitStack, asynccontextmanager
from functools import partial
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.dependencies.utils import get_dependant, solve_dependencies

_STARTUP_SCOPE: dict[str, Any] = {
    "type": "http",
    "http_version": "1.1",
    "method": "GET",
    "scheme": "http",
    "path": "/",
    "raw_path": b"/",
    "root_path": "",
    "query_string": b"",
    "headers": ((b"x-request-scope", b"lifespan"),),
    "client": ("127.0.0.1", 0),
    "server": ("127.0.0.1", 0),
}


def get_app(request: Request) -> FastAPI:
    """Dependency returning the running application."""
    return request.app


def inject(lifespan: Callable[..., Any]) -> Callable[[FastAPI], Any]:
    """Turn a ``Depends``-annotated async generator into a lifespan.

    Generator dependencies run their code after ``yield`` on shutdown,
    newest first.  Overrides in ``app.dependency_overrides`` apply here
    exactly as they do for routes.
    """

    @asynccontextmanager
    async def run(app: FastAPI):  # type: ignore[misc]
        request = Request({**_STARTUP_SCOPE, "app": app, "state": app.state})
        dependant = get_dependant(path="/", call=partial(lifespan, app))

        async with AsyncExitStack() as cleanup:
            solved = await solve_dependencies(
                request=request,
                dependant=dependant,
                async_exit_stack=cleanup,
                embed_body_fields=False,
                dependency_overrides_provider=app,
            )
            async with asynccontextmanager(lifespan)(app, **solved.values):
                yield

    return run
