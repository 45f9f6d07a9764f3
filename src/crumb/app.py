"""Application factory wiring cookie sessions into a Falcon ASGI app."""

from __future__ import annotations

import typing

import falcon
from falcon import asgi

from .config import SessionConfig
from .errors import (
    SessionWriteError,
    handle_http_error,
    handle_session_write_error,
)
from .middleware import SessionMiddleware
from .msgspec_support import json_handler

__all__ = ["HealthResource", "create_app"]


class HealthResource:
    """Report service liveness without touching the session."""

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        resp.media = {"status": "ok"}


def create_app(
    config: SessionConfig | None = None,
    *,
    middleware: typing.Sequence[object] = (),
) -> asgi.App:
    """Configure and return a Falcon ASGI app with cookie sessions.

    Parameters
    ----------
    config:
        Session options. Defaults to :meth:`SessionConfig.from_env`.
    middleware:
        Extra middleware installed after the session middleware, so it sees
        ``req.context.session``.
    """
    session_config = config or SessionConfig.from_env()
    app = asgi.App(middleware=[SessionMiddleware(session_config), *middleware])
    app.add_error_handler(falcon.HTTPError, handle_http_error)
    app.add_error_handler(SessionWriteError, handle_session_write_error)
    app.req_options.media_handlers["application/json"] = json_handler
    app.resp_options.media_handlers["application/json"] = json_handler
    app.add_route("/health", HealthResource())
    return app
