"""Resources and request helpers for exercising the session middleware.

Each helper opens a fresh client per request so no cookie jar carries state
between calls; cookies are passed explicitly, as a browser would send them.
"""
from __future__ import annotations

import typing

import falcon
from httpx import ASGITransport, AsyncClient

from crumb import get_session
from crumb.config import DEFAULT_COOKIE_NAME

if typing.TYPE_CHECKING:
    import httpx
    from falcon import asgi


class IncrementResource:
    """Bump ``counter`` and echo the session without its id."""

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        session = get_session(req)
        session["counter"] = session.get("counter", 0) + 1
        body = dict(session)
        body.pop("session_id", None)
        resp.media = body


class SessionReaderResource:
    """Echo the whole session without changing it."""

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        resp.media = dict(get_session(req))


class NothingResource:
    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        resp.text = "Nothing"


class BigResource:
    """Store more than fits in a cookie."""

    async def on_get(self, req: falcon.Request, resp: falcon.Response) -> None:
        get_session(req)["cookie"] = "big" * 3000
        resp.text = "too big"


class OptionsResource:
    """Mutate the session, then flip the per-request option named in the URL."""

    async def on_get(
        self, req: falcon.Request, resp: falcon.Response, action: str
    ) -> None:
        get_session(req)["counter"] = 99
        setattr(req.context.session_options, action, True)
        resp.text = action


async def get(
    app: asgi.App,
    path: str = "/",
    *,
    cookie: str | None = None,
    https: bool = False,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Send a single GET request to *app*."""
    request_headers = dict(headers or {})
    if cookie is not None:
        request_headers["Cookie"] = cookie
    async with AsyncClient(
        transport=ASGITransport(app=typing.cast("typing.Any", app)),
        base_url="https://test" if https else "http://test",
    ) as client:
        return await client.get(path, headers=request_headers)


def cookie_pair(resp: httpx.Response) -> str:
    """Return the ``name=value`` part of the response's ``Set-Cookie``."""
    header = resp.headers["set-cookie"]
    return header.split(";", 1)[0]


def cookie_value(resp: httpx.Response, name: str = DEFAULT_COOKIE_NAME) -> str:
    """Return the session cookie value set by *resp*."""
    key, _, value = cookie_pair(resp).partition("=")
    assert key == name
    return value
