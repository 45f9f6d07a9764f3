"""Falcon middleware keeping the whole session in a signed cookie."""

from __future__ import annotations

import copy
import dataclasses as dc
import datetime as dt
import logging
import typing
import uuid

from .config import SessionConfig
from .errors import (
    SessionCoderError,
    SessionCookieTooLargeError,
    SessionNotLoadedError,
)
from .signing import CookieSigner

if typing.TYPE_CHECKING:
    import falcon

__all__ = ["SESSION_ID_KEY", "SessionMiddleware", "SessionOptions", "get_session"]

_logger = logging.getLogger(__name__)

SESSION_ID_KEY = "session_id"


@dc.dataclass(slots=True)
class SessionOptions:
    """Per-request switches a responder may flip.

    ``skip`` leaves the cookie untouched for this response. ``drop`` deletes
    the cookie on the client.
    """

    skip: bool = False
    drop: bool = False


def generate_session_id() -> str:
    """Return a new random session identifier."""
    return uuid.uuid4().hex


def get_session(req: falcon.Request) -> dict[str, typing.Any]:
    """Return the session loaded for *req*.

    Raises
    ------
    SessionNotLoadedError
        If :class:`SessionMiddleware` did not process the request.
    """
    session = getattr(req.context, "session", None)
    if session is None:
        raise SessionNotLoadedError
    return typing.cast("dict[str, typing.Any]", session)


class SessionMiddleware:
    """Load the session from a cookie and write it back when it changes."""

    def __init__(self, config: SessionConfig | None = None) -> None:
        """Create middleware with a session configuration.

        Parameters
        ----------
        config : SessionConfig, optional
            Cookie, signing and codec options. Defaults to an unsigned
            :class:`SessionConfig`.
        """
        self.config = config or SessionConfig()
        self._signer = CookieSigner(self.config.secret, self.config.old_secrets)
        if not self._signer.signed:
            _logger.warning(
                "no session secret configured; cookie %r will not be signed "
                "and clients can forge its contents",
                self.config.cookie_name,
            )

    def _decode(self, cookie: str | None) -> dict[str, typing.Any]:
        payload = self._signer.verify(cookie) if cookie else None
        data = self.config.coder.decode(payload or "")
        stored = dict(data) if isinstance(data, dict) else {}
        if cookie and not stored:
            _logger.debug("starting fresh session in place of rejected cookie")
        return stored

    def load_session(self, cookie: str | None) -> dict[str, typing.Any]:
        """Return the session stored in *cookie*, or a fresh one.

        A missing, forged or undecodable cookie all yield the same result: a
        new session holding only a ``session_id``.
        """
        session = self._decode(cookie)
        session.setdefault(SESSION_ID_KEY, generate_session_id())
        return session

    def dump_session(self, session: dict[str, typing.Any]) -> str:
        """Return the signed cookie value for *session*.

        Raises
        ------
        SessionCoderError
            If the coder does not return an ASCII string.
        SessionCookieTooLargeError
            If the cookie would exceed ``config.size_limit``.
        """
        encoded = self.config.coder.encode(session)
        if not isinstance(encoded, str) or not encoded.isascii():
            raise SessionCoderError(self.config.cookie_name, self.config.coder, encoded)
        value = self._signer.sign(encoded)
        size = len(self.config.cookie_name) + 1 + len(value)
        if size > self.config.size_limit:
            raise SessionCookieTooLargeError(
                self.config.cookie_name, size, self.config.size_limit
            )
        return value

    def _is_secure(self, req: falcon.Request) -> bool:
        if self.config.trust_forwarded_scheme:
            return req.forwarded_scheme == "https"
        return req.scheme == "https"

    async def process_request(self, req: falcon.Request, resp: falcon.Response) -> None:
        """Place the session mapping on ``req.context``.

        Parameters
        ----------
        req : falcon.Request
            The incoming request.
        resp : falcon.Response
            The outgoing response.
        """
        cookie = typing.cast(
            "str | None", req.cookies.get(self.config.cookie_name)
        )
        stored = self._decode(cookie)
        session = dict(stored)
        session.setdefault(SESSION_ID_KEY, generate_session_id())
        req.context.session = session
        req.context.session_options = SessionOptions()
        # a stored session lacking an id differs from its snapshot, so the
        # new id is written back and stays put on later requests
        req.context.session_snapshot = copy.deepcopy(stored or session)

    async def process_response(
        self,
        req: falcon.Request,
        resp: falcon.Response,
        resource: object,
        req_succeeded: bool,
    ) -> None:
        """Write the session cookie if the response calls for one.

        Parameters
        ----------
        req : falcon.Request
            The request whose session is being saved.
        resp : falcon.Response
            The response receiving the ``Set-Cookie`` header.
        resource : object
            The resource that handled the request, if any.
        req_succeeded : bool
            Whether the request was processed without an unhandled error.

        Raises
        ------
        SessionWriteError
            If the session cannot be encoded into a cookie that fits.
        """
        session = getattr(req.context, "session", None)
        if session is None:
            return
        options: SessionOptions = req.context.session_options
        cfg = self.config

        if options.skip:
            return
        if options.drop:
            resp.unset_cookie(cfg.cookie_name, domain=cfg.domain, path=cfg.path)
            return
        changed = session != req.context.session_snapshot
        if not changed and cfg.expire_after is None:
            return
        if cfg.secure and not self._is_secure(req):
            _logger.debug(
                "not sending secure cookie %r over plain HTTP", cfg.cookie_name
            )
            return

        value = self.dump_session(session)
        expires = None
        if cfg.expire_after is not None:
            expires = dt.datetime.now(dt.UTC) + dt.timedelta(seconds=cfg.expire_after)
        resp.set_cookie(
            cfg.cookie_name,
            value,
            expires=expires,
            max_age=cfg.expire_after,
            domain=cfg.domain,
            path=cfg.path,
            secure=cfg.secure,
            http_only=cfg.http_only,
            same_site=cfg.same_site,
        )
