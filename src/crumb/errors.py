"""Error types and Falcon error handlers for cookie sessions."""

from __future__ import annotations

import logging
import typing
from http import HTTPStatus

if typing.TYPE_CHECKING:  # pragma: no cover
    from falcon import HTTPError, Request, Response

__all__ = [
    "CrumbError",
    "SessionCoderError",
    "SessionConfigError",
    "SessionCookieTooLargeError",
    "SessionNotLoadedError",
    "SessionWriteError",
    "handle_http_error",
    "handle_session_write_error",
]

_logger = logging.getLogger(__name__)


class CrumbError(Exception):
    """Base class for session middleware errors."""


class SessionConfigError(CrumbError, ValueError):
    """Raised when a :class:`~crumb.config.SessionConfig` is invalid."""


class SessionWriteError(CrumbError):
    """Raised when a session cannot be turned into a cookie value."""

    cookie_name: str


class SessionCoderError(SessionWriteError):
    """Raised when a coder produces something that is not a cookie value."""

    def __init__(self, cookie_name: str, coder: object, value: object) -> None:
        self.cookie_name = cookie_name
        self.coder = coder
        super().__init__(
            f"{type(coder).__name__}.encode() returned {type(value).__name__} "
            f"for cookie {cookie_name!r}; expected an ASCII str"
        )


class SessionCookieTooLargeError(SessionWriteError):
    """Raised when an encoded session does not fit in a cookie."""

    def __init__(self, cookie_name: str, size: int, limit: int) -> None:
        self.cookie_name = cookie_name
        self.size = size
        self.limit = limit
        super().__init__(
            f"session cookie {cookie_name!r} is {size} bytes, limit is {limit}"
        )


class SessionNotLoadedError(CrumbError, LookupError):
    """Raised when a session is requested but no middleware loaded one."""

    def __init__(self) -> None:
        super().__init__("no session on request; is SessionMiddleware installed?")


async def handle_http_error(
    req: Request,
    resp: Response,
    exc: HTTPError,
    params: dict[str, typing.Any],
) -> None:
    """Serialize :class:`falcon.HTTPError` exceptions as JSON."""
    resp.status = exc.status
    resp.media = {"title": exc.title, "description": exc.description}


async def handle_session_write_error(
    req: Request,
    resp: Response,
    exc: SessionWriteError,
    params: dict[str, typing.Any],
) -> None:
    """Log a session that could not be stored and answer with a 500."""
    _logger.exception("session cookie not written", exc_info=exc)
    resp.text = None
    resp.status = HTTPStatus.INTERNAL_SERVER_ERROR
    resp.media = {
        "title": (
            f"{HTTPStatus.INTERNAL_SERVER_ERROR.value} "
            f"{HTTPStatus.INTERNAL_SERVER_ERROR.phrase}"
        ),
        "description": "The session could not be stored in a cookie.",
    }
