"""Cookie-backed sessions for Falcon applications."""

from .app import create_app
from .coders import (
    Base64Coder,
    Base64Transport,
    Coder,
    JSONSerializer,
    MsgpackSerializer,
    SessionCoder,
    ZlibBase64Transport,
)
from .config import SessionConfig
from .errors import (
    CrumbError,
    SessionCoderError,
    SessionConfigError,
    SessionCookieTooLargeError,
    SessionNotLoadedError,
    SessionWriteError,
)
from .middleware import SessionMiddleware, SessionOptions, get_session
from .signing import CookieSigner

__all__ = [
    "Base64Coder",
    "Base64Transport",
    "Coder",
    "CookieSigner",
    "CrumbError",
    "JSONSerializer",
    "MsgpackSerializer",
    "SessionCoder",
    "SessionCoderError",
    "SessionConfig",
    "SessionConfigError",
    "SessionCookieTooLargeError",
    "SessionMiddleware",
    "SessionNotLoadedError",
    "SessionOptions",
    "SessionWriteError",
    "ZlibBase64Transport",
    "create_app",
    "get_session",
]
