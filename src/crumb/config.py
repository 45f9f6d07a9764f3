"""Immutable configuration for :class:`~crumb.middleware.SessionMiddleware`."""

from __future__ import annotations

import dataclasses as dc
import os
import typing

from .coders import Coder, SessionCoder
from .errors import SessionConfigError

__all__ = ["DEFAULT_COOKIE_NAME", "DEFAULT_SIZE_LIMIT", "SessionConfig"]

DEFAULT_COOKIE_NAME = "crumb.session"
# Browsers guarantee at least 4096 bytes per cookie, name included.
DEFAULT_SIZE_LIMIT = 4096

_TRUTHY = {"1", "true", "yes", "on"}

SameSite = typing.Literal["Strict", "Lax", "None"]


@dc.dataclass(frozen=True, slots=True, kw_only=True)
class SessionConfig:
    """Options resolved once when the middleware is built.

    Parameters
    ----------
    secret : str or None
        Key used to sign cookies. ``None`` or ``""`` leaves cookies unsigned.
    old_secrets : tuple of str
        Previous keys still accepted when verifying, never used for signing.
    expire_after : int or None
        Lifetime of the cookie in seconds. When set, the cookie is re-issued
        on every response so the expiry window slides forward.
    secure : bool
        Only send the cookie over HTTPS.
    http_only : bool
        Hide the cookie from client-side scripts.
    same_site : str or None
        ``SameSite`` attribute of the cookie.
    path : str
        ``Path`` attribute of the cookie.
    domain : str or None
        ``Domain`` attribute of the cookie.
    cookie_name : str
        Name of the cookie holding the session.
    size_limit : int
        Largest allowed ``name=value`` length in bytes.
    trust_forwarded_scheme : bool
        Treat ``Forwarded``/``X-Forwarded-Proto`` as proof of HTTPS.
    coder : Coder
        Codec used to turn the session into a string and back.
    """

    secret: str | None = None
    old_secrets: tuple[str, ...] = ()
    expire_after: int | None = None
    secure: bool = False
    http_only: bool = True
    same_site: SameSite | None = "Lax"
    path: str = "/"
    domain: str | None = None
    cookie_name: str = DEFAULT_COOKIE_NAME
    size_limit: int = DEFAULT_SIZE_LIMIT
    trust_forwarded_scheme: bool = False
    coder: Coder = dc.field(default_factory=SessionCoder)

    def __post_init__(self) -> None:
        if not self.secret:
            object.__setattr__(self, "secret", None)
        if self.expire_after is not None and self.expire_after <= 0:
            raise SessionConfigError("expire_after must be a positive number of seconds")
        if self.size_limit <= 0:
            raise SessionConfigError("size_limit must be positive")
        if not self.cookie_name:
            raise SessionConfigError("cookie_name must not be empty")
        if self.old_secrets and self.secret is None:
            raise SessionConfigError("old_secrets require a current secret")
        if not isinstance(self.coder, Coder):
            raise SessionConfigError("coder must provide encode() and decode()")

    @classmethod
    def from_env(cls, **overrides: typing.Any) -> SessionConfig:
        """Create a config from ``SESSION_*`` environment variables.

        Keyword arguments take precedence over the environment.
        """
        values: dict[str, typing.Any] = {"secret": os.getenv("SESSION_SECRET")}
        if old := os.getenv("SESSION_OLD_SECRETS"):
            values["old_secrets"] = tuple(s for s in old.split(",") if s)
        if expire_after := os.getenv("SESSION_EXPIRE_AFTER"):
            try:
                values["expire_after"] = int(expire_after)
            except ValueError:
                raise SessionConfigError(
                    f"SESSION_EXPIRE_AFTER must be an integer, got {expire_after!r}"
                ) from None
        if secure := os.getenv("SESSION_SECURE"):
            values["secure"] = secure.strip().lower() in _TRUTHY
        if name := os.getenv("SESSION_COOKIE_NAME"):
            values["cookie_name"] = name
        values.update(overrides)
        return cls(**values)
