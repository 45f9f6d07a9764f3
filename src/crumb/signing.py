"""HMAC signing and verification of session cookie values."""

from __future__ import annotations

import hashlib
import logging

from itsdangerous import BadSignature, Signer

__all__ = ["SALT", "SEPARATOR", "CookieSigner"]

_logger = logging.getLogger(__name__)

SALT = "crumb.session"
SEPARATOR = "."


class CookieSigner:
    """Append and check a keyed digest on encoded session payloads.

    Signed values look like ``payload.digest``. The digest is an
    HMAC-SHA256 of the payload, URL-safe base64 encoded, and is compared in
    constant time. Without a secret the signer passes payloads through
    untouched.
    """

    def __init__(
        self,
        secret: str | None,
        old_secrets: tuple[str, ...] = (),
        *,
        separator: str = SEPARATOR,
    ) -> None:
        self.separator = separator
        self._signer: Signer | None = None
        if secret:
            # itsdangerous signs with the last key and verifies with all of them
            self._signer = Signer(
                [*old_secrets, secret],
                salt=SALT,
                sep=separator,
                key_derivation="hmac",
                digest_method=hashlib.sha256,
            )

    @property
    def signed(self) -> bool:
        """Whether a secret is configured."""
        return self._signer is not None

    def sign(self, payload: str) -> str:
        """Return *payload* with its digest appended."""
        if self._signer is None:
            return payload
        return self._signer.sign(payload).decode("ascii")

    def verify(self, value: str) -> str | None:
        """Return the payload of *value*, or ``None`` if it fails verification."""
        if self._signer is None:
            if self.separator in value:
                _logger.debug("rejecting signed cookie: no secret configured")
                return None
            return value
        try:
            return self._signer.unsign(value).decode("utf-8")
        except BadSignature:
            _logger.debug("rejecting cookie with bad signature")
            return None
