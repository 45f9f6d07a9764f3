"""Codecs turning session mappings into cookie-safe strings and back.

A coder is any object with ``encode`` and ``decode`` methods. The default
:class:`SessionCoder` is built from two stages that can be swapped
independently:

* a *serializer* that turns Python values into bytes (MessagePack or JSON,
  both via :mod:`msgspec`), and
* a *transport* that turns bytes into text that is safe inside a cookie
  value (URL-safe base64, optionally zlib-compressed first).

Decoding never raises. Cookies come from the client and are untrusted, so
anything that fails to decode is treated as an empty session.
"""

from __future__ import annotations

import binascii
import logging
import typing
import zlib

import msgspec
from itsdangerous import BadData
from itsdangerous.encoding import base64_decode, base64_encode
from msgspec import json as msgspec_json
from msgspec import msgpack

__all__ = [
    "Base64Coder",
    "Base64Transport",
    "Coder",
    "JSONSerializer",
    "MsgpackSerializer",
    "Serializer",
    "SessionCoder",
    "Transport",
    "ZlibBase64Transport",
]

_logger = logging.getLogger(__name__)

_DECODE_ERRORS = (
    BadData,
    binascii.Error,
    zlib.error,
    msgspec.DecodeError,
    UnicodeDecodeError,
    ValueError,
    TypeError,
    RecursionError,
)


@typing.runtime_checkable
class Coder(typing.Protocol):
    """Anything able to encode a session into a string and back."""

    def encode(self, obj: typing.Any) -> str: ...

    def decode(self, data: str) -> typing.Any: ...


class Serializer(typing.Protocol):
    """Turn Python values into bytes and back."""

    def dumps(self, obj: typing.Any) -> bytes: ...

    def loads(self, data: bytes) -> typing.Any: ...


class Transport(typing.Protocol):
    """Turn bytes into cookie-safe text and back."""

    def encode(self, data: bytes) -> str: ...

    def decode(self, data: str) -> bytes: ...


class MsgpackSerializer:
    """Serialize with MessagePack."""

    def __init__(self) -> None:
        self._encoder = msgpack.Encoder()
        self._decoder = msgpack.Decoder()

    def dumps(self, obj: typing.Any) -> bytes:
        return self._encoder.encode(obj)

    def loads(self, data: bytes) -> typing.Any:
        return self._decoder.decode(data)


class JSONSerializer:
    """Serialize with compact JSON."""

    def __init__(self) -> None:
        self._encoder = msgspec_json.Encoder()
        self._decoder = msgspec_json.Decoder()

    def dumps(self, obj: typing.Any) -> bytes:
        return self._encoder.encode(obj)

    def loads(self, data: bytes) -> typing.Any:
        return self._decoder.decode(data)


class Base64Transport:
    """URL-safe base64 without padding or line breaks.

    The alphabet is ``A-Z a-z 0-9 - _``, so the output never contains ``.``,
    ``;``, ``,``, quotes or whitespace.
    """

    def encode(self, data: bytes) -> str:
        return base64_encode(data).decode("ascii")

    def decode(self, data: str) -> bytes:
        return base64_decode(data)


class ZlibBase64Transport(Base64Transport):
    """Compress with zlib before base64 encoding.

    Decoding refuses to inflate beyond *max_size* bytes.
    """

    def __init__(self, level: int = 9, max_size: int = 64 * 1024) -> None:
        self.level = level
        self.max_size = max_size

    def encode(self, data: bytes) -> str:
        return super().encode(zlib.compress(data, self.level))

    def decode(self, data: str) -> bytes:
        inflater = zlib.decompressobj()
        raw = inflater.decompress(super().decode(data), self.max_size)
        if inflater.unconsumed_tail or not inflater.eof:
            raise zlib.error("compressed session is truncated or too large")
        return raw


class SessionCoder:
    """Default session coder: serialize, then apply a text transport.

    Parameters
    ----------
    serializer : Serializer, optional
        Stage turning the session into bytes. Defaults to
        :class:`MsgpackSerializer`.
    transport : Transport, optional
        Stage turning those bytes into cookie-safe text. Defaults to
        :class:`Base64Transport`.
    """

    def __init__(
        self,
        serializer: Serializer | None = None,
        transport: Transport | None = None,
    ) -> None:
        self.serializer = serializer or MsgpackSerializer()
        self.transport = transport or Base64Transport()

    def encode(self, obj: typing.Any) -> str:
        """Return the cookie-safe text form of *obj*."""
        return self.transport.encode(self.serializer.dumps(obj))

    def decode(self, data: str) -> dict[str, typing.Any]:
        """Return the session stored in *data*, or ``{}`` if it is unusable."""
        if not data:
            return {}
        try:
            value = self.serializer.loads(self.transport.decode(data))
        except _DECODE_ERRORS as exc:
            _logger.debug("discarding undecodable session payload: %s", exc)
            return {}
        if not isinstance(value, dict) or not all(
            isinstance(key, str) for key in value
        ):
            _logger.debug("discarding non-mapping session payload")
            return {}
        return typing.cast("dict[str, typing.Any]", value)


class Base64Coder:
    """Coder for plain strings, with base64 as the only stage."""

    def __init__(self) -> None:
        self._transport = Base64Transport()

    def encode(self, obj: str) -> str:
        return self._transport.encode(obj.encode("utf-8"))

    def decode(self, data: str) -> str:
        try:
            return self._transport.decode(data).decode("utf-8")
        except _DECODE_ERRORS:
            return ""
