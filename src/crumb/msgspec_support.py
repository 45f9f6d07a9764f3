"""JSON media handling for Falcon backed by msgspec."""

from __future__ import annotations

import typing

import falcon
import falcon.media
import msgspec
from msgspec import json as msgspec_json

__all__ = ["json_handler"]

_ENCODER = msgspec_json.Encoder()
_DECODER = msgspec_json.Decoder()


def _loads(content: bytes | str) -> typing.Any:
    try:
        return _DECODER.decode(content)
    except msgspec.DecodeError as ex:
        raise falcon.MediaMalformedError(falcon.MEDIA_JSON) from ex


def _dumps(obj: typing.Any) -> str:
    return _ENCODER.encode(obj).decode("utf-8")


json_handler = falcon.media.JSONHandler(dumps=_dumps, loads=_loads)
