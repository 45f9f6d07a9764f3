"""Unit tests for session coders."""
from __future__ import annotations

import base64
import zlib

import pytest

from crumb.coders import (
    Base64Coder,
    Base64Transport,
    JSONSerializer,
    SessionCoder,
    ZlibBase64Transport,
)

SESSION = {
    "session_id": "0123456789abcdef0123456789abcdef",
    "counter": 3,
    "user": {"name": "alice", "roles": ["admin", "staff"]},
    "ratio": 0.5,
    "flag": True,
    "nothing": None,
}


def test_base64_coder_encodes() -> None:
    """Plain strings are URL-safe base64 encoded without padding."""
    coder = Base64Coder()
    assert coder.encode("fuuuuu") == base64.urlsafe_b64encode(b"fuuuuu").decode().rstrip("=")


def test_base64_coder_decodes() -> None:
    coder = Base64Coder()
    assert coder.decode(coder.encode("fuuuuu")) == "fuuuuu"


def test_base64_coder_rescues_failures() -> None:
    assert Base64Coder().decode("!!!") == ""


@pytest.mark.parametrize(
    "coder",
    [
        SessionCoder(),
        SessionCoder(JSONSerializer()),
        SessionCoder(transport=ZlibBase64Transport()),
    ],
    ids=["msgpack", "json", "zlib"],
)
def test_session_coder_round_trip(coder: SessionCoder) -> None:
    assert coder.decode(coder.encode(SESSION)) == SESSION


def test_encoded_session_is_cookie_safe() -> None:
    """Encoded payloads use only URL-safe base64 characters."""
    encoded = SessionCoder().encode({"text": "a; b, c\n\"d\" " * 20})
    assert set(encoded) <= set(
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
    )


def test_compressed_transport_shrinks_repetitive_sessions() -> None:
    session = {"cookie": "big" * 3000}
    plain = SessionCoder().encode(session)
    packed = SessionCoder(transport=ZlibBase64Transport()).encode(session)
    assert len(packed) < len(plain) // 10


@pytest.mark.parametrize(
    "garbage",
    ["lulz", "blarghfasel", "not valid data", "%%%%", "☃☃", "A" * 1001, ""],
)
def test_session_coder_rescues_failures(garbage: str) -> None:
    """Undecodable payloads come back as an empty session."""
    assert SessionCoder().decode(garbage) == {}


def test_session_coder_rejects_non_mapping() -> None:
    coder = SessionCoder()
    assert coder.decode(coder.encode([1, 2, 3])) == {}
    assert coder.decode(coder.encode("fuuuuu")) == {}


def test_session_coder_rejects_non_string_keys() -> None:
    coder = SessionCoder()
    assert coder.decode(coder.encode({1: "one"})) == {}


def test_zlib_transport_rejects_uncompressed_data() -> None:
    payload = Base64Transport().encode(b"not compressed")
    assert SessionCoder(transport=ZlibBase64Transport()).decode(payload) == {}


@pytest.mark.parametrize(
    ("coder", "raw"),
    [
        (SessionCoder(), b"\x81\xa1a" + b"\x91" * 5000 + b"\xc0"),
        (SessionCoder(JSONSerializer()), b'{"a":' + b"[" * 5000 + b"]" * 5000 + b"}"),
    ],
    ids=["msgpack", "json"],
)
def test_session_coder_rescues_deep_nesting(coder: SessionCoder, raw: bytes) -> None:
    """Payloads nested past the recursion limit decode to an empty session."""
    assert coder.decode(Base64Transport().encode(raw)) == {}


def test_zlib_transport_refuses_to_inflate_past_limit() -> None:
    transport = ZlibBase64Transport(max_size=1024)
    payload = Base64Transport().encode(zlib.compress(b"\x00" * 4096))
    with pytest.raises(zlib.error):
        transport.decode(payload)
    assert SessionCoder(transport=transport).decode(payload) == {}


def test_zlib_transport_rejects_truncated_stream() -> None:
    payload = Base64Transport().encode(zlib.compress(b"x" * 100)[:-4])
    assert SessionCoder(transport=ZlibBase64Transport()).decode(payload) == {}
