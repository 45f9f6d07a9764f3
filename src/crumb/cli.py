"""Command line helpers for inspecting session cookies."""

from __future__ import annotations

import typing

import msgspec
import typer
from msgspec import json as msgspec_json

from .coders import SessionCoder, ZlibBase64Transport
from .config import SessionConfig
from .errors import CrumbError
from .middleware import SessionMiddleware
from .signing import CookieSigner

app = typer.Typer(help="Encode and decode crumb session cookies")


def _config(secret: str | None, compress: bool) -> SessionConfig:
    transport = ZlibBase64Transport() if compress else None
    return SessionConfig(secret=secret, coder=SessionCoder(transport=transport))


def encode_cookie(
    session: dict[str, typing.Any], *, secret: str | None = None, compress: bool = False
) -> str:
    """Return the cookie value the middleware would write for *session*."""
    return SessionMiddleware(_config(secret, compress)).dump_session(session)


def decode_cookie(
    value: str, *, secret: str | None = None, compress: bool = False
) -> dict[str, typing.Any] | None:
    """Return the session stored in *value*, or ``None`` if it is rejected."""
    config = _config(secret, compress)
    payload = CookieSigner(config.secret).verify(value)
    if payload is None:
        return None
    session = config.coder.decode(payload)
    return session or None


@app.command()  # pyright: ignore[reportUntypedFunctionDecorator]
def encode(
    data: str = typer.Argument(..., help="Session as a JSON object"),
    secret: str | None = typer.Option(
        None, "--secret", envvar="SESSION_SECRET", help="Signing secret"
    ),
    compress: bool = typer.Option(False, "--compress", help="zlib-compress payload"),
) -> None:
    """Print the cookie value for a JSON session."""
    try:
        session = msgspec_json.decode(data)
    except msgspec.DecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}") from None
    if not isinstance(session, dict):
        raise typer.BadParameter("session must be a JSON object")
    try:
        typer.echo(encode_cookie(session, secret=secret, compress=compress))
    except CrumbError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from None


@app.command()  # pyright: ignore[reportUntypedFunctionDecorator]
def decode(
    value: str = typer.Argument(..., help="Cookie value"),
    secret: str | None = typer.Option(
        None, "--secret", envvar="SESSION_SECRET", help="Signing secret"
    ),
    compress: bool = typer.Option(False, "--compress", help="Payload is compressed"),
) -> None:
    """Print the session stored in a cookie value as JSON."""
    session = decode_cookie(value, secret=secret, compress=compress)
    if session is None:
        typer.echo("cookie rejected", err=True)
        raise typer.Exit(code=1)
    typer.echo(msgspec_json.format(msgspec_json.encode(session), indent=2).decode())


__all__ = ["app", "decode_cookie", "encode_cookie"]
