"""Shared pytest fixtures for the test suite."""
from __future__ import annotations

import sys
import typing
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))
sys.path.insert(0, str(BASE_DIR))

import pytest

from crumb import SessionConfig, create_app
from tests.session_helpers import (
    BigResource,
    IncrementResource,
    NothingResource,
    OptionsResource,
    SessionReaderResource,
)

if typing.TYPE_CHECKING:
    from falcon import asgi

AppFactory: typing.TypeAlias = "typing.Callable[..., asgi.App]"


@pytest.fixture()
def make_app() -> AppFactory:
    """Return a factory building an app with every test resource mounted."""

    def factory(**options: typing.Any) -> asgi.App:
        app = create_app(SessionConfig(**options))
        app.add_route("/", IncrementResource())
        app.add_route("/read", SessionReaderResource())
        app.add_route("/nothing", NothingResource())
        app.add_route("/big", BigResource())
        app.add_route("/options/{action}", OptionsResource())
        return app

    return factory
