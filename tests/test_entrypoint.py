"""Tests for the ``python -m streailer`` entrypoint."""

from __future__ import annotations

from typing import Any

import pytest

from app.config import Settings
from streailer import __main__ as entrypoint


def test_uvicorn_options_follow_settings() -> None:
    settings = Settings(_env_file=None, HOST="127.0.0.1", PORT=8123, ENVIRONMENT="production")

    options = entrypoint.uvicorn_options(settings)

    assert options["host"] == "127.0.0.1"
    assert options["port"] == 8123
    assert options["reload"] is False
    assert options["log_level"] == "info"
    assert options["proxy_headers"] is True


def test_main_runs_the_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []
    settings = Settings(_env_file=None, PORT=9001, ENVIRONMENT="development")

    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(
        entrypoint.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs))
    )

    entrypoint.main()

    assert calls == [("app.main:app", entrypoint.uvicorn_options(settings))]
    assert calls[0][1]["reload"] is True
