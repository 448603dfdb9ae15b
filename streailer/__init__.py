"""Streailer trailer add-on; re-exports the ASGI app for ``uvicorn streailer:app``."""

from __future__ import annotations

from app.main import app, create_app

__version__ = "1.0.0"

__all__ = ["__version__", "app", "create_app"]
