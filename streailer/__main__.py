"""Run the trailer add-on with ``python -m streailer`` or the ``streailer`` script."""

from __future__ import annotations

import uvicorn

from app.config import Settings, get_settings


def uvicorn_options(config: Settings) -> dict[str, object]:
    """Translate settings into ``uvicorn.run`` keyword arguments."""

    development = config.environment == "development"
    return {
        "host": config.server_host,
        "port": config.server_port,
        "reload": development,
        "log_level": "debug" if development else "info",
        # Add-ons are usually published behind an HTTPS reverse proxy.
        "proxy_headers": True,
        "forwarded_allow_ips": "*",
    }


def main() -> None:
    uvicorn.run("app.main:app", **uvicorn_options(get_settings()))


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
