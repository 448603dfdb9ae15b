"""Entry point for the FastAPI-powered Stremio trailer addon."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from .config import Settings, settings
from .languages import SUPPORTED_LANGUAGE_CODES
from .models import StreamConfig
from .services.resolver import TrailerResolver
from .services.tmdb import TMDBClient
from .services.youtube import YouTubeSearchClient
from .web import render_config_page

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    timeout = httpx.Timeout(settings.provider_timeout_seconds, connect=5.0)
    tmdb_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(base_url=str(settings.tmdb_api_url), timeout=timeout)
    )
    youtube_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.youtube_url),
            timeout=timeout,
            follow_redirects=True,
        )
    )

    resolver = build_resolver(
        settings,
        TMDBClient(settings, tmdb_http_client),
        YouTubeSearchClient(settings, youtube_http_client),
    )
    if not resolver.is_available():
        logger.warning("TMDB_API_KEY is not configured; every stream request will be empty")
    fastapi_app.state.trailer_resolver = resolver

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        await exit_stack.aclose()


def build_resolver(
    config: Settings, tmdb: TMDBClient, youtube: YouTubeSearchClient
) -> TrailerResolver:
    # A TMDB step may issue up to three requests.
    return TrailerResolver(
        tmdb,
        youtube,
        default_language=config.default_language,
        fallback_language=config.fallback_language,
        step_timeout=config.provider_timeout_seconds * 3,
    )


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Trailer streams for Stremio with multi-language support",
        version=settings.addon_version,
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    return fastapi_app


def get_trailer_resolver(app: FastAPI) -> TrailerResolver:
    resolver = getattr(app.state, "trailer_resolver", None)
    if not isinstance(resolver, TrailerResolver):
        raise RuntimeError("Trailer resolver not initialised")
    return resolver


def build_manifest(config: Settings) -> dict[str, Any]:
    """Return the add-on manifest advertised to Stremio."""

    manifest: dict[str, Any] = {
        "id": config.addon_id,
        "version": config.addon_version,
        "name": f"{config.app_name} - Trailer Provider",
        "description": (
            "Trailer provider with multi-language support. "
            "TMDB → YouTube fallback → TMDB "
            f"{config.fallback_language}"
        ),
        "resources": ["stream"],
        "types": ["movie", "series"],
        "idPrefixes": ["tt"],
        "catalogs": [],
        "behaviorHints": {"configurable": True},
        "config": [
            {
                "key": "language",
                "type": "select",
                "title": "Lingua Trailer / Trailer Language",
                "options": list(SUPPORTED_LANGUAGE_CODES),
                "default": config.default_language,
                "required": True,
            }
        ],
    }
    if config.addon_logo:
        manifest["logo"] = str(config.addon_logo)
    if config.addon_background:
        manifest["background"] = str(config.addon_background)
    return manifest


def _parse_config(raw: str | None) -> StreamConfig:
    try:
        return StreamConfig.from_path(raw)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def register_routes(fastapi_app: FastAPI) -> None:
    async def _stream_endpoint(
        content_type: str,
        content_id: str,
        *,
        raw_config: str | None = None,
    ) -> JSONResponse:
        resolver = get_trailer_resolver(fastapi_app)
        config = _parse_config(raw_config)
        logger.info(
            "Stream request: type=%s, id=%s, language=%s",
            content_type,
            content_id,
            config.language or "default",
        )
        streams = await resolver.resolve(
            content_type, content_id, locale=config.language
        )
        logger.info("Returning %s stream(s) for %s", len(streams), content_id)
        return JSONResponse(
            {"streams": [stream.to_stream_payload(settings.app_name) for stream in streams]}
        )

    @fastapi_app.get("/")
    async def root() -> RedirectResponse:
        return RedirectResponse(url="/configure")

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, Any]:
        resolver = getattr(fastapi_app.state, "trailer_resolver", None)
        available = isinstance(resolver, TrailerResolver) and resolver.is_available()
        return {"status": "ok", "tmdb": available}

    @fastapi_app.get("/configure", response_class=HTMLResponse)
    async def configure() -> HTMLResponse:
        return HTMLResponse(render_config_page(settings))

    @fastapi_app.get("/manifest.json")
    async def manifest() -> dict[str, Any]:
        return build_manifest(settings)

    @fastapi_app.get("/stream/{content_type}/{content_id}.json")
    async def stream(content_type: str, content_id: str) -> JSONResponse:
        return await _stream_endpoint(content_type, content_id)

    @fastapi_app.get("/{raw_config}/configure", response_class=HTMLResponse)
    async def configure_with_config(raw_config: str) -> HTMLResponse:
        config = _parse_config(raw_config)
        return HTMLResponse(render_config_page(settings, language=config.language))

    @fastapi_app.get("/{raw_config}/manifest.json")
    async def manifest_with_config(raw_config: str) -> dict[str, Any]:
        _parse_config(raw_config)
        return build_manifest(settings)

    @fastapi_app.get("/{raw_config}/stream/{content_type}/{content_id}.json")
    async def stream_with_config(
        raw_config: str, content_type: str, content_id: str
    ) -> JSONResponse:
        return await _stream_endpoint(
            content_type, content_id, raw_config=raw_config
        )


app = create_app()
