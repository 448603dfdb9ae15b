"""Utilities for resolving trailers from The Movie Database (TMDB)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import Settings
from ..errors import (
    ProviderAuthenticationError,
    ProviderUnavailableError,
    TransientProviderError,
)
from ..languages import iso_639_1
from ..models import ContentReference
from ..utils import youtube_watch_url
from .providers import TrailerLookup, VideoCandidate

logger = logging.getLogger(__name__)

TRAILER_VIDEO_TYPES = {"trailer", "teaser"}


@dataclass(slots=True)
class TMDBTitle:
    """TMDB entity matched from an external identifier."""

    tmdb_id: int
    media_type: str
    title: str
    year: int | None


class TMDBClient:
    """Client responsible for looking up trailers on TMDB."""

    name = "tmdb"

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    def is_available(self) -> bool:
        return self._settings.tmdb_configured

    async def fetch_trailers(
        self, reference: ContentReference, language: str
    ) -> TrailerLookup | None:
        """Return trailers for ``reference`` in ``language``.

        Season videos are preferred for a series with a season; the show
        videos are used when the season has none.
        """

        if not self.is_available():
            raise ProviderUnavailableError("TMDB API key is not configured", provider=self.name)

        title = await self.find_by_imdb_id(
            reference.external_id, content_type=reference.media_type, language=language
        )
        if title is None:
            logger.info("TMDB has no entry for %s", reference.external_id)
            return None

        candidates: list[VideoCandidate] = []
        if title.media_type == "tv" and reference.is_season:
            candidates = await self._fetch_videos(
                f"/tv/{title.tmdb_id}/season/{reference.season}/videos", language
            )
        if not candidates:
            candidates = await self._fetch_videos(
                f"/{title.media_type}/{title.tmdb_id}/videos", language
            )

        return TrailerLookup(title=title.title, year=title.year, candidates=candidates)

    async def find_by_imdb_id(
        self, imdb_id: str, *, content_type: str, language: str
    ) -> TMDBTitle | None:
        """Resolve an IMDb identifier to a TMDB movie or TV show."""

        payload = await self._get(
            f"/find/{imdb_id}",
            {"external_source": "imdb_id", "language": language},
        )
        if payload is None:
            return None

        order = ("tv", "movie") if content_type == "series" else ("movie", "tv")
        for media_type in order:
            results = payload.get(f"{media_type}_results") or []
            if not isinstance(results, list):
                continue
            for result in results:
                if not isinstance(result, dict) or result.get("id") is None:
                    continue
                try:
                    tmdb_id = int(result["id"])
                except (TypeError, ValueError):
                    continue
                return TMDBTitle(
                    tmdb_id=tmdb_id,
                    media_type=media_type,
                    title=str(
                        result.get("title")
                        or result.get("name")
                        or result.get("original_title")
                        or result.get("original_name")
                        or imdb_id
                    ),
                    year=self._extract_year(result, media_type),
                )
        return None

    async def _fetch_videos(self, path: str, language: str) -> list[VideoCandidate]:
        payload = await self._get(
            path,
            {"language": language, "include_video_language": iso_639_1(language)},
        )
        if payload is None:
            return []
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise TransientProviderError(
                f"TMDB returned malformed videos for {path}", provider=self.name
            )

        candidates: list[VideoCandidate] = []
        for video in results:
            if not isinstance(video, dict):
                continue
            key = video.get("key")
            if not key or video.get("site") != "YouTube":
                continue
            video_type = str(video.get("type") or "")
            if video_type.lower() not in TRAILER_VIDEO_TYPES:
                continue
            candidates.append(
                VideoCandidate(
                    key=str(key),
                    name=str(video.get("name") or "Trailer"),
                    url=youtube_watch_url(str(key)),
                    site="YouTube",
                    type=video_type,
                    official=bool(video.get("official")),
                    language=self._video_language(video, language),
                )
            )
        return candidates

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any] | None:
        """Perform a GET request; ``None`` means TMDB reported 404."""

        query = dict(params)
        query["api_key"] = self._settings.tmdb_api_key
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as exc:
            raise TransientProviderError(
                f"TMDB request to {path} failed: {exc.__class__.__name__}",
                provider=self.name,
            ) from exc

        if response.status_code == 401:
            raise ProviderAuthenticationError(
                "TMDB rejected the configured API key", provider=self.name
            )
        if response.status_code == 404:
            logger.debug("TMDB returned 404 for %s", path)
            return None
        if response.status_code >= 400:
            raise TransientProviderError(
                f"TMDB request to {path} failed with status {response.status_code}",
                provider=self.name,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TransientProviderError(
                f"TMDB returned invalid JSON for {path}", provider=self.name
            ) from exc
        if not isinstance(payload, dict):
            raise TransientProviderError(
                f"TMDB returned an unexpected payload for {path}", provider=self.name
            )
        return payload

    @staticmethod
    def _video_language(video: dict[str, Any], requested: str) -> str:
        language = video.get("iso_639_1")
        region = video.get("iso_3166_1")
        if not isinstance(language, str) or not language:
            return requested
        if language.lower() == iso_639_1(requested):
            return requested
        if isinstance(region, str) and region:
            return f"{language.lower()}-{region.upper()}"
        return language.lower()

    @staticmethod
    def _extract_year(result: dict[str, Any], media_type: str) -> int | None:
        date_key = "release_date" if media_type == "movie" else "first_air_date"
        date_value = result.get(date_key)
        if not isinstance(date_value, str) or len(date_value) < 4:
            return None
        try:
            return int(date_value[:4])
        except ValueError:
            return None
