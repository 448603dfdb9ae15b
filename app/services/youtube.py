"""Generic trailer search against the public YouTube results page."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator

import httpx

from ..config import Settings
from ..errors import TransientProviderError
from ..utils import is_youtube_id, youtube_watch_url
from .providers import VideoCandidate

logger = logging.getLogger(__name__)

INITIAL_DATA_RE = re.compile(
    r"(?:var\s+ytInitialData|window\[\"ytInitialData\"\])\s*=\s*(\{.*?\});\s*</script>",
    re.DOTALL,
)
WATCH_ID_RE = re.compile(r"watch\?v=([A-Za-z0-9_-]{11})")


class YouTubeSearchClient:
    """Searches YouTube by free text; needs neither credential nor locale."""

    name = "youtube"

    _SEARCH_PATH = "/results"

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        *,
        max_results: int = 10,
    ) -> None:
        self._settings = settings
        self._client = http_client
        self._max_results = max_results

    async def search_trailers(self, query: str) -> list[VideoCandidate]:
        """Return videos for ``query`` in the order YouTube ranks them."""

        normalized_query = (query or "").strip()
        if not normalized_query:
            return []

        try:
            response = await self._client.get(
                self._SEARCH_PATH,
                params={"search_query": normalized_query, "hl": "en"},
                headers={"User-Agent": f"Mozilla/5.0 ({self._settings.app_name})"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransientProviderError(
                f"YouTube search failed with status {exc.response.status_code}",
                provider=self.name,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransientProviderError(
                f"YouTube search failed: {exc.__class__.__name__}",
                provider=self.name,
            ) from exc

        candidates = self.parse_results_page(response.text)
        logger.debug(
            "YouTube search for %r returned %s candidate(s)",
            normalized_query,
            len(candidates),
        )
        return candidates[: self._max_results]

    @classmethod
    def parse_results_page(cls, html: str) -> list[VideoCandidate]:
        """Extract video candidates from a results page."""

        match = INITIAL_DATA_RE.search(html)
        if match:
            try:
                data = json.loads(match.group(1))
            except json.JSONDecodeError:
                logger.debug("ytInitialData is not valid JSON, scanning for ids")
            else:
                return cls._dedupe(cls._candidates_from_initial_data(data))

        return cls._dedupe(
            VideoCandidate(key=key, name="", url=youtube_watch_url(key))
            for key in WATCH_ID_RE.findall(html)
        )

    @classmethod
    def _candidates_from_initial_data(cls, data: Any) -> Iterator[VideoCandidate]:
        for renderer in cls._walk_video_renderers(data):
            key = renderer.get("videoId")
            if not is_youtube_id(key):
                continue
            yield VideoCandidate(
                key=key,
                name=cls._renderer_title(renderer),
                url=youtube_watch_url(key),
            )

    @classmethod
    def _walk_video_renderers(cls, node: Any) -> Iterator[dict[str, Any]]:
        if isinstance(node, dict):
            renderer = node.get("videoRenderer")
            if isinstance(renderer, dict):
                yield renderer
            for value in node.values():
                yield from cls._walk_video_renderers(value)
        elif isinstance(node, list):
            for value in node:
                yield from cls._walk_video_renderers(value)

    @staticmethod
    def _renderer_title(renderer: dict[str, Any]) -> str:
        title = renderer.get("title")
        if not isinstance(title, dict):
            return ""
        runs = title.get("runs")
        if isinstance(runs, list):
            return "".join(
                str(run.get("text") or "") for run in runs if isinstance(run, dict)
            ).strip()
        simple = title.get("simpleText")
        return str(simple).strip() if simple else ""

    @staticmethod
    def _dedupe(candidates: Any) -> list[VideoCandidate]:
        seen: set[str] = set()
        unique: list[VideoCandidate] = []
        for candidate in candidates:
            if candidate.key in seen:
                continue
            seen.add(candidate.key)
            unique.append(candidate)
        return unique
