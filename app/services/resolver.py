"""Trailer resolution fallback chain.

The resolver tries, in order:

1. the metadata provider in the requested locale,
2. the search provider with a locale-agnostic query,
3. the metadata provider in the fallback locale,

and stops at the first step that yields a trailer. Every failure ends in an
empty stream list; nothing is raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

from ..errors import (
    InvalidIdentifierError,
    ProviderAuthenticationError,
    ProviderUnavailableError,
    TransientProviderError,
)
from ..languages import DEFAULT_LANGUAGE, FALLBACK_LANGUAGE, normalize_language
from ..models import ContentReference, TrailerStream
from ..utils import title_tokens
from .providers import MetadataProvider, SearchProvider, TrailerLookup, VideoCandidate

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Found:
    stream: TrailerStream


@dataclass(slots=True, frozen=True)
class NotFound:
    pass


@dataclass(slots=True, frozen=True)
class ProviderFailure:
    reason: str


ProviderResult = Found | NotFound | ProviderFailure


@dataclass(slots=True)
class _Resolution:
    """Per-call state shared between the steps of one chain."""

    reference: ContentReference
    title: str | None = None
    year: int | None = None


class _ChainAborted(Exception):
    """Raised inside the chain when later steps must not run."""


def select_candidate(candidates: Sequence[VideoCandidate]) -> VideoCandidate | None:
    """Pick the first official trailer, else the first candidate.

    Candidates are ordered by rank and then by their original position so the
    choice is deterministic for identical upstream data.
    """

    if not candidates:
        return None
    ranked = sorted(
        enumerate(candidates),
        key=lambda entry: (0 if entry[1].is_official_trailer else 1, entry[0]),
    )
    return ranked[0][1]


def is_relevant(candidate: VideoCandidate, title: str | None) -> bool:
    """Return ``True`` when every title token appears in the video name."""

    if not title or not candidate.name:
        return True
    expected = title_tokens(title)
    if not expected:
        return True
    available = set(title_tokens(candidate.name))
    return all(token in available for token in expected)


class TrailerResolver:
    """Resolve a single trailer stream for a title."""

    def __init__(
        self,
        metadata_provider: MetadataProvider,
        search_provider: SearchProvider,
        *,
        default_language: str = DEFAULT_LANGUAGE,
        fallback_language: str = FALLBACK_LANGUAGE,
        step_timeout: float | None = 10.0,
    ) -> None:
        self._metadata = metadata_provider
        self._search = search_provider
        self._default_language = default_language
        self._fallback_language = fallback_language
        self._step_timeout = step_timeout
        self._unavailable_logged = False

    def is_available(self) -> bool:
        return self._metadata.is_available()

    async def resolve(
        self,
        media_type: str,
        external_id: str,
        season: int | None = None,
        locale: str | None = None,
    ) -> list[TrailerStream]:
        """Return zero or one trailer streams for the requested title."""

        language = normalize_language(locale, self._default_language)
        try:
            reference = ContentReference.parse(media_type, external_id, season=season)
        except InvalidIdentifierError:
            logger.info(
                "Ignoring trailer request for unsupported id %r (%s)", external_id, media_type
            )
            return []

        if not self._metadata.is_available():
            self._log_unavailable()
            return []

        try:
            stream = await self._run_chain(reference, language)
        except _ChainAborted:
            return []
        except Exception:
            logger.exception(
                "Unexpected error resolving trailer for %s %s (%s)",
                reference.media_type,
                reference.external_id,
                language,
            )
            return []

        if stream is None:
            logger.info(
                "No trailer found for %s %s (season=%s, language=%s)",
                reference.media_type,
                reference.external_id,
                reference.season,
                language,
            )
            return []

        logger.info(
            "Resolved trailer for %s %s via %s (%s)",
            reference.media_type,
            reference.external_id,
            stream.source_provider,
            stream.locale or "generic",
        )
        return [stream]

    async def _run_chain(
        self, reference: ContentReference, language: str
    ) -> TrailerStream | None:
        state = _Resolution(reference)

        async def primary() -> ProviderResult:
            return await self._from_metadata(state, language)

        async def search() -> ProviderResult:
            return await self._from_search(state)

        steps: list[tuple[str, str, Callable[[], Awaitable[ProviderResult]]]] = [
            ("primary", language, primary),
            ("search", language, search),
        ]
        if language != self._fallback_language:

            async def fallback() -> ProviderResult:
                return await self._from_metadata(state, self._fallback_language)

            steps.append(("fallback", self._fallback_language, fallback))

        for step_name, step_language, step in steps:
            result = await self._run_step(reference, step_name, step_language, step)
            if isinstance(result, Found):
                return result.stream
        return None

    async def _run_step(
        self,
        reference: ContentReference,
        step_name: str,
        language: str,
        step: Callable[[], Awaitable[ProviderResult]],
    ) -> ProviderResult:
        try:
            if self._step_timeout is None:
                return await step()
            return await asyncio.wait_for(step(), timeout=self._step_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Trailer step %s timed out for %s %s (%s)",
                step_name,
                reference.media_type,
                reference.external_id,
                language,
            )
            return ProviderFailure("timeout")
        except TransientProviderError as exc:
            logger.warning(
                "Trailer step %s failed for %s %s (%s): %s",
                step_name,
                reference.media_type,
                reference.external_id,
                language,
                exc,
            )
            return ProviderFailure(str(exc))
        except ProviderAuthenticationError as exc:
            logger.error(
                "Trailer step %s rejected by %s for %s %s (%s): %s",
                step_name,
                exc.provider or "provider",
                reference.media_type,
                reference.external_id,
                language,
                exc,
            )
            raise _ChainAborted from exc
        except ProviderUnavailableError as exc:
            self._log_unavailable()
            raise _ChainAborted from exc

    async def _from_metadata(
        self,
        state: _Resolution,
        language: str,
    ) -> ProviderResult:
        lookup: TrailerLookup | None = await self._metadata.fetch_trailers(
            state.reference, language
        )
        if lookup is None:
            return NotFound()
        if lookup.title and state.title is None:
            state.title = lookup.title
            state.year = lookup.year

        candidate = select_candidate(lookup.candidates)
        if candidate is None:
            return NotFound()
        return Found(
            TrailerStream(
                url=candidate.url,
                title=self._stream_title(lookup.title, candidate),
                locale=candidate.language or language,
                source_provider=self._metadata.name,
                youtube_id=candidate.key if candidate.site == "YouTube" else None,
            )
        )

    async def _from_search(self, state: _Resolution) -> ProviderResult:
        title = state.title
        query = self._search_query(state.reference, title, state.year)
        candidates = await self._search.search_trailers(query)
        relevant = [candidate for candidate in candidates if is_relevant(candidate, title)]
        candidate = select_candidate(relevant)
        if candidate is None:
            return NotFound()
        return Found(
            TrailerStream(
                url=candidate.url,
                title=candidate.name or self._stream_title(title, candidate),
                locale=candidate.language,
                source_provider=self._search.name,
                youtube_id=candidate.key if candidate.site == "YouTube" else None,
            )
        )

    @staticmethod
    def _search_query(
        reference: ContentReference, title: str | None, year: int | None = None
    ) -> str:
        parts = [title or reference.external_id]
        if title and year and not reference.is_season:
            parts.append(str(year))
        if reference.is_season:
            parts.append(f"season {reference.season}")
        parts.append("trailer")
        return " ".join(parts)

    @staticmethod
    def _stream_title(title: str | None, candidate: VideoCandidate) -> str:
        if title and candidate.name and candidate.name != title:
            return f"{title} - {candidate.name}"
        return candidate.name or title or "Trailer"

    def _log_unavailable(self) -> None:
        if self._unavailable_logged:
            return
        self._unavailable_logged = True
        logger.warning(
            "Trailer provider %s is unavailable: no access credential configured",
            self._metadata.name,
        )
