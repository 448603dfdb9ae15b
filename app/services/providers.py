"""Provider capabilities consumed by the trailer resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from ..models import ContentReference


@dataclass(slots=True)
class VideoCandidate:
    """Normalized view of a video returned by an upstream provider."""

    key: str
    name: str
    url: str
    site: str = "YouTube"
    type: str | None = None
    official: bool = False
    language: str | None = None

    @property
    def is_official_trailer(self) -> bool:
        return self.official and (self.type or "").lower() == "trailer"


@dataclass(slots=True)
class TrailerLookup:
    """Title metadata plus the trailer candidates found for one locale."""

    title: str
    year: int | None = None
    candidates: list[VideoCandidate] = field(default_factory=list)


class MetadataProvider(Protocol):
    """Catalog service able to list trailers for a title in a locale."""

    name: str

    def is_available(self) -> bool:
        ...

    async def fetch_trailers(
        self, reference: ContentReference, language: str
    ) -> TrailerLookup | None:
        ...


class SearchProvider(Protocol):
    """Video hosting service searched by free text."""

    name: str

    async def search_trailers(self, query: str) -> list[VideoCandidate]:
        ...
