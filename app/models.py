"""Pydantic models describing trailer requests and stream payloads."""

from __future__ import annotations

import json
import re
from typing import Any, Literal
from urllib.parse import parse_qs, unquote

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .errors import InvalidIdentifierError
from .languages import find_language

ContentType = Literal["movie", "series"]

IMDB_ID_RE = re.compile(r"^tt[0-9]+$")


def normalize_content_type(value: object) -> ContentType:
    """Anything other than ``series`` is treated as a movie."""

    if isinstance(value, str) and value.strip().lower() == "series":
        return "series"
    return "movie"


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class ContentReference(BaseModel):
    """Identifies the title a trailer is requested for."""

    model_config = ConfigDict(frozen=True)

    media_type: ContentType = "movie"
    external_id: str
    season: int | None = Field(default=None, ge=0)
    episode: int | None = Field(default=None, ge=0)

    @classmethod
    def parse(
        cls,
        media_type: object,
        raw_id: str,
        *,
        season: int | None = None,
    ) -> "ContentReference":
        """Parse a ``<id>[:<season>[:<episode>]]`` identifier.

        A season segment that parses as an integer overrides ``season``. The
        episode segment is kept on the reference but trailers are looked up
        at season granularity.
        """

        parts = (raw_id or "").strip().split(":")
        external_id = parts[0].strip()
        if not IMDB_ID_RE.match(external_id):
            raise InvalidIdentifierError(f"Unsupported identifier: {raw_id!r}")

        parsed_season = _parse_int(parts[1]) if len(parts) >= 2 else None
        if parsed_season is not None:
            season = parsed_season
        episode = _parse_int(parts[2]) if len(parts) >= 3 else None

        if season is not None and season < 0:
            season = None
        if episode is not None and episode < 0:
            episode = None

        return cls(
            media_type=normalize_content_type(media_type),
            external_id=external_id,
            season=season,
            episode=episode,
        )

    @property
    def is_season(self) -> bool:
        return self.media_type == "series" and self.season is not None


class TrailerStream(BaseModel):
    """A single playable trailer returned to the host."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    locale: str | None = None
    source_provider: str
    youtube_id: str | None = None

    def to_stream_payload(self, addon_name: str) -> dict[str, Any]:
        """Return a Stremio-compatible stream object."""

        label = self.locale or "Trailer"
        payload: dict[str, Any] = {
            "name": f"{addon_name}\n{label}",
            "title": self.title,
            "behaviorHints": {
                "notWebReady": self.youtube_id is None,
                "bingeGroup": f"{addon_name.lower()}-trailer",
            },
        }
        if self.youtube_id:
            payload["ytId"] = self.youtube_id
        else:
            payload["url"] = self.url
        return payload


class StreamConfig(BaseModel):
    """User configuration embedded in the add-on URL."""

    language: str | None = Field(
        default=None,
        validation_alias=AliasChoices("language", "lang", "locale"),
    )

    @field_validator("language", mode="before")
    @classmethod
    def _parse_language(cls, value: object) -> object:
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            raise ValueError("language must be a string")
        # Unsupported codes are kept; the resolver falls back to the default.
        return find_language(value) or value.strip()

    @classmethod
    def from_path(cls, raw: str | None) -> "StreamConfig":
        """Parse the config segment of ``/{config}/manifest.json`` style URLs.

        The segment may be URL-encoded JSON, a query string or a bare locale.
        """

        if raw is None:
            return cls()
        text = unquote(raw).strip()
        if not text:
            return cls()
        if text.startswith("{"):
            try:
                payload = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError("Configuration segment is not valid JSON") from exc
            if not isinstance(payload, dict):
                raise ValueError("Configuration segment must be a JSON object")
            return cls.model_validate(payload)
        if "=" in text:
            parsed = parse_qs(text, keep_blank_values=True)
            return cls.model_validate(
                {key: values[-1] for key, values in parsed.items() if values}
            )
        return cls.model_validate({"language": text})
