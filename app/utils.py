"""Utility helpers for the Streailer service."""

from __future__ import annotations

import re
import unicodedata


YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={key}"
YOUTUBE_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")


def slugify(value: str) -> str:
    """Return a URL-friendly slug."""

    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"[^a-zA-Z0-9]+", "-", value)
    value = value.strip("-")
    value = re.sub(r"-+", "-", value)
    return value.lower()


APOSTROPHES_RE = re.compile(r"['`\u2018\u2019\u02bc\u00b4]")


def title_tokens(value: str) -> list[str]:
    """Split a title into lowercase ASCII tokens used for relevance checks.

    Apostrophes are dropped first so "Ocean's" and "Ocean’s" agree.
    """

    value = APOSTROPHES_RE.sub("", value)
    return [token for token in slugify(value).split("-") if token]


def youtube_watch_url(key: str) -> str:
    return YOUTUBE_WATCH_URL.format(key=key)


def is_youtube_id(value: object) -> bool:
    return isinstance(value, str) and bool(YOUTUBE_ID_RE.match(value))
