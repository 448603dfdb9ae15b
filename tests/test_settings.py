"""Configuration settings behaviour tests."""

from __future__ import annotations

import pytest

from app.config import Settings
from app.languages import SUPPORTED_LANGUAGE_CODES, normalize_language


def test_defaults_match_addon_conventions(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PORT", "DEFAULT_LANGUAGE", "FALLBACK_LANGUAGE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.server_port == 7020
    assert settings.default_language == "it-IT"
    assert settings.fallback_language == "en-US"


def test_languages_are_normalised() -> None:
    settings = Settings(_env_file=None, DEFAULT_LANGUAGE="fr_fr", FALLBACK_LANGUAGE="EN-us")

    assert settings.default_language == "fr-FR"
    assert settings.fallback_language == "en-US"


def test_unsupported_default_language_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported language configured"):
        Settings(_env_file=None, DEFAULT_LANGUAGE="xx-XX")


def test_blank_tmdb_key_counts_as_missing() -> None:
    assert Settings(_env_file=None, TMDB_API_KEY="  ").tmdb_configured is False
    assert Settings(_env_file=None, TMDB_API_KEY="secret").tmdb_configured is True


def test_provider_timeout_is_bounded() -> None:
    with pytest.raises(ValueError):
        Settings(_env_file=None, PROVIDER_TIMEOUT=0)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("it-IT", "it-IT"),
        ("pt_br", "pt-BR"),
        (" ja-jp ", "ja-JP"),
        ("xx-XX", "it-IT"),
        (None, "it-IT"),
        ("", "it-IT"),
    ],
)
def test_normalize_language(value: str | None, expected: str) -> None:
    assert normalize_language(value) == expected


def test_supported_languages_are_unique() -> None:
    assert len(set(SUPPORTED_LANGUAGE_CODES)) == len(SUPPORTED_LANGUAGE_CODES) == 11
