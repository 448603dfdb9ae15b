"""Supported trailer languages and locale negotiation helpers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageDefinition:
    """Describes a locale users can pick on the configuration page."""

    code: str
    name: str


SUPPORTED_LANGUAGES: tuple[LanguageDefinition, ...] = (
    # Dubbing-centric markets
    LanguageDefinition(code="en-US", name="English (US)"),
    LanguageDefinition(code="es-MX", name="Español (Latinoamérica)"),
    LanguageDefinition(code="pt-BR", name="Português (Brasil)"),
    LanguageDefinition(code="de-DE", name="Deutsch"),
    LanguageDefinition(code="fr-FR", name="Français"),
    LanguageDefinition(code="es-ES", name="Español (España)"),
    LanguageDefinition(code="it-IT", name="Italiano"),
    # Expansion markets
    LanguageDefinition(code="ru-RU", name="Русский"),
    LanguageDefinition(code="ja-JP", name="日本語"),
    LanguageDefinition(code="hi-IN", name="हिन्दी"),
    LanguageDefinition(code="tr-TR", name="Türkçe"),
)

SUPPORTED_LANGUAGE_CODES: tuple[str, ...] = tuple(
    definition.code for definition in SUPPORTED_LANGUAGES
)

DEFAULT_LANGUAGE = "it-IT"
FALLBACK_LANGUAGE = "en-US"

_LANGUAGE_LOOKUP = {code.lower(): code for code in SUPPORTED_LANGUAGE_CODES}


def find_language(value: object) -> str | None:
    """Return the canonical supported code for ``value`` or ``None``."""

    if not isinstance(value, str):
        return None
    candidate = value.strip().replace("_", "-").lower()
    if not candidate:
        return None
    return _LANGUAGE_LOOKUP.get(candidate)


def normalize_language(value: object, default: str = DEFAULT_LANGUAGE) -> str:
    """Return a supported locale code, falling back to ``default``."""

    return find_language(value) or default


def iso_639_1(code: str) -> str:
    return code.split("-", 1)[0].lower()
