"""Locale-aware lookups for catalog questions, answers and fixed chat strings.

Every lookup is keyed by the canonical English text. A locale or key with no
registered translation silently falls back to English.
"""

from __future__ import annotations

import logging
from typing import List

from .loaders import load_translations
from .models import GREETING_KEY, UNKNOWN_KEY

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

LANGUAGE_CONFIG = {
    "en": {"label": "EN", "name": "English"},
    "fr": {"label": "FR", "name": "Français"},
    "de": {"label": "DE", "name": "Deutsch"},
}


def supported_locales() -> List[str]:
    return list(LANGUAGE_CONFIG)


def is_supported(locale: str | None) -> bool:
    return bool(locale) and locale in LANGUAGE_CONFIG


def resolve_locale(locale: str | None) -> str:
    """Return ``locale`` if supported, otherwise the default locale."""
    if is_supported(locale):
        return locale
    return DEFAULT_LOCALE


def _lookup(table: str, locale: str, canonical: str) -> str:
    if locale == DEFAULT_LOCALE or not canonical:
        return canonical
    translated = load_translations()[table].get(locale, {}).get(canonical)
    if not translated:
        logger.debug("No %s translation for %s; using English.", table, locale)
        return canonical
    return translated


def translate_question(question: str, locale: str) -> str:
    return _lookup("questions", locale, question)


def translate_answer(answer: str, locale: str) -> str:
    return _lookup("answers", locale, answer)


def ui_text(key: str, locale: str) -> str:
    strings = load_translations()["strings"]
    localized = strings.get(locale, {}).get(key)
    if localized:
        return localized
    return strings.get(DEFAULT_LOCALE, {}).get(key, key)


def greeting_text(locale: str) -> str:
    return ui_text(GREETING_KEY, locale)


def unknown_text(locale: str) -> str:
    return ui_text(UNKNOWN_KEY, locale)


class Translator:
    def __init__(self, target_language: str):
        if target_language not in LANGUAGE_CONFIG:
            raise ValueError(f"Unsupported language: {target_language}")
        self.target_language = target_language
        self.language_name = LANGUAGE_CONFIG[target_language]["name"]

    def question(self, question: str) -> str:
        return translate_question(question, self.target_language)

    def answer(self, answer: str) -> str:
        return translate_answer(answer, self.target_language)

    def content_for_key(self, content_key: str) -> str:
        """Render an assistant reply from its canonical key."""
        if content_key == GREETING_KEY:
            return greeting_text(self.target_language)
        if content_key == UNKNOWN_KEY:
            return unknown_text(self.target_language)
        return self.answer(content_key)

    def text(self, key: str) -> str:
        return ui_text(key, self.target_language)
