from __future__ import annotations

import logging
from typing import Callable, List, MutableMapping

from . import config
from .i18n import DEFAULT_LOCALE, LANGUAGE_CONFIG, is_supported

logger = logging.getLogger(__name__)

LocaleListener = Callable[[str], None]


def detect_locale(accept_language: str | None) -> str | None:
    """Pick the first supported primary language tag from an Accept-Language value."""
    if not accept_language:
        return None
    for part in accept_language.split(","):
        tag = part.split(";")[0].strip().lower()
        primary = tag.split("-")[0]
        if is_supported(primary):
            return primary
    return None


class LocaleManager:
    """Owns the active locale and tells subscribers when it changes.

    The choice is kept under ``key`` in a per-visitor mapping (a dict in tests,
    ``st.query_params`` in the app). The initial locale comes from that
    mapping, then from the visitor's language header, then the default locale.
    """

    def __init__(
        self,
        store: MutableMapping | None = None,
        *,
        accept_language: str | None = None,
        key: str | None = None,
    ):
        self.store = store if store is not None else {}
        self.key = key or config.LOCALE_KEY
        self._listeners: List[LocaleListener] = []
        candidate = self.store.get(self.key)
        if isinstance(candidate, str) and is_supported(candidate):
            self._locale = candidate
        else:
            self._locale = detect_locale(accept_language) or DEFAULT_LOCALE

    @property
    def locale(self) -> str:
        return self._locale

    @staticmethod
    def options() -> dict:
        return {code: meta["name"] for code, meta in LANGUAGE_CONFIG.items()}

    def subscribe(self, listener: LocaleListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_locale(self, locale: str) -> str:
        if not is_supported(locale):
            raise ValueError(f"Unsupported language: {locale}")
        changed = locale != self._locale
        self._locale = locale
        self.store[self.key] = locale
        if changed:
            logger.info("Locale switched to %s.", locale)
            for listener in list(self._listeners):
                listener(locale)
        return locale
