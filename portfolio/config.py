from __future__ import annotations

from .settings_manager import get_settings


def _as_int(value, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def _resolve_settings(force: bool = False) -> dict:
    settings = get_settings(force_reload=force)
    delay_min = max(0, _as_int(settings.get("typing_delay_min_ms"), 600))
    delay_max = max(delay_min, _as_int(settings.get("typing_delay_max_ms"), 1000))
    return {
        "MATCH_THRESHOLD": _as_int(settings.get("match_threshold"), 2),
        "SUGGESTION_COUNT": max(0, _as_int(settings.get("suggestion_count"), 4)),
        "TYPING_DELAY_MS": (delay_min, delay_max),
        "SESSION_KEY": settings.get("session_key") or "portfolio-chat-session",
        "LOCALE_KEY": settings.get("locale_key") or "lang",
        "INTRO_AUDIO_SRC": settings.get("intro_audio_src") or "static/intro.m4a",
        "CONTACT_EMAIL": settings.get("contact_email") or "",
    }


_settings_cache = _resolve_settings()

MATCH_THRESHOLD = _settings_cache["MATCH_THRESHOLD"]
SUGGESTION_COUNT = _settings_cache["SUGGESTION_COUNT"]
TYPING_DELAY_MS = _settings_cache["TYPING_DELAY_MS"]
SESSION_KEY = _settings_cache["SESSION_KEY"]
LOCALE_KEY = _settings_cache["LOCALE_KEY"]
INTRO_AUDIO_SRC = _settings_cache["INTRO_AUDIO_SRC"]
CONTACT_EMAIL = _settings_cache["CONTACT_EMAIL"]


def refresh_runtime_settings():
    global MATCH_THRESHOLD, SUGGESTION_COUNT, TYPING_DELAY_MS
    global SESSION_KEY, LOCALE_KEY, INTRO_AUDIO_SRC, CONTACT_EMAIL
    updated = _resolve_settings(force=True)
    MATCH_THRESHOLD = updated["MATCH_THRESHOLD"]
    SUGGESTION_COUNT = updated["SUGGESTION_COUNT"]
    TYPING_DELAY_MS = updated["TYPING_DELAY_MS"]
    SESSION_KEY = updated["SESSION_KEY"]
    LOCALE_KEY = updated["LOCALE_KEY"]
    INTRO_AUDIO_SRC = updated["INTRO_AUDIO_SRC"]
    CONTACT_EMAIL = updated["CONTACT_EMAIL"]


class UIConfig:
    PAGE_TITLE = "Nguyen Vo | Frontend Architect & UX Engineer"
    PAGE_ICON = "💬"
    OWNER_NAME = "Nguyen Vo"
