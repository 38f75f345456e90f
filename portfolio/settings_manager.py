"""Durable visitor preferences and runtime knobs, kept in one JSON file."""

from __future__ import annotations

import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SETTINGS_PATH = Path(os.getenv("PORTFOLIO_SETTINGS", PROJECT_ROOT / "settings.json"))

DEFAULT_SETTINGS: Dict[str, Any] = {
    "locale_key": "lang",
    "match_threshold": 2,
    "suggestion_count": 4,
    "typing_delay_min_ms": 600,
    "typing_delay_max_ms": 1000,
    "session_key": "portfolio-chat-session",
    "intro_audio_src": "static/intro.m4a",
    "contact_email": "nguyen.vo@outlook.com",
}

_SETTINGS_CACHE: Dict[str, Any] | None = None


def _with_defaults(values: Dict[str, Any]) -> Dict[str, Any]:
    combined = deepcopy(DEFAULT_SETTINGS)
    combined.update(values)
    return combined


def _write(values: Dict[str, Any]) -> None:
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(json.dumps(values, ensure_ascii=False, indent=2), encoding="utf-8")


def _load_from_disk() -> Dict[str, Any]:
    if not SETTINGS_PATH.exists():
        _write(DEFAULT_SETTINGS)
        return _with_defaults({})
    try:
        payload = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", SETTINGS_PATH, exc)
        return _with_defaults({})
    if not isinstance(payload, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object.", SETTINGS_PATH)
        return _with_defaults({})
    return _with_defaults(payload)


def get_settings(*, force_reload: bool = False) -> Dict[str, Any]:
    global _SETTINGS_CACHE
    if force_reload or _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = _load_from_disk()
    return deepcopy(_SETTINGS_CACHE)


def save_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    _write(_with_defaults(settings))
    return get_settings(force_reload=True)


def update_settings(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``changes`` into the stored settings and return the result."""
    current = get_settings()
    current.update(changes)
    return save_settings(current)
