from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Tuple

from .models import QAEntry, Subtitle, WordTiming

DATA_DIR = Path(__file__).resolve().parent / "data"


def _read_json(path: Path):
    if not path.exists():
        raise FileNotFoundError(f"Expected file at {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def generate_word_timings(text: str, start: float, end: float) -> Tuple[WordTiming, ...]:
    """Split ``[start, end]`` across the words of ``text`` by character length.

    Each word gets a share of the caption duration proportional to its length,
    punctuation included. Ranges are contiguous and the last one ends exactly at
    ``end``.
    """
    words = text.split()
    total_chars = sum(len(word) for word in words)
    if not words or total_chars == 0:
        return ()
    total_duration = end - start
    cursor = start
    timings: List[WordTiming] = []
    for index, word in enumerate(words):
        word_end = end if index == len(words) - 1 else cursor + total_duration * len(word) / total_chars
        timings.append(WordTiming(word=word, start=cursor, end=word_end))
        cursor = word_end
    return tuple(timings)


@lru_cache(maxsize=None)
def _catalog_cache(path: str) -> Tuple[QAEntry, ...]:
    payload = _read_json(Path(path))
    entries = tuple(QAEntry.from_dict(item) for item in payload)
    seen = set()
    for entry in entries:
        if entry.id in seen:
            raise ValueError(f"Duplicate QA entry id {entry.id!r} in {path}")
        seen.add(entry.id)
    return entries


@lru_cache(maxsize=None)
def _translation_cache(path: str) -> Dict[str, Dict[str, Dict[str, str]]]:
    payload = _read_json(Path(path))
    return {
        "strings": payload.get("strings", {}),
        "questions": payload.get("questions", {}),
        "answers": payload.get("answers", {}),
    }


@lru_cache(maxsize=None)
def _subtitle_cache(path: str) -> Tuple[Subtitle, ...]:
    payload = _read_json(Path(path))
    subtitles = []
    for item in payload:
        start = float(item.get("start", 0.0))
        end = float(item.get("end", 0.0))
        text = item.get("text", "").strip()
        subtitles.append(
            Subtitle(
                id=int(item.get("id", 0)),
                start=start,
                end=end,
                text=text,
                words=generate_word_timings(text, start, end),
            )
        )
    return tuple(sorted(subtitles, key=lambda sub: sub.start))


def load_qa_catalog(base_dir: Path = DATA_DIR) -> Tuple[QAEntry, ...]:
    return _catalog_cache(str((base_dir / "qa_catalog.json").resolve()))


def load_translations(base_dir: Path = DATA_DIR) -> Dict[str, Dict[str, Dict[str, str]]]:
    return _translation_cache(str((base_dir / "translations.json").resolve()))


def load_subtitles(base_dir: Path = DATA_DIR) -> Tuple[Subtitle, ...]:
    return _subtitle_cache(str((base_dir / "subtitles.json").resolve()))
