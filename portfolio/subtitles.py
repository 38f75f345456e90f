from __future__ import annotations

import math
from typing import List, Sequence

from .loaders import load_subtitles
from .models import Subtitle

WORD_PAST = "past"
WORD_ACTIVE = "active"
WORD_FUTURE = "future"


def derive_active_subtitle(current_time: float, subtitles: Sequence[Subtitle] | None = None) -> Subtitle | None:
    if subtitles is None:
        subtitles = load_subtitles()
    for subtitle in subtitles:
        if subtitle.start <= current_time < subtitle.end:
            return subtitle
    return None


def derive_active_word_index(subtitle: Subtitle, current_time: float) -> int:
    """Index of the word to highlight at ``current_time``, or -1.

    Between two word ranges, or past the last word, the most recently started
    word stays highlighted so the caption never goes blank mid-line.
    """
    words = subtitle.words
    for index, word in enumerate(words):
        if word.start <= current_time < word.end:
            return index
    if not words or current_time < subtitle.start:
        return -1
    for index, word in enumerate(words):
        if current_time < word.start:
            return max(0, index - 1)
    return len(words) - 1


def word_states(subtitle: Subtitle, current_time: float) -> List[str]:
    active = derive_active_word_index(subtitle, current_time)
    states = []
    for index in range(len(subtitle.words)):
        if index < active:
            states.append(WORD_PAST)
        elif index == active:
            states.append(WORD_ACTIVE)
        else:
            states.append(WORD_FUTURE)
    return states


def total_duration(subtitles: Sequence[Subtitle] | None = None) -> float:
    if subtitles is None:
        subtitles = load_subtitles()
    if not subtitles:
        return 0.0
    return subtitles[-1].end


def progress_percent(current_time: float, duration: float) -> float:
    if duration <= 0:
        return 0.0
    return min(100.0, max(0.0, current_time / duration * 100))


def format_time(seconds: float) -> str:
    if not seconds or math.isnan(seconds) or seconds < 0:
        seconds = 0.0
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
