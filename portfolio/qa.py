from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Sequence, Tuple

from . import config
from .i18n import translate_question
from .loaders import load_qa_catalog
from .models import QAEntry, Suggestion

logger = logging.getLogger(__name__)

KEYWORD_WEIGHT = 2
QUESTION_WORD_WEIGHT = 1
MIN_QUESTION_WORD_LENGTH = 4

RELATED_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "location": ("visa", "availability"),
    "visa": ("location", "availability"),
    "availability": ("visa", "role", "salary"),
    "experience": ("role", "language"),
    "language": ("experience", "location"),
    "role": ("experience", "salary", "team"),
    "team": ("role", "availability"),
    "salary": ("role", "availability"),
}


def normalize_input(text: str) -> str:
    return (text or "").lower().strip()


def score_entry(entry: QAEntry, normalized_input: str) -> int:
    """Score one entry against already-normalized input.

    Keywords are matched as raw substrings, so ``"where"`` also hits
    ``"somewhere"``. Question words shorter than four characters are ignored.
    """
    score = 0
    for keyword in entry.keywords:
        if keyword in normalized_input:
            score += KEYWORD_WEIGHT
    for word in re.split(r"\s+", entry.question.lower()):
        if len(word) >= MIN_QUESTION_WORD_LENGTH and word in normalized_input:
            score += QUESTION_WORD_WEIGHT
    return score


class FAQMatcher:
    def __init__(self, catalog: Sequence[QAEntry] | None = None, *, threshold: int | None = None):
        self.catalog: Tuple[QAEntry, ...] = tuple(catalog if catalog is not None else load_qa_catalog())
        self.threshold = config.MATCH_THRESHOLD if threshold is None else threshold
        self._by_id = {entry.id: entry for entry in self.catalog}

    def score_and_match(self, user_input: str) -> QAEntry | None:
        normalized = normalize_input(user_input)
        best_entry: QAEntry | None = None
        best_score = 0
        for entry in self.catalog:
            score = score_entry(entry, normalized)
            if score > best_score:
                best_score = score
                best_entry = entry
        if best_entry is None or best_score < self.threshold:
            logger.info("No catalog match for input (%d chars, best score %d).", len(normalized), best_score)
            return None
        logger.info("Matched input to %s with score %d.", best_entry.id, best_score)
        return best_entry

    def lookup_by_id(self, entry_id: str | None) -> QAEntry | None:
        if not entry_id:
            return None
        return self._by_id.get(entry_id)

    def suggest_follow_ups(
        self,
        current_entry_id: str | None,
        asked_ids: Iterable[str],
        locale: str,
        count: int,
    ) -> List[Suggestion]:
        current = self.lookup_by_id(current_entry_id)
        priority = set(RELATED_CATEGORIES.get(current.category, ())) if current else set()
        excluded = set(asked_ids)
        if current_entry_id:
            excluded.add(current_entry_id)

        related = [entry for entry in self.catalog if entry.category in priority]
        others = [entry for entry in self.catalog if entry.category not in priority]

        suggestions: List[Suggestion] = []
        for entry in related + others:
            if len(suggestions) >= count:
                break
            if entry.id in excluded:
                continue
            suggestions.append(Suggestion(id=entry.id, text=translate_question(entry.question, locale)))
        return suggestions
