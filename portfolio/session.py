"""Conversation state for the FAQ chat window.

``ChatSessionManager`` owns the message log and the ids of catalog entries
already answered. Every mutation is written through to the session store so a
reload within the same browser session restores the conversation verbatim.
"""

from __future__ import annotations

import asyncio
import copy
import logging
import random
import time
from enum import Enum
from typing import Callable, List

from . import config
from .i18n import DEFAULT_LOCALE, Translator, greeting_text, resolve_locale, translate_question, unknown_text
from .models import GREETING_KEY, ROLE_ASSISTANT, ROLE_USER, UNKNOWN_KEY, ChatMessage, ChatSession
from .qa import FAQMatcher
from .storage import MappingSessionStore, load_session, save_session

logger = logging.getLogger(__name__)

SessionListener = Callable[[ChatSession], None]


class ChatWindowState(str, Enum):
    CLOSED = "closed"
    OPEN_EMPTY = "open-empty"
    OPEN_ACTIVE = "open-active"


def uniform_delay(min_ms: int, max_ms: int) -> Callable[[], float]:
    """Return a factory drawing typing delays in seconds from ``[min_ms, max_ms]``."""

    def draw() -> float:
        return random.uniform(min_ms, max_ms) / 1000.0

    return draw


class ChatSessionManager:
    def __init__(
        self,
        *,
        matcher: FAQMatcher | None = None,
        store: MappingSessionStore | None = None,
        locale: str = DEFAULT_LOCALE,
        delay_factory: Callable[[], float] | None = None,
        suggestion_count: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.matcher = matcher or FAQMatcher()
        self.store = store or MappingSessionStore()
        self.locale = resolve_locale(locale)
        self.delay_factory = delay_factory or uniform_delay(*config.TYPING_DELAY_MS)
        self.suggestion_count = config.SUGGESTION_COUNT if suggestion_count is None else suggestion_count
        self._clock = clock
        self._last_id = 0
        self._listeners: List[SessionListener] = []
        self.is_open = False
        self._pending_replies = 0
        self.session = load_session(self.store)
        for message in self.session.messages:
            if message.id.isdigit():
                self._last_id = max(self._last_id, int(message.id))

    @property
    def state(self) -> ChatWindowState:
        if not self.is_open:
            return ChatWindowState.CLOSED
        if not self.session.messages:
            return ChatWindowState.OPEN_EMPTY
        return ChatWindowState.OPEN_ACTIVE

    @property
    def is_typing(self) -> bool:
        """True while at least one reply is still waiting out its delay."""
        return self._pending_replies > 0

    def snapshot(self) -> ChatSession:
        return copy.deepcopy(self.session)

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _next_id(self) -> str:
        candidate = int(self._clock() * 1000)
        self._last_id = max(candidate, self._last_id + 1)
        return str(self._last_id)

    def _commit(self) -> None:
        save_session(self.store, self.session)
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def open_session(self) -> ChatWindowState:
        self.is_open = True
        if not self.session.messages:
            greeting = ChatMessage(
                id=self._next_id(),
                role=ROLE_ASSISTANT,
                content=greeting_text(self.locale),
                content_key=GREETING_KEY,
                suggestions=self.matcher.suggest_follow_ups(None, [], self.locale, self.suggestion_count),
            )
            self.session.messages.append(greeting)
            self._commit()
        return self.state

    def close(self) -> None:
        self.is_open = False

    async def submit_user_input(
        self,
        text: str,
        resolved_entry_id: str | None = None,
        origin_message_id: str | None = None,
    ) -> ChatMessage | None:
        """Record a user turn and, after the typing delay, the assistant reply.

        ``resolved_entry_id`` is set when the text came from a suggestion click;
        the entry is then looked up directly instead of being re-scored.
        """
        text = (text or "").strip()
        if not text:
            return None

        if origin_message_id:
            origin = self.session.find_message(origin_message_id)
            if origin is not None:
                origin.suggestions_used = True

        self.session.messages.append(ChatMessage(id=self._next_id(), role=ROLE_USER, content=text))
        self._pending_replies += 1
        self._commit()

        try:
            await asyncio.sleep(self.delay_factory())
        finally:
            self._pending_replies -= 1

        if resolved_entry_id:
            entry = self.matcher.lookup_by_id(resolved_entry_id)
        else:
            entry = self.matcher.score_and_match(text)

        # Locale is read after the delay so a switch while typing applies to the reply.
        locale = self.locale
        if entry is not None:
            if entry.id not in self.session.asked_question_ids:
                self.session.asked_question_ids.append(entry.id)
            reply = ChatMessage(
                id=self._next_id(),
                role=ROLE_ASSISTANT,
                content=Translator(locale).answer(entry.answer),
                content_key=entry.answer,
                suggestions=self.matcher.suggest_follow_ups(
                    entry.id, self.session.asked_question_ids, locale, self.suggestion_count
                ),
            )
        else:
            reply = ChatMessage(
                id=self._next_id(),
                role=ROLE_ASSISTANT,
                content=unknown_text(locale),
                content_key=UNKNOWN_KEY,
                show_contact_button=True,
            )
        self.session.messages.append(reply)
        self._commit()
        return reply

    async def select_suggestion(self, message_id: str, suggestion_id: str) -> ChatMessage | None:
        origin = self.session.find_message(message_id)
        if origin is None or origin.suggestions_used or not origin.suggestions:
            return None
        for suggestion in origin.suggestions:
            if suggestion.id == suggestion_id:
                return await self.submit_user_input(
                    suggestion.text,
                    resolved_entry_id=suggestion.id,
                    origin_message_id=message_id,
                )
        return None

    def change_locale(self, locale: str) -> None:
        self.locale = resolve_locale(locale)
        translator = Translator(self.locale)
        for message in self.session.messages:
            if not message.is_assistant:
                continue
            if message.content_key:
                message.content = translator.content_for_key(message.content_key)
            if message.suggestions and not message.suggestions_used:
                for suggestion in message.suggestions:
                    entry = self.matcher.lookup_by_id(suggestion.id)
                    if entry is not None:
                        suggestion.text = translate_question(entry.question, self.locale)
        logger.info("Re-projected %d messages into %s.", len(self.session.messages), self.locale)
        self._commit()
