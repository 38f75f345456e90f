from __future__ import annotations

import logging
from typing import List, Literal, MutableMapping, Optional

from pydantic import BaseModel, Field, ValidationError

from . import config
from .models import ChatSession

logger = logging.getLogger(__name__)


class StoredSuggestion(BaseModel):
    id: str
    text: str


class StoredMessage(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    content_key: Optional[str] = None
    suggestions: Optional[List[StoredSuggestion]] = None
    suggestions_used: bool = False
    show_contact_button: bool = False


class StoredSession(BaseModel):
    messages: List[StoredMessage] = Field(default_factory=list)
    asked_question_ids: List[str] = Field(default_factory=list)


class MappingSessionStore:
    """Session-scoped blob store on top of any mutable mapping.

    Works with a plain dict in tests and with ``st.session_state`` in the app.
    """

    def __init__(self, backing: MutableMapping | None = None, *, key: str | None = None):
        self.backing = backing if backing is not None else {}
        self.key = key or config.SESSION_KEY

    def read(self) -> str | None:
        value = self.backing.get(self.key)
        return value if isinstance(value, str) else None

    def write(self, blob: str) -> None:
        self.backing[self.key] = blob

    def clear(self) -> None:
        self.backing.pop(self.key, None)


def load_session(store: MappingSessionStore) -> ChatSession:
    blob = store.read()
    if not blob:
        return ChatSession()
    try:
        stored = StoredSession.model_validate_json(blob)
    except ValidationError as exc:
        logger.warning("Discarding malformed chat session under %s: %s", store.key, exc.error_count())
        return ChatSession()
    return ChatSession.from_dict(stored.model_dump())


def save_session(store: MappingSessionStore, session: ChatSession) -> bool:
    try:
        blob = StoredSession.model_validate(session.to_dict()).model_dump_json()
        store.write(blob)
    except (ValidationError, OSError, TypeError) as exc:
        logger.warning("Could not persist chat session under %s: %s", store.key, exc)
        return False
    return True
