from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

CATEGORIES = (
    "location",
    "visa",
    "availability",
    "experience",
    "language",
    "role",
    "team",
    "salary",
)

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

GREETING_KEY = "greeting"
UNKNOWN_KEY = "unknown"


@dataclass(frozen=True)
class QAEntry:
    id: str
    keywords: Tuple[str, ...]
    question: str
    answer: str
    category: str

    @classmethod
    def from_dict(cls, data: dict) -> "QAEntry":
        category = data.get("category", "")
        if category not in CATEGORIES:
            raise ValueError(f"Unknown QA category {category!r} for entry {data.get('id')!r}")
        return cls(
            id=str(data["id"]),
            keywords=tuple(str(keyword).lower() for keyword in data.get("keywords", [])),
            question=data.get("question", "").strip(),
            answer=data.get("answer", "").strip(),
            category=category,
        )


@dataclass(frozen=True)
class WordTiming:
    word: str
    start: float
    end: float


@dataclass(frozen=True)
class Subtitle:
    id: int
    start: float
    end: float
    text: str
    words: Tuple[WordTiming, ...] = ()


@dataclass
class Suggestion:
    id: str
    text: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text}


@dataclass
class ChatMessage:
    id: str
    role: str
    content: str
    content_key: Optional[str] = None
    suggestions: Optional[List[Suggestion]] = None
    suggestions_used: bool = False
    show_contact_button: bool = False

    @property
    def is_assistant(self) -> bool:
        return self.role == ROLE_ASSISTANT

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "content_key": self.content_key,
            "suggestions": [item.to_dict() for item in self.suggestions] if self.suggestions is not None else None,
            "suggestions_used": self.suggestions_used,
            "show_contact_button": self.show_contact_button,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        raw_suggestions = data.get("suggestions")
        return cls(
            id=str(data.get("id", "")),
            role=data.get("role", ROLE_USER),
            content=data.get("content", ""),
            content_key=data.get("content_key"),
            suggestions=(
                [Suggestion(id=str(item["id"]), text=item.get("text", "")) for item in raw_suggestions]
                if raw_suggestions is not None
                else None
            ),
            suggestions_used=bool(data.get("suggestions_used", False)),
            show_contact_button=bool(data.get("show_contact_button", False)),
        )


@dataclass
class ChatSession:
    messages: List[ChatMessage] = field(default_factory=list)
    asked_question_ids: List[str] = field(default_factory=list)

    def find_message(self, message_id: str) -> ChatMessage | None:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    def to_dict(self) -> dict:
        return {
            "messages": [message.to_dict() for message in self.messages],
            "asked_question_ids": list(self.asked_question_ids),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChatSession":
        return cls(
            messages=[ChatMessage.from_dict(item) for item in data.get("messages", [])],
            asked_question_ids=[str(item) for item in data.get("asked_question_ids", [])],
        )
