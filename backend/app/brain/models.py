"""
Intent, envelope and learning models for the assistant brain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def utc_iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Intent(str, Enum):
    THEME_DARK = "theme_dark"
    THEME_LIGHT = "theme_light"
    THEME_SYSTEM = "theme_system"
    NAVIGATE_HOME = "navigate_home"
    NAVIGATE_ABOUT = "navigate_about"
    NAVIGATE_PROJECTS = "navigate_projects"
    NAVIGATE_BLOG = "navigate_blog"
    NAVIGATE_CONTACT = "navigate_contact"
    NAVIGATE_GENERAL = "navigate_general"
    BLOG = "blog"
    CONTACT = "contact"
    PROJECTS = "projects"
    SKILLS = "skills"
    ABOUT = "about"
    GREETING = "greeting"
    HELP = "help"
    DEFAULT = "default"

    @property
    def is_navigation(self) -> bool:
        return self.value.startswith("navigate_")

    @property
    def is_theme(self) -> bool:
        return self.value.startswith("theme_")

    @property
    def is_command(self) -> bool:
        return self.is_navigation or self.is_theme

    @classmethod
    def parse(cls, raw: Any, default: "Intent | None" = None) -> "Intent":
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return default if default is not None else cls.DEFAULT


NAVIGATION_ROUTES: dict[Intent, str] = {
    Intent.NAVIGATE_HOME: "/",
    Intent.NAVIGATE_ABOUT: "/about",
    Intent.NAVIGATE_PROJECTS: "/projects",
    Intent.NAVIGATE_BLOG: "/blog",
    Intent.NAVIGATE_CONTACT: "/contact",
}

THEME_ACTIONS: dict[Intent, str] = {
    Intent.THEME_DARK: "dark",
    Intent.THEME_LIGHT: "light",
    Intent.THEME_SYSTEM: "system",
}


class Sender(str, Enum):
    USER = "USER"
    BOT = "BOT"


class FeedbackType(str, Enum):
    HELPFUL = "HELPFUL"
    NOT_HELPFUL = "NOT_HELPFUL"
    SUGGESTION = "SUGGESTION"
    COMPLAINT = "COMPLAINT"
    COMPLIMENT = "COMPLIMENT"

    @classmethod
    def from_rating(cls, rating: int) -> "FeedbackType":
        return cls.HELPFUL if rating >= 3 else cls.NOT_HELPFUL


@dataclass
class Classification:
    intent: Intent
    confidence: float
    source: str = "rules"

    def to_dict(self) -> dict[str, Any]:
        return {"intent": self.intent.value, "confidence": self.confidence, "source": self.source}


@dataclass
class ChatResult:
    response: str
    intent: str
    confidence: float
    source: str
    session_id: str
    response_time_ms: int = 0
    message_id: str | None = None
    navigation_action: str | None = None
    theme_action: str | None = None
    cached: bool = False

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "response": self.response,
            "intent": self.intent,
            "confidence": round(float(self.confidence), 4),
            "source": self.source,
            "sessionId": self.session_id,
            "responseTime": self.response_time_ms,
        }
        if self.message_id:
            payload["messageId"] = self.message_id
        if self.navigation_action:
            payload["navigationAction"] = self.navigation_action
        if self.theme_action:
            payload["themeAction"] = self.theme_action
        if self.cached:
            payload["cached"] = True
        return payload


@dataclass
class KnowledgeEntry:
    id: str
    question: str
    answer: str
    intent: str
    keywords: list[str] = field(default_factory=list)
    confidence: float = 0.7
    usage_count: int = 0
    success_rate: float = 0.0
    source: str = "learned"
    is_active: bool = True
    created_at: str = field(default_factory=utc_iso_now)
    updated_at: str = field(default_factory=utc_iso_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "intent": self.intent,
            "keywords": list(self.keywords),
            "confidence": self.confidence,
            "usageCount": self.usage_count,
            "successRate": self.success_rate,
            "source": self.source,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class LearningPattern:
    id: str
    pattern: str
    intent: str
    confidence: float
    examples: list[str] = field(default_factory=list)
    success_count: int = 0
    total_attempts: int = 0
    is_active: bool = True
    last_used: str = field(default_factory=utc_iso_now)

    @property
    def keywords(self) -> list[str]:
        return [k for k in self.pattern.split("|") if k]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pattern": self.pattern,
            "intent": self.intent,
            "confidence": self.confidence,
            "examples": list(self.examples),
            "successCount": self.success_count,
            "totalAttempts": self.total_attempts,
            "isActive": self.is_active,
            "lastUsed": self.last_used,
        }


@dataclass
class LearnedResponse:
    response: str
    confidence: float
    entry_id: str
    score: float
    source: str = "learned"


@dataclass
class ContextMessage:
    content: str
    sender: str
    intent: str | None = None
    was_helpful: bool | None = None
    timestamp: str = field(default_factory=utc_iso_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "sender": self.sender,
            "intent": self.intent,
            "wasHelpful": self.was_helpful,
            "timestamp": self.timestamp,
        }


@dataclass
class ConversationContext:
    session_id: str
    user_id: str | None = None
    previous_messages: list[ContextMessage] = field(default_factory=list)

    def recent_intents(self) -> list[str]:
        return [m.intent for m in self.previous_messages if m.intent]

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "userId": self.user_id,
            "previousMessages": [m.to_dict() for m in self.previous_messages],
        }
