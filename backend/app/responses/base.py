"""
Shared pieces of the per-topic response banks.

Selection runs in three steps: an answer whose trigger phrase appears in the
query wins outright, then the answer whose prompt overlaps the query most
(above a per-bank floor), then a uniformly random answer.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence, TypeVar

from backend.app.brain.intent import compile_triggers, contains_any
from backend.app.brain.text import normalize_text, overlap_ratio
from backend.app.content.store import ContentStore
from backend.app.observability.logging import log_event
from backend.app.tasks.background import call_with_timeout

T = TypeVar("T")


@dataclass(frozen=True)
class CannedAnswer:
    prompt: str
    answer: str
    triggers: tuple[str, ...] = field(default=())

    @classmethod
    def of(cls, prompt: str, answer: str, *triggers: str) -> "CannedAnswer":
        return cls(prompt=prompt, answer=answer, triggers=compile_triggers(triggers))


def answers(*texts: str) -> tuple[CannedAnswer, ...]:
    """Answers without prompts; each answer is matched against the query itself."""
    return tuple(CannedAnswer(prompt=t, answer=t) for t in texts)


def select_answer(
    query: str,
    bank: Sequence[CannedAnswer],
    rng: random.Random,
    min_overlap: float = 0.0,
) -> str:
    if not bank:
        return ""
    padded = f" {normalize_text(query)} "
    if padded.strip():
        for item in bank:
            if item.triggers and contains_any(padded, item.triggers):
                return item.answer
        best: CannedAnswer | None = None
        best_score = min_overlap
        for item in bank:
            score = overlap_ratio(query, item.prompt)
            if score > best_score:
                best, best_score = item, score
        if best is not None:
            return best.answer
    return rng.choice(list(bank)).answer


def detect_subtopic(query: str, table: Sequence[tuple[str, tuple[str, ...]]], default: str) -> str:
    padded = f" {normalize_text(query)} "
    for name, triggers in table:
        if contains_any(padded, triggers):
            return name
    return default


class ResponseBank:
    """Base class for a topic bank; `respond` must return non-empty text."""

    topic = "default"

    def __init__(self, content: ContentStore | None, rng: random.Random | None = None, timeout_seconds: float = 3.0):
        self.content = content
        self.rng = rng or random.Random()
        self.timeout_seconds = timeout_seconds

    def fetch(self, label: str, fn: Callable[..., T], *args: Any) -> T | None:
        """Run a content-store call under the timeout; failures become None."""
        if self.content is None:
            return None
        try:
            return call_with_timeout(label, fn, *args, timeout_seconds=self.timeout_seconds)
        except Exception as exc:
            log_event(
                "content_fetch_failed",
                level="warning",
                topic=self.topic,
                call=label,
                error_class=type(exc).__name__,
                error=str(exc),
            )
            return None

    def respond(self, query: str) -> str:
        raise NotImplementedError
