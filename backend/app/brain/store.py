"""
Relational store for conversation history and learned knowledge.

Turns, feedback, knowledge entries and keyword patterns all live in the
relational DB. Write methods raise on database errors; the router calls them
through its background queue or behind a try/except so a broken store never
breaks a reply. `record_feedback` is the exception: it reports failure as False.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any

from sqlalchemy import Engine, func
from sqlalchemy.exc import SQLAlchemyError

from backend.app.brain.models import (
    Classification,
    ContextMessage,
    ConversationContext,
    FeedbackType,
    Intent,
    KnowledgeEntry,
    LearnedResponse,
    LearningPattern,
    Sender,
)
from backend.app.brain.text import extract_keywords, jaccard, normalize_text
from backend.app.core.db.relational import (
    DBChatConversation,
    DBChatFeedback,
    DBChatMessage,
    DBKnowledgeEntry,
    DBLearningPattern,
    build_session_factory,
    get_engine,
    init_relational_db,
    session_scope,
)
from backend.app.observability.logging import log_event

HELPFUL_RATING = 3
CONFIDENCE_STEP = 0.05
LEARNED_ENTRY_CONFIDENCE = 0.7
LEARNED_RESPONSE_THRESHOLD = 0.6
PATTERN_LEARNING_THRESHOLD = 0.7
PATTERN_MATCH_THRESHOLD = 0.7
CONTEXT_WINDOW = 10
KNOWLEDGE_CANDIDATE_LIMIT = 50
MAX_PATTERN_EXAMPLES = 20


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str:
    return (value or _utc_now()).isoformat()


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _load_list(raw: str | None) -> list[str]:
    try:
        data = json.loads(raw or "[]")
    except ValueError:
        return []
    return [str(x) for x in data] if isinstance(data, list) else []


def _dump_list(values: list[str]) -> str:
    return json.dumps(list(values), ensure_ascii=False, separators=(",", ":"))


def score_knowledge_entry(similarity: float, confidence: float, success_rate: float) -> float:
    return similarity * 0.4 + confidence * 0.3 + success_rate * 0.3


def _entry_from_row(row: DBKnowledgeEntry) -> KnowledgeEntry:
    return KnowledgeEntry(
        id=row.id,
        question=row.question,
        answer=row.answer,
        intent=row.intent,
        keywords=_load_list(row.keywords),
        confidence=float(row.confidence or 0.0),
        usage_count=int(row.usage_count or 0),
        success_rate=float(row.success_rate or 0.0),
        source=row.source or "learned",
        is_active=bool(row.is_active),
        created_at=_iso(row.created_at),
        updated_at=_iso(row.updated_at),
    )


def _pattern_from_row(row: DBLearningPattern) -> LearningPattern:
    return LearningPattern(
        id=row.id,
        pattern=row.pattern,
        intent=row.intent,
        confidence=float(row.confidence or 0.0),
        examples=_load_list(row.examples),
        success_count=int(row.success_count or 0),
        total_attempts=int(row.total_attempts or 0),
        is_active=bool(row.is_active),
        last_used=_iso(row.last_used),
    )


class LearningStore:
    def __init__(self, engine: Engine | None = None):
        self.engine = engine or get_engine()
        self._session_factory = build_session_factory(self.engine)
        self._lock = Lock()
        init_relational_db(self.engine)

    def _session(self):
        return session_scope(self._session_factory)

    def _open_conversation(self, db, session_id: str) -> DBChatConversation | None:
        return (
            db.query(DBChatConversation)
            .filter(DBChatConversation.session_id == session_id, DBChatConversation.ended_at.is_(None))
            .order_by(DBChatConversation.started_at.desc())
            .first()
        )

    # ------------------------------------------------------------------
    # Conversation history
    # ------------------------------------------------------------------
    def record_turn(
        self,
        session_id: str,
        message: str,
        response: str,
        intent: str,
        confidence: float,
        response_time_ms: int,
        user_id: str | None = None,
        message_id: str | None = None,
    ) -> dict[str, str]:
        """Append a USER and a BOT message to the session's open conversation."""
        now = _utc_now()
        with self._lock, self._session() as db:
            conversation = self._open_conversation(db, session_id)
            if conversation is None:
                conversation = DBChatConversation(
                    id=str(uuid.uuid4()),
                    session_id=session_id,
                    user_id=user_id,
                    started_at=now,
                    total_messages=0,
                )
                db.add(conversation)
                db.flush()

            user_row = DBChatMessage(
                id=message_id or str(uuid.uuid4()),
                conversation_id=conversation.id,
                content=message,
                sender=Sender.USER.value,
                intent=intent,
                confidence=confidence,
                response=response,
                response_time_ms=response_time_ms,
                timestamp=now,
            )
            bot_row = DBChatMessage(
                id=str(uuid.uuid4()),
                conversation_id=conversation.id,
                content=response,
                sender=Sender.BOT.value,
                intent=intent,
                confidence=confidence,
                timestamp=now + timedelta(microseconds=1),
            )
            db.add_all([user_row, bot_row])
            conversation.total_messages = int(conversation.total_messages or 0) + 2
            return {"conversationId": conversation.id, "messageId": user_row.id}

    def end_conversation(self, session_id: str, satisfaction: int | None = None) -> bool:
        with self._lock, self._session() as db:
            conversation = self._open_conversation(db, session_id)
            if conversation is None:
                return False
            conversation.ended_at = _utc_now()
            if satisfaction is not None:
                conversation.satisfaction = max(1, min(5, int(satisfaction)))
            return True

    def analyze_conversation_context(self, session_id: str, user_id: str | None = None) -> ConversationContext:
        context = ConversationContext(session_id=session_id, user_id=user_id)
        with self._session() as db:
            conversation = self._open_conversation(db, session_id)
            if conversation is None:
                return context
            context.user_id = context.user_id or conversation.user_id
            rows = (
                db.query(DBChatMessage)
                .filter(DBChatMessage.conversation_id == conversation.id)
                .order_by(DBChatMessage.timestamp.desc())
                .limit(CONTEXT_WINDOW)
                .all()
            )
        context.previous_messages = [
            ContextMessage(
                content=row.content,
                sender=row.sender,
                intent=row.intent,
                was_helpful=row.was_helpful,
                timestamp=_iso(row.timestamp),
            )
            for row in reversed(rows)
        ]
        return context

    # ------------------------------------------------------------------
    # Feedback and knowledge
    # ------------------------------------------------------------------
    def record_feedback(
        self,
        conversation_id: str | None,
        message_id: str,
        rating: int,
        feedback_type: FeedbackType | None = None,
        comment: str | None = None,
    ) -> bool:
        was_helpful = rating >= HELPFUL_RATING
        kind = feedback_type or FeedbackType.from_rating(rating)
        try:
            with self._lock, self._session() as db:
                message = db.get(DBChatMessage, message_id)
                if message is None:
                    log_event("feedback_unknown_message", level="warning", message_id=message_id)
                    return False
                db.add(
                    DBChatFeedback(
                        id=str(uuid.uuid4()),
                        conversation_id=conversation_id or message.conversation_id,
                        message_id=message_id,
                        rating=int(rating),
                        feedback_type=kind.value,
                        comment=comment,
                    )
                )
                message.was_helpful = was_helpful
        except SQLAlchemyError as exc:
            log_event("feedback_save_failed", level="error", message_id=message_id, error_class=type(exc).__name__, error=str(exc))
            return False

        try:
            self.learn_from_feedback(message_id, was_helpful)
        except SQLAlchemyError as exc:
            log_event("learn_from_feedback_failed", level="error", message_id=message_id, error_class=type(exc).__name__, error=str(exc))
        return True

    def learn_from_feedback(self, message_id: str, was_helpful: bool) -> KnowledgeEntry | None:
        """Nudge the matching knowledge entry, or learn a new one from a helpful turn."""
        with self._lock, self._session() as db:
            message = db.get(DBChatMessage, message_id)
            if message is None or message.sender != Sender.USER.value:
                return None
            text = (message.content or "").lower().strip()
            intent = message.intent or Intent.DEFAULT.value

            rows = db.query(DBKnowledgeEntry).filter(DBKnowledgeEntry.intent == intent).all()
            entry = next((r for r in rows if r.question and r.question in text), None)
            if entry is not None:
                usage = int(entry.usage_count or 0)
                outcome = 1.0 if was_helpful else 0.0
                entry.success_rate = (float(entry.success_rate or 0.0) * usage + outcome) / (usage + 1)
                entry.usage_count = usage + 1
                step = CONFIDENCE_STEP if was_helpful else -CONFIDENCE_STEP
                entry.confidence = _clamp(float(entry.confidence or 0.0) + step)
                entry.updated_at = _utc_now()
                return _entry_from_row(entry)

            if not was_helpful or not text or not (message.response or "").strip():
                return None
            now = _utc_now()
            created = DBKnowledgeEntry(
                id=str(uuid.uuid4()),
                question=text,
                answer=message.response,
                intent=intent,
                keywords=_dump_list(extract_keywords(text)),
                confidence=LEARNED_ENTRY_CONFIDENCE,
                usage_count=1,
                success_rate=1.0,
                source="learned",
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            db.add(created)
            log_event("knowledge_learned", intent=intent, entry_id=created.id)
            return _entry_from_row(created)

    def find_learned_response(self, text: str, intent: str) -> LearnedResponse | None:
        query = (text or "").lower().strip()
        if not query:
            return None
        with self._session() as db:
            rows = (
                db.query(DBKnowledgeEntry)
                .filter(DBKnowledgeEntry.is_active.is_(True))
                .order_by(
                    DBKnowledgeEntry.confidence.desc(),
                    DBKnowledgeEntry.success_rate.desc(),
                    DBKnowledgeEntry.usage_count.desc(),
                )
                .all()
            )
        candidates = [r for r in rows if r.intent == intent or (r.question and r.question in query)]
        best: DBKnowledgeEntry | None = None
        best_score = 0.0
        for row in candidates[:KNOWLEDGE_CANDIDATE_LIMIT]:
            score = score_knowledge_entry(
                jaccard(query, row.question), float(row.confidence or 0.0), float(row.success_rate or 0.0)
            )
            if score > best_score:
                best, best_score = row, score
        if best is None or best_score <= LEARNED_RESPONSE_THRESHOLD:
            return None
        return LearnedResponse(
            response=best.answer,
            confidence=float(best.confidence or 0.0),
            entry_id=best.id,
            score=best_score,
        )

    def add_knowledge(
        self,
        question: str,
        answer: str,
        intent: str,
        source: str = "static",
        confidence: float = 0.8,
    ) -> KnowledgeEntry:
        text = (question or "").lower().strip()
        now = _utc_now()
        row = DBKnowledgeEntry(
            id=str(uuid.uuid4()),
            question=text,
            answer=answer,
            intent=intent,
            keywords=_dump_list(extract_keywords(text)),
            confidence=_clamp(float(confidence)),
            usage_count=0,
            success_rate=0.0,
            source=source,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        with self._lock, self._session() as db:
            db.add(row)
        return _entry_from_row(row)

    def get_knowledge(self, entry_id: str) -> KnowledgeEntry | None:
        with self._session() as db:
            row = db.get(DBKnowledgeEntry, entry_id)
            return _entry_from_row(row) if row is not None else None

    def set_knowledge_active(self, entry_id: str, active: bool) -> KnowledgeEntry | None:
        with self._lock, self._session() as db:
            row = db.get(DBKnowledgeEntry, entry_id)
            if row is None:
                return None
            row.is_active = bool(active)
            row.updated_at = _utc_now()
            return _entry_from_row(row)

    def delete_knowledge(self, entry_id: str) -> bool:
        with self._lock, self._session() as db:
            row = db.get(DBKnowledgeEntry, entry_id)
            if row is None:
                return False
            db.delete(row)
            return True

    def get_learned_knowledge(self, limit: int = 50) -> list[KnowledgeEntry]:
        with self._session() as db:
            rows = (
                db.query(DBKnowledgeEntry)
                .filter(DBKnowledgeEntry.is_active.is_(True))
                .order_by(DBKnowledgeEntry.success_rate.desc(), DBKnowledgeEntry.usage_count.desc())
                .limit(max(1, limit))
                .all()
            )
        return [_entry_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Keyword patterns
    # ------------------------------------------------------------------
    def learn_new_pattern(self, text: str, intent: str, confidence: float) -> LearningPattern | None:
        """Remember the keywords of a low-confidence message under `intent`."""
        if confidence >= PATTERN_LEARNING_THRESHOLD:
            return None
        keywords = extract_keywords(text)
        if not keywords:
            return None
        pattern = "|".join(keywords)
        now = _utc_now()
        with self._lock, self._session() as db:
            row = (
                db.query(DBLearningPattern)
                .filter(DBLearningPattern.pattern == pattern, DBLearningPattern.intent == intent)
                .first()
            )
            if row is not None:
                examples = _load_list(row.examples)
                if text not in examples:
                    examples = (examples + [text])[-MAX_PATTERN_EXAMPLES:]
                row.examples = _dump_list(examples)
                row.success_count = int(row.success_count or 0) + 1
                row.total_attempts = int(row.total_attempts or 0) + 1
                row.last_used = now
            else:
                row = DBLearningPattern(
                    id=str(uuid.uuid4()),
                    pattern=pattern,
                    intent=intent,
                    confidence=float(confidence),
                    examples=_dump_list([text]),
                    success_count=1,
                    total_attempts=1,
                    is_active=True,
                    last_used=now,
                    created_at=now,
                )
                db.add(row)
            return _pattern_from_row(row)

    def improved_intent_detection(self, text: str, context: ConversationContext | None = None) -> Classification | None:
        """Score active patterns by keyword coverage; the best one above 0.7 wins.

        Ties go to a pattern whose intent already appeared in the conversation.
        """
        words = normalize_text(text).split()
        if not words:
            return None
        recent = set(context.recent_intents()) if context is not None else set()
        with self._session() as db:
            rows = (
                db.query(DBLearningPattern)
                .filter(DBLearningPattern.is_active.is_(True))
                .order_by(DBLearningPattern.success_count.desc())
                .all()
            )
        best: DBLearningPattern | None = None
        best_score = 0.0
        for row in rows:
            keywords = [k for k in (row.pattern or "").split("|") if k]
            if not keywords:
                continue
            matched = sum(1 for k in keywords if any(k in w for w in words))
            score = matched / len(keywords)
            if score <= PATTERN_MATCH_THRESHOLD:
                continue
            better = score > best_score
            tie_break = (
                best is not None
                and score == best_score
                and row.intent in recent
                and best.intent not in recent
            )
            if better or tie_break:
                best, best_score = row, score
        if best is None:
            return None
        with self._lock, self._session() as db:
            used = db.get(DBLearningPattern, best.id)
            if used is not None:
                used.total_attempts = int(used.total_attempts or 0) + 1
                used.last_used = _utc_now()
        return Classification(intent=Intent.parse(best.intent), confidence=best_score, source="learned_pattern")

    def list_patterns(self, limit: int = 50) -> list[LearningPattern]:
        with self._session() as db:
            rows = (
                db.query(DBLearningPattern)
                .filter(DBLearningPattern.is_active.is_(True))
                .order_by(DBLearningPattern.success_count.desc(), DBLearningPattern.last_used.desc())
                .limit(max(1, limit))
                .all()
            )
        return [_pattern_from_row(r) for r in rows]

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------
    def get_conversation_stats(self) -> dict[str, Any]:
        with self._session() as db:
            total_conversations = db.query(func.count(DBChatConversation.id)).scalar() or 0
            total_messages = db.query(func.count(DBChatMessage.id)).scalar() or 0
            helpful_messages = (
                db.query(func.count(DBChatMessage.id)).filter(DBChatMessage.was_helpful.is_(True)).scalar() or 0
            )
            rated_messages = (
                db.query(func.count(DBChatMessage.id)).filter(DBChatMessage.was_helpful.is_not(None)).scalar() or 0
            )
            avg_satisfaction = db.query(func.avg(DBChatConversation.satisfaction)).scalar()
            knowledge_entries = (
                db.query(func.count(DBKnowledgeEntry.id)).filter(DBKnowledgeEntry.is_active.is_(True)).scalar() or 0
            )
            patterns = (
                db.query(func.count(DBLearningPattern.id)).filter(DBLearningPattern.is_active.is_(True)).scalar() or 0
            )
        return {
            "totalConversations": int(total_conversations),
            "totalMessages": int(total_messages),
            "helpfulMessages": int(helpful_messages),
            "ratedMessages": int(rated_messages),
            "averageSatisfaction": round(float(avg_satisfaction), 2) if avg_satisfaction is not None else 0.0,
            "knowledgeEntries": int(knowledge_entries),
            "learningPatterns": int(patterns),
        }


_learning_store: LearningStore | None = None


def get_learning_store() -> LearningStore:
    global _learning_store
    if _learning_store is None:
        _learning_store = LearningStore()
    return _learning_store
