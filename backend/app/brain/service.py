"""
Chatbot router:
- explicit theme/navigation commands (short-circuit, structured action)
- rule classification, optionally overridden by learned keyword patterns
- response cache (exact, then similar query)
- learned knowledge base
- per-topic response banks, with a fixed fallback sentence per intent
- fire-and-forget turn recording and pattern learning
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Iterable

from backend.app.brain.cache import ResponseCache
from backend.app.brain.intent import RULE_CONFIDENCE, IntentClassifier
from backend.app.brain.models import (
    NAVIGATION_ROUTES,
    THEME_ACTIONS,
    ChatResult,
    Classification,
    FeedbackType,
    Intent,
    LearnedResponse,
)
from backend.app.brain.store import (
    LEARNED_RESPONSE_THRESHOLD,
    PATTERN_LEARNING_THRESHOLD,
    LearningStore,
    get_learning_store,
)
from backend.app.content.store import build_content_store
from backend.app.core.config import Settings, get_settings
from backend.app.observability.logging import log_event
from backend.app.responses.general import ERROR_FALLBACK, NAVIGATION_MESSAGES, THEME_MESSAGES, fallback_for
from backend.app.responses.registry import ResponseBanks
from backend.app.tasks.background import BackgroundTaskQueue, call_with_timeout

ERROR_FALLBACK_CONFIDENCE = 0.5


def new_session_id() -> str:
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class ChatbotRouter:
    def __init__(
        self,
        banks: ResponseBanks,
        store: LearningStore | None = None,
        cache: ResponseCache | None = None,
        classifier: IntentClassifier | None = None,
        tasks: BackgroundTaskQueue | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.settings = settings or get_settings()
        self.banks = banks
        self.store = store
        self.cache = cache or ResponseCache(
            ttl_seconds=self.settings.cache_ttl_seconds,
            max_entries=self.settings.cache_max_entries,
        )
        self.classifier = classifier or IntentClassifier()
        self.tasks = tasks or BackgroundTaskQueue(
            max_workers=self.settings.background_workers,
            max_pending=self.settings.background_max_pending,
        )
        self._clock = clock
        self._store_backoff_until: float | None = None

    @property
    def learning_enabled(self) -> bool:
        return self.store is not None and self.settings.enable_learning

    def handle(self, message: str | None, session_id: str | None = None, user_id: str | None = None) -> ChatResult:
        """Answer one message. Never raises; worst case is the error fallback envelope."""
        started = self._clock()
        session_id = (session_id or "").strip() or new_session_id()
        text = message if isinstance(message, str) else str(message or "")
        try:
            result = self._resolve(text, session_id, user_id)
        except Exception as exc:
            log_event(
                "chatbot_pipeline_failed",
                level="error",
                session_id=session_id,
                error_class=type(exc).__name__,
                error=str(exc),
            )
            result = ChatResult(
                response=ERROR_FALLBACK,
                intent=Intent.GREETING.value,
                confidence=ERROR_FALLBACK_CONFIDENCE,
                source="error_fallback",
                session_id=session_id,
            )
        result.response_time_ms = max(0, int((self._clock() - started) * 1000))
        self._after_turn(text, result, user_id)
        log_event(
            "chatbot_response",
            session_id=session_id,
            intent=result.intent,
            source=result.source,
            confidence=round(result.confidence, 4),
            response_time_ms=result.response_time_ms,
        )
        return result

    def _resolve(self, text: str, session_id: str, user_id: str | None) -> ChatResult:
        # 1) Commands bypass cache and learning.
        command = self.classifier.detect_command(text)
        if command is not None:
            return self._command_result(command, session_id)

        # 2) Rules, then learned patterns.
        classification = self.classifier.classify(text)
        learned_intent = self._learned_intent(text, session_id, user_id)
        if learned_intent is not None:
            log_event(
                "intent_overridden",
                level="debug",
                rule_intent=classification.intent.value,
                learned_intent=learned_intent.intent.value,
                score=round(learned_intent.confidence, 3),
            )
            classification = learned_intent
        intent = classification.intent

        # 3) Cache.
        cached = self.cache.get(text, intent.value)
        if cached is not None:
            return ChatResult(
                response=str(cached.get("response") or fallback_for(intent)),
                intent=str(cached.get("intent") or intent.value),
                confidence=float(cached.get("confidence") or 0.0),
                source=str(cached.get("source") or "direct_cached"),
                session_id=session_id,
                cached=True,
            )

        # 4) Learned knowledge, then the topic bank.
        learned = self._learned_response(text, intent)
        if learned is not None:
            response, confidence, source = learned.response, learned.confidence, learned.source
        else:
            confidence = classification.confidence
            try:
                response, source = self.banks.respond(intent, text), "direct"
            except Exception as exc:
                log_event(
                    "response_bank_failed",
                    level="error",
                    intent=intent.value,
                    error_class=type(exc).__name__,
                    error=str(exc),
                )
                response, source = fallback_for(intent), "fallback"

        if source != "fallback":
            self.cache.put(
                text,
                intent.value,
                {"response": response, "intent": intent.value, "confidence": confidence, "source": source},
                confidence,
            )
        return ChatResult(
            response=response,
            intent=intent.value,
            confidence=confidence,
            source=source,
            session_id=session_id,
        )

    def _command_result(self, command: Classification, session_id: str) -> ChatResult:
        intent = command.intent
        if intent.is_theme:
            return ChatResult(
                response=THEME_MESSAGES[intent],
                intent=intent.value,
                confidence=command.confidence,
                source="theme_direct",
                session_id=session_id,
                theme_action=THEME_ACTIONS[intent],
            )
        return ChatResult(
            response=NAVIGATION_MESSAGES[intent],
            intent=intent.value,
            confidence=command.confidence,
            source="navigation_direct",
            session_id=session_id,
            navigation_action=NAVIGATION_ROUTES.get(intent),
        )

    def _bounded_store_call(self, label: str, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a read on the request path; a timeout pauses store reads for the backoff window."""
        if self._store_backoff_until is not None:
            if self._clock() < self._store_backoff_until:
                return None
            self._store_backoff_until = None
        try:
            return call_with_timeout(label, fn, *args, timeout_seconds=self.settings.store_timeout_seconds)
        except TimeoutError as exc:
            self._store_backoff_until = self._clock() + self.settings.store_backoff_seconds
            log_event(
                "learning_store_backoff",
                level="warning",
                call=label,
                error=str(exc),
                backoff_seconds=self.settings.store_backoff_seconds,
            )
            return None
        except Exception as exc:
            log_event("learning_store_failed", level="warning", call=label, error_class=type(exc).__name__, error=str(exc))
            return None

    def _learned_intent(self, text: str, session_id: str, user_id: str | None) -> Classification | None:
        store = self.store
        if store is None or not self.settings.enable_learning:
            return None

        def detect() -> Classification | None:
            context = store.analyze_conversation_context(session_id, user_id)
            return store.improved_intent_detection(text, context)

        return self._bounded_store_call("improved_intent_detection", detect)

    def _learned_response(self, text: str, intent: Intent) -> LearnedResponse | None:
        store = self.store
        if store is None or not self.settings.enable_learning:
            return None
        learned = self._bounded_store_call("find_learned_response", store.find_learned_response, text, intent.value)
        if learned is None or learned.confidence <= LEARNED_RESPONSE_THRESHOLD:
            return None
        return learned

    def _after_turn(self, text: str, result: ChatResult, user_id: str | None) -> None:
        store = self.store
        if store is None or not self.settings.enable_learning:
            return
        message_id = str(uuid.uuid4())
        submitted = self.tasks.submit(
            "record_turn",
            store.record_turn,
            result.session_id,
            text,
            result.response,
            result.intent,
            result.confidence,
            result.response_time_ms,
            user_id=user_id,
            message_id=message_id,
        )
        if submitted:
            result.message_id = message_id
        if result.confidence < PATTERN_LEARNING_THRESHOLD and result.source != "error_fallback":
            self.tasks.submit("learn_new_pattern", store.learn_new_pattern, text, result.intent, result.confidence)

    def submit_feedback(
        self,
        conversation_id: str | None,
        message_id: str,
        rating: int,
        feedback_type: FeedbackType | None = None,
        comment: str | None = None,
    ) -> bool:
        if self.store is None:
            return False
        try:
            return self.store.record_feedback(conversation_id, message_id, rating, feedback_type, comment)
        except Exception as exc:
            log_event("feedback_failed", level="error", message_id=message_id, error_class=type(exc).__name__, error=str(exc))
            return False

    def end_conversation(self, session_id: str, satisfaction: int | None = None) -> bool:
        if self.store is None:
            return False
        try:
            return self.store.end_conversation(session_id, satisfaction)
        except Exception as exc:
            log_event("end_conversation_failed", level="error", session_id=session_id, error_class=type(exc).__name__, error=str(exc))
            return False

    def warmup_cache(self, intent: Intent, queries: Iterable[str]) -> int:
        """Pre-fill the cache with bank answers for `queries` under `intent`."""

        def responder(query: str) -> dict[str, Any]:
            return {
                "response": self.banks.respond(intent, query),
                "intent": intent.value,
                "confidence": RULE_CONFIDENCE,
                "source": "direct",
            }

        return self.cache.warmup(intent.value, queries, responder)

    def stats(self) -> dict[str, Any]:
        return {
            "cache": self.cache.stats(),
            "tasks": self.tasks.stats(),
            "learningEnabled": self.learning_enabled,
        }

    def close(self) -> None:
        self.tasks.shutdown(wait_for_pending=True)
        self.banks.close()


def build_chatbot_router(settings: Settings | None = None) -> ChatbotRouter:
    settings = settings or get_settings()
    store: LearningStore | None = None
    if settings.enable_learning:
        try:
            store = get_learning_store()
        except Exception as exc:
            log_event("learning_store_unavailable", level="error", error_class=type(exc).__name__, error=str(exc))
    banks = ResponseBanks(build_content_store(settings), timeout_seconds=settings.content_timeout_seconds)
    return ChatbotRouter(banks=banks, store=store, settings=settings)


_chatbot_router: ChatbotRouter | None = None


def get_chatbot_router() -> ChatbotRouter:
    global _chatbot_router
    if _chatbot_router is None:
        _chatbot_router = build_chatbot_router()
    return _chatbot_router
