"""
Platform-level API endpoints for architecture and runtime inspection.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.app.api.chatbot import get_router
from backend.app.brain.cache import EVICTION_FRACTION, SIMILAR_CONFIDENCE_FACTOR, SIMILARITY_THRESHOLD
from backend.app.brain.intent import INTENT_RULES
from backend.app.brain.service import ChatbotRouter
from backend.app.brain.store import LEARNED_RESPONSE_THRESHOLD, PATTERN_LEARNING_THRESHOLD, PATTERN_MATCH_THRESHOLD
from backend.app.core.config import get_settings


router = APIRouter(prefix="/api/v1/platform", tags=["platform"])


@router.get("/architecture")
async def architecture():
    diagram = """User Message
-> Command Detection (theme / navigation -> structured action)
-> Intent Classifier (ordered rule table)
   - learned keyword patterns may override
-> Response Cache
   - exact (intent, query) key
   - similar query (Jaccard >= 0.8, confidence x0.9)
-> Learned Knowledge Base (score > 0.6)
-> Topic Response Banks
   - live content store data
   - per-intent fallback sentence
-> Response Envelope
-> Background Queue
   - record turn
   - learn keyword pattern (confidence < 0.7)"""
    return {"diagram": diagram, "precedence": [rule.intent.value for rule in INTENT_RULES]}


@router.get("/config")
async def platform_config(chatbot: ChatbotRouter = Depends(get_router)):
    settings = get_settings()
    return {
        "app_env": settings.app_env,
        "learning_enabled": chatbot.learning_enabled,
        "content_store": settings.content_store,
        "truth_db": "DATABASE_URL",
        "content_timeout_seconds": settings.content_timeout_seconds,
        "store_timeout_seconds": settings.store_timeout_seconds,
        "store_backoff_seconds": settings.store_backoff_seconds,
        "cache": {
            "ttl_seconds": chatbot.cache.ttl_seconds,
            "max_entries": chatbot.cache.max_entries,
            "similarity_threshold": SIMILARITY_THRESHOLD,
            "similar_confidence_factor": SIMILAR_CONFIDENCE_FACTOR,
            "eviction_fraction": EVICTION_FRACTION,
        },
        "thresholds": {
            "learned_response": LEARNED_RESPONSE_THRESHOLD,
            "pattern_learning": PATTERN_LEARNING_THRESHOLD,
            "pattern_match": PATTERN_MATCH_THRESHOLD,
        },
        "background": chatbot.tasks.stats(),
    }
