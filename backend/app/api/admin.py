"""
Admin inspection of the learning store and the response cache.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from backend.app.api.chatbot import get_router
from backend.app.brain.models import Intent
from backend.app.brain.service import ChatbotRouter
from backend.app.brain.store import LearningStore


router = APIRouter(prefix="/api/admin/chatbot", tags=["admin"])


class KnowledgeCreateRequest(BaseModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    intent: Intent
    confidence: float = Field(default=0.8, ge=0.0, le=1.0)


class KnowledgeUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_active: bool = Field(alias="isActive")


def _store(chatbot: ChatbotRouter) -> LearningStore:
    if chatbot.store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Learning store is disabled")
    return chatbot.store


@router.get("/stats")
def stats(chatbot: ChatbotRouter = Depends(get_router)):
    payload = _store(chatbot).get_conversation_stats()
    payload.update(chatbot.stats())
    return payload


@router.get("/knowledge")
def list_knowledge(limit: int = Query(default=50, ge=1, le=500), chatbot: ChatbotRouter = Depends(get_router)):
    return {"entries": [e.to_dict() for e in _store(chatbot).get_learned_knowledge(limit)]}


@router.post("/knowledge", status_code=status.HTTP_201_CREATED)
def add_knowledge(payload: KnowledgeCreateRequest, chatbot: ChatbotRouter = Depends(get_router)):
    entry = _store(chatbot).add_knowledge(
        payload.question,
        payload.answer,
        payload.intent.value,
        source="static",
        confidence=payload.confidence,
    )
    return entry.to_dict()


@router.patch("/knowledge/{entry_id}")
def update_knowledge(entry_id: str, payload: KnowledgeUpdateRequest, chatbot: ChatbotRouter = Depends(get_router)):
    entry = _store(chatbot).set_knowledge_active(entry_id, payload.is_active)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Knowledge entry not found")
    return entry.to_dict()


@router.delete("/knowledge/{entry_id}")
def delete_knowledge(entry_id: str, chatbot: ChatbotRouter = Depends(get_router)):
    if not _store(chatbot).delete_knowledge(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Knowledge entry not found")
    return {"ok": True}


@router.get("/patterns")
def list_patterns(limit: int = Query(default=50, ge=1, le=500), chatbot: ChatbotRouter = Depends(get_router)):
    return {"patterns": [p.to_dict() for p in _store(chatbot).list_patterns(limit)]}


@router.get("/cache")
def cache_stats(chatbot: ChatbotRouter = Depends(get_router)):
    return chatbot.cache.stats()


@router.delete("/cache")
def clear_cache(chatbot: ChatbotRouter = Depends(get_router)):
    cleared = len(chatbot.cache)
    chatbot.cache.clear()
    return {"ok": True, "cleared": cleared}
