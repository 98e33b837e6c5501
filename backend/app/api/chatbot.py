"""
Public chatbot endpoints: ask, rate an answer, end a conversation.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from backend.app.brain.models import FeedbackType
from backend.app.brain.service import ChatbotRouter, get_chatbot_router


router = APIRouter(prefix="/api/chatbot", tags=["chatbot"])


def get_router(request: Request) -> ChatbotRouter:
    chatbot = getattr(request.app.state, "chatbot", None)
    if chatbot is None:
        chatbot = get_chatbot_router()
        request.app.state.chatbot = chatbot
    return chatbot


class ChatbotRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    user_id: Optional[str] = Field(default=None, alias="userId")


class FeedbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    message_id: str = Field(alias="messageId", min_length=1)
    rating: int = Field(ge=1, le=5)
    feedback_type: Optional[FeedbackType] = Field(default=None, alias="feedbackType")
    comment: Optional[str] = None


class EndConversationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    satisfaction: Optional[int] = Field(default=None, ge=1, le=5)


@router.post("")
def ask(payload: ChatbotRequest, chatbot: ChatbotRouter = Depends(get_router)):
    result = chatbot.handle(payload.message, session_id=payload.session_id, user_id=payload.user_id)
    return result.to_dict()


@router.patch("")
def submit_feedback(payload: FeedbackRequest, chatbot: ChatbotRouter = Depends(get_router)):
    ok = chatbot.submit_feedback(
        payload.conversation_id,
        payload.message_id,
        payload.rating,
        feedback_type=payload.feedback_type,
        comment=payload.comment,
    )
    if not ok:
        return JSONResponse(status_code=500, content={"ok": False})
    return {"ok": True}


@router.post("/end")
def end_conversation(payload: EndConversationRequest, chatbot: ChatbotRouter = Depends(get_router)):
    return {"ok": chatbot.end_conversation(payload.session_id, payload.satisfaction)}
