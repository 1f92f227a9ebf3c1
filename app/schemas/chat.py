from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field(default="", max_length=4000)


class ChatReply(BaseModel):
    reply: str
    chat_id: int


class ChatHistoryEntry(BaseModel):
    id: int
    user_message: str
    ai_response: str
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    history: list[ChatHistoryEntry] = Field(default_factory=list)
