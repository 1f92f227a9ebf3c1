import hashlib
import json
import logging
import time

from app.core.config import settings
from app.features.topic_gate import classify
from app.schemas.chat import ChatHistoryEntry, ChatHistoryResponse, ChatReply
from app.services.career_ai import chat_reply
from app.services.errors import (
    InvalidInputError,
    PlanLimitError,
    ProOnlyError,
    TopicRejectedError,
)
from app.services.user_service import require_user
from app.store import records

logger = logging.getLogger("app.chat")


def _short_hash(value: str | None) -> str:
    normalized = (value or "").strip()
    if not normalized:
        return ""
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:12]


async def ask(user_id: str | None, message: str) -> ChatReply:
    started_at = time.perf_counter()
    user_message = (message or "").strip()
    if not user_message:
        raise InvalidInputError("Message is required")

    decision = classify(user_message)
    if not decision.allowed:
        logger.info(
            json.dumps(
                {
                    "event": "chat_rejected",
                    "verdict": decision.verdict.value,
                    "matched": decision.matched,
                    "message_hash": _short_hash(user_message),
                }
            )
        )
        raise TopicRejectedError(decision)

    user = require_user(user_id)
    if user["plan"] == "free" and user["chat_count"] >= settings.free_max_chat_messages:
        raise PlanLimitError("Free plan chat limit reached. Upgrade to Pro.")

    history = records.recent_chat_turns(user["id"], settings.chat_history_turns)
    reply = await chat_reply(user_message, history)

    chat_id = records.add_chat_turn(user["id"], user_message=user_message, ai_response=reply)
    records.increment_counter(user["id"], "chat_count")

    logger.info(
        json.dumps(
            {
                "event": "chat_request",
                "user_hash": _short_hash(user["id"]),
                "history_turns": len(history),
                "message_len": len(user_message),
                "message_hash": _short_hash(user_message),
                "reply_len": len(reply),
                "duration_ms": int((time.perf_counter() - started_at) * 1000),
            }
        )
    )
    return ChatReply(reply=reply, chat_id=chat_id)


def history(user_id: str | None) -> ChatHistoryResponse:
    user = require_user(user_id)
    if user["plan"] != "pro":
        raise ProOnlyError("Chat history is available for Pro users only.")
    rows = records.chat_history(user["id"], settings.chat_history_limit)
    return ChatHistoryResponse(history=[ChatHistoryEntry(**row) for row in rows])
