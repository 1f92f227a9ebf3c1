from fastapi import APIRouter, Depends, Request

from app.core.rate_limit import rate_limit
from app.core.security import current_user_id, require_api_key
from app.schemas.chat import ChatHistoryResponse, ChatReply, ChatRequest
from app.services import chat_service
from app.services.errors import CareerServiceError
from app.api.v1.errors import raise_http_error

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/chat/ask", response_model=ChatReply)
@rate_limit()
async def ask_chatbot(
    request: Request,
    payload: ChatRequest,
    user_id: str | None = Depends(current_user_id),
):
    _ = request
    try:
        return await chat_service.ask(user_id, payload.message)
    except CareerServiceError as exc:
        raise_http_error(exc)


@router.get("/chat/history", response_model=ChatHistoryResponse)
def chat_history(user_id: str | None = Depends(current_user_id)):
    try:
        return chat_service.history(user_id)
    except CareerServiceError as exc:
        raise_http_error(exc)
