from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from admissions_chat.core.dependencies import get_chat_service, require_admin
from admissions_chat.schemas.chat import (
    ChatListResponse,
    ChatSummary,
    MessageCreate,
    MessageListResponse,
    MessageRecord,
    StatusMessage,
)
from admissions_chat.services.chat import ChatSessionService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/auth", response_class=PlainTextResponse)
async def check_auth():
    return "authenticated"


@router.get("/chats", response_model=ChatListResponse)
async def list_chats(service: ChatSessionService = Depends(get_chat_service)):
    """All chats with their follow-up contact details, for the dashboard."""
    chats = await service.list_chats()
    return ChatListResponse(chats=[ChatSummary.model_validate(c) for c in chats])


@router.get("/chat/{chat_id}/messages", response_model=MessageListResponse)
async def list_chat_messages(
    chat_id: str,
    service: ChatSessionService = Depends(get_chat_service),
):
    messages = await service.list_messages(chat_id)
    return MessageListResponse(messages=[MessageRecord.model_validate(m) for m in messages])


@router.post("/chat/{chat_id}/reply", response_model=StatusMessage)
async def reply_to_chat(
    chat_id: str,
    payload: MessageCreate,
    service: ChatSessionService = Depends(get_chat_service),
):
    """Staff reply; the first one after an escalation takes the chat over."""
    await service.post_admin_reply(chat_id, payload.content)
    return StatusMessage(message="Reply sent")
