from fastapi import APIRouter, Depends, status

from admissions_chat.core.dependencies import get_chat_service
from admissions_chat.schemas.chat import (
    ChatStartResponse,
    FollowupCreate,
    MessageCreate,
    StatusMessage,
    StudentMessageResponse,
)
from admissions_chat.services.chat import ChatSessionService

router = APIRouter()


@router.get("/")
async def healthcheck():
    return {"message": "hello"}


@router.post("/chat/start", response_model=ChatStartResponse)
async def start_chat(service: ChatSessionService = Depends(get_chat_service)):
    """Creates a chat in bot mode and greets the student."""
    chat_id, greeting = await service.start_chat()
    return ChatStartResponse(chat_id=chat_id, greeting=greeting)


@router.post(
    "/chat/{chat_id}/message",
    response_model=StudentMessageResponse,
    response_model_exclude_none=True,
)
async def post_student_message(
    chat_id: str,
    payload: MessageCreate,
    service: ChatSessionService = Depends(get_chat_service),
):
    """
    Saves the student's message and, while the chat is still in bot mode,
    answers it with either the escalation notice or a generated reply.
    """
    exchange = await service.post_student_message(chat_id, payload.content)
    return {
        "student": exchange.student.to_dict(),
        "bot": exchange.bot.to_dict() if exchange.bot else None,
    }


@router.post(
    "/chat/{chat_id}/followup",
    response_model=StatusMessage,
    status_code=status.HTTP_201_CREATED,
)
async def post_followup(
    chat_id: str,
    payload: FollowupCreate,
    service: ChatSessionService = Depends(get_chat_service),
):
    """Contact details the student leaves for admissions staff."""
    await service.record_followup(
        chat_id,
        student_email=str(payload.student_email),
        student_phone=payload.student_phone,
        preferred_time=payload.preferred_time,
    )
    return StatusMessage(message="Follow-up saved")
