from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator


class MessageCreate(BaseModel):
    content: str


class ChatStartResponse(BaseModel):
    chat_id: str
    greeting: str


class MessageOut(BaseModel):
    chat_id: str
    sender: str
    content: str


class StudentMessageResponse(BaseModel):
    student: MessageOut
    bot: Optional[MessageOut] = None


class MessageRecord(BaseModel):
    id: int
    chat_id: str
    sender: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class MessageListResponse(BaseModel):
    messages: List[MessageRecord]


class FollowupCreate(BaseModel):
    student_email: EmailStr
    student_phone: Optional[str] = None
    preferred_time: Optional[str] = None

    @field_validator("student_phone", "preferred_time")
    @classmethod
    def clean_optional(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        if not cleaned:
            return None
        return cleaned[:120]


class FollowupOut(BaseModel):
    student_email: str
    student_phone: Optional[str] = None
    preferred_time: Optional[str] = None

    model_config = {"from_attributes": True}


class ChatSummary(BaseModel):
    id: str
    status: str
    created_at: datetime
    followups: List[FollowupOut] = []

    model_config = {"from_attributes": True}


class ChatListResponse(BaseModel):
    chats: List[ChatSummary]


class StatusMessage(BaseModel):
    message: str
