from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from admissions_chat.core.database import Base


def _new_chat_id() -> str:
    return str(uuid.uuid4())


class Chat(Base):
    __tablename__ = "chats"

    id = Column(String(36), primary_key=True, default=_new_chat_id)
    status = Column(String(16), nullable=False, default="bot")  # bot, awaiting_human, human
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    followups = relationship("Followup", back_populates="chat")
