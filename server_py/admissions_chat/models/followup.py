from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from admissions_chat.core.database import Base

class Followup(Base):
    __tablename__ = "followups"

    id = Column(Integer, primary_key=True, index=True)
    chat_id = Column(String(36), ForeignKey("chats.id", ondelete="CASCADE"), nullable=False, index=True)

    # Student contact details
    student_email = Column(String, nullable=False)
    student_phone = Column(String, nullable=True)
    preferred_time = Column(String, nullable=True)  # free text, e.g. "weekdays after 5pm"

    created_at = Column(DateTime, default=datetime.utcnow)

    chat = relationship("Chat", back_populates="followups")
