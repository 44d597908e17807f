from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from sqlalchemy import asc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from admissions_chat.core.errors import StoreError
from admissions_chat.models.chat import Chat
from admissions_chat.models.followup import Followup
from admissions_chat.models.message import Message
from admissions_chat.services.status import ChatStatus, Sender


class ConversationStore:
    """Chats, messages and follow-ups in the database.

    Every call opens its own session and commits before returning, so there
    is no transaction spanning several calls. Any SQLAlchemy failure is
    re-raised as ``StoreError`` with the message passed by the caller.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self, failure: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreError(failure) from exc

    async def create_chat(self) -> Chat:
        async with self._session("Failed to create chat") as session:
            chat = Chat(status=ChatStatus.BOT.value)
            session.add(chat)
            await session.commit()
            await session.refresh(chat)
            return chat

    async def create_message(
        self,
        *,
        chat_id: str,
        sender: Sender,
        content: str,
        failure: str = "Failed to save message",
    ) -> Message:
        async with self._session(failure) as session:
            message = Message(chat_id=chat_id, sender=sender.value, content=content)
            session.add(message)
            await session.commit()
            await session.refresh(message)
            return message

    async def get_status(self, chat_id: str) -> ChatStatus:
        async with self._session("Failed to fetch chat status") as session:
            result = await session.execute(select(Chat.status).where(Chat.id == chat_id))
            status = result.scalar_one_or_none()
        if status is None:
            raise StoreError("Failed to fetch chat status")
        return ChatStatus(status)

    async def set_status(self, chat_id: str, status: ChatStatus) -> None:
        async with self._session("Failed to update chat status") as session:
            await session.execute(
                update(Chat).where(Chat.id == chat_id).values(status=status.value)
            )
            await session.commit()

    async def list_chats(self) -> List[Chat]:
        async with self._session("Failed to fetch chats with followups") as session:
            result = await session.execute(
                select(Chat).options(selectinload(Chat.followups))
            )
            return list(result.scalars())

    async def list_messages(self, *, chat_id: str) -> List[Message]:
        async with self._session("Failed to fetch messages") as session:
            result = await session.execute(
                select(Message)
                .where(Message.chat_id == chat_id)
                .order_by(asc(Message.created_at), asc(Message.id))
            )
            return list(result.scalars())

    async def create_followup(
        self,
        *,
        chat_id: str,
        student_email: str,
        student_phone: Optional[str] = None,
        preferred_time: Optional[str] = None,
    ) -> Followup:
        async with self._session("Failed to save follow-up") as session:
            followup = Followup(
                chat_id=chat_id,
                student_email=student_email,
                student_phone=student_phone,
                preferred_time=preferred_time,
            )
            session.add(followup)
            await session.commit()
            await session.refresh(followup)
            return followup
