from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from admissions_chat.core.errors import StoreError
from admissions_chat.models.chat import Chat
from admissions_chat.models.followup import Followup
from admissions_chat.models.message import Message
from admissions_chat.services.completion import CompletionProvider
from admissions_chat.services.status import (
    BotReply,
    ChatStatus,
    Sender,
    transition,
)
from admissions_chat.services.store import ConversationStore

logger = logging.getLogger(__name__)

GREETING = "Hello! I'm the Cats University admissions assistant. How can I help you today?"
ESCALATION_REPLY = (
    "Hello! Our College Admissions Staff will be here to answer you shortly. Please wait..."
)
FALLBACK_REPLY = "Sorry, I did not understand."
SYSTEM_PROMPT = (
    "You are a helpful admissions assistant for Cats University. "
    "Our university teaches humans how to take good care of cats. "
    "Keep answers concise and factual. Always return your answer in plain text. "
    "Escalate to a human if unsure."
)


@dataclass(frozen=True)
class ChatLine:
    chat_id: str
    sender: Sender
    content: str

    def to_dict(self) -> dict:
        return {"chat_id": self.chat_id, "sender": self.sender.value, "content": self.content}


@dataclass(frozen=True)
class StudentExchange:
    student: ChatLine
    bot: Optional[ChatLine] = None


class ChatSessionService:
    """Routes student and admin messages according to the chat status.

    There is no locking around the status read and write, so two messages
    arriving together for the same chat may both act on the same status.
    """

    def __init__(self, store: ConversationStore, provider: CompletionProvider) -> None:
        self.store = store
        self.provider = provider

    async def start_chat(self) -> tuple[str, str]:
        chat = await self.store.create_chat()
        try:
            await self.store.create_message(chat_id=chat.id, sender=Sender.BOT, content=GREETING)
        except StoreError:
            # Not fatal, the chat is returned without its greeting
            logger.warning("Failed to save greeting for chat %s", chat.id, exc_info=True)
        logger.info("Started chat %s", chat.id)
        return chat.id, GREETING

    async def post_student_message(self, chat_id: str, content: str) -> StudentExchange:
        await self.store.create_message(chat_id=chat_id, sender=Sender.STUDENT, content=content)
        student = ChatLine(chat_id, Sender.STUDENT, content)

        status = await self.store.get_status(chat_id)
        step = transition(status, Sender.STUDENT, content)

        bot: Optional[ChatLine] = None
        if step.reply is BotReply.CANNED:
            bot = await self._save_bot_reply(chat_id, ESCALATION_REPLY)
        elif step.reply is BotReply.COMPLETION:
            reply = await self.provider.complete(system_prompt=SYSTEM_PROMPT, content=content)
            bot = await self._save_bot_reply(chat_id, reply or FALLBACK_REPLY)

        await self._apply_status(chat_id, status, step.status)
        return StudentExchange(student=student, bot=bot)

    async def post_admin_reply(self, chat_id: str, content: str) -> None:
        await self.store.create_message(
            chat_id=chat_id,
            sender=Sender.ADMIN,
            content=content,
            failure="Failed to send reply",
        )
        status = await self.store.get_status(chat_id)
        await self._apply_status(chat_id, status, transition(status, Sender.ADMIN).status)

    async def list_chats(self) -> List[Chat]:
        return await self.store.list_chats()

    async def list_messages(self, chat_id: str) -> List[Message]:
        return await self.store.list_messages(chat_id=chat_id)

    async def record_followup(
        self,
        chat_id: str,
        *,
        student_email: str,
        student_phone: Optional[str] = None,
        preferred_time: Optional[str] = None,
    ) -> Followup:
        return await self.store.create_followup(
            chat_id=chat_id,
            student_email=student_email,
            student_phone=student_phone,
            preferred_time=preferred_time,
        )

    async def _save_bot_reply(self, chat_id: str, content: str) -> ChatLine:
        await self.store.create_message(
            chat_id=chat_id,
            sender=Sender.BOT,
            content=content,
            failure="Failed to save bot reply",
        )
        return ChatLine(chat_id, Sender.BOT, content)

    async def _apply_status(self, chat_id: str, current: ChatStatus, new: ChatStatus) -> None:
        if new is current:
            return
        await self.store.set_status(chat_id, new)
        logger.info("Chat %s status %s -> %s", chat_id, current.value, new.value)
