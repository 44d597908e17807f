"""Chat status state machine.

A chat starts in ``bot``. A student can escalate with a fixed phrase, which
moves the chat to ``awaiting_human``; the first admin reply after that moves
it to ``human``. Once a chat has left ``bot`` the assistant never answers it
again, so bot replies cannot interleave with staff replies.

The functions here only decide. Persisting messages, calling the completion
provider and writing the new status is done by ``ChatSessionService``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


ESCALATION_PHRASE = "i want to chat with an admissions staff"


class ChatStatus(str, enum.Enum):
    BOT = "bot"
    AWAITING_HUMAN = "awaiting_human"
    HUMAN = "human"


class Sender(str, enum.Enum):
    STUDENT = "student"
    BOT = "bot"
    ADMIN = "admin"


class BotReply(enum.Enum):
    NONE = "none"
    CANNED = "canned"
    COMPLETION = "completion"


@dataclass(frozen=True)
class Transition:
    status: ChatStatus
    reply: BotReply = BotReply.NONE


def is_escalation_request(content: str) -> bool:
    return content.strip().lower() == ESCALATION_PHRASE


def on_student_message(status: ChatStatus, content: str) -> Transition:
    if status is not ChatStatus.BOT:
        # Also downgrades an active ``human`` chat back to ``awaiting_human``.
        return Transition(ChatStatus.AWAITING_HUMAN)
    if is_escalation_request(content):
        return Transition(ChatStatus.AWAITING_HUMAN, BotReply.CANNED)
    return Transition(ChatStatus.BOT, BotReply.COMPLETION)


def on_admin_reply(status: ChatStatus) -> Transition:
    if status is ChatStatus.AWAITING_HUMAN:
        return Transition(ChatStatus.HUMAN)
    return Transition(status)


def transition(status: ChatStatus, actor: Sender, content: str = "") -> Transition:
    """Single entry point over every (status, actor) pair."""
    if actor is Sender.STUDENT:
        return on_student_message(status, content)
    if actor is Sender.ADMIN:
        return on_admin_reply(status)
    raise ValueError(f"{actor.value} messages do not drive status transitions")
