import pytest

from admissions_chat.core.errors import ProviderError, StoreError
from admissions_chat.services.chat import (
    ESCALATION_REPLY,
    FALLBACK_REPLY,
    GREETING,
    SYSTEM_PROMPT,
    ChatSessionService,
)
from admissions_chat.services.status import ChatStatus, Sender
from admissions_chat.services.store import ConversationStore

from conftest import FakeProvider

pytestmark = pytest.mark.anyio


class GreetingFailsStore(ConversationStore):
    async def create_message(self, *, chat_id, sender, content, failure="Failed to save message"):
        if sender is Sender.BOT and content == GREETING:
            raise StoreError(failure)
        return await super().create_message(
            chat_id=chat_id, sender=sender, content=content, failure=failure
        )


class StatusWriteFailsStore(ConversationStore):
    async def set_status(self, chat_id, status):
        raise StoreError("Failed to update chat status")


async def _senders(store, chat_id):
    return [m.sender for m in await store.list_messages(chat_id=chat_id)]


async def test_start_chat_persists_greeting(store):
    service = ChatSessionService(store, FakeProvider())
    chat_id, greeting = await service.start_chat()

    assert greeting == GREETING
    assert await store.get_status(chat_id) is ChatStatus.BOT
    messages = await store.list_messages(chat_id=chat_id)
    assert [(m.sender, m.content) for m in messages] == [("bot", GREETING)]


async def test_greeting_failure_still_returns_chat(store):
    failing = GreetingFailsStore(store.session_factory)
    service = ChatSessionService(failing, FakeProvider())

    chat_id, greeting = await service.start_chat()

    assert greeting == GREETING
    assert await store.get_status(chat_id) is ChatStatus.BOT
    assert await store.list_messages(chat_id=chat_id) == []


async def test_completion_reply_is_saved_and_status_kept(store):
    provider = FakeProvider(reply="We accept applications all year.")
    service = ChatSessionService(store, provider)
    chat_id, _ = await service.start_chat()

    exchange = await service.post_student_message(chat_id, "When can I apply?")

    assert provider.calls == [(SYSTEM_PROMPT, "When can I apply?")]
    assert exchange.student.content == "When can I apply?"
    assert exchange.bot.content == "We accept applications all year."
    assert await store.get_status(chat_id) is ChatStatus.BOT
    assert await _senders(store, chat_id) == ["bot", "student", "bot"]


@pytest.mark.parametrize("reply", [None, ""])
async def test_empty_completion_falls_back(store, reply):
    service = ChatSessionService(store, FakeProvider(reply=reply))
    chat_id, _ = await service.start_chat()

    exchange = await service.post_student_message(chat_id, "Do you teach grooming?")

    assert exchange.bot.content == FALLBACK_REPLY
    messages = await store.list_messages(chat_id=chat_id)
    assert messages[-1].content == FALLBACK_REPLY


async def test_escalation_skips_provider(store):
    provider = FakeProvider()
    service = ChatSessionService(store, provider)
    chat_id, _ = await service.start_chat()

    exchange = await service.post_student_message(chat_id, " I want to chat with an ADMISSIONS staff ")

    assert provider.calls == []
    assert exchange.bot.content == ESCALATION_REPLY
    assert await store.get_status(chat_id) is ChatStatus.AWAITING_HUMAN


@pytest.mark.parametrize("status", [ChatStatus.AWAITING_HUMAN, ChatStatus.HUMAN])
async def test_student_message_after_escalation_gets_no_reply(store, status):
    provider = FakeProvider()
    service = ChatSessionService(store, provider)
    chat_id, _ = await service.start_chat()
    await store.set_status(chat_id, status)

    exchange = await service.post_student_message(chat_id, "Anyone there?")

    assert exchange.bot is None
    assert provider.calls == []
    assert await store.get_status(chat_id) is ChatStatus.AWAITING_HUMAN
    assert await _senders(store, chat_id) == ["bot", "student"]


@pytest.mark.parametrize(
    "status, expected",
    [
        (ChatStatus.BOT, ChatStatus.BOT),
        (ChatStatus.AWAITING_HUMAN, ChatStatus.HUMAN),
        (ChatStatus.HUMAN, ChatStatus.HUMAN),
    ],
)
async def test_admin_reply_transitions(store, status, expected):
    service = ChatSessionService(store, FakeProvider())
    chat_id, _ = await service.start_chat()
    await store.set_status(chat_id, status)

    await service.post_admin_reply(chat_id, "Hi, this is Maria from admissions.")

    assert await store.get_status(chat_id) is expected
    assert await _senders(store, chat_id) == ["bot", "admin"]


async def test_provider_error_propagates_after_student_message_saved(store):
    provider = FakeProvider()
    provider.error = ProviderError("Bot reply failed")
    service = ChatSessionService(store, provider)
    chat_id, _ = await service.start_chat()

    with pytest.raises(ProviderError):
        await service.post_student_message(chat_id, "Hello")

    assert await _senders(store, chat_id) == ["bot", "student"]


async def test_status_write_failure_is_not_rolled_back(store):
    failing = StatusWriteFailsStore(store.session_factory)
    service = ChatSessionService(failing, FakeProvider())
    chat_id, _ = await service.start_chat()

    with pytest.raises(StoreError, match="Failed to update chat status"):
        await service.post_student_message(chat_id, "i want to chat with an admissions staff")

    assert await _senders(store, chat_id) == ["bot", "student", "bot"]
    assert await store.get_status(chat_id) is ChatStatus.BOT


async def test_unknown_chat_fails_to_save_message(store):
    service = ChatSessionService(store, FakeProvider())

    with pytest.raises(StoreError, match="Failed to save message"):
        await service.post_student_message("no-such-chat", "Hello")


async def test_followups_are_listed_with_chats(store):
    service = ChatSessionService(store, FakeProvider())
    chat_id, _ = await service.start_chat()
    other_id, _ = await service.start_chat()

    await service.record_followup(
        chat_id, student_email="kit@example.com", preferred_time="mornings"
    )

    chats = {chat.id: chat for chat in await service.list_chats()}
    assert set(chats) == {chat_id, other_id}
    assert [f.student_email for f in chats[chat_id].followups] == ["kit@example.com"]
    assert chats[chat_id].followups[0].preferred_time == "mornings"
    assert chats[other_id].followups == []


async def test_list_messages_returns_whole_transcript_in_order(store):
    service = ChatSessionService(store, FakeProvider(reply="Yes, we do."))
    chat_id, _ = await service.start_chat()
    await service.post_student_message(chat_id, "Do you offer night classes?")
    await service.post_admin_reply(chat_id, "Evening sessions run twice a week.")

    messages = await service.list_messages(chat_id)

    assert [(m.sender, m.content) for m in messages] == [
        ("bot", GREETING),
        ("student", "Do you offer night classes?"),
        ("bot", "Yes, we do."),
        ("admin", "Evening sessions run twice a week."),
    ]
    assert all(m.chat_id == chat_id for m in messages)


async def test_service_decides_through_transition(store, monkeypatch):
    from admissions_chat.services import chat as chat_module

    seen = []
    original = chat_module.transition

    def recording_transition(status, actor, content=""):
        seen.append((status, actor))
        return original(status, actor, content)

    monkeypatch.setattr(chat_module, "transition", recording_transition)
    service = ChatSessionService(store, FakeProvider())
    chat_id, _ = await service.start_chat()

    await service.post_student_message(chat_id, "i want to chat with an admissions staff")
    await service.post_admin_reply(chat_id, "I'm here.")

    assert seen == [
        (ChatStatus.BOT, Sender.STUDENT),
        (ChatStatus.AWAITING_HUMAN, Sender.ADMIN),
    ]
    assert await store.get_status(chat_id) is ChatStatus.HUMAN
