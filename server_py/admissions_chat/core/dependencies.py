from typing import Optional

from fastapi import Cookie, Depends, Request

from admissions_chat.core.config import Settings
from admissions_chat.core.errors import AuthError
from admissions_chat.core.security import AUTH_COOKIE, verify_password_hash
from admissions_chat.services.chat import ChatSessionService
from admissions_chat.services.completion import CompletionProvider
from admissions_chat.services.store import ConversationStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ConversationStore:
    """Store created once in the application lifespan."""
    return request.app.state.store


def get_provider(request: Request) -> CompletionProvider:
    return request.app.state.provider


def get_chat_service(
    store: ConversationStore = Depends(get_store),
    provider: CompletionProvider = Depends(get_provider),
) -> ChatSessionService:
    return ChatSessionService(store, provider)


async def require_admin(
    auth: Optional[str] = Cookie(default=None, alias=AUTH_COOKIE),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Dependency for staff-only endpoints.
    The cookie must hold the hash of the configured admin password;
    it is re-checked on every request, there is no session store.
    """
    if not verify_password_hash(auth, settings):
        raise AuthError("Unauthorized")
