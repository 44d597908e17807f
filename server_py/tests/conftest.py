from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from admissions_chat.core.config import Settings
from admissions_chat.core.database import create_engine_from_settings, create_session_factory
from admissions_chat.core.dependencies import get_provider
from admissions_chat.core.init_db import init_db
from admissions_chat.main import create_app
from admissions_chat.services.store import ConversationStore

ADMIN_PASSWORD = "whiskers-and-tuna"


class FakeProvider:
    """Completion provider that records calls instead of reaching OpenAI."""

    def __init__(self, reply: Optional[str] = "Applications close on March 1st.") -> None:
        self.reply = reply
        self.error: Optional[Exception] = None
        self.calls: List[Tuple[str, str]] = []

    async def complete(self, *, system_prompt: str, content: str) -> Optional[str]:
        self.calls.append((system_prompt, content))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}",
        AUTH_PASSWORD=ADMIN_PASSWORD,
        OPENAI_API_KEY="sk-test",
        BACKEND_CORS_ORIGINS=[],
    )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
async def store(settings):
    engine = create_engine_from_settings(settings)
    await init_db(engine)
    yield ConversationStore(create_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def client(settings, provider):
    app = create_app(settings)
    app.dependency_overrides[get_provider] = lambda: provider
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    response = client.post("/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
