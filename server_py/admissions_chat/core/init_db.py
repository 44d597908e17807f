from pathlib import Path

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine

from admissions_chat.core.database import Base

# Import the models so they are registered in metadata before create_all
from admissions_chat.models import chat  # noqa: F401
from admissions_chat.models import message  # noqa: F401
from admissions_chat.models import followup  # noqa: F401


def ensure_sqlite_directory(database_url: str | URL) -> None:
    """Creates the parent directory of a file-backed SQLite database."""
    url = make_url(database_url)
    if not url.get_backend_name().startswith("sqlite"):
        return
    if not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db(engine: AsyncEngine) -> None:
    """Creates the chats, messages and followups tables if they are missing."""
    ensure_sqlite_directory(engine.url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
