from pydantic_settings import BaseSettings
from pathlib import Path
from typing import List

class Settings(BaseSettings):
    # Project
    PROJECT_NAME: str = "Cats University Admissions Chat"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"  # development, production

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # Server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 3000

    # Database
    DATABASE_URL: str = f"sqlite+aiosqlite:///{DATA_DIR}/chat.db"
    DATABASE_ECHO: bool = False

    # Admin password, the cookie carries its SHA-256 digest
    AUTH_PASSWORD: str = ""
    AUTH_COOKIE_MAX_AGE: int = 24 * 60 * 60

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_MAX_TOKENS: int = 200

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

# Settings instance shared by the app and run.py
settings = Settings()
