import hashlib
import hmac
from typing import Optional

from admissions_chat.core.config import Settings

AUTH_COOKIE = "auth"


def get_password_hash(password: str) -> str:
    """SHA-256 hex digest; also used as the value of the admin cookie."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password_hash(hashed_password: Optional[str], settings: Settings) -> bool:
    """Compares a digest against the digest of the configured admin password."""
    if not hashed_password or not settings.AUTH_PASSWORD:
        return False
    expected = get_password_hash(settings.AUTH_PASSWORD)
    return hmac.compare_digest(hashed_password.encode("utf-8"), expected.encode("utf-8"))
