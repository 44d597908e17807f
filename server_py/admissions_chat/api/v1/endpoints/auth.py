import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response

from admissions_chat.core.config import Settings
from admissions_chat.core.dependencies import get_settings
from admissions_chat.core.errors import AuthError
from admissions_chat.core.security import AUTH_COOKIE, get_password_hash, verify_password_hash
from admissions_chat.schemas.auth import LoginRequest
from admissions_chat.schemas.chat import StatusMessage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=StatusMessage)
async def login(
    response: Response,
    payload: Optional[LoginRequest] = None,
    settings: Settings = Depends(get_settings),
):
    """
    Checks the admin password and sets the ``auth`` cookie to its hash.
    The cookie is HTTP-only, SameSite=Lax and lives for 24 hours.
    """
    password = payload.password if payload else None
    if not password:
        raise AuthError("Invalid credentials")

    hashed_password = get_password_hash(password)
    if not verify_password_hash(hashed_password, settings):
        logger.warning("Rejected admin login")
        raise AuthError("Invalid credentials")

    response.set_cookie(
        AUTH_COOKIE,
        hashed_password,
        max_age=settings.AUTH_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return StatusMessage(message="Logged in")


@router.post("/logout", response_model=StatusMessage)
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        AUTH_COOKIE,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return StatusMessage(message="Logged out")
