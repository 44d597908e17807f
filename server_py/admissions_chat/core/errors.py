"""Domain errors raised by the chat services.

Every error carries the message shown to the client and the HTTP status it
maps to. Handlers registered in ``admissions_chat.main`` convert them to
``{"error": message}`` bodies at the request boundary; nothing is retried.
"""

from fastapi import status


class ChatError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class StoreError(ChatError):
    """Any failure reported by the conversation store."""

    default_message = "Database error"


class ProviderError(ChatError):
    """The completion provider call failed."""

    default_message = "Bot reply failed"


class AuthError(ChatError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ValidationError(ChatError):
    """Malformed request body; reported as a server error like the rest."""

    default_message = "Invalid request body"
