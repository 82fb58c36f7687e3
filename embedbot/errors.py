"""Errors raised by the turn handler.

Each carries the HTTP status and the message that is safe to hand back to the
widget. Anything not derived from ``ChatbotError`` is treated as an internal
error by the API layer.
"""

from fastapi import status


class ChatbotError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(ChatbotError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required parameters"


class BotNotFound(ChatbotError):
    # Same message for "missing" and "inactive"; callers learn nothing more.
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Bot not found or inactive"


class GenerationFailed(ChatbotError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
