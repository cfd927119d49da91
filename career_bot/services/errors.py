"""Error taxonomy shared by the services and the API layer.

Each error carries the HTTP status it maps to. Messages are written for end
users: the UI shows them verbatim.
"""

from fastapi import status


class CareerBotError(Exception):
    """Base class for expected application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(CareerBotError):
    """Raised when a request is well-formed but not acceptable."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(CareerBotError):
    """Raised on bad credentials or an invalid session token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(CareerBotError):
    """Raised when a referenced user, chat, or message does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class LLMServiceError(CareerBotError):
    """Raised when the language model provider call fails."""

    status_code = status.HTTP_502_BAD_GATEWAY
