"""Business logic behind the RPC procedures.

Modules:
    - users: signup, signin, session lookup, profile updates
    - chats: chat creation and listing, message send and status updates
    - errors: exception types mapped to HTTP status codes

Services take a SQLAlchemy session and typed request models, and return
response models. They raise CareerBotError subclasses for expected failures.
"""

from career_bot.services.errors import (
    AuthenticationError,
    CareerBotError,
    InvalidInputError,
    LLMServiceError,
    NotFoundError,
)

__all__ = [
    "AuthenticationError",
    "CareerBotError",
    "InvalidInputError",
    "LLMServiceError",
    "NotFoundError",
]
