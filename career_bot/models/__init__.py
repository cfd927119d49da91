"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.
Field names are snake_case in Python and camelCase on the wire.

Models:
    - *Request: Typed input of each RPC procedure
    - PublicUser, ChatOut, MessageOut: Entities returned to the client
    - AuthResponse, SendMessageResponse: Composite procedure results
    - ParsedPDFResponse, ErrorResponse: PDF parse endpoint bodies
    - ChatMessage: A role/content turn sent to the language model
"""

from career_bot.models.schemas import (
    AuthResponse,
    ChatIdRequest,
    ChatMessage,
    ChatOut,
    ChatWithMessages,
    CreateChatRequest,
    ErrorResponse,
    MessageOut,
    ParsedPDFResponse,
    PublicUser,
    SendMessageRequest,
    SendMessageResponse,
    SigninRequest,
    SignupRequest,
    TokenRequest,
    UpdateMessageStatusRequest,
    UpdateUserRequest,
    UserIdRequest,
)

__all__ = [
    "AuthResponse",
    "ChatIdRequest",
    "ChatMessage",
    "ChatOut",
    "ChatWithMessages",
    "CreateChatRequest",
    "ErrorResponse",
    "MessageOut",
    "ParsedPDFResponse",
    "PublicUser",
    "SendMessageRequest",
    "SendMessageResponse",
    "SigninRequest",
    "SignupRequest",
    "TokenRequest",
    "UpdateMessageStatusRequest",
    "UpdateUserRequest",
    "UserIdRequest",
]
