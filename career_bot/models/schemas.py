import re
from datetime import datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6

StatusUpdate = Literal["sent", "delivered", "read", "error"]


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _validate_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


Email = Annotated[str, AfterValidator(_validate_email)]


# === Requests ===


class SignupRequest(CamelModel):
    """Payload for creating an account.

    Attributes:
        email: Login email, must be unique.
        password: Plaintext password, at least 6 characters.
        name: Optional display name.
    """

    email: Email
    password: str
    name: str | None = None

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v: str) -> str:
        """Reject passwords shorter than the minimum length."""
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class SigninRequest(CamelModel):
    email: Email
    password: str


class TokenRequest(CamelModel):
    token: str


class UpdateUserRequest(CamelModel):
    id: str
    email: Email
    name: str | None = None


class UserIdRequest(CamelModel):
    user_id: str


class CreateChatRequest(CamelModel):
    user_id: str
    title: str | None = None


class ChatIdRequest(CamelModel):
    chat_id: str


class SendMessageRequest(CamelModel):
    """Payload for sending a user turn to a chat.

    Attributes:
        chat_id: Target chat.
        content: Message text, possibly prefixed with resume context.
        user_id: Owner of the chat.
    """

    chat_id: str
    content: str = Field(..., min_length=1)
    user_id: str

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v: str) -> str:
        """Strip whitespace from content before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class UpdateMessageStatusRequest(CamelModel):
    message_id: str
    status: StatusUpdate


# === Responses ===


class PublicUser(CamelModel):
    """User fields that are safe to return to the client."""

    id: str
    email: str
    name: str | None = None
    is_subscribed: bool = False


class AuthResponse(CamelModel):
    user: PublicUser
    token: str


class MessageOut(CamelModel):
    id: str
    chat_id: str
    role: Literal["user", "assistant"]
    content: str
    status: str | None = None
    created_at: datetime


class ChatOut(CamelModel):
    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class ChatWithMessages(ChatOut):
    messages: list[MessageOut] = Field(default_factory=list)


class SendMessageResponse(CamelModel):
    user_message: MessageOut
    ai_message: MessageOut


class ParsedPDFResponse(CamelModel):
    """Text extracted from an uploaded PDF.

    Attributes:
        text: Raw text of all pages.
        file_name: Uploaded filename.
        upload_date: ISO-8601 UTC timestamp of the upload.
    """

    text: str
    file_name: str
    upload_date: str


class ErrorResponse(BaseModel):
    error: str


# === LLM context ===


class ChatMessage(BaseModel):
    """A single turn passed to the language model.

    Attributes:
        role: The speaker, 'user' or 'assistant'.
        content: The message text.
    """

    role: Literal["user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="The message content")
