"""Chat and message procedures.

sendMessage is the one multi-step flow: persist the user turn, rebuild the
conversation from the database, ask the model, persist the reply, and bump
the chat's updated_at so it sorts first in the sidebar.
"""

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from career_bot.agent.context import build_chat_context
from career_bot.db.models import Chat, Message, MessageRole, MessageStatus, User, utcnow
from career_bot.models.schemas import (
    ChatMessage,
    ChatOut,
    ChatWithMessages,
    CreateChatRequest,
    MessageOut,
    SendMessageRequest,
    SendMessageResponse,
    UpdateMessageStatusRequest,
)
from career_bot.services.errors import InvalidInputError, LLMServiceError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "New Chat"


class ReplyGenerator(Protocol):
    async def get_response(self, messages: list[ChatMessage]) -> str: ...


def _require_user(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return user


def _ordered_messages(db: Session, chat_id: str) -> list[Message]:
    return list(
        db.scalars(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.asc())
        )
    )


def create_chat(db: Session, payload: CreateChatRequest) -> ChatOut:
    """Create an empty chat for an existing user.

    Raises:
        NotFoundError: If the user does not exist.
    """
    _require_user(db, payload.user_id)

    chat = Chat(user_id=payload.user_id, title=payload.title or DEFAULT_CHAT_TITLE)
    db.add(chat)
    db.commit()
    db.refresh(chat)

    logger.info(f"Created chat {chat.id} for user {payload.user_id}")
    return ChatOut.model_validate(chat)


def get_chats(db: Session, user_id: str) -> list[ChatWithMessages]:
    """List a user's chats, most recently updated first, with their messages.

    Raises:
        NotFoundError: If the user does not exist.
    """
    _require_user(db, user_id)

    chats = db.scalars(
        select(Chat)
        .where(Chat.user_id == user_id)
        .order_by(Chat.updated_at.desc())
        .options(selectinload(Chat.messages))
    )
    return [ChatWithMessages.model_validate(chat) for chat in chats]


def get_messages(db: Session, chat_id: str) -> list[MessageOut]:
    return [MessageOut.model_validate(m) for m in _ordered_messages(db, chat_id)]


async def send_message(
    db: Session,
    payload: SendMessageRequest,
    agent: ReplyGenerator,
) -> SendMessageResponse:
    """Run one conversation turn.

    The user message is committed before the model is called, so it
    survives a provider failure.

    Raises:
        NotFoundError: If the chat does not exist or belongs to another user.
        LLMServiceError: If the model call fails.
    """
    chat = db.get(Chat, payload.chat_id)
    if chat is None or chat.user_id != payload.user_id:
        raise NotFoundError(f"Chat with ID {payload.chat_id} not found")

    user_message = Message(
        chat_id=chat.id,
        role=MessageRole.USER.value,
        content=payload.content,
        status=MessageStatus.SENT.value,
    )
    db.add(user_message)
    db.commit()
    db.refresh(user_message)

    history = build_chat_context(_ordered_messages(db, chat.id))

    try:
        reply = await agent.get_response(history)
    except LLMServiceError as e:
        logger.error(f"Failed to get AI response for chat {chat.id}: {e}")
        raise LLMServiceError("Failed to get AI response") from e

    ai_message = Message(
        chat_id=chat.id,
        role=MessageRole.ASSISTANT.value,
        content=reply,
    )
    db.add(ai_message)
    chat.updated_at = utcnow()
    db.commit()
    db.refresh(ai_message)
    db.refresh(chat)

    logger.info(f"Completed turn in chat {chat.id} ({len(history)} messages of context)")
    return SendMessageResponse(
        user_message=MessageOut.model_validate(user_message),
        ai_message=MessageOut.model_validate(ai_message),
    )


def update_message_status(db: Session, payload: UpdateMessageStatusRequest) -> MessageOut:
    """Set the delivery status of a single user message.

    Raises:
        NotFoundError: If the message does not exist.
        InvalidInputError: If the message was written by the assistant.
    """
    message = db.get(Message, payload.message_id)
    if message is None:
        raise NotFoundError(f"Message with ID {payload.message_id} not found")
    if message.role != MessageRole.USER.value:
        raise InvalidInputError("Only user messages have a delivery status")

    message.status = payload.status
    db.commit()
    db.refresh(message)
    return MessageOut.model_validate(message)
