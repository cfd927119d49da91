"""Typed RPC procedures for the chat client.

Each procedure is ``POST /rpc/<name>`` with a JSON body validated by a
request model and a JSON response described by a response model. Expected
failures are raised as CareerBotError and rendered by the app's exception
handler as ``{"detail": message}``.

Procedures:
    - signup, signin, getCurrentUser, updateUser, getUserById
    - createChat, getChats, getMessages, sendMessage, updateMessageStatus
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from career_bot.agent.chat_agent import get_agent_service
from career_bot.db.session import get_db
from career_bot.models.schemas import (
    AuthResponse,
    ChatIdRequest,
    ChatMessage,
    ChatOut,
    ChatWithMessages,
    CreateChatRequest,
    MessageOut,
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
from career_bot.services import LLMServiceError, chats, users
from career_bot.services.chats import ReplyGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rpc", tags=["rpc"])


class DeferredAgent:
    """Resolves the shared agent when a reply is requested.

    A missing API key becomes LLMServiceError at that point, after
    sendMessage has stored the user turn.
    """

    async def get_response(self, messages: list[ChatMessage]) -> str:
        try:
            agent = get_agent_service()
        except ValueError as e:
            logger.error(f"Language model is not configured: {e}")
            raise LLMServiceError("Failed to get AI response") from e
        return await agent.get_response(messages)


def get_agent() -> ReplyGenerator:
    return DeferredAgent()


# === Auth ===


@router.post("/signup", response_model=AuthResponse)
def signup(payload: SignupRequest, db: Session = Depends(get_db)) -> AuthResponse:
    return users.signup(db, payload)


@router.post("/signin", response_model=AuthResponse)
def signin(payload: SigninRequest, db: Session = Depends(get_db)) -> AuthResponse:
    return users.signin(db, payload)


@router.post("/getCurrentUser", response_model=PublicUser)
def get_current_user(payload: TokenRequest, db: Session = Depends(get_db)) -> PublicUser:
    return users.get_current_user(db, payload.token)


@router.post("/updateUser", response_model=PublicUser)
def update_user(payload: UpdateUserRequest, db: Session = Depends(get_db)) -> PublicUser:
    return users.update_user(db, payload)


@router.post("/getUserById", response_model=PublicUser | None)
def get_user_by_id(payload: UserIdRequest, db: Session = Depends(get_db)) -> PublicUser | None:
    return users.get_user_by_id(db, payload.user_id)


# === Chats ===


@router.post("/createChat", response_model=ChatOut)
def create_chat(payload: CreateChatRequest, db: Session = Depends(get_db)) -> ChatOut:
    return chats.create_chat(db, payload)


@router.post("/getChats", response_model=list[ChatWithMessages])
def get_chats(payload: UserIdRequest, db: Session = Depends(get_db)) -> list[ChatWithMessages]:
    return chats.get_chats(db, payload.user_id)


@router.post("/getMessages", response_model=list[MessageOut])
def get_messages(payload: ChatIdRequest, db: Session = Depends(get_db)) -> list[MessageOut]:
    return chats.get_messages(db, payload.chat_id)


@router.post("/sendMessage", response_model=SendMessageResponse)
async def send_message(
    payload: SendMessageRequest,
    db: Session = Depends(get_db),
    agent: ReplyGenerator = Depends(get_agent),
) -> SendMessageResponse:
    return await chats.send_message(db, payload, agent)


@router.post("/updateMessageStatus", response_model=MessageOut)
def update_message_status(
    payload: UpdateMessageStatusRequest, db: Session = Depends(get_db)
) -> MessageOut:
    return chats.update_message_status(db, payload)
