"""Unit tests for chat and message procedures."""

from datetime import UTC, datetime

import pytest
import pytest_check as check
from sqlalchemy import select
from sqlalchemy.orm import Session

from career_bot.auth.config import AuthConfig
from career_bot.db.models import Chat, Message
from career_bot.models.schemas import (
    ChatMessage,
    CreateChatRequest,
    SendMessageRequest,
    SignupRequest,
    UpdateMessageStatusRequest,
)
from career_bot.services import chats, users
from career_bot.services.errors import InvalidInputError, LLMServiceError, NotFoundError
from tests.conftest import FakeAgent


@pytest.fixture
def user_id(db_session: Session, auth_config: AuthConfig) -> str:
    result = users.signup(
        db_session, SignupRequest(email="ada@example.com", password="secret123"), config=auth_config
    )
    return result.user.id


@pytest.fixture
def chat_id(db_session: Session, user_id: str) -> str:
    return chats.create_chat(db_session, CreateChatRequest(user_id=user_id)).id


def _send(db: Session, chat_id: str, user_id: str, content: str, agent: FakeAgent):
    return chats.send_message(
        db, SendMessageRequest(chat_id=chat_id, content=content, user_id=user_id), agent
    )


class TestCreateChat:
    """Tests for chat creation."""

    def test_default_title(self, db_session: Session, user_id: str) -> None:
        chat = chats.create_chat(db_session, CreateChatRequest(user_id=user_id))

        check.equal(chat.title, "New Chat")
        check.equal(chat.user_id, user_id)

    def test_custom_title(self, db_session: Session, user_id: str) -> None:
        chat = chats.create_chat(db_session, CreateChatRequest(user_id=user_id, title="Resume help"))

        assert chat.title == "Resume help"

    def test_unknown_user_rejected(self, db_session: Session) -> None:
        """createChat fails when the user does not exist."""
        with pytest.raises(NotFoundError, match="User with ID missing not found"):
            chats.create_chat(db_session, CreateChatRequest(user_id="missing"))


class TestGetChats:
    """Tests for listing a user's chats."""

    def test_most_recently_updated_first(self, db_session: Session, user_id: str) -> None:
        older = chats.create_chat(db_session, CreateChatRequest(user_id=user_id, title="Older"))
        newer = chats.create_chat(db_session, CreateChatRequest(user_id=user_id, title="Newer"))
        db_session.get(Chat, older.id).updated_at = datetime(2024, 1, 1, tzinfo=UTC)
        db_session.get(Chat, newer.id).updated_at = datetime(2024, 6, 1, tzinfo=UTC)
        db_session.commit()

        listed = chats.get_chats(db_session, user_id)

        assert [c.title for c in listed] == ["Newer", "Older"]

    async def test_includes_messages(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        await _send(db_session, chat_id, user_id, "Hi", fake_agent)
        db_session.expire_all()

        listed = chats.get_chats(db_session, user_id)

        assert [m.role for m in listed[0].messages] == ["user", "assistant"]

    def test_only_own_chats(self, db_session: Session, auth_config: AuthConfig, user_id: str, chat_id: str) -> None:
        other = users.signup(
            db_session, SignupRequest(email="grace@example.com", password="secret123"), config=auth_config
        )

        check.equal(len(chats.get_chats(db_session, user_id)), 1)
        check.equal(chats.get_chats(db_session, other.user.id), [])

    def test_unknown_user_rejected(self, db_session: Session) -> None:
        with pytest.raises(NotFoundError):
            chats.get_chats(db_session, "missing")


class TestSendMessage:
    """Tests for a full conversation turn."""

    async def test_first_turn_persists_both_messages(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        """Empty history plus "Hi" yields a user and an assistant message."""
        result = await _send(db_session, chat_id, user_id, "Hi", fake_agent)

        check.equal(result.user_message.role, "user")
        check.equal(result.user_message.content, "Hi")
        check.equal(result.user_message.status, "sent")
        check.equal(result.ai_message.role, "assistant")
        check.equal(result.ai_message.content, fake_agent.reply)
        check.is_none(result.ai_message.status)

        stored = chats.get_messages(db_session, chat_id)
        check.equal([m.id for m in stored], [result.user_message.id, result.ai_message.id])

    async def test_model_receives_history_in_order(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        await _send(db_session, chat_id, user_id, "Hi", fake_agent)
        await _send(db_session, chat_id, user_id, "Review my resume", fake_agent)

        check.equal(fake_agent.calls[0], [ChatMessage(role="user", content="Hi")])
        check.equal(
            fake_agent.calls[1],
            [
                ChatMessage(role="user", content="Hi"),
                ChatMessage(role="assistant", content=fake_agent.reply),
                ChatMessage(role="user", content="Review my resume"),
            ],
        )

    async def test_updates_chat_timestamp(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        stale = datetime(2024, 1, 1, tzinfo=UTC)
        db_session.get(Chat, chat_id).updated_at = stale
        db_session.commit()

        await _send(db_session, chat_id, user_id, "Hi", fake_agent)
        db_session.expire_all()

        assert db_session.get(Chat, chat_id).updated_at > stale

    async def test_model_failure_keeps_user_message(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        fake_agent.error = LLMServiceError("provider down")

        with pytest.raises(LLMServiceError, match="Failed to get AI response"):
            await _send(db_session, chat_id, user_id, "Hi", fake_agent)

        stored = chats.get_messages(db_session, chat_id)
        check.equal(len(stored), 1)
        check.equal(stored[0].role, "user")

    async def test_unknown_chat_rejected(
        self, db_session: Session, user_id: str, fake_agent: FakeAgent
    ) -> None:
        with pytest.raises(NotFoundError):
            await _send(db_session, "missing", user_id, "Hi", fake_agent)
        assert fake_agent.calls == []

    async def test_other_users_chat_rejected(
        self, db_session: Session, auth_config: AuthConfig, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        other = users.signup(
            db_session, SignupRequest(email="grace@example.com", password="secret123"), config=auth_config
        )

        with pytest.raises(NotFoundError):
            await _send(db_session, chat_id, other.user.id, "Hi", fake_agent)
        assert chats.get_messages(db_session, chat_id) == []


class TestGetMessages:
    """Tests for message listing."""

    async def test_ordered_by_creation_time(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        for text in ("one", "two", "three"):
            await _send(db_session, chat_id, user_id, text, fake_agent)

        stored = chats.get_messages(db_session, chat_id)
        times = [m.created_at for m in stored]

        check.equal(times, sorted(times))
        check.equal(
            [m.content for m in stored if m.role == "user"], ["one", "two", "three"]
        )

    def test_unknown_chat_is_empty(self, db_session: Session) -> None:
        assert chats.get_messages(db_session, "missing") == []


class TestUpdateMessageStatus:
    """Tests for delivery status updates."""

    async def test_only_target_message_changes(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        first = await _send(db_session, chat_id, user_id, "one", fake_agent)
        second = await _send(db_session, chat_id, user_id, "two", fake_agent)

        updated = chats.update_message_status(
            db_session,
            UpdateMessageStatusRequest(message_id=first.user_message.id, status="read"),
        )
        db_session.expire_all()
        statuses = {
            m.id: m.status
            for m in db_session.scalars(select(Message).where(Message.chat_id == chat_id))
        }

        check.equal(updated.status, "read")
        check.equal(statuses[first.user_message.id], "read")
        check.equal(statuses[second.user_message.id], "sent")
        check.is_none(statuses[first.ai_message.id])
        check.is_none(statuses[second.ai_message.id])

    def test_unknown_message_rejected(self, db_session: Session) -> None:
        with pytest.raises(NotFoundError):
            chats.update_message_status(
                db_session, UpdateMessageStatusRequest(message_id="missing", status="read")
            )

    async def test_assistant_message_rejected(
        self, db_session: Session, user_id: str, chat_id: str, fake_agent: FakeAgent
    ) -> None:
        result = await _send(db_session, chat_id, user_id, "Hi", fake_agent)

        with pytest.raises(InvalidInputError):
            chats.update_message_status(
                db_session,
                UpdateMessageStatusRequest(message_id=result.ai_message.id, status="read"),
            )
