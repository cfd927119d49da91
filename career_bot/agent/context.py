"""Conversation context assembly for the model call.

Turns persisted chat history into role/content pairs, and wraps a user
message with extracted resume text when a PDF was attached.
"""

from collections.abc import Iterable
from typing import Protocol

from career_bot.models.schemas import ChatMessage

_ALLOWED_ROLES = {"user", "assistant"}


class HistoryRow(Protocol):
    role: str
    content: str


def build_chat_context(history: Iterable[HistoryRow]) -> list[ChatMessage]:
    """Map history rows, already in creation order, to model turns.

    Rows with an unknown role or blank content are dropped; the system
    prompt is never read from history.
    """
    return [
        ChatMessage(role=row.role, content=row.content)
        for row in history
        if row.role in _ALLOWED_ROLES and row.content and row.content.strip()
    ]


def with_resume_context(message: str, resume_text: str | None) -> str:
    """Prefix a user message with attached resume text, if any."""
    if not resume_text or not resume_text.strip():
        return message
    return f"[PDF Context: {resume_text}]\n\nUser Message: {message}"


def split_resume_context(content: str) -> tuple[bool, str]:
    """Undo with_resume_context for display.

    Returns whether resume text was attached, and the message the user typed.
    """
    marker = "\n\nUser Message: "
    if content.startswith("[PDF Context: ") and marker in content:
        return True, content.rsplit(marker, 1)[1]
    return False, content
