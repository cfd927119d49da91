"""Persistence layer for users, chats, and messages.

SQLAlchemy models plus the engine and per-request session factory.
"""

from career_bot.db.models import Base, Chat, Message, MessageRole, MessageStatus, User
from career_bot.db.session import SessionLocal, engine, get_db, init_db

__all__ = [
    "Base",
    "Chat",
    "Message",
    "MessageRole",
    "MessageStatus",
    "SessionLocal",
    "User",
    "engine",
    "get_db",
    "init_db",
]
