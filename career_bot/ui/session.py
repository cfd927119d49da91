"""Browser-side session cache.

After signin the token and user are kept in per-browser storage (NiceGUI's
``app.storage.user``). On the next visit the cached user is trusted as-is;
the server is only asked to re-validate the token when
VALIDATE_SESSION_ON_LOAD is enabled.
"""

import logging
import os
from collections.abc import MutableMapping
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from career_bot.models.schemas import PublicUser

load_dotenv()

logger = logging.getLogger(__name__)

TOKEN_KEY = "authToken"
USER_KEY = "userData"


class UIConfig(BaseModel):
    """Configuration for the NiceGUI client.

    Attributes:
        api_base_url: Root URL of the Career Bot API.
        validate_session_on_load: Re-check cached tokens with getCurrentUser.
        storage_secret: Key signing the browser storage cookie.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
    )
    validate_session_on_load: bool = Field(
        default_factory=lambda: os.getenv("VALIDATE_SESSION_ON_LOAD", "false").lower()
        in {"1", "true", "yes"},
    )
    storage_secret: str = Field(
        default_factory=lambda: os.getenv("NICEGUI_STORAGE_SECRET", "career-bot-secret"),
    )


def get_ui_config() -> UIConfig:
    return UIConfig()


class CachedSession(BaseModel):
    token: str
    user: PublicUser


class SessionStore:
    """Reads and writes the cached session in a browser storage mapping."""

    def __init__(self, storage: MutableMapping[str, Any]) -> None:
        self._storage = storage

    def save(self, user: PublicUser, token: str) -> None:
        self._storage[TOKEN_KEY] = token
        self._storage[USER_KEY] = user.model_dump(by_alias=True)

    def restore(self) -> CachedSession | None:
        """Return the cached session, dropping it if it cannot be read."""
        token = self._storage.get(TOKEN_KEY)
        user_data = self._storage.get(USER_KEY)
        if not token or not user_data:
            return None

        try:
            return CachedSession(token=token, user=PublicUser.model_validate(user_data))
        except ValidationError as e:
            logger.warning(f"Discarding unreadable cached session: {e}")
            self.clear()
            return None

    def clear(self) -> None:
        self._storage.pop(TOKEN_KEY, None)
        self._storage.pop(USER_KEY, None)
