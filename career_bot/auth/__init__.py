"""Authentication primitives: bcrypt password hashes and JWT session tokens."""

from career_bot.auth.config import AuthConfig, get_auth_config
from career_bot.auth.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

__all__ = [
    "AuthConfig",
    "TokenError",
    "create_access_token",
    "decode_access_token",
    "get_auth_config",
    "hash_password",
    "verify_password",
]
