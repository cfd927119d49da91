"""Password hashing and session token helpers.

Passwords are stored as salted bcrypt hashes. Session tokens are HS256 JWTs
carrying the user id and email, valid for a configurable number of days.
"""

import logging
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from career_bot.auth.config import AuthConfig, get_auth_config

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Raised when a session token cannot be verified."""


def hash_password(password: str, config: AuthConfig | None = None) -> str:
    """Hash a plaintext password with a fresh salt."""
    config = config or get_auth_config()
    salt = bcrypt.gensalt(rounds=config.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    user_id: str,
    email: str,
    config: AuthConfig | None = None,
    now: datetime | None = None,
) -> str:
    """Issue a signed session token for a user.

    Args:
        user_id: Id of the authenticated user.
        email: Email of the authenticated user.
        config: Optional auth configuration.
        now: Issue time, defaults to the current UTC time.

    Returns:
        Encoded JWT string.
    """
    config = config or get_auth_config()
    if config.uses_fallback_secret:
        logger.warning("JWT_SECRET is not set; signing tokens with the fallback secret")

    issued_at = now or datetime.now(UTC)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(days=config.expires_days)).timestamp()),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_access_token(token: str, config: AuthConfig | None = None) -> dict:
    """Verify a session token and return its claims.

    Raises:
        TokenError: If the signature is invalid, the token expired,
            or the user id claim is missing.
    """
    config = config or get_auth_config()
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token has expired") from e
    except jwt.PyJWTError as e:
        raise TokenError(f"Invalid token: {e}") from e

    if not claims.get("userId"):
        raise TokenError("Token is missing the user id claim")
    return claims
