"""Session token configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

FALLBACK_SECRET = "fallback-secret"


class AuthConfig(BaseModel):
    """Configuration for signed session tokens.

    Attributes:
        jwt_secret: HMAC key used to sign tokens.
        jwt_algorithm: JWT signing algorithm.
        expires_days: Token lifetime in days.
        bcrypt_rounds: Cost factor for password hashing.
    """

    jwt_secret: str = Field(
        default_factory=lambda: os.getenv("JWT_SECRET") or FALLBACK_SECRET,
        description="Signing key for session tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    expires_days: int = Field(
        default_factory=lambda: int(os.getenv("JWT_EXPIRES_DAYS", "7")),
        ge=1,
        le=365,
        description="Session token lifetime in days",
    )
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    @property
    def uses_fallback_secret(self) -> bool:
        return self.jwt_secret == FALLBACK_SECRET


def get_auth_config() -> AuthConfig:
    """Create auth configuration from environment."""
    return AuthConfig()
