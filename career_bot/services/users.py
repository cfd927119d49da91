"""Account procedures: signup, signin, session lookup, and profile updates."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from career_bot.auth import (
    AuthConfig,
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from career_bot.db.models import User
from career_bot.models.schemas import (
    AuthResponse,
    PublicUser,
    SigninRequest,
    SignupRequest,
    UpdateUserRequest,
)
from career_bot.services.errors import AuthenticationError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"
EMAIL_TAKEN = "User with this email already exists"


def _find_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))


def _commit_email_change(db: Session) -> None:
    # The unique index catches a concurrent claim that passed the lookup
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise InvalidInputError(EMAIL_TAKEN) from e


def _auth_response(user: User, config: AuthConfig | None) -> AuthResponse:
    token = create_access_token(user.id, user.email, config=config)
    return AuthResponse(user=PublicUser.model_validate(user), token=token)


def signup(db: Session, payload: SignupRequest, config: AuthConfig | None = None) -> AuthResponse:
    """Create an account and issue a session token.

    Raises:
        InvalidInputError: If the email is already registered.
    """
    if _find_by_email(db, payload.email) is not None:
        raise InvalidInputError(EMAIL_TAKEN)

    user = User(
        email=payload.email,
        password=hash_password(payload.password, config=config),
        name=payload.name,
    )
    db.add(user)
    _commit_email_change(db)
    db.refresh(user)

    logger.info(f"Created user {user.id}")
    return _auth_response(user, config)


def signin(db: Session, payload: SigninRequest, config: AuthConfig | None = None) -> AuthResponse:
    """Verify credentials and issue a session token.

    Unknown emails and wrong passwords fail with the same message.

    Raises:
        AuthenticationError: If the credentials do not match.
    """
    user = _find_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password):
        raise AuthenticationError(INVALID_CREDENTIALS)

    logger.info(f"User {user.id} signed in")
    return _auth_response(user, config)


def get_current_user(db: Session, token: str, config: AuthConfig | None = None) -> PublicUser:
    """Resolve a session token to its user.

    Raises:
        AuthenticationError: If the token is invalid, expired, or names
            a user that no longer exists.
    """
    try:
        claims = decode_access_token(token, config=config)
    except TokenError as e:
        logger.info(f"Rejected session token: {e}")
        raise AuthenticationError(INVALID_TOKEN) from e

    user = db.get(User, claims["userId"])
    if user is None:
        raise AuthenticationError(INVALID_TOKEN)
    return PublicUser.model_validate(user)


def get_user_by_id(db: Session, user_id: str) -> PublicUser | None:
    user = db.get(User, user_id)
    return PublicUser.model_validate(user) if user else None


def update_user(db: Session, payload: UpdateUserRequest) -> PublicUser:
    """Update a user's email and, when given, display name.

    Raises:
        NotFoundError: If the user does not exist.
        InvalidInputError: If another user already has the email.
    """
    user = db.get(User, payload.id)
    if user is None:
        raise NotFoundError(f"User with ID {payload.id} not found")

    existing = _find_by_email(db, payload.email)
    if existing is not None and existing.id != user.id:
        raise InvalidInputError(EMAIL_TAKEN)

    user.email = payload.email
    if payload.name is not None:
        user.name = payload.name
    _commit_email_change(db)
    db.refresh(user)
    return PublicUser.model_validate(user)
