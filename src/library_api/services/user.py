"""Account business logic: registration and login.

Both operations return None for the expected "no" outcomes (email taken,
bad credentials) and leave it to the router to pick the HTTP answer.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.logging import get_logger
from library_api.models import User
from library_api.repositories.user import (
    create_user,
    get_user_by_email,
    get_user_by_id,
    user_exists_by_email,
)
from library_api.services.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)


@dataclass
class AuthResult:
    token: str
    email: str
    user_id: uuid.UUID
    expires_at: datetime


def _issue(user: User) -> AuthResult:
    issued = create_access_token(user.id, user.email)
    return AuthResult(
        token=issued.token,
        email=user.email,
        user_id=user.id,
        expires_at=issued.expires_at,
    )


async def register(db: AsyncSession, email: str, password: str) -> AuthResult | None:
    """Create an account and sign the user in. None if the email is already registered."""
    if await user_exists_by_email(db, email):
        logger.warning("registration_rejected", reason="email_exists")
        return None

    user = await create_user(db, User(email=email, password_hash=hash_password(password)))
    logger.info("user_registered", user_id=str(user.id))
    return _issue(user)


async def login(db: AsyncSession, email: str, password: str) -> AuthResult | None:
    """Check credentials and issue a token. None on unknown email or wrong password."""
    user = await get_user_by_email(db, email)
    if user is None:
        logger.warning("login_failed", reason="unknown_email")
        return None
    if not verify_password(password, user.password_hash):
        logger.warning("login_failed", reason="bad_password", user_id=str(user.id))
        return None

    logger.info("user_logged_in", user_id=str(user.id))
    return _issue(user)


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await get_user_by_id(db, user_id)
