"""User data-access layer.

Email lookups are case-insensitive; the address is stored as entered.
"""

import uuid

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.exceptions import InvalidOperationError
from library_api.logging import get_logger
from library_api.models import User

logger = get_logger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(func.lower(User.email) == email.lower())
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await db.get(User, user_id)


async def user_exists_by_email(db: AsyncSession, email: str) -> bool:
    stmt = select(exists().where(func.lower(User.email) == email.lower()))
    result = await db.execute(stmt)
    return bool(result.scalar())


async def create_user(db: AsyncSession, user: User) -> User:
    """Insert a user. Raises InvalidOperationError if the email is taken."""
    if await user_exists_by_email(db, user.email):
        raise InvalidOperationError(f"A user with email '{user.email}' already exists.")

    db.add(user)
    await db.flush()
    logger.info("user_created", user_id=str(user.id))
    return user
