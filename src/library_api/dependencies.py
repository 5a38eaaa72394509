"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.config import settings
from library_api.db.session import get_db
from library_api.exceptions import UnauthorizedError
from library_api.models import User
from library_api.services.security import decode_access_token
from library_api.services.user import get_user

DB = Annotated[AsyncSession, Depends(get_db)]

_bearer = HTTPBearer(auto_error=False)


def get_access_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Bearer token from the Authorization header, else the auth cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    cookie = request.cookies.get(settings.auth_cookie_name)
    if cookie:
        return cookie
    raise UnauthorizedError("Missing access token")


async def get_current_user(db: DB, token: Annotated[str, Depends(get_access_token)]) -> User:
    user_id = decode_access_token(token)
    user = await get_user(db, user_id)
    if user is None:
        raise UnauthorizedError("Invalid user token")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
