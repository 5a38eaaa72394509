"""Password hashing and access-token handling.

bcrypt for password hashes, HS256 JWTs for access tokens. Token problems of
any kind surface as UnauthorizedError, which the error middleware turns
into a 401.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from library_api.config import settings
from library_api.exceptions import UnauthorizedError

JWT_ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes of the secret
_BCRYPT_MAX_BYTES = 72


@dataclass
class IssuedToken:
    token: str
    expires_at: datetime


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("ascii"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: uuid.UUID, email: str, now: datetime | None = None) -> IssuedToken:
    """Sign an access token for the user, valid for jwt_expiration_hours."""
    issued_at = now or datetime.now(UTC)
    expires_at = issued_at + timedelta(hours=settings.jwt_expiration_hours)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "jti": str(uuid.uuid4()),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=JWT_ALGORITHM)
    return IssuedToken(token=token, expires_at=expires_at)


def decode_access_token(token: str) -> uuid.UUID:
    """Validate signature, issuer, audience and lifetime; return the user id."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[JWT_ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.PyJWTError as e:
        raise UnauthorizedError("Invalid access token") from e

    try:
        return uuid.UUID(payload["sub"])
    except (TypeError, ValueError) as e:
        raise UnauthorizedError("Invalid user token") from e
