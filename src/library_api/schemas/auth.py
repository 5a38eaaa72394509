"""Authentication request and response schemas."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator, model_validator

from library_api.schemas.base import CamelModel

EMAIL_MAX_LENGTH = 255


def _check_email_length(value: Any) -> Any:
    if isinstance(value, str) and len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email cannot exceed {EMAIL_MAX_LENGTH} characters")
    return value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def limit_email_length(cls, v: Any) -> Any:
        return _check_email_length(v)


class RegisterRequest(CamelModel):
    """Registration form. confirm_password must repeat password exactly."""

    email: EmailStr
    password: str = Field(min_length=6, max_length=100)
    confirm_password: str = Field(min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def limit_email_length(cls, v: Any) -> Any:
        return _check_email_length(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Password and confirmation do not match")
        return self


class AuthResponse(CamelModel):
    """Issued access token plus the identity it belongs to."""

    token: str
    email: str
    user_id: uuid.UUID
    expires_at: datetime


class CurrentUserResponse(CamelModel):
    user_id: uuid.UUID
    email: str
