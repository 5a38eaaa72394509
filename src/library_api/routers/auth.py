"""Authentication endpoints.

Successful register/login responses carry the token in the body and in an
httpOnly cookie, so browser clients never have to store it themselves.
"""

from fastapi import APIRouter, HTTPException, Response, status

from library_api.config import settings
from library_api.dependencies import DB, CurrentUser
from library_api.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
)
from library_api.services.user import AuthResult, login, register

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_auth_cookie(response: Response, result: AuthResult) -> None:
    response.set_cookie(
        settings.auth_cookie_name,
        result.token,
        max_age=settings.jwt_expiration_hours * 3600,
        httponly=True,
        samesite="strict",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_user(body: RegisterRequest, db: DB, response: Response) -> AuthResponse:
    """Create an account; 409 if the email is already registered."""
    result = await register(db, body.email, body.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email address already exists",
        )
    _set_auth_cookie(response, result)
    return AuthResponse.model_validate(result)


@router.post("/login", response_model=AuthResponse)
async def login_user(body: LoginRequest, db: DB, response: Response) -> AuthResponse:
    """Exchange credentials for an access token; 401 on mismatch."""
    result = await login(db, body.email, body.password)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    _set_auth_cookie(response, result)
    return AuthResponse.model_validate(result)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout_user(response: Response) -> None:
    response.delete_cookie(settings.auth_cookie_name, httponly=True, samesite="strict")


@router.get("/me", response_model=CurrentUserResponse)
async def current_user(user: CurrentUser) -> CurrentUserResponse:
    return CurrentUserResponse(user_id=user.id, email=user.email)
