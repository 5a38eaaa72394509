from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Signing key for local development only
DEV_JWT_SECRET_KEY = "dev-only-secret-change-me-in-production-0123456789"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Pydantic Settings automatically reads env vars matching field names (case-insensitive).
    In development, it also reads from .env file if present.
    In production, set environment variables directly (Docker, k8s, etc.).
    """

    # Anything other than "development" requires a real JWT_SECRET_KEY
    environment: str = "development"

    # Database connection URL
    # Format: sqlite+aiosqlite:///path/to/file.db or postgresql+asyncpg://user:pw@host/db
    database_url: str = "sqlite+aiosqlite:///./library.db"
    db_echo: bool = False  # Log all SQL statements (True for debugging)

    # JWT signing. The default secret is refused outside development.
    jwt_secret_key: str = DEV_JWT_SECRET_KEY
    jwt_issuer: str = "library-api"
    jwt_audience: str = "library-client"
    jwt_expiration_hours: int = 24

    # bcrypt work factor; tests lower it to keep hashing fast
    bcrypt_rounds: int = 12

    # Name of the httpOnly cookie carrying the access token
    auth_cookie_name: str = "auth-token"

    cors_allowed_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",  # Load from .env in development
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )

    @property
    def uses_dev_jwt_secret(self) -> bool:
        return self.jwt_secret_key == DEV_JWT_SECRET_KEY

    @model_validator(mode="after")
    def require_jwt_secret_outside_development(self) -> "Settings":
        if self.environment.lower() != "development" and self.uses_dev_jwt_secret:
            raise ValueError(
                f"JWT_SECRET_KEY must be set when ENVIRONMENT={self.environment}"
            )
        return self


settings = Settings()
