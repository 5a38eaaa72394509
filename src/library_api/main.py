from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text
from starlette.middleware.cors import CORSMiddleware

from library_api.config import settings
from library_api.db.session import shutdown
from library_api.dependencies import DB
from library_api.logging import get_logger
from library_api.middleware import (
    GlobalExceptionMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from library_api.routers import auth, book, genre

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup logs a marker; shutdown disposes the connection pool.

    Schema changes are applied with `alembic upgrade head`, not here.
    """
    logger.info("library_api_starting", environment=settings.environment)
    if settings.uses_dev_jwt_secret:
        logger.warning(
            "dev_jwt_secret_in_use",
            detail="Tokens are signed with the built-in development key; set JWT_SECRET_KEY",
        )
    yield
    await shutdown()


app = FastAPI(title="Library API", version="1.0.0", lifespan=lifespan)

# Each add_middleware wraps the ones before it: the last one added runs first.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,  # auth cookie
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(GlobalExceptionMiddleware)

app.include_router(auth.router)
app.include_router(book.router)
app.include_router(genre.router)


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check: verifies database connectivity.

    Returns 200 OK only if the database responds to a ping query.
    """
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}


@app.get("/health/live")
async def liveness() -> dict[str, str]:
    """Process is up; does not touch the database."""
    return {"status": "ok"}


@app.get("/health/ready")
async def readiness(db: DB) -> dict[str, str]:
    """Ready to serve traffic: the database answers."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
