"""Genre business logic.

Genres are keyed by their trimmed name. Books may reference genres that do
not exist yet; ensure_genres_exist creates them as user genres on the fly.
"""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.exceptions import InvalidArgumentError
from library_api.logging import get_logger
from library_api.models import Genre
from library_api.repositories.genre import add_genre, get_genre, get_genres_by_names, list_genres

logger = get_logger(__name__)

GENRE_NAME_MAX_LENGTH = 50


def normalize_genre_names(names: Iterable[str]) -> list[str]:
    """Trim names and drop duplicates, keeping first-seen order.

    Raises InvalidArgumentError for blank or over-long names.
    """
    normalized: list[str] = []
    for raw in names:
        name = raw.strip()
        if not name:
            raise InvalidArgumentError("Genre name cannot be empty")
        if len(name) > GENRE_NAME_MAX_LENGTH:
            raise InvalidArgumentError(
                f"Genre name cannot exceed {GENRE_NAME_MAX_LENGTH} characters"
            )
        if name not in normalized:
            normalized.append(name)
    return normalized


async def get_genres(db: AsyncSession, search: str | None = None) -> list[Genre]:
    return await list_genres(db, search)


async def create_genre(db: AsyncSession, name: str) -> Genre:
    """Create a user genre, or return the existing one with that name."""
    (normalized,) = normalize_genre_names([name])
    existing = await get_genre(db, normalized)
    if existing is not None:
        return existing

    genre = await add_genre(db, Genre(name=normalized, is_system_genre=False))
    logger.info("genre_created", genre=normalized)
    return genre


async def ensure_genres_exist(db: AsyncSession, names: Iterable[str]) -> list[Genre]:
    """Return Genre rows for all names, creating missing ones. Order follows the input."""
    normalized = normalize_genre_names(names)
    found = await get_genres_by_names(db, normalized)

    genres: list[Genre] = []
    for name in normalized:
        genre = found.get(name)
        if genre is None:
            genre = await add_genre(db, Genre(name=name, is_system_genre=False))
            logger.info("genre_created", genre=name)
        genres.append(genre)
    return genres
