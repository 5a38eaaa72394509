"""Genre data-access layer."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.models import Genre


async def list_genres(db: AsyncSession, search: str | None = None) -> list[Genre]:
    """Return genres ordered by name, optionally filtered by a case-insensitive substring."""
    stmt = select(Genre).order_by(Genre.name)
    if search and search.strip():
        stmt = stmt.where(Genre.name.icontains(search.strip(), autoescape=True))
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_genre(db: AsyncSession, name: str) -> Genre | None:
    return await db.get(Genre, name)


async def get_genres_by_names(db: AsyncSession, names: Iterable[str]) -> dict[str, Genre]:
    wanted = list(names)
    if not wanted:
        return {}
    result = await db.execute(select(Genre).where(Genre.name.in_(wanted)))
    return {genre.name: genre for genre in result.scalars().all()}


async def add_genre(db: AsyncSession, genre: Genre) -> Genre:
    db.add(genre)
    await db.flush()
    return genre
