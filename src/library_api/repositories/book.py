"""Book data-access layer.

Query functions only, no business rules or HTTP concerns.
Every query is scoped to the owning user; a book belonging to someone else
is indistinguishable from a missing one.
"""

import uuid
from dataclasses import dataclass, field

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.elements import ColumnElement

from library_api.models import Book, Genre, book_genres

SORT_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "publisheddate": Book.published_date,
    "rating": Book.rating,
    "createdat": Book.created_at,
}


@dataclass
class BookFilters:
    """Optional list filters. Empty values mean "no filter"."""

    genres: list[str] = field(default_factory=list)
    min_rating: int | None = None
    search: str | None = None
    sort_by: str | None = None
    sort_direction: str | None = None


@dataclass
class GenreStat:
    genre: str
    count: int
    average_rating: float


def _filtered(user_id: uuid.UUID, filters: BookFilters) -> Select[tuple[Book]]:
    stmt = select(Book).where(Book.user_id == user_id)
    if filters.genres:
        stmt = stmt.where(Book.genres.any(Genre.name.in_(filters.genres)))
    if filters.min_rating is not None:
        stmt = stmt.where(Book.rating >= filters.min_rating)
    if filters.search and filters.search.strip():
        term = filters.search.strip()
        stmt = stmt.where(
            or_(
                Book.title.icontains(term, autoescape=True),
                Book.author.icontains(term, autoescape=True),
            )
        )
    return stmt


def _ordering(filters: BookFilters) -> ColumnElement[object]:
    column = SORT_COLUMNS.get((filters.sort_by or "").lower())
    if column is None:
        # Newest first unless the caller picked a known column
        return Book.created_at.desc()
    if (filters.sort_direction or "").lower() == "desc":
        return column.desc()
    return column.asc()


async def list_books(
    db: AsyncSession,
    user_id: uuid.UUID,
    filters: BookFilters,
    offset: int,
    limit: int,
) -> list[Book]:
    """Return one page of the user's books with genres eagerly loaded."""
    stmt = (
        _filtered(user_id, filters)
        .options(selectinload(Book.genres))
        .order_by(_ordering(filters), Book.id)
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_books(db: AsyncSession, user_id: uuid.UUID, filters: BookFilters) -> int:
    """Return how many of the user's books match the filters."""
    stmt = select(func.count()).select_from(_filtered(user_id, filters).subquery())
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_book(db: AsyncSession, book_id: uuid.UUID, user_id: uuid.UUID) -> Book | None:
    """Fetch a single book with its genres, refreshing any copy already in the session."""
    stmt = (
        select(Book)
        .options(selectinload(Book.genres))
        .where(Book.id == book_id, Book.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def add_book(db: AsyncSession, book: Book) -> Book:
    db.add(book)
    await db.flush()
    return book


async def delete_book(db: AsyncSession, book: Book) -> None:
    await db.delete(book)
    await db.flush()


async def get_rating_summary(db: AsyncSession, user_id: uuid.UUID) -> tuple[int, float]:
    """Return (total books, average rating) for the user. Average is 0.0 with no books."""
    stmt = select(func.count(Book.id), func.avg(Book.rating)).where(Book.user_id == user_id)
    total, average = (await db.execute(stmt)).one()
    return total, float(average) if average is not None else 0.0


async def get_genre_stats(db: AsyncSession, user_id: uuid.UUID) -> list[GenreStat]:
    """Return book count and average rating per genre for the user's books."""
    stmt = (
        select(book_genres.c.genre_name, func.count(), func.avg(Book.rating))
        .join(Book, Book.id == book_genres.c.book_id)
        .where(Book.user_id == user_id)
        .group_by(book_genres.c.genre_name)
        .order_by(book_genres.c.genre_name)
    )
    result = await db.execute(stmt)
    return [
        GenreStat(genre=row[0], count=row[1], average_rating=float(row[2]))
        for row in result.all()
    ]
