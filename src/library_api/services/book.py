"""Book business logic.

Orchestrates repository calls for the current user's shelf and builds the
statistics summary. Missing books raise NotFoundError so the error
middleware answers 404.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.exceptions import NotFoundError
from library_api.logging import get_logger
from library_api.models import Book
from library_api.repositories.book import (
    BookFilters,
    GenreStat,
    add_book,
    count_books,
    delete_book,
    get_book,
    get_genre_stats,
    get_rating_summary,
    list_books,
)
from library_api.schemas.book import BookRequest
from library_api.schemas.pagination import Paginated
from library_api.services.genre import ensure_genres_exist

logger = get_logger(__name__)


@dataclass
class BookStats:
    total_books: int
    average_rating: float
    genre_distribution: list[GenreStat]


async def get_books_page(
    db: AsyncSession,
    user_id: uuid.UUID,
    filters: BookFilters,
    page: int,
    page_size: int,
) -> Paginated[Book]:
    """Fetch one page of the user's books plus the total match count.

    Two queries per call: the page itself and the total.
    """
    offset = (page - 1) * page_size
    items = await list_books(db, user_id, filters, offset, page_size)
    total = await count_books(db, user_id, filters)
    return Paginated(items=items, page=page, page_size=page_size, total_items=total)


async def get_book_for_user(db: AsyncSession, book_id: uuid.UUID, user_id: uuid.UUID) -> Book:
    book = await get_book(db, book_id, user_id)
    if book is None:
        raise NotFoundError("Book", book_id)
    return book


async def create_book(db: AsyncSession, user_id: uuid.UUID, request: BookRequest) -> Book:
    genres = await ensure_genres_exist(db, request.genres)
    book = Book(
        user_id=user_id,
        title=request.title,
        author=request.author,
        published_date=request.published_date,
        rating=request.rating,
        edition=request.edition,
        isbn=request.isbn,
        genres=genres,
    )
    await add_book(db, book)
    logger.info("book_created", book_id=str(book.id))
    return await get_book_for_user(db, book.id, user_id)


async def update_book(
    db: AsyncSession,
    book_id: uuid.UUID,
    user_id: uuid.UUID,
    request: BookRequest,
) -> Book:
    """Replace every field of the book, genre links included."""
    book = await get_book_for_user(db, book_id, user_id)
    genres = await ensure_genres_exist(db, request.genres)

    book.title = request.title
    book.author = request.author
    book.published_date = request.published_date
    book.rating = request.rating
    book.edition = request.edition
    book.isbn = request.isbn
    book.genres = genres
    # Genre-only edits touch just book_genres, so onupdate would not fire
    book.updated_at = datetime.now(UTC)
    await db.flush()

    logger.info("book_updated", book_id=str(book.id))
    return await get_book_for_user(db, book.id, user_id)


async def remove_book(db: AsyncSession, book_id: uuid.UUID, user_id: uuid.UUID) -> None:
    book = await get_book_for_user(db, book_id, user_id)
    await delete_book(db, book)
    logger.info("book_deleted", book_id=str(book_id))


async def get_book_stats(db: AsyncSession, user_id: uuid.UUID) -> BookStats:
    total, average = await get_rating_summary(db, user_id)
    distribution = await get_genre_stats(db, user_id)
    return BookStats(total_books=total, average_rating=average, genre_distribution=distribution)
