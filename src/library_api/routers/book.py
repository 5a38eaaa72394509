"""Book endpoints. Every route works on the authenticated user's books only."""

import uuid

from fastapi import APIRouter, Query, status

from library_api.dependencies import DB, CurrentUser
from library_api.repositories.book import BookFilters
from library_api.schemas.book import (
    BookResponse,
    BookStatsResponse,
    CreateBookRequest,
    UpdateBookRequest,
)
from library_api.schemas.pagination import PaginatedResponse
from library_api.services.book import (
    create_book,
    get_book_for_user,
    get_book_stats,
    get_books_page,
    remove_book,
    update_book,
)

router = APIRouter(prefix="/api/books", tags=["books"])


@router.get("", response_model=PaginatedResponse[BookResponse])
async def list_books(
    db: DB,
    user: CurrentUser,
    genres: list[str] | None = Query(None),
    rating: int | None = Query(None, ge=1, le=5),
    search: str | None = Query(None, max_length=255),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection", max_length=4),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, alias="pageSize", ge=1, le=100),
) -> PaginatedResponse[BookResponse]:
    """List the user's books with optional genre/rating/search filters and sorting."""
    filters = BookFilters(
        genres=genres or [],
        min_rating=rating,
        search=search,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    result = await get_books_page(db, user.id, filters, page, page_size)
    return PaginatedResponse[BookResponse].model_validate(result)


@router.get("/stats", response_model=BookStatsResponse)
async def book_stats(db: DB, user: CurrentUser) -> BookStatsResponse:
    """Totals, average rating and per-genre distribution for the user's books."""
    stats = await get_book_stats(db, user.id)
    return BookStatsResponse.model_validate(stats)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: uuid.UUID, db: DB, user: CurrentUser) -> BookResponse:
    book = await get_book_for_user(db, book_id, user.id)
    return BookResponse.model_validate(book)


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def add_book(body: CreateBookRequest, db: DB, user: CurrentUser) -> BookResponse:
    book = await create_book(db, user.id, body)
    return BookResponse.model_validate(book)


@router.put("/{book_id}", response_model=BookResponse)
async def replace_book(
    book_id: uuid.UUID, body: UpdateBookRequest, db: DB, user: CurrentUser
) -> BookResponse:
    book = await update_book(db, book_id, user.id, body)
    return BookResponse.model_validate(book)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(book_id: uuid.UUID, db: DB, user: CurrentUser) -> None:
    await remove_book(db, book_id, user.id)
