"""Genre endpoints."""

from fastapi import APIRouter, Query, status

from library_api.dependencies import DB, CurrentUser
from library_api.schemas.genre import CreateGenreRequest, GenreResponse
from library_api.services.genre import create_genre, get_genres

router = APIRouter(prefix="/api/genres", tags=["genres"])


@router.get("", response_model=list[GenreResponse])
async def list_genres(
    db: DB,
    _user: CurrentUser,
    search: str | None = Query(None, max_length=50),
) -> list[GenreResponse]:
    genres = await get_genres(db, search)
    return [GenreResponse.model_validate(genre) for genre in genres]


@router.post("", response_model=GenreResponse, status_code=status.HTTP_201_CREATED)
async def add_genre(body: CreateGenreRequest, db: DB, _user: CurrentUser) -> GenreResponse:
    """Create a user genre. Posting an existing name returns that genre."""
    genre = await create_genre(db, body.name)
    return GenreResponse.model_validate(genre)
