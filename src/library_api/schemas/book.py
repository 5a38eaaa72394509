"""Book request and response schemas.

Create and update share one rule set: required title/author, at least one
genre, an ISO published date that is not in the future, rating 1-5.
"""

import uuid
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import Field, StringConstraints, field_validator

from library_api.schemas.base import CamelModel

GenreName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]


def parse_published_date(value: str) -> date:
    """Parse an ISO date or datetime string into a calendar date.

    Raises ValueError for anything else.
    """
    return datetime.fromisoformat(value.strip()).date()


class BookRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    genres: list[GenreName] = Field(min_length=1)
    published_date: str = Field(min_length=1, max_length=50)
    rating: int = Field(ge=1, le=5)
    edition: str | None = Field(default=None, max_length=100)
    isbn: str | None = Field(default=None, max_length=20)

    @field_validator("title", "author", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("published_date")
    @classmethod
    def check_published_date(cls, v: str) -> str:
        try:
            published = parse_published_date(v)
        except ValueError:
            raise ValueError(
                "Published date must be a valid date in ISO format (YYYY-MM-DD)"
            ) from None
        # Books can be published today
        if published > date.today():
            raise ValueError("Published date cannot be in the future")
        return v.strip()

    @field_validator("edition", "isbn", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class CreateBookRequest(BookRequest):
    pass


class UpdateBookRequest(BookRequest):
    """Full replacement of a book, genres included."""


class BookResponse(CamelModel):
    id: uuid.UUID
    title: str
    author: str
    genres: list[str]
    published_date: str
    rating: int
    edition: str | None
    isbn: str | None
    created_at: datetime
    updated_at: datetime

    @field_validator("genres", mode="before")
    @classmethod
    def genre_objects_to_names(cls, v: Any) -> Any:
        # ORM books carry Genre rows; the wire format is a list of names
        return [getattr(genre, "name", genre) for genre in v]


class GenreCount(CamelModel):
    genre: str
    count: int
    average_rating: float


class BookStatsResponse(CamelModel):
    total_books: int
    average_rating: float
    genre_distribution: list[GenreCount]
