"""Genre schemas."""

from pydantic import Field

from library_api.schemas.base import CamelModel


class GenreResponse(CamelModel):
    name: str
    is_system_genre: bool


class CreateGenreRequest(CamelModel):
    name: str = Field(min_length=1, max_length=50)
