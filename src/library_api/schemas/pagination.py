"""Generic pagination types shared by all list endpoints.

PaginatedResponse[T]: Pydantic model for HTTP responses (serializable).
Paginated[T]: plain dataclass for service-layer returns (not serializable).
"""

import math
from dataclasses import dataclass

from pydantic import computed_field

from library_api.schemas.base import CamelModel


class PaginatedResponse[T](CamelModel):
    """Pydantic model for paginated HTTP responses.

    ``from_attributes`` (inherited from CamelModel) lets ``model_validate``
    read a ``Paginated`` dataclass directly::

        result = await get_books_page(db, user_id, query)
        return PaginatedResponse[BookResponse].model_validate(result)

    The page counters are derived so they can never disagree with
    ``total_items`` and ``page_size``.
    """

    items: list[T]
    page: int
    page_size: int
    total_items: int

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_items / self.page_size)

    @computed_field(alias="hasPreviousPage")  # type: ignore[prop-decorator]
    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @computed_field(alias="hasNextPage")  # type: ignore[prop-decorator]
    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages


@dataclass
class Paginated[T]:
    """Plain dataclass for paginated results inside the service layer.

    Services shouldn't know about serialization; the router converts this
    into ``PaginatedResponse`` at the HTTP boundary.
    """

    items: list[T]
    page: int
    page_size: int
    total_items: int
