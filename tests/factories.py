"""Factory functions for creating model instances in tests."""

import uuid

from library_api.models import Book, Genre, User
from library_api.services.security import hash_password


def make_user(
    *,
    email: str = "reader@example.com",
    password: str = "secret123",
) -> User:
    return User(email=email, password_hash=hash_password(password))


def make_genre(name: str, *, is_system_genre: bool = False) -> Genre:
    return Genre(name=name, is_system_genre=is_system_genre)


def make_book(
    *,
    user_id: uuid.UUID,
    title: str = "The Left Hand of Darkness",
    author: str = "Ursula K. Le Guin",
    published_date: str = "1969-03-01",
    rating: int = 4,
    edition: str | None = None,
    isbn: str | None = None,
    genres: list[Genre] | None = None,
) -> Book:
    return Book(
        user_id=user_id,
        title=title,
        author=author,
        published_date=published_date,
        rating=rating,
        edition=edition,
        isbn=isbn,
        genres=genres or [],
    )


def book_payload(**overrides: object) -> dict[str, object]:
    """JSON body for POST/PUT /api/books, camelCase like the browser client sends."""
    payload: dict[str, object] = {
        "title": "Dune",
        "author": "Frank Herbert",
        "genres": ["Fiction"],
        "publishedDate": "1965-08-01",
        "rating": 5,
        "edition": "First",
        "isbn": "9780441013593",
    }
    payload.update(overrides)
    return payload
