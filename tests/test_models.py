import uuid

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from library_api.models import Book, Genre, User, book_genres
from tests.factories import make_book, make_user


# ---------------------------------------------------------------------------
# 1. Persistence: 2 users, 6 books, 12 genre links
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_seed_creates_users_and_books(seeded_db: AsyncSession) -> None:
    users = (await seeded_db.execute(select(User))).scalars().all()
    books = (await seeded_db.execute(select(Book))).scalars().all()
    links = (await seeded_db.execute(select(func.count()).select_from(book_genres))).scalar_one()

    assert len(users) == 2
    assert len(books) == 6
    assert links == 12


# ---------------------------------------------------------------------------
# 2. Associations: genres load in name order
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_book_genres_are_ordered_by_name(seeded_db: AsyncSession, user: User) -> None:
    stmt = select(Book).options(selectinload(Book.genres)).where(Book.title == "Dune")
    dune = (await seeded_db.execute(stmt)).scalar_one()

    assert [genre.name for genre in dune.genres] == ["Fiction", "Science"]
    assert dune.user_id == user.id


# ---------------------------------------------------------------------------
# 3. Check constraint on rating
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 6, -1])
async def test_rating_out_of_range_raises(db: AsyncSession, user: User, rating: int) -> None:
    db.add(make_book(user_id=user.id, rating=rating))

    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


# ---------------------------------------------------------------------------
# 4. Unique email
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_duplicate_email_raises(db: AsyncSession) -> None:
    db.add(make_user(email="twin@example.com"))
    await db.flush()

    db.add(make_user(email="twin@example.com"))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


# ---------------------------------------------------------------------------
# 5. Deleting a user removes their books and genre links (CASCADE)
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_deleting_user_cascades_to_books(
    seeded_db: AsyncSession, user: User, other_user: User
) -> None:
    await seeded_db.execute(delete(User).where(User.id == user.id))
    await seeded_db.flush()

    remaining = (await seeded_db.execute(select(Book.title))).scalars().all()
    links = (await seeded_db.execute(select(func.count()).select_from(book_genres))).scalar_one()
    assert remaining == ["Emma"]
    assert links == 2


# ---------------------------------------------------------------------------
# 6. Deleting a genre unlinks it without touching books
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_deleting_genre_removes_links_only(seeded_db: AsyncSession) -> None:
    await seeded_db.execute(delete(Genre).where(Genre.name == "Fiction"))
    await seeded_db.flush()

    books = (await seeded_db.execute(select(func.count()).select_from(Book))).scalar_one()
    fiction_links = (
        await seeded_db.execute(
            select(func.count())
            .select_from(book_genres)
            .where(book_genres.c.genre_name == "Fiction")
        )
    ).scalar_one()
    assert books == 6
    assert fiction_links == 0


# ---------------------------------------------------------------------------
# 7. Book must belong to an existing user
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_book_without_owner_raises(db: AsyncSession) -> None:
    db.add(make_book(user_id=uuid.uuid4()))

    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()


# ---------------------------------------------------------------------------
# 8. created_at / updated_at auto-populated
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_timestamps_auto_populated(db: AsyncSession, user: User) -> None:
    book = make_book(user_id=user.id)
    db.add(book)
    await db.commit()

    await db.refresh(user)
    await db.refresh(book)

    assert user.created_at is not None
    assert book.created_at is not None
    assert book.updated_at is not None


@pytest.mark.asyncio
async def test_updated_at_moves_on_change(db: AsyncSession, user: User) -> None:
    book = make_book(user_id=user.id)
    db.add(book)
    await db.flush()
    first = book.updated_at.replace(tzinfo=None)

    book.rating = 1
    await db.flush()
    await db.refresh(book)

    assert book.updated_at.replace(tzinfo=None) >= first
