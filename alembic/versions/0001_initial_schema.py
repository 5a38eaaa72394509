"""Initial schema: users, books, genres, book_genres; seed system genres.

Revision ID: 0001_initial
Revises: None
Create Date: 2025-09-03

"""
from collections.abc import Sequence
from datetime import UTC, datetime

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SYSTEM_GENRES = (
    "Fiction",
    "Non-Fiction",
    "Science",
    "Technology",
    "Biography",
    "History",
    "Romance",
    "Mystery",
    "Fantasy",
    "Self-Help",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    genres = op.create_table(
        "genres",
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("is_system_genre", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("name", name="pk_genres"),
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(255), nullable=False),
        sa.Column("published_date", sa.String(50), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("edition", sa.String(100), nullable=True),
        sa.Column("isbn", sa.String(20), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("rating >= 1 AND rating <= 5", name="ck_books_rating_range"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_books_user_id_users", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_books"),
    )
    op.create_index("ix_books_user_id", "books", ["user_id"])

    op.create_table(
        "book_genres",
        sa.Column("book_id", sa.Uuid(), nullable=False),
        sa.Column("genre_name", sa.String(50), nullable=False),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.id"], name="fk_book_genres_book_id_books", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["genre_name"],
            ["genres.name"],
            name="fk_book_genres_genre_name_genres",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("book_id", "genre_name", name="pk_book_genres"),
    )

    seeded_at = datetime(2024, 1, 1, tzinfo=UTC)
    op.bulk_insert(
        genres,
        [{"name": name, "is_system_genre": True, "created_at": seeded_at} for name in SYSTEM_GENRES],
    )


def downgrade() -> None:
    op.drop_table("book_genres")
    op.drop_index("ix_books_user_id", table_name="books")
    op.drop_table("books")
    op.drop_table("genres")
    op.drop_table("users")
