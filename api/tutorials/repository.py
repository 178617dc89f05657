"""
Tutorial persistence (raw SQL).

Schema comes from the dbmate migration:
- tutorials(id bigserial, title, description, published)
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_tutorials() -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, title, description, published
        FROM tutorials
        ORDER BY id
        """
    )


async def list_tutorials_by_published(published: bool) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, title, description, published
        FROM tutorials
        WHERE published = $1
        ORDER BY id
        """,
        published,
    )


async def get_tutorial(tutorial_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, title, description, published
        FROM tutorials
        WHERE id = $1
        """,
        tutorial_id,
    )


async def create_tutorial(*, title: str, description: str | None, published: bool) -> dict[str, Any]:
    row = await db.fetch_one(
        """
        INSERT INTO tutorials (title, description, published)
        VALUES ($1, $2, $3)
        RETURNING id, title, description, published
        """,
        title,
        description,
        published,
    )
    if row is None:
        raise RuntimeError("Failed to insert tutorial.")
    return row


async def update_tutorial(
    tutorial_id: int,
    *,
    title: str,
    description: str | None,
    published: bool,
) -> dict[str, Any] | None:
    """
    Overwrite all mutable columns. Returns None when the id does not exist.
    """
    return await db.fetch_one(
        """
        UPDATE tutorials
        SET title = $2,
            description = $3,
            published = $4
        WHERE id = $1
        RETURNING id, title, description, published
        """,
        tutorial_id,
        title,
        description,
        published,
    )


async def delete_tutorial(tutorial_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM tutorials
        WHERE id = $1
        RETURNING id
        """,
        tutorial_id,
    )
    return row is not None


async def delete_all_tutorials() -> int:
    status = await db.execute("DELETE FROM tutorials")
    return db.affected_rows(status)
