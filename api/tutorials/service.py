"""
Tutorial business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)

# tutorials.id is a bigserial: ids outside this range cannot exist.
MAX_TUTORIAL_ID = 2**63 - 1


def _to_response(row: dict) -> schemas.TutorialResponse:
    return schemas.TutorialResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        description=row.get("description"),
        published=bool(row["published"]),
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Tutorial not found.",
    )


def _check_id(tutorial_id: int) -> None:
    if not 1 <= tutorial_id <= MAX_TUTORIAL_ID:
        raise _not_found()


async def list_tutorials() -> list[schemas.TutorialResponse]:
    rows = await repository.list_tutorials()
    return [_to_response(row) for row in rows]


async def list_published_tutorials() -> list[schemas.TutorialResponse]:
    rows = await repository.list_tutorials_by_published(True)
    return [_to_response(row) for row in rows]


async def get_tutorial(tutorial_id: int) -> schemas.TutorialResponse:
    _check_id(tutorial_id)
    row = await repository.get_tutorial(tutorial_id)
    if row is None:
        raise _not_found()
    return _to_response(row)


async def create_tutorial(payload: schemas.TutorialCreate) -> schemas.TutorialResponse:
    row = await repository.create_tutorial(
        title=payload.title,
        description=payload.description,
        published=payload.published,
    )
    logger.info("tutorial_created id=%s", row["id"])
    return _to_response(row)


async def update_tutorial(tutorial_id: int, payload: schemas.TutorialUpdate) -> schemas.TutorialResponse:
    _check_id(tutorial_id)
    current = await repository.get_tutorial(tutorial_id)
    if current is None:
        raise _not_found()

    changes = payload.model_dump(exclude_unset=True)
    merged = {
        "title": current["title"],
        "description": current.get("description"),
        "published": bool(current["published"]),
    }
    for key, value in changes.items():
        # An explicit null only clears the nullable column.
        if value is None and key != "description":
            continue
        merged[key] = value

    row = await repository.update_tutorial(tutorial_id, **merged)
    if row is None:
        # Deleted between the read and the write.
        raise _not_found()
    logger.info("tutorial_updated id=%s fields=%s", tutorial_id, ",".join(sorted(changes)))
    return _to_response(row)


async def delete_tutorial(tutorial_id: int) -> None:
    _check_id(tutorial_id)
    deleted = await repository.delete_tutorial(tutorial_id)
    if not deleted:
        raise _not_found()
    logger.info("tutorial_deleted id=%s", tutorial_id)


async def delete_all_tutorials() -> int:
    count = await repository.delete_all_tutorials()
    logger.info("tutorials_deleted count=%s", count)
    return count
