from __future__ import annotations

import itertools

import pytest
from fastapi.testclient import TestClient

from main import create_app
from tutorials import repository


class FakeTutorialStore:
    """In-memory stand-in for the tutorials table."""

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self._ids = itertools.count(1)

    async def list_tutorials(self) -> list[dict]:
        return [dict(self.rows[key]) for key in sorted(self.rows)]

    async def list_tutorials_by_published(self, published: bool) -> list[dict]:
        return [row for row in await self.list_tutorials() if row["published"] is published]

    async def get_tutorial(self, tutorial_id: int) -> dict | None:
        row = self.rows.get(tutorial_id)
        return dict(row) if row is not None else None

    async def create_tutorial(self, *, title: str, description: str | None, published: bool) -> dict:
        tutorial_id = next(self._ids)
        self.rows[tutorial_id] = {
            "id": tutorial_id,
            "title": title,
            "description": description,
            "published": published,
        }
        return dict(self.rows[tutorial_id])

    async def update_tutorial(
        self,
        tutorial_id: int,
        *,
        title: str,
        description: str | None,
        published: bool,
    ) -> dict | None:
        if tutorial_id not in self.rows:
            return None
        self.rows[tutorial_id].update(title=title, description=description, published=published)
        return dict(self.rows[tutorial_id])

    async def delete_tutorial(self, tutorial_id: int) -> bool:
        return self.rows.pop(tutorial_id, None) is not None

    async def delete_all_tutorials(self) -> int:
        count = len(self.rows)
        self.rows.clear()
        return count


@pytest.fixture()
def store(monkeypatch) -> FakeTutorialStore:
    fake = FakeTutorialStore()
    for name in (
        "list_tutorials",
        "list_tutorials_by_published",
        "get_tutorial",
        "create_tutorial",
        "update_tutorial",
        "delete_tutorial",
        "delete_all_tutorials",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture()
def client(store) -> TestClient:
    # Not used as a context manager, so the lifespan (DB pool) never runs.
    return TestClient(create_app(), raise_server_exceptions=False)
