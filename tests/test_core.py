from __future__ import annotations

import asyncio

import pytest

from core import db, settings


class TestDatabaseUrl:
    def test_requires_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            db.database_url()

    def test_strips_sslmode(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/testdb?sslmode=disable&application_name=x")
        monkeypatch.delenv("DATABASE_USER", raising=False)
        monkeypatch.delenv("DATABASE_PASSWORD", raising=False)
        assert db.database_url() == "postgresql://u:p@db:5432/testdb?application_name=x"

    def test_injects_separate_credentials(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://db:5432/testdb")
        monkeypatch.setenv("DATABASE_USER", "postgres")
        monkeypatch.setenv("DATABASE_PASSWORD", "s3cr@t")
        assert db.database_url() == "postgresql://postgres:s3cr%40t@db:5432/testdb"

    def test_separate_user_keeps_url_password(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://old:pw@db/testdb")
        monkeypatch.setenv("DATABASE_USER", "new")
        monkeypatch.delenv("DATABASE_PASSWORD", raising=False)
        assert db.database_url() == "postgresql://new:pw@db/testdb"


class TestAffectedRows:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [("DELETE 3", 3), ("DELETE 0", 0), ("UPDATE 1", 1), ("", 0), ("CREATE TABLE", 0)],
    )
    def test_parses_status_tag(self, status, expected):
        assert db.affected_rows(status) == expected


class TestPool:
    def test_pool_requires_init(self, monkeypatch):
        monkeypatch.setattr(db, "_pool", None)
        with pytest.raises(db.DatabaseError):
            db.pool()

    def test_connection_errors_become_database_error(self, monkeypatch):
        class BrokenPool:
            async def fetch(self, sql, *args):
                raise ConnectionRefusedError("refused")

        monkeypatch.setattr(db, "_pool", BrokenPool())
        with pytest.raises(db.DatabaseError, match="refused"):
            asyncio.run(db.fetch_all("SELECT 1"))

    def test_rows_become_dicts(self, monkeypatch):
        class Pool:
            async def fetchrow(self, sql, *args):
                return {"id": 1, "title": "A"}

        monkeypatch.setattr(db, "_pool", Pool())
        assert asyncio.run(db.fetch_one("SELECT")) == {"id": 1, "title": "A"}


class TestSettings:
    def test_pool_defaults(self, monkeypatch):
        monkeypatch.delenv("DB_POOL_MIN_SIZE", raising=False)
        monkeypatch.delenv("DB_POOL_MAX_SIZE", raising=False)
        assert settings.pool_min_size() == 1
        assert settings.pool_max_size() == 5

    def test_pool_max_never_below_min(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MIN_SIZE", "8")
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")
        assert settings.pool_max_size() == 8

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "many")
        with pytest.raises(RuntimeError, match="DB_POOL_MAX_SIZE"):
            settings.pool_max_size()

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert settings.log_level() == "DEBUG"

    def test_cors_origins(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
        assert settings.cors_origins() == ["https://a.example", "https://b.example"]

    def test_cors_origins_default(self, monkeypatch):
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        assert settings.cors_origins() == list(settings.DEFAULT_CORS_ORIGINS)
