"""Shared pytest fixtures for database-backed provider tests."""

from __future__ import annotations

from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from transhub.config import TranslationSettings
from transhub.db.base import Base


class _AsyncSessionWrapper:
    def __init__(self, sync_session) -> None:
        self._sync = sync_session

    async def execute(self, *args, **kwargs):
        return self._sync.execute(*args, **kwargs)

    async def get(self, *args, **kwargs):
        return self._sync.get(*args, **kwargs)

    def get_bind(self, *args, **kwargs):
        return self._sync.get_bind(*args, **kwargs)

    def add(self, obj) -> None:
        self._sync.add(obj)

    def add_all(self, objs) -> None:
        self._sync.add_all(objs)

    async def flush(self) -> None:
        self._sync.flush()

    async def commit(self) -> None:
        self._sync.commit()

    async def rollback(self) -> None:
        self._sync.rollback()

    async def close(self) -> None:
        self._sync.close()


class FakeDatabase:
    """Stands in for ``transhub.db.session.Database`` around one shared session."""

    def __init__(self, session) -> None:
        self._session = session
        self.session_calls = 0

    @asynccontextmanager
    async def session(self):
        self.session_calls += 1
        try:
            yield self._session
        except Exception:
            await self._session.rollback()
            raise


class ExplodingDatabase:
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or RuntimeError("database unavailable")
        self.session_calls = 0

    @asynccontextmanager
    async def session(self):
        self.session_calls += 1
        raise self.exc
        yield  # pragma: no cover


@pytest_asyncio.fixture
async def session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    sync_session = SessionLocal()
    try:
        yield _AsyncSessionWrapper(sync_session)
    finally:
        sync_session.close()
        engine.dispose()


@pytest.fixture
def database(session) -> FakeDatabase:
    return FakeDatabase(session)


@pytest.fixture
def messages_dir(tmp_path):
    root = tmp_path / "messages"
    (root / "en").mkdir(parents=True)
    (root / "en" / "common.json").write_text(
        '{"nav": {"home": "Home", "about": "About"}, "save": "Save"}', encoding="utf-8"
    )
    (root / "en.json").write_text(
        '{"Common": {"save": "Save (combined)"},'
        ' "HomePage": {"title": "Welcome", "hero": {"cta": "Start"}},'
        ' "SEO": {"title": "Site"},'
        ' "version": 3}',
        encoding="utf-8",
    )
    (root / "es.json").write_text(
        '{"HomePage": {"title": "Bienvenido"}, "Common": {"save": "Guardar"}}',
        encoding="utf-8",
    )
    return root


@pytest.fixture
def settings(messages_dir) -> TranslationSettings:
    return TranslationSettings(
        _env_file=None,
        environment="prod",
        files={"base_path": str(messages_dir)},
        database={"enabled": True},
    )


@pytest.fixture
def exploding_database() -> ExplodingDatabase:
    return ExplodingDatabase()
