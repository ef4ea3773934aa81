"""
Shared fixtures: a throwaway SQLite database per test and a mocked job queue.
"""

import os

os.environ.setdefault("CHANNELS_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import community_channels.models  # noqa: F401
from community_channels.models.community import Community
from community_channels.services.notifications import drain_notifications


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'channels.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session
    # Scheduled enqueues must finish before the queue patch is undone
    await drain_notifications()


@pytest.fixture(autouse=True)
def queue():
    """Job queue stand-in for every test."""
    queue = AsyncMock()
    with patch(
        "community_channels.services.notifications.get_queue",
        AsyncMock(return_value=queue),
    ):
        yield queue


@pytest.fixture
async def community(session):
    community = Community(name="X", slug="x-slug")
    session.add(community)
    await session.flush()
    return community


@pytest.fixture
def user_id():
    return uuid.uuid4()
