"""Shared test fixtures."""

import os

# Settings() requires a secret at import time
os.environ.setdefault("JWT_SECRET", "test-secret")

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.am_common.database import get_db_session
from src.main import app


@pytest.fixture
def db() -> AsyncMock:
    """Stand-in AsyncSession: commit/rollback/execute are awaitable."""
    return AsyncMock()


@pytest.fixture
async def client(db: AsyncMock) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the DB session dependency replaced by a mock."""

    async def _override_db() -> AsyncIterator[AsyncMock]:
        yield db

    app.dependency_overrides[get_db_session] = _override_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
