"""Integration-test fixtures.

Needs PostgreSQL (alembic upgrade head) and Redis; skipped unless
AUCTION_INTEGRATION=1. All integration tests share a single event loop so
that the module-level SQLAlchemy async engine pool and Redis pool (both
created lazily and bound to the first loop) remain valid.
"""

import os
import uuid
from collections.abc import AsyncIterator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app
from tests.factories import make_token

RELAY_SUBJECT = "it-relay"


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("AUCTION_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set AUCTION_INTEGRATION=1 with PostgreSQL and Redis running")
    for item in items:
        if "tests/integration" in str(item.fspath):
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncIterator[AsyncClient]:  # type: ignore[override]
    """Session-scoped async HTTP client against the real database."""
    if RELAY_SUBJECT not in settings.SYSTEM_SUBJECTS:
        settings.SYSTEM_SUBJECTS = [*settings.SYSTEM_SUBJECTS, RELAY_SUBJECT]
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def new_identity() -> Callable[[str], dict[str, str]]:
    """Authorization headers for a fresh provider subject."""

    def _make(prefix: str = "user") -> dict[str, str]:
        sub = f"{prefix}-{uuid.uuid4().hex[:10]}"
        return {"Authorization": f"Bearer {make_token(sub, email=f'{sub}@example.com')}"}

    return _make


@pytest.fixture
def relay_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(RELAY_SUBJECT)}"}
