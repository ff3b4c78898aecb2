"""Tests for the verdict reading rule and VerificationStatusStore."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.am_common.enums import AIStatus
from src.am_common.errors import InvalidInputError, ListingNotFoundError
from src.am_listing.application.status_service import STALE_MESSAGE, VerificationStatusStore
from src.am_listing.domain.models import StatusSnapshot
from src.am_listing.domain.status import PENDING_MESSAGE, resolve_status
from tests.factories import make_listing


class _FakeSubscription:
    def __init__(self, queue: asyncio.Queue[StatusSnapshot]) -> None:
        self._queue = queue

    async def next_snapshot(self, timeout: float) -> StatusSnapshot | None:
        try:
            return await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None


class _FakeBus:
    def __init__(self) -> None:
        self.published: list[StatusSnapshot] = []
        self.queue: asyncio.Queue[StatusSnapshot] = asyncio.Queue()
        self.subscribed: list[str] = []

    async def publish(self, snapshot: StatusSnapshot) -> None:
        self.published.append(snapshot)
        await self.queue.put(snapshot)

    @asynccontextmanager
    async def subscribe(self, listing_id: str) -> AsyncIterator[_FakeSubscription]:
        self.subscribed.append(listing_id)
        yield _FakeSubscription(self.queue)


def _snapshot(status: AIStatus) -> StatusSnapshot:
    return StatusSnapshot("prod-1", status, "msg", datetime.now(UTC))


class TestResolveStatus:
    def test_accepted(self) -> None:
        snap = resolve_status(make_listing())
        assert snap.status == AIStatus.ACCEPTED
        assert snap.is_terminal

    def test_missing_fields_read_as_pending(self) -> None:
        snap = resolve_status(make_listing(ai_status="", ai_message=None, ai_verified=False))
        assert snap.status == AIStatus.PENDING
        assert snap.message == PENDING_MESSAGE
        assert not snap.is_terminal

    def test_unknown_value_reads_as_pending(self) -> None:
        snap = resolve_status(make_listing(ai_status="weird", ai_message=None))
        assert snap.status == AIStatus.PENDING

    def test_accepted_without_verified_flag_is_pending(self) -> None:
        snap = resolve_status(make_listing(ai_status="accepted", ai_verified=False))
        assert snap.status == AIStatus.PENDING
        assert snap.message == PENDING_MESSAGE

    def test_pending_ignores_stored_message(self) -> None:
        snap = resolve_status(
            make_listing(ai_status="pending", ai_message="Queued for review", ai_verified=False)
        )
        assert snap.status == AIStatus.PENDING
        assert snap.message == PENDING_MESSAGE

    def test_error_default_message(self) -> None:
        snap = resolve_status(make_listing(ai_status="error", ai_message=None))
        assert snap.status == AIStatus.ERROR
        assert snap.message


class TestSetStatus:
    async def test_commits_then_publishes(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.set_ai_status.return_value = make_listing(
            ai_status="rejected", ai_verified=False, ai_verified_at=None,
            ai_message="Product does not match the description. Please try again.",
        )
        bus = _FakeBus()
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        snap = await store.set_status(db, "prod-1", AIStatus.REJECTED, "nope")

        assert snap.status == AIStatus.REJECTED
        db.commit.assert_awaited_once()
        assert bus.published == [snap]

    async def test_unknown_listing(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.set_ai_status.return_value = None
        bus = _FakeBus()
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        with pytest.raises(ListingNotFoundError):
            await store.set_status(db, "missing", AIStatus.ACCEPTED)
        assert bus.published == []
        db.rollback.assert_awaited_once()

    async def test_blank_id(self, db: AsyncMock) -> None:
        store = VerificationStatusStore(repo=AsyncMock(), events=_FakeBus())  # type: ignore[arg-type]
        with pytest.raises(InvalidInputError):
            await store.set_status(db, "  ", AIStatus.ACCEPTED)


class TestGetStatus:
    async def test_not_found(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_by_id.return_value = None
        store = VerificationStatusStore(repo=repo, events=_FakeBus())  # type: ignore[arg-type]
        with pytest.raises(ListingNotFoundError):
            await store.get_status(db, "missing")

    async def test_blank_id(self, db: AsyncMock) -> None:
        store = VerificationStatusStore(repo=AsyncMock(), events=_FakeBus())  # type: ignore[arg-type]
        with pytest.raises(InvalidInputError):
            await store.get_status(db, "")


class TestWaitForTerminal:
    async def test_returns_stored_terminal_immediately(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_by_id.return_value = make_listing()
        bus = _FakeBus()
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        snap = await store.wait_for_terminal(db, "prod-1", timeout=5)

        assert snap.status == AIStatus.ACCEPTED
        assert bus.subscribed == ["prod-1"]

    async def test_wakes_on_published_verdict(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_by_id.return_value = make_listing(ai_status="processing", ai_verified=False)
        bus = _FakeBus()
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        async def _verdict_later() -> None:
            await asyncio.sleep(0.01)
            await bus.publish(_snapshot(AIStatus.PROCESSING))
            await bus.publish(_snapshot(AIStatus.REJECTED))

        task = asyncio.create_task(_verdict_later())
        snap = await store.wait_for_terminal(db, "prod-1", timeout=5)
        await task

        assert snap.status == AIStatus.REJECTED

    async def test_times_out_with_latest_snapshot(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_by_id.return_value = make_listing(ai_status="pending", ai_verified=False)
        store = VerificationStatusStore(repo=repo, events=_FakeBus())  # type: ignore[arg-type]

        snap = await store.wait_for_terminal(db, "prod-1", timeout=0.05)

        assert snap.status == AIStatus.PENDING

    async def test_redis_down_falls_back_to_read(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_by_id.return_value = make_listing(ai_status="processing", ai_verified=False)
        bus = _FakeBus()

        @asynccontextmanager
        async def _broken(listing_id: str) -> AsyncIterator[_FakeSubscription]:
            raise RedisConnectionError("down")
            yield  # pragma: no cover

        bus.subscribe = _broken  # type: ignore[method-assign]
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        snap = await store.wait_for_terminal(db, "prod-1", timeout=5)

        assert snap.status == AIStatus.PROCESSING

    async def test_zero_timeout_is_a_plain_read(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.get_by_id.return_value = make_listing(ai_status="processing", ai_verified=False)
        store = VerificationStatusStore(repo=repo, events=_FakeBus())  # type: ignore[arg-type]

        snap = await store.wait_for_terminal(db, "prod-1", timeout=0)

        assert snap.status == AIStatus.PROCESSING


class TestSweepStale:
    async def test_expires_and_publishes(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.expire_stale_verifications.return_value = [
            make_listing(id="p1", ai_status="error", ai_message=STALE_MESSAGE, ai_verified=False),
            make_listing(id="p2", ai_status="error", ai_message=STALE_MESSAGE, ai_verified=False),
        ]
        bus = _FakeBus()
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        before = datetime.now(UTC)
        expired = await store.sweep_stale(db, older_than_seconds=600)

        assert expired == ["p1", "p2"]
        cutoff, message = repo.expire_stale_verifications.await_args.args[1:]
        assert message == STALE_MESSAGE
        assert (before - cutoff).total_seconds() == pytest.approx(600, abs=5)
        assert [s.status for s in bus.published] == [AIStatus.ERROR, AIStatus.ERROR]
        db.commit.assert_awaited_once()

    async def test_nothing_stale(self, db: AsyncMock) -> None:
        repo = AsyncMock()
        repo.expire_stale_verifications.return_value = []
        bus = _FakeBus()
        store = VerificationStatusStore(repo=repo, events=bus)  # type: ignore[arg-type]

        assert await store.sweep_stale(db) == []
        assert bus.published == []
