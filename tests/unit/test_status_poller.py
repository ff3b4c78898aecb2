"""Tests for StatusPoller."""

import httpx

from src.am_poller.poller import StatusPoller


def _body(status: str) -> dict[str, object]:
    return {"status": status, "message": status, "timestamp": None, "productId": "prod-1"}


def _poller(responses: list[object]) -> tuple[StatusPoller, list[str], list[float]]:
    calls: list[str] = []
    sleeps: list[float] = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item  # type: ignore[return-value]

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    poller = StatusPoller(
        "http://api.test", interval=3.0, transport=httpx.MockTransport(handler), sleep=fake_sleep
    )
    return poller, calls, sleeps


class TestPoll:
    async def test_stops_on_first_terminal(self) -> None:
        poller, calls, sleeps = _poller([
            httpx.Response(200, json=_body("pending")),
            httpx.Response(200, json=_body("processing")),
            httpx.Response(200, json=_body("accepted")),
        ])

        result = await poller.poll("prod-1")

        assert result is not None
        assert result.status.value == "accepted"
        assert calls == ["/api/product-status/prod-1"] * 3
        assert sleeps == [3.0, 3.0]

    async def test_failures_are_skipped(self) -> None:
        poller, calls, _ = _poller([
            httpx.ConnectError("down"),
            httpx.Response(503),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json=_body("rejected")),
        ])

        result = await poller.poll("prod-1")

        assert result is not None
        assert result.status.value == "rejected"
        assert len(calls) == 4

    async def test_on_update_called_per_observation(self) -> None:
        poller, _, _ = _poller([
            httpx.Response(200, json=_body("processing")),
            httpx.Response(200, json=_body("error")),
        ])
        seen: list[str] = []

        async def on_update(status) -> None:
            seen.append(status.status.value)

        await poller.poll("prod-1", on_update=on_update)

        assert seen == ["processing", "error"]

    async def test_max_attempts_returns_latest(self) -> None:
        poller, calls, _ = _poller([
            httpx.Response(200, json=_body("pending")),
            httpx.Response(200, json=_body("processing")),
        ])

        result = await poller.poll("prod-1", max_attempts=2)

        assert result is not None
        assert result.status.value == "processing"
        assert len(calls) == 2

    async def test_nothing_read(self) -> None:
        poller, _, _ = _poller([httpx.Response(404)])
        assert await poller.poll("prod-1", max_attempts=1) is None
