"""Tests for the AI verification HTTP client (httpx.MockTransport)."""

import httpx
import pytest

from src.am_common.enums import AIStatus
from src.am_common.errors import UpstreamUnavailableError, UpstreamUnexpectedResponseError
from src.am_verification.domain.upload import VideoUpload
from src.am_verification.infrastructure.ai_client import VerificationClient, parse_verdict

VIDEO = VideoUpload(filename="clip.mp4", content_type="video/mp4", content=b"\x00\x01frames")


def _client(handler) -> VerificationClient:
    return VerificationClient(
        base_url="http://ai.test", timeout=1.0, transport=httpx.MockTransport(handler)
    )


class TestParseVerdict:
    @pytest.mark.parametrize(
        "body,expected",
        [
            ("accepted", AIStatus.ACCEPTED),
            (" REJECTED\n", AIStatus.REJECTED),
            ('{"status": "Accepted"}', AIStatus.ACCEPTED),
            ('"rejected"', AIStatus.REJECTED),
        ],
    )
    def test_known_verdicts(self, body: str, expected: AIStatus) -> None:
        assert parse_verdict(body) == expected

    @pytest.mark.parametrize("body", ["maybe", "", '{"result": "accepted"}', "[1, 2]"])
    def test_unexpected(self, body: str) -> None:
        with pytest.raises(UpstreamUnexpectedResponseError):
            parse_verdict(body)


class TestPredict:
    async def test_sends_multipart_with_accept_header(self) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["accept"] = request.headers["accept"]
            seen["body"] = request.content
            return httpx.Response(200, json={"status": "accepted"})

        verdict = await _client(handler).predict(VIDEO, "Leica M3")

        assert verdict == AIStatus.ACCEPTED
        assert seen["path"] == "/predict/"
        assert seen["accept"] == "application/json, text/plain"
        body = seen["body"]
        assert isinstance(body, bytes)
        assert b'name="video"; filename="clip.mp4"' in body
        assert b'name="description"' in body
        assert b"Leica M3" in body

    async def test_plain_text_rejected(self) -> None:
        verdict = await _client(lambda r: httpx.Response(200, text="rejected")).predict(
            VIDEO, "desc"
        )
        assert verdict == AIStatus.REJECTED

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).predict(VIDEO, "desc")
        assert exc_info.value.message.startswith("Request timed out.")

    async def test_connection_refused(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(handler).predict(VIDEO, "desc")
        assert exc_info.value.message.startswith("Cannot connect to AI server.")

    async def test_non_2xx(self) -> None:
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await _client(lambda r: httpx.Response(500, text="boom")).predict(VIDEO, "desc")
        assert exc_info.value.message == (
            "AI server returned error 500. Please check your video format and description."
        )

    async def test_unknown_token(self) -> None:
        with pytest.raises(UpstreamUnexpectedResponseError):
            await _client(lambda r: httpx.Response(200, text="uncertain")).predict(VIDEO, "d")


class TestAddToAuction:
    async def test_success(self) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(201, json={"ok": True})

        assert await _client(handler).add_to_auction(VIDEO, "desc") is True
        assert paths == ["/auction/add/"]

    async def test_failure_is_reported_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert await _client(handler).add_to_auction(VIDEO, "desc") is False

    async def test_error_status_is_false(self) -> None:
        assert await _client(lambda r: httpx.Response(503)).add_to_auction(VIDEO, "d") is False
