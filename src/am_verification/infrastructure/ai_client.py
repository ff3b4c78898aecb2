"""HTTP client for the external AI verification service.

Contract: POST multipart {video, description} to /predict/. The body is a
bare token ("accepted"/"rejected") or a JSON object with a "status" field,
matched case-insensitively. Anything else is an unexpected response.
Every call carries an explicit timeout.
"""

import json
import logging

import httpx

from config.settings import settings
from src.am_common.enums import AIStatus
from src.am_common.errors import UpstreamUnavailableError, UpstreamUnexpectedResponseError
from src.am_verification.domain.upload import VideoUpload

logger = logging.getLogger(__name__)

_PREDICT_PATH = "/predict/"
_AUCTION_ADD_PATH = "/auction/add/"
_ACCEPT_HEADER = {"Accept": "application/json, text/plain"}

_VERDICT_TOKENS: dict[str, AIStatus] = {
    "accepted": AIStatus.ACCEPTED,
    "rejected": AIStatus.REJECTED,
}


def parse_verdict(body: str) -> AIStatus:
    """Map a /predict/ response body to accepted/rejected.

    Raises:
        UpstreamUnexpectedResponseError: body is neither a known token nor
            JSON carrying one in "status".
    """
    try:
        payload = json.loads(body)
    except ValueError:
        token = body.strip().lower()
    else:
        if isinstance(payload, dict):
            token = str(payload.get("status") or "").strip().lower()
        elif isinstance(payload, str):
            token = payload.strip().lower()
        else:
            token = ""
    verdict = _VERDICT_TOKENS.get(token)
    if verdict is None:
        raise UpstreamUnexpectedResponseError(body)
    return verdict


def _multipart(video: VideoUpload, description: str) -> dict[str, object]:
    return {
        "files": {"video": (video.filename, video.content, video.content_type)},
        "data": {"description": description},
    }


class VerificationClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        auction_add_timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.AI_SERVICE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.AI_TIMEOUT_SECONDS
        self._auction_add_timeout = (
            auction_add_timeout
            if auction_add_timeout is not None
            else settings.AUCTION_ADD_TIMEOUT_SECONDS
        )
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, timeout=timeout, transport=self._transport
        )

    async def predict(self, video: VideoUpload, description: str) -> AIStatus:
        """Ask the AI service for a verdict.

        Raises:
            UpstreamUnavailableError: timeout, connection failure, or non-2xx.
            UpstreamUnexpectedResponseError: unrecognized verdict body.
        """
        try:
            async with self._client(self._timeout) as client:
                resp = await client.post(
                    _PREDICT_PATH, headers=_ACCEPT_HEADER, **_multipart(video, description)
                )
        except httpx.TimeoutException:
            raise UpstreamUnavailableError(
                "Request timed out. Please ensure the AI server is running and try again."
            ) from None
        except httpx.HTTPError as exc:
            logger.warning("AI server unreachable at %s: %s", self._base_url, exc)
            raise UpstreamUnavailableError(
                "Cannot connect to AI server. "
                f"Please ensure the server is running on {self._base_url}"
            ) from None

        if not resp.is_success:
            logger.warning(
                "AI server error: %d %s", resp.status_code, resp.text[:200]
            )
            raise UpstreamUnavailableError(
                f"AI server returned error {resp.status_code}. "
                "Please check your video format and description."
            )
        return parse_verdict(resp.text)

    async def add_to_auction(self, video: VideoUpload, description: str) -> bool:
        """Best-effort push of an accepted product to the external auction service."""
        try:
            async with self._client(self._auction_add_timeout) as client:
                resp = await client.post(
                    _AUCTION_ADD_PATH, headers=_ACCEPT_HEADER, **_multipart(video, description)
                )
        except httpx.HTTPError as exc:
            logger.warning("External auction server not available, continuing without it: %s", exc)
            return False
        if not resp.is_success:
            logger.warning(
                "External auction server returned %d, continuing without it", resp.status_code
            )
            return False
        return True
