"""Request logging middleware.

One log line per request on logger "am.request":

    INFO [POST] /api/v1/bids → 200 (23ms) req_a1b2c3d4e5f6

An inbound X-Request-ID (sent by the AI relay or the status poller) is kept
so their logs correlate with ours; otherwise a fresh id is generated. The id
goes on request.state for the response envelope and back out as a header.
5xx responses log at WARNING, unhandled exceptions with a traceback.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.am_common.response import REQUEST_ID_HEADER, new_request_id

logger = logging.getLogger("am.request")

_MAX_INBOUND_ID_LENGTH = 64


def _request_id_for(request: Request) -> str:
    inbound = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if inbound and len(inbound) <= _MAX_INBOUND_ID_LENGTH:
        return inbound
    return new_request_id()


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id_for(request)
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "[%s] %s → unhandled (%.0fms) %s",
                request.method,
                request.url.path,
                (time.perf_counter() - start) * 1000,
                request_id,
            )
            raise

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
            request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
