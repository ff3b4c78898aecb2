"""ApiResponse envelope shared by every /api/v1 endpoint.

{
    "code": 0,           // 0=success, otherwise an AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}

GET /api/product-status/{id} is the exception: it answers with the flat
status body the poller expects, and only its errors use the envelope.
"""

import uuid
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.requests import Request

from src.am_common.datetime_utils import utc_now

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=None)


def with_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    """Stamp the envelope with the id RequestLogMiddleware put on request.state."""
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


def render_error(request: Request, http_status: int, code: int, message: str) -> JSONResponse:
    resp = with_request_id(error_response(code, message), request)
    return JSONResponse(status_code=http_status, content=resp.model_dump())
