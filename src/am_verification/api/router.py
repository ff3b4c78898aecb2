"""am_verification REST endpoint.

POST /listings/{listing_id}/verify  (multipart: video, description)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.am_common.database import get_db_session
from src.am_common.response import ApiResponse, success_response, with_request_id
from src.am_gateway.auth.dependencies import get_current_user
from src.am_gateway.user.db_models import UserModel
from src.am_verification.application.service import VerificationRelayService
from src.am_verification.domain.upload import VideoUpload

router = APIRouter(prefix="/listings", tags=["verification"])

_service = VerificationRelayService()


@router.post("/{listing_id}/verify")
async def verify_listing(
    listing_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    video: UploadFile = File(...),
    description: str = Form(""),
) -> ApiResponse:
    # One byte past the limit is enough to reject oversize uploads.
    content = await video.read(settings.MAX_VIDEO_BYTES + 1)
    upload = VideoUpload(
        filename=video.filename or "video",
        content_type=video.content_type or "",
        content=content,
    )
    result = await _service.verify_listing(
        db, listing_id, current_user.id, upload, description
    )
    return with_request_id(
        success_response(result.model_dump(mode="json"), result.message), request
    )
