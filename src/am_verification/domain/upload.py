"""Video upload accepted for AI verification."""

from dataclasses import dataclass

from src.am_common.errors import InvalidVideoError


@dataclass(frozen=True)
class VideoUpload:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def validate_submission(video: VideoUpload | None, description: str, max_bytes: int) -> str:
    """Return the stripped description or raise InvalidVideoError(5003)."""
    description = (description or "").strip()
    if video is None or video.size == 0 or not description:
        raise InvalidVideoError("Video and description are required")
    if not (video.content_type or "").startswith("video/"):
        raise InvalidVideoError("Please upload a valid video file")
    if video.size > max_bytes:
        raise InvalidVideoError(
            f"Video file size must be less than {max_bytes // (1024 * 1024)}MB"
        )
    return description
