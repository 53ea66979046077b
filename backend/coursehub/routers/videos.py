"""Videos router — video detail and access-gated streaming."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError, PermissionDeniedError
from coursehub.middleware.auth import get_optional_user
from coursehub.models.user import User
from coursehub.models.video import Video
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.video import VideoDetail
from coursehub.services import storage
from coursehub.services.access import Viewer, can_watch, viewer_for
from coursehub.services.streaming import build_stream_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["videos"])


def _get_visible_video(db: Session, video_id: str, viewer: Viewer) -> Video:
    """Videos of inactive courses stay reachable for admins only."""
    video = db.query(Video).filter(Video.id == video_id).first()
    if not video or not (video.course.is_active or viewer.is_admin):
        raise NotFoundError("Video")
    return video


@router.get("/{video_id}", response_model=ApiResponse[VideoDetail])
def get_video(
    video_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    viewer = viewer_for(current_user)
    video = _get_visible_video(db, video_id, viewer)
    allowed = can_watch(db, viewer, video)
    return ApiResponse(
        data=VideoDetail(
            id=video.id,
            title=video.display_name or video.title,
            description=video.description,
            duration=video.duration,
            is_free=video.is_free,
            order_index=video.order_index,
            course_id=video.course_id,
            course_title=video.course.title,
            has_access=allowed,
            video_url=f"/api/videos/{video.id}/stream" if allowed else None,
        )
    )


@router.get("/{video_id}/stream")
def stream_video(
    video_id: str,
    range_header: Optional[str] = Header(None, alias="range"),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Stream the video file, honouring a single byte range for seeking."""
    viewer = viewer_for(current_user)
    video = _get_visible_video(db, video_id, viewer)
    if not can_watch(db, viewer, video):
        raise PermissionDeniedError("You do not have access to this video")

    path = storage.safe_path(storage.VIDEOS, video.filename)
    if not path.is_file():
        logger.error("Video %s points to missing file %s", video.id, video.filename)
        raise NotFoundError("Video file")
    return build_stream_response(path, range_header)
