"""Admin videos router — video metadata CRUD and ordering."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError, ValidationError
from coursehub.middleware.auth import require_admin
from coursehub.models.course import Course
from coursehub.models.user import User
from coursehub.models.video import Video
from coursehub.schemas.common import ApiResponse, stripped, update_changes
from coursehub.schemas.video import VideoCreate, VideoReorder, VideoResponse, VideoUpdate
from coursehub.services import course_service, storage
from coursehub.services.audit import log_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/videos", tags=["admin-videos"])


def _video_to_response(video: Video) -> VideoResponse:
    return VideoResponse(
        id=video.id,
        course_id=video.course_id,
        course_title=video.course.title,
        title=video.title,
        display_name=video.display_name,
        description=video.description,
        filename=video.filename,
        duration=video.duration,
        file_size=video.file_size,
        poster=video.poster,
        order_index=video.order_index,
        is_free=video.is_free,
        created_at=video.created_at.isoformat(),
    )


def _get_video(db: Session, video_id: str) -> Video:
    video = db.query(Video).filter(Video.id == video_id).first()
    if not video:
        raise NotFoundError("Video")
    return video


@router.get("", response_model=ApiResponse[list[VideoResponse]])
def list_videos(
    course_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    query = db.query(Video)
    if course_id:
        query = query.filter(Video.course_id == course_id)
    videos = query.order_by(Video.course_id.asc(), Video.order_index.asc()).all()
    return ApiResponse(data=[_video_to_response(v) for v in videos])


@router.post("", response_model=ApiResponse[VideoResponse], status_code=201)
def create_video(req: VideoCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Register an uploaded file as a video at the end of its course."""
    course = db.query(Course).filter(Course.id == req.course_id).first()
    if not course:
        raise NotFoundError("Course")
    if not storage.safe_path(storage.VIDEOS, req.filename).is_file():
        raise ValidationError(f"Uploaded file '{req.filename}' not found")

    display_name = stripped(req.display_name, "display_name")
    video = Video(
        course_id=course.id,
        title=display_name,
        display_name=display_name,
        description=req.description,
        filename=req.filename,
        duration=req.duration,
        file_size=req.file_size,
        poster=req.poster,
        is_free=req.is_free,
        order_index=req.order_index if req.order_index is not None else course_service.next_video_order(db, course.id),
    )
    db.add(video)
    db.flush()
    course_service.recalculate_duration(db, course.id)
    log_action(
        db,
        "video_created",
        f'Admin {admin.email} added video "{display_name}" to course "{course.title}"',
        actor_id=admin.id,
        entity_type="video",
        entity_id=video.id,
    )
    db.commit()
    db.refresh(video)
    course_service.invalidate_catalog()
    return ApiResponse(data=_video_to_response(video), message="Video created")


@router.put("/reorder", response_model=ApiResponse)
def reorder_videos(req: VideoReorder, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    course_service.reorder_videos(db, admin, req.video_ids)
    return ApiResponse(message="Video order updated")


@router.patch("/{video_id}", response_model=ApiResponse[VideoResponse])
def update_video(
    video_id: str,
    req: VideoUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    video = _get_video(db, video_id)
    changes = update_changes(req, required=("display_name", "is_free", "order_index"))
    if "display_name" in changes:
        changes["display_name"] = stripped(changes["display_name"], "display_name")
        changes["title"] = changes["display_name"]
    for field, value in changes.items():
        setattr(video, field, value)

    if "duration" in changes:
        course_service.recalculate_duration(db, video.course_id)
    log_action(
        db,
        "video_updated",
        f'Admin {admin.email} updated video "{video.display_name}": {", ".join(sorted(req.model_fields_set))}',
        actor_id=admin.id,
        entity_type="video",
        entity_id=video.id,
    )
    db.commit()
    db.refresh(video)
    course_service.invalidate_catalog()
    return ApiResponse(data=_video_to_response(video), message="Video updated")


@router.delete("/{video_id}", response_model=ApiResponse)
def delete_video(video_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete the video row and its file. A file that cannot be removed is logged, not fatal."""
    video = _get_video(db, video_id)
    course_id = video.course_id
    try:
        storage.remove_file(storage.VIDEOS, video.filename)
    except (OSError, ValidationError) as exc:
        logger.error("Could not delete file %s for video %s: %s", video.filename, video.id, exc)

    log_action(
        db,
        "video_deleted",
        f'Admin {admin.email} deleted video "{video.display_name or video.title}" ({video.filename})',
        actor_id=admin.id,
        entity_type="video",
        entity_id=video.id,
    )
    db.delete(video)
    db.flush()
    course_service.recalculate_duration(db, course_id)
    db.commit()
    course_service.invalidate_catalog()
    return ApiResponse(message="Video deleted")
