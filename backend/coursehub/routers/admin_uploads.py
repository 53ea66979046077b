"""Admin uploads router — video and thumbnail uploads plus storage housekeeping."""

import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, File, Query, Request, UploadFile
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import ConflictError
from coursehub.middleware.auth import require_admin
from coursehub.middleware.rate_limit import limiter, UPLOAD_LIMIT
from coursehub.models.course import Course
from coursehub.models.user import User
from coursehub.models.video import Video
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.upload import CleanupReport, CleanupResult, DiskInfo, OrphanReport, OrphanStats, UploadResponse
from coursehub.services import storage
from coursehub.services.audit import log_action
from coursehub.services.file_validation import IMAGE, VIDEO, validate_upload_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/upload", tags=["admin-uploads"])

FileKind = Literal["video", "thumbnail"]
_KIND_DIRS = {"video": storage.VIDEOS, "thumbnail": storage.THUMBNAILS}


def _used_videos(db: Session) -> set[str]:
    return {row[0] for row in db.query(Video.filename).all()}


def _used_thumbnails(db: Session) -> set[str]:
    refs = db.query(Course.thumbnail).filter(Course.thumbnail.isnot(None)).all()
    return {name for name in (storage.thumbnail_ref_name(row[0]) for row in refs) if name}


@router.post("/video", response_model=ApiResponse[UploadResponse], status_code=201)
@limiter.limit(UPLOAD_LIMIT)
async def upload_video(
    request: Request,
    video: UploadFile = File(...),
    admin: User = Depends(require_admin),
):
    """Validate and store a video file. Register it afterwards via POST /api/admin/videos."""
    size = await validate_upload_file(VIDEO, video)
    filename = storage.video_filename(video.filename)
    await run_in_threadpool(storage.save_stream, video.file, storage.VIDEOS, filename)
    logger.info("Admin %s uploaded video %s (%d bytes)", admin.email, filename, size)
    return ApiResponse(
        data=UploadResponse(
            filename=filename,
            original_name=video.filename,
            size=size,
            content_type=video.content_type,
            url=filename,
            uploaded_at=datetime.now(timezone.utc).isoformat(),
        ),
        message="Video uploaded",
    )


@router.post("/thumbnail", response_model=ApiResponse[UploadResponse], status_code=201)
@limiter.limit(UPLOAD_LIMIT)
async def upload_thumbnail(
    request: Request,
    thumbnail: UploadFile = File(...),
    admin: User = Depends(require_admin),
):
    size = await validate_upload_file(IMAGE, thumbnail)
    filename = storage.thumbnail_filename(thumbnail.filename)
    await run_in_threadpool(storage.save_stream, thumbnail.file, storage.THUMBNAILS, filename)
    logger.info("Admin %s uploaded thumbnail %s (%d bytes)", admin.email, filename, size)
    return ApiResponse(
        data=UploadResponse(
            filename=filename,
            original_name=thumbnail.filename,
            size=size,
            content_type=thumbnail.content_type,
            url=f"{storage.THUMBNAIL_URL_PREFIX}{filename}",
            uploaded_at=datetime.now(timezone.utc).isoformat(),
        ),
        message="Thumbnail uploaded",
    )


@router.get("/disk", response_model=ApiResponse[DiskInfo])
def disk_usage(admin: User = Depends(require_admin)):
    return ApiResponse(data=DiskInfo(**storage.disk_info()))


@router.delete("/cleanup", response_model=ApiResponse)
def delete_unused_file(
    filename: str = Query(..., min_length=1),
    file_type: FileKind = Query("video", alias="type"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete one uploaded file that no video or course refers to."""
    used = _used_videos(db) if file_type == "video" else _used_thumbnails(db)
    if filename in used:
        raise ConflictError("File is still in use")
    storage.remove_unused_file(_KIND_DIRS[file_type], filename)
    return ApiResponse(message="File deleted")


@router.get("/orphans", response_model=ApiResponse[OrphanReport])
def orphan_stats(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return ApiResponse(
        data=OrphanReport(
            videos=OrphanStats(**storage.orphan_stats(storage.VIDEOS, _used_videos(db))),
            thumbnails=OrphanStats(**storage.orphan_stats(storage.THUMBNAILS, _used_thumbnails(db))),
        )
    )


@router.post("/orphans/cleanup", response_model=ApiResponse[CleanupReport])
def cleanup_orphans(
    file_type: Optional[Literal["videos", "thumbnails"]] = Body(None, embed=True),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Remove files on disk that nothing in the database refers to."""
    report = CleanupReport(videos=CleanupResult(), thumbnails=CleanupResult())
    if file_type in (None, "videos"):
        report.videos = CleanupResult(**storage.cleanup_orphans(storage.VIDEOS, _used_videos(db)))
    if file_type in (None, "thumbnails"):
        report.thumbnails = CleanupResult(**storage.cleanup_orphans(storage.THUMBNAILS, _used_thumbnails(db)))

    log_action(
        db,
        "files_cleanup",
        f"Admin {admin.email} cleaned up files. "
        f"Videos: deleted {report.videos.deleted}, failed {report.videos.failed}. "
        f"Thumbnails: deleted {report.thumbnails.deleted}, failed {report.thumbnails.failed}.",
        actor_id=admin.id,
        entity_type="storage",
    )
    db.commit()
    return ApiResponse(data=report, message="File cleanup finished")
