"""Course service — ordering, duration bookkeeping and deletion with files."""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.errors import NotFoundError, ValidationError
from coursehub.models.course import Course
from coursehub.models.user import User
from coursehub.models.video import Video
from coursehub.services import storage
from coursehub.services.audit import log_action
from coursehub.services.cache import api_cache, COURSES_PREFIX

logger = logging.getLogger(__name__)


def invalidate_catalog() -> None:
    api_cache.invalidate_prefix(COURSES_PREFIX)


def next_course_order(db: Session) -> int:
    current = db.query(func.max(Course.order_index)).scalar()
    return 0 if current is None else current + 1


def next_video_order(db: Session, course_id: str) -> int:
    current = db.query(func.max(Video.order_index)).filter(Video.course_id == course_id).scalar()
    return 0 if current is None else current + 1


def recalculate_duration(db: Session, course_id: str) -> int:
    """Store the sum of the course's video durations and return it."""
    db.flush()
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course")
    total = (
        db.query(func.coalesce(func.sum(Video.duration), 0))
        .filter(Video.course_id == course_id)
        .scalar()
    )
    course.total_duration = int(total or 0)
    return course.total_duration


def recalculate_all_durations(db: Session) -> int:
    course_ids = [row[0] for row in db.query(Course.id).all()]
    for course_id in course_ids:
        recalculate_duration(db, course_id)
    logger.info("Recalculated duration for %d courses", len(course_ids))
    return len(course_ids)


def reorder_courses(db: Session, admin: User, course_ids: list[str]) -> None:
    if len(set(course_ids)) != len(course_ids):
        raise ValidationError("Duplicate course ids")
    courses = {c.id: c for c in db.query(Course).filter(Course.id.in_(course_ids)).all()}
    if len(courses) != len(course_ids):
        raise ValidationError("Some courses were not found")
    for index, course_id in enumerate(course_ids):
        courses[course_id].order_index = index
    log_action(
        db,
        "courses_reordered",
        f"Admin {admin.email} reordered courses: {', '.join(course_ids)}",
        actor_id=admin.id,
        entity_type="course",
    )
    db.commit()
    invalidate_catalog()


def reorder_videos(db: Session, admin: User, video_ids: list[str]) -> None:
    """Assign order_index by list position. Nothing is written unless every id exists."""
    if len(set(video_ids)) != len(video_ids):
        raise ValidationError("Duplicate video ids")
    videos = {v.id: v for v in db.query(Video).filter(Video.id.in_(video_ids)).all()}
    missing = [vid for vid in video_ids if vid not in videos]
    if missing:
        raise NotFoundError("Video", f"Video not found: {missing[0]}")
    for index, video_id in enumerate(video_ids):
        videos[video_id].order_index = index
    log_action(
        db,
        "videos_reordered",
        f"Admin {admin.email} reordered videos: {', '.join(video_ids)}",
        actor_id=admin.id,
        entity_type="video",
    )
    db.commit()
    invalidate_catalog()


def _remove_course_files(video_names: list[str], thumbnail_ref: Optional[str]) -> tuple[list[str], list[str]]:
    deleted_files: list[str] = []
    failed_files: list[str] = []

    for filename in video_names:
        try:
            if storage.remove_file(storage.VIDEOS, filename):
                deleted_files.append(f"video: {filename}")
        except (OSError, ValidationError) as exc:
            logger.error("Failed to delete video file %s: %s", filename, exc)
            failed_files.append(f"video: {filename}")

    thumbnail_name = storage.thumbnail_ref_name(thumbnail_ref)
    if thumbnail_name:
        try:
            if storage.remove_file(storage.THUMBNAILS, thumbnail_name):
                deleted_files.append(f"thumbnail: {thumbnail_ref}")
        except (OSError, ValidationError) as exc:
            logger.error("Failed to delete thumbnail %s: %s", thumbnail_ref, exc)
            failed_files.append(f"thumbnail: {thumbnail_ref}")

    return deleted_files, failed_files


def delete_course_with_files(db: Session, admin: User, course_id: str) -> dict:
    """Delete a course, its videos, grants and requests, plus files on disk.

    Files are removed only after the rows are committed. File failures are
    reported, not raised.
    """
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course")

    title = course.title
    thumbnail_ref = course.thumbnail
    video_names = [video.filename for video in course.videos]
    db.delete(course)
    db.commit()
    invalidate_catalog()

    deleted_files, failed_files = _remove_course_files(video_names, thumbnail_ref)
    log_action(
        db,
        "course_deleted_with_files",
        f'Admin {admin.email} deleted course "{title}" with {len(video_names)} videos. '
        f"Files deleted: {len(deleted_files)}, failed: {len(failed_files)}",
        actor_id=admin.id,
        entity_type="course",
        entity_id=course_id,
    )
    db.commit()
    return {"deleted_files": deleted_files, "failed_files": failed_files}
