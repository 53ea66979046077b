"""Courses router — public catalog and course detail."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError
from coursehub.middleware.auth import get_optional_user
from coursehub.middleware.rate_limit import limiter, API_LIMIT
from coursehub.models.course import Course
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.course import CourseDetail, CourseSummary, CourseType, CourseVideoItem
from coursehub.services.access import course_access, granted_course_ids, has_access, viewer_for
from coursehub.services.cache import api_cache, COURSES_PREFIX

router = APIRouter(prefix="/api/courses", tags=["courses"])


def _catalog_rows(db: Session, course_type: str) -> list[dict]:
    """Viewer-independent catalog data; cached until an admin edits courses."""
    query = db.query(Course).filter(Course.is_active.is_(True))
    if course_type == "free":
        query = query.filter(Course.is_free.is_(True))
    elif course_type == "paid":
        query = query.filter(Course.is_free.is_(False))
    # "featured" has no curation yet and lists everything, like "all"
    courses = query.order_by(Course.created_at.desc()).all()
    return [
        {
            "id": c.id,
            "title": c.title,
            "short_description": c.short_description,
            "price": c.price,
            "is_free": c.is_free,
            "videos_count": len(c.videos),
            "free_videos_count": sum(1 for v in c.videos if v.is_free),
            "total_duration": c.total_duration or 0,
            "thumbnail": c.thumbnail,
        }
        for c in courses
    ]


@router.get("", response_model=ApiResponse[list[CourseSummary]])
@limiter.limit(API_LIMIT)
def list_courses(
    request: Request,
    course_type: CourseType = Query("all", alias="type"),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """List active courses with the caller's access flag on each."""
    rows = api_cache.get_or_set(f"{COURSES_PREFIX}{course_type}", lambda: _catalog_rows(db, course_type))
    viewer = viewer_for(current_user)
    granted = granted_course_ids(db, viewer.user_id)
    data = [
        CourseSummary(
            **row,
            has_access=has_access(viewer, False, row["is_free"], row["id"] in granted),
        )
        for row in rows
    ]
    return ApiResponse(data=data)


@router.get("/{course_id}", response_model=ApiResponse[CourseDetail])
def get_course(
    course_id: str,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    course = db.query(Course).filter(Course.id == course_id, Course.is_active.is_(True)).first()
    if not course:
        raise NotFoundError("Course")

    viewer = viewer_for(current_user)
    # admin, free course or a grant; individual free videos are open regardless
    course_level = course_access(db, viewer, course)
    videos = [
        CourseVideoItem(
            id=v.id,
            title=v.display_name or v.title,
            description=v.description,
            is_free=v.is_free,
            duration=v.duration,
            order_index=v.order_index,
            has_access=has_access(viewer, v.is_free, course.is_free, course_level),
        )
        for v in course.videos
    ]
    return ApiResponse(
        data=CourseDetail(
            id=course.id,
            title=course.title,
            short_description=course.short_description,
            full_description=course.full_description,
            price=course.price,
            is_free=course.is_free,
            thumbnail=course.thumbnail,
            has_access=course_level,
            videos_count=len(videos),
            free_videos_count=sum(1 for v in videos if v.is_free),
            total_duration=course.total_duration or 0,
            videos=videos,
        )
    )
