"""Admin courses router — course CRUD, ordering, durations and access grants."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError, ValidationError
from coursehub.middleware.auth import require_admin
from coursehub.models.course import Course
from coursehub.models.course_access import CourseAccess
from coursehub.models.course_request import CourseRequest
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse, stripped, update_changes
from coursehub.schemas.course import (
    AccessGrantResponse,
    AdminCourseResponse,
    AdminVideoBrief,
    CourseCreate,
    CourseDeleteResult,
    CourseReorder,
    CourseUpdate,
    DurationRecalculate,
    DurationResult,
)
from coursehub.services import course_service, request_workflow
from coursehub.services.audit import log_action

router = APIRouter(prefix="/api/admin/courses", tags=["admin-courses"])


def _counts(db: Session, column, course_ids: list[str], *filters) -> dict[str, int]:
    if not course_ids:
        return {}
    rows = (
        db.query(column, func.count())
        .filter(column.in_(course_ids), *filters)
        .group_by(column)
        .all()
    )
    return dict(rows)


def _course_to_response(
    course: Course,
    users_with_access: int = 0,
    pending_requests: int = 0,
    with_videos: bool = False,
) -> AdminCourseResponse:
    return AdminCourseResponse(
        id=course.id,
        title=course.title,
        short_description=course.short_description,
        full_description=course.full_description,
        price=course.price,
        is_free=course.is_free,
        is_active=course.is_active,
        thumbnail=course.thumbnail,
        total_duration=course.total_duration or 0,
        order_index=course.order_index,
        created_at=course.created_at.isoformat(),
        videos_count=len(course.videos),
        users_with_access=users_with_access,
        pending_requests=pending_requests,
        videos=[
            AdminVideoBrief(
                id=v.id,
                title=v.title,
                display_name=v.display_name,
                description=v.description,
                filename=v.filename,
                is_free=v.is_free,
                duration=v.duration,
                order_index=v.order_index,
                created_at=v.created_at.isoformat(),
            )
            for v in course.videos
        ] if with_videos else [],
    )


def _check_pricing(is_free: bool, price: Optional[float]) -> Optional[float]:
    if is_free:
        return None
    if price is None:
        raise ValidationError("Price is required for a paid course")
    return price


def _get_course(db: Session, course_id: str) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course")
    return course


@router.get("", response_model=ApiResponse[list[AdminCourseResponse]])
def list_courses(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """All courses, active or not, in display order with usage counters."""
    courses = db.query(Course).order_by(Course.order_index.asc(), Course.created_at.desc()).all()
    ids = [c.id for c in courses]
    access = _counts(db, CourseAccess.course_id, ids)
    pending = _counts(db, CourseRequest.course_id, ids, CourseRequest.status == "new")
    return ApiResponse(
        data=[_course_to_response(c, access.get(c.id, 0), pending.get(c.id, 0)) for c in courses]
    )


@router.post("", response_model=ApiResponse[AdminCourseResponse], status_code=201)
def create_course(req: CourseCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    course = Course(
        title=stripped(req.title, "title"),
        short_description=req.short_description,
        full_description=req.full_description,
        price=_check_pricing(req.is_free, req.price),
        is_free=req.is_free,
        is_active=req.is_active,
        thumbnail=req.thumbnail or None,
        order_index=course_service.next_course_order(db),
    )
    db.add(course)
    db.flush()
    log_action(
        db,
        "course_created",
        f'Admin {admin.email} created course "{course.title}"',
        actor_id=admin.id,
        entity_type="course",
        entity_id=course.id,
    )
    db.commit()
    db.refresh(course)
    course_service.invalidate_catalog()
    return ApiResponse(data=_course_to_response(course), message="Course created")


@router.put("/reorder", response_model=ApiResponse)
def reorder_courses(req: CourseReorder, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    course_service.reorder_courses(db, admin, req.course_ids)
    return ApiResponse(message="Course order updated")


@router.post("/recalculate-duration", response_model=ApiResponse[DurationResult])
def recalculate_duration(
    req: Optional[DurationRecalculate] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Recalculate one course's total duration, or every course's when no id is given."""
    if req is not None and req.course_id:
        duration = course_service.recalculate_duration(db, req.course_id)
        db.commit()
        course_service.invalidate_catalog()
        return ApiResponse(
            data=DurationResult(course_id=req.course_id, duration=duration, courses_updated=1),
            message="Course duration recalculated",
        )
    updated = course_service.recalculate_all_durations(db)
    db.commit()
    course_service.invalidate_catalog()
    return ApiResponse(data=DurationResult(courses_updated=updated), message="All course durations recalculated")


@router.get("/{course_id}", response_model=ApiResponse[AdminCourseResponse])
def get_course(course_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    course = _get_course(db, course_id)
    access = db.query(CourseAccess).filter(CourseAccess.course_id == course_id).count()
    pending = (
        db.query(CourseRequest)
        .filter(CourseRequest.course_id == course_id, CourseRequest.status == "new")
        .count()
    )
    return ApiResponse(data=_course_to_response(course, access, pending, with_videos=True))


@router.patch("/{course_id}", response_model=ApiResponse[AdminCourseResponse])
def update_course(
    course_id: str,
    req: CourseUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    course = _get_course(db, course_id)
    changes = update_changes(req, required=("title", "is_free", "is_active"))

    is_free = changes.get("is_free", course.is_free)
    price = changes.get("price", course.price)
    changes["price"] = _check_pricing(is_free, price)
    if "title" in changes:
        changes["title"] = stripped(changes["title"], "title")

    for field, value in changes.items():
        setattr(course, field, value)

    log_action(
        db,
        "course_updated",
        f'Admin {admin.email} updated course "{course.title}": {", ".join(sorted(req.model_fields_set)) or "no fields"}',
        actor_id=admin.id,
        entity_type="course",
        entity_id=course.id,
    )
    db.commit()
    db.refresh(course)
    course_service.invalidate_catalog()
    return ApiResponse(data=_course_to_response(course), message="Course updated")


@router.delete("/{course_id}", response_model=ApiResponse[CourseDeleteResult])
def delete_course(course_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """Delete the course with its videos, grants and requests, and remove its files."""
    result = course_service.delete_course_with_files(db, admin, course_id)
    return ApiResponse(
        data=CourseDeleteResult(**result),
        message=f"Course deleted, files removed: {len(result['deleted_files'])}",
    )


@router.get("/{course_id}/access", response_model=ApiResponse[list[AccessGrantResponse]])
def list_course_access(course_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    _get_course(db, course_id)
    grants = (
        db.query(CourseAccess)
        .filter(CourseAccess.course_id == course_id)
        .order_by(CourseAccess.granted_at.desc())
        .all()
    )
    return ApiResponse(
        data=[
            AccessGrantResponse(
                user_id=g.user_id,
                email=g.user.email,
                name=g.user.name,
                granted_at=g.granted_at.isoformat(),
                granted_by=g.granted_by,
            )
            for g in grants
        ]
    )


@router.delete("/{course_id}/access/{user_id}", response_model=ApiResponse)
def revoke_course_access(
    course_id: str,
    user_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    request_workflow.revoke_grant(db, admin, course_id, user_id)
    return ApiResponse(message="Access revoked")
