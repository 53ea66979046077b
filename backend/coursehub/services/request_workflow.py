"""Course request workflow — the state machine behind paid-course access.

    (none)     --submit-->  new
    rejected   --reopen-->  new
    cancelled  --reopen-->  new
    new        --approve--> approved   (creates the grant)
    new        --reject-->  rejected
    new        --cancel-->  cancelled  (user only)
    approved   --revoke-->  cancelled  (grant removed by an admin)

There is at most one request row per (user, course); reopening resets the same
row instead of inserting a second one.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.errors import ConflictError, NotFoundError, ValidationError
from coursehub.models.course import Course
from coursehub.models.course_access import CourseAccess
from coursehub.models.course_request import CourseRequest
from coursehub.models.user import User
from coursehub.services.audit import log_action

logger = logging.getLogger(__name__)

NEW = "new"
APPROVED = "approved"
REJECTED = "rejected"
CANCELLED = "cancelled"
STATUSES = (NEW, APPROVED, REJECTED, CANCELLED)

SUBMIT = "submit"
REOPEN = "reopen"
APPROVE = "approve"
REJECT = "reject"
CANCEL = "cancel"
REVOKE = "revoke"

TRANSITIONS: dict[tuple[Optional[str], str], str] = {
    (None, SUBMIT): NEW,
    (REJECTED, REOPEN): NEW,
    (CANCELLED, REOPEN): NEW,
    (NEW, APPROVE): APPROVED,
    (NEW, REJECT): REJECTED,
    (NEW, CANCEL): CANCELLED,
    (APPROVED, REVOKE): CANCELLED,
}

_CONFLICT_MESSAGES = {
    (NEW, REOPEN): "You already have an active request for this course",
    (APPROVED, REOPEN): "Your request has already been approved",
}


def next_status(current: Optional[str], event: str) -> str:
    """Return the status reached from `current` via `event` or raise ConflictError."""
    try:
        return TRANSITIONS[(current, event)]
    except KeyError:
        message = _CONFLICT_MESSAGES.get((current, event))
        if message is None:
            if event in (APPROVE, REJECT):
                message = "Request already processed"
            else:
                message = f"Cannot {event} a request in status '{current}'"
        raise ConflictError(message)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_grant(db: Session, user_id: str, course_id: str, granted_by: Optional[str]) -> CourseAccess:
    """Return the grant for (user, course), creating it if missing."""
    grant = (
        db.query(CourseAccess)
        .filter(CourseAccess.user_id == user_id, CourseAccess.course_id == course_id)
        .first()
    )
    if grant is None:
        grant = CourseAccess(user_id=user_id, course_id=course_id, granted_by=granted_by)
        db.add(grant)
        db.flush()
    return grant


def _find_request(db: Session, user_id: str, course_id: str) -> Optional[CourseRequest]:
    return (
        db.query(CourseRequest)
        .filter(CourseRequest.user_id == user_id, CourseRequest.course_id == course_id)
        .first()
    )


def submit_request(
    db: Session,
    user: User,
    course_id: str,
    contact_method: str,
    message: Optional[str] = None,
) -> CourseRequest:
    """Create a request for a paid course, or reopen a rejected/cancelled one."""
    course = db.query(Course).filter(Course.id == course_id, Course.is_active.is_(True)).first()
    if not course:
        raise NotFoundError("Course")
    if course.is_free:
        raise ValidationError("Course is free, no request needed")

    grant = (
        db.query(CourseAccess.id)
        .filter(CourseAccess.user_id == user.id, CourseAccess.course_id == course_id)
        .first()
    )
    if grant:
        raise ConflictError("You already have access to this course")

    existing = _find_request(db, user.id, course_id)
    if existing is None:
        next_status(None, SUBMIT)
        course_request = CourseRequest(
            user_id=user.id,
            course_id=course_id,
            status=NEW,
            contact_method=contact_method,
            message=message,
        )
        db.add(course_request)
    else:
        existing.status = next_status(existing.status, REOPEN)
        existing.contact_method = contact_method
        existing.message = message
        existing.created_at = _now()
        existing.processed_at = None
        existing.processed_by = None
        course_request = existing

    try:
        db.flush()
    except IntegrityError:
        # A concurrent submission won the unique (user, course) slot
        db.rollback()
        logger.warning("Duplicate request for user %s on course %s", user.id, course_id)
        raise ConflictError("You already have an active request for this course")

    log_action(
        db,
        "course_request_created",
        f'User {user.email} requested access to course "{course.title}" (ID: {course.id})',
        actor_id=user.id,
        entity_type="course_request",
        entity_id=course_request.id,
    )
    db.commit()
    db.refresh(course_request)
    return course_request


def cancel_request(db: Session, user: User, course_id: str) -> CourseRequest:
    course_request = (
        db.query(CourseRequest)
        .filter(
            CourseRequest.user_id == user.id,
            CourseRequest.course_id == course_id,
            CourseRequest.status == NEW,
        )
        .first()
    )
    if not course_request:
        raise NotFoundError("Active request")

    course_request.status = next_status(course_request.status, CANCEL)
    course_request.processed_at = _now()

    log_action(
        db,
        "course_request_cancelled",
        f'User {user.email} cancelled the request for course "{course_request.course.title}" (ID: {course_id})',
        actor_id=user.id,
        entity_type="course_request",
        entity_id=course_request.id,
    )
    db.commit()
    db.refresh(course_request)
    return course_request


def process_request(db: Session, admin: User, request_id: str, decision: str) -> CourseRequest:
    """Approve or reject a pending request. Approval materializes the grant."""
    course_request = db.query(CourseRequest).filter(CourseRequest.id == request_id).first()
    if not course_request:
        raise NotFoundError("Request")

    event = APPROVE if decision == APPROVED else REJECT
    course_request.status = next_status(course_request.status, event)
    course_request.processed_at = _now()
    course_request.processed_by = admin.id

    user_email = course_request.user.email
    course_title = course_request.course.title
    if event == APPROVE:
        ensure_grant(db, course_request.user_id, course_request.course_id, admin.id)
        log_action(
            db,
            "access_granted",
            f'Admin {admin.email} approved the request of {user_email} for course "{course_title}"',
            actor_id=admin.id,
            entity_type="course_request",
            entity_id=course_request.id,
        )
    else:
        log_action(
            db,
            "request_rejected",
            f'Admin {admin.email} rejected the request of {user_email} for course "{course_title}"',
            actor_id=admin.id,
            entity_type="course_request",
            entity_id=course_request.id,
        )

    db.commit()
    db.refresh(course_request)
    return course_request


def request_status(db: Session, user: User, course_id: str) -> dict:
    """Where the user stands with a course: granted, requested, free or nothing yet."""
    grant = (
        db.query(CourseAccess)
        .filter(CourseAccess.user_id == user.id, CourseAccess.course_id == course_id)
        .first()
    )
    if grant:
        return {
            "has_access": True,
            "status": "access_granted",
            "granted_at": grant.granted_at.isoformat(),
        }

    course_request = _find_request(db, user.id, course_id)
    if course_request and course_request.status != CANCELLED:
        return {
            "has_access": False,
            "status": course_request.status,
            "request_id": course_request.id,
            "created_at": course_request.created_at.isoformat(),
            "processed_at": course_request.processed_at.isoformat() if course_request.processed_at else None,
            "can_cancel": course_request.status == NEW,
            "can_request": course_request.status == REJECTED,
        }

    course = db.query(Course).filter(Course.id == course_id).first()
    if not course or not course.is_active:
        raise NotFoundError("Course")
    return {
        "has_access": course.is_free,
        "status": "free_course" if course.is_free else "no_request",
        "can_request": not course.is_free,
    }


def revoke_grant(db: Session, admin: User, course_id: str, user_id: str) -> None:
    grant = (
        db.query(CourseAccess)
        .filter(CourseAccess.user_id == user_id, CourseAccess.course_id == course_id)
        .first()
    )
    if not grant:
        raise NotFoundError("Access grant")
    user_email = grant.user.email
    course_title = grant.course.title
    db.delete(grant)

    # An approved request would otherwise block the user from asking again
    course_request = _find_request(db, user_id, course_id)
    if course_request is not None and course_request.status == APPROVED:
        course_request.status = next_status(APPROVED, REVOKE)
        course_request.processed_at = _now()
        course_request.processed_by = admin.id

    log_action(
        db,
        "access_revoked",
        f'Admin {admin.email} revoked access of {user_email} to course "{course_title}"',
        actor_id=admin.id,
        entity_type="course_access",
        entity_id=course_id,
    )
    db.commit()
