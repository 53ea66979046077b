"""Access evaluator — decides whether a viewer may watch a video.

The decision order is fixed: admins see everything, then free videos, then
free courses, and only after that does a paid course require a grant.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from sqlalchemy.orm import Session

from coursehub.models.course import Course
from coursehub.models.course_access import CourseAccess
from coursehub.models.user import User
from coursehub.models.video import Video

Role = Literal["anonymous", "user", "admin"]


@dataclass(frozen=True)
class Viewer:
    role: Role = "anonymous"
    user_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Viewer()


def has_access(viewer: Viewer, video_is_free: bool, course_is_free: bool, has_grant: bool) -> bool:
    if viewer.is_admin:
        return True
    if video_is_free:
        return True
    if course_is_free:
        return True
    return has_grant


def viewer_for(user: Optional[User]) -> Viewer:
    if user is None:
        return ANONYMOUS
    return Viewer(role="admin" if user.is_admin else "user", user_id=user.id)


def grant_exists(db: Session, user_id: Optional[str], course_id: str) -> bool:
    if not user_id:
        return False
    return (
        db.query(CourseAccess.id)
        .filter(CourseAccess.user_id == user_id, CourseAccess.course_id == course_id)
        .first()
        is not None
    )


def granted_course_ids(db: Session, user_id: Optional[str]) -> set[str]:
    """All course ids the user holds a grant for, for list endpoints."""
    if not user_id:
        return set()
    rows = db.query(CourseAccess.course_id).filter(CourseAccess.user_id == user_id).all()
    return {row[0] for row in rows}


def course_access(db: Session, viewer: Viewer, course: Course) -> bool:
    """Course-level decision, without a particular video in mind."""
    if viewer.is_admin or course.is_free:
        return True
    return grant_exists(db, viewer.user_id, course.id)


def can_watch(db: Session, viewer: Viewer, video: Video) -> bool:
    course = video.course
    needs_grant = not (viewer.is_admin or video.is_free or course.is_free)
    has_grant = grant_exists(db, viewer.user_id, course.id) if needs_grant else False
    return has_access(viewer, video.is_free, course.is_free, has_grant)
