"""SQLAlchemy ORM models."""

from coursehub.models.user import User
from coursehub.models.course import Course
from coursehub.models.video import Video
from coursehub.models.course_access import CourseAccess
from coursehub.models.course_request import CourseRequest
from coursehub.models.review import Review
from coursehub.models.news import News
from coursehub.models.admin_settings import AdminSettings
from coursehub.models.audit_log import AuditLog

__all__ = [
    "User",
    "Course",
    "Video",
    "CourseAccess",
    "CourseRequest",
    "Review",
    "News",
    "AdminSettings",
    "AuditLog",
]
