"""Course request — a user's ask for access to a paid course.

One row per (user, course); re-requesting reopens the same row.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from coursehub.database import Base


class CourseRequest(Base):
    __tablename__ = "course_requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default="new")  # new | approved | rejected | cancelled
    contact_method = Column(String(20), nullable=False, default="email")
    message = Column(Text, nullable=True)
    processed_at = Column(DateTime, nullable=True)
    processed_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_request_user_course"),
    )

    # Relationships
    user = relationship("User", back_populates="course_requests", foreign_keys=[user_id])
    course = relationship("Course", back_populates="requests")
    processed_by_user = relationship("User", foreign_keys=[processed_by])
