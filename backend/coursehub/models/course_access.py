"""Course access grant — a user may watch every video of a paid course."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from coursehub.database import Base


class CourseAccess(Base):
    __tablename__ = "course_access"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    granted_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    granted_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_access_user_course"),
    )

    # Relationships
    user = relationship("User", back_populates="course_access", foreign_keys=[user_id])
    course = relationship("Course", back_populates="access_grants")
    granted_by_user = relationship("User", foreign_keys=[granted_by])
