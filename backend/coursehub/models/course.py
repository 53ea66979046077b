"""Course model — an ordered set of videos, free or sold through access requests."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text, Boolean, Integer, Float
from sqlalchemy.orm import relationship

from coursehub.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(100), nullable=False)
    short_description = Column(String(150), nullable=True)
    full_description = Column(Text, nullable=True)
    price = Column(Float, nullable=True)  # NULL for free courses
    is_free = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    thumbnail = Column(String(500), nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    total_duration = Column(Integer, nullable=False, default=0)  # seconds
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    videos = relationship(
        "Video",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Video.order_index",
    )
    access_grants = relationship("CourseAccess", back_populates="course", cascade="all, delete-orphan")
    requests = relationship("CourseRequest", back_populates="course", cascade="all, delete-orphan")
