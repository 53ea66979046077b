"""Video model — one uploaded file belonging to a course."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Boolean, Integer, BigInteger
from sqlalchemy.orm import relationship

from coursehub.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id = Column(String(36), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    display_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    filename = Column(String(255), nullable=False)  # name under UPLOAD_DIR/videos
    duration = Column(Integer, nullable=True)  # seconds
    file_size = Column(BigInteger, nullable=True)
    poster = Column(String(500), nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    is_free = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    course = relationship("Course", back_populates="videos")
