"""User model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from coursehub.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    display_name = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="user")  # user | admin
    google_id = Column(String(255), nullable=True, unique=True)
    # Only admin accounts that sign in with a password carry a hash
    password_hash = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    telegram = Column(String(100), nullable=True)
    preferred_contact = Column(String(20), nullable=False, default="email")  # email | phone | telegram
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    course_access = relationship(
        "CourseAccess",
        back_populates="user",
        foreign_keys="CourseAccess.user_id",
        cascade="all, delete-orphan",
    )
    course_requests = relationship(
        "CourseRequest",
        back_populates="user",
        foreign_keys="CourseRequest.user_id",
        cascade="all, delete-orphan",
    )
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan")
    news = relationship("News", back_populates="author")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
