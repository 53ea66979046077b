"""Singleton row with site-wide settings editable from the back-office."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime

from coursehub.database import Base

SETTINGS_ID = "main"


class AdminSettings(Base):
    __tablename__ = "admin_settings"

    id = Column(String(36), primary_key=True, default=SETTINGS_ID)
    support_email = Column(String(255), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))
