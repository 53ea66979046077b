"""Site-wide settings row, cached between reads."""

from typing import Optional

from sqlalchemy.orm import Session

from coursehub.models.admin_settings import AdminSettings, SETTINGS_ID
from coursehub.services.cache import api_cache, SETTINGS_KEY


def get_settings_row(db: Session) -> AdminSettings:
    row = db.query(AdminSettings).filter(AdminSettings.id == SETTINGS_ID).first()
    if row is None:
        row = AdminSettings(id=SETTINGS_ID)
        db.add(row)
        db.commit()
        db.refresh(row)
    return row


def support_email(db: Session) -> Optional[str]:
    return api_cache.get_or_set(SETTINGS_KEY, lambda: get_settings_row(db).support_email or "") or None


def update_support_email(db: Session, email: Optional[str]) -> AdminSettings:
    row = get_settings_row(db)
    row.support_email = email
    db.commit()
    db.refresh(row)
    api_cache.delete(SETTINGS_KEY)
    return row
