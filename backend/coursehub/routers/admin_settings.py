"""Admin settings router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.middleware.auth import require_admin
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.contact import SettingsResponse, SettingsUpdate
from coursehub.services import site_settings
from coursehub.services.audit import log_action

router = APIRouter(prefix="/api/admin/settings", tags=["admin-settings"])


@router.get("", response_model=ApiResponse[SettingsResponse])
def get_settings(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    row = site_settings.get_settings_row(db)
    return ApiResponse(data=SettingsResponse(support_email=row.support_email))


@router.put("", response_model=ApiResponse[SettingsResponse])
def update_settings(req: SettingsUpdate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    log_action(
        db,
        "settings_updated",
        f"Admin {admin.email} set support email to {req.support_email or 'none'}",
        actor_id=admin.id,
        entity_type="settings",
    )
    row = site_settings.update_support_email(db, req.support_email)
    return ApiResponse(data=SettingsResponse(support_email=row.support_email), message="Settings saved")
