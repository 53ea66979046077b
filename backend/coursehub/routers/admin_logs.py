"""Admin logs router — audit trail browsing."""

from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.middleware.auth import require_admin
from coursehub.models.audit_log import AuditLog
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse, Pagination
from coursehub.schemas.log import LogListResponse, LogResponse

router = APIRouter(prefix="/api/admin/logs", tags=["admin-logs"])


@router.get("", response_model=ApiResponse[LogListResponse])
def list_logs(
    action: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Filter by action substring, free text over action/details, and an inclusive date range."""
    query = db.query(AuditLog)
    if action:
        query = query.filter(AuditLog.action.contains(action))
    if search:
        query = query.filter(or_(AuditLog.action.contains(search), AuditLog.details.contains(search)))
    if date_from:
        query = query.filter(AuditLog.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(AuditLog.created_at < datetime.combine(date_to + timedelta(days=1), time.min))

    total = query.count()
    logs = (
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    actions = [row[0] for row in db.query(AuditLog.action).distinct().order_by(AuditLog.action).all()]
    return ApiResponse(
        data=LogListResponse(
            logs=[
                LogResponse(
                    id=entry.id,
                    action=entry.action,
                    details=entry.details,
                    entity_type=entry.entity_type,
                    entity_id=entry.entity_id,
                    actor_id=entry.actor_id,
                    created_at=entry.created_at.isoformat(),
                )
                for entry in logs
            ],
            pagination=Pagination.build(page, limit, total),
            actions=actions,
        )
    )
