"""Admin users router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.middleware.auth import require_admin
from coursehub.models.course_access import CourseAccess
from coursehub.models.course_request import CourseRequest
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse, Pagination
from coursehub.schemas.user import AdminUserListResponse, AdminUserResponse

router = APIRouter(prefix="/api/admin/users", tags=["admin-users"])


@router.get("", response_model=ApiResponse[AdminUserListResponse])
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Users, newest first, with grant and pending-request counts."""
    total = db.query(User).count()
    users = (
        db.query(User)
        .order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    ids = [u.id for u in users]
    access = dict(
        db.query(CourseAccess.user_id, func.count())
        .filter(CourseAccess.user_id.in_(ids))
        .group_by(CourseAccess.user_id)
        .all()
    ) if ids else {}
    pending = dict(
        db.query(CourseRequest.user_id, func.count())
        .filter(CourseRequest.user_id.in_(ids), CourseRequest.status == "new")
        .group_by(CourseRequest.user_id)
        .all()
    ) if ids else {}

    return ApiResponse(
        data=AdminUserListResponse(
            users=[
                AdminUserResponse(
                    id=u.id,
                    name=u.name,
                    display_name=u.display_name,
                    email=u.email,
                    role=u.role,
                    phone=u.phone,
                    telegram=u.telegram,
                    preferred_contact=u.preferred_contact,
                    created_at=u.created_at.isoformat(),
                    courses_access=access.get(u.id, 0),
                    active_requests=pending.get(u.id, 0),
                )
                for u in users
            ],
            pagination=Pagination.build(page, limit, total),
        )
    )
