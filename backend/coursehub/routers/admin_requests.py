"""Admin requests router — review and process course access requests."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError
from coursehub.middleware.auth import require_admin
from coursehub.models.course_request import CourseRequest
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.course_request import (
    CourseRequestResponse,
    RequestListResponse,
    RequestProcess,
    RequestStats,
    RequestStatusName,
    request_to_response,
)
from coursehub.services import request_workflow

router = APIRouter(prefix="/api/admin/requests", tags=["admin-requests"])


@router.get("", response_model=ApiResponse[RequestListResponse])
def list_requests(
    status: Optional[RequestStatusName] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Requests grouped by status, with totals across all requests."""
    query = db.query(CourseRequest)
    if status:
        query = query.filter(CourseRequest.status == status)
    rows = (
        query.order_by(CourseRequest.status.asc(), CourseRequest.created_at.desc())
        .limit(limit)
        .all()
    )
    items = [request_to_response(r, include_contacts=True) for r in rows]

    grouped = {name: [] for name in request_workflow.STATUSES}
    for item in items:
        grouped.setdefault(item.status, []).append(item)

    counts = dict(db.query(CourseRequest.status, func.count()).group_by(CourseRequest.status).all())
    stats = RequestStats(
        total=sum(counts.values()),
        **{name: counts.get(name, 0) for name in request_workflow.STATUSES},
    )
    return ApiResponse(data=RequestListResponse(requests=items, grouped=grouped, stats=stats))


@router.get("/{request_id}", response_model=ApiResponse[CourseRequestResponse])
def get_request(request_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    course_request = db.query(CourseRequest).filter(CourseRequest.id == request_id).first()
    if not course_request:
        raise NotFoundError("Request")
    return ApiResponse(data=request_to_response(course_request, include_contacts=True))


@router.patch("/{request_id}", response_model=ApiResponse[CourseRequestResponse])
def process_request(
    request_id: str,
    req: RequestProcess,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Approve (grants access) or reject a pending request."""
    course_request = request_workflow.process_request(db, admin, request_id, req.status)
    message = "Request approved, access granted" if req.status == "approved" else "Request rejected"
    return ApiResponse(data=request_to_response(course_request, include_contacts=True), message=message)
