"""Course requests router — users asking for access to paid courses."""

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.middleware.auth import get_current_user
from coursehub.middleware.rate_limit import limiter, API_LIMIT
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.course_request import (
    CourseRequestCreate,
    CourseRequestResponse,
    RequestStatusResponse,
    request_to_response,
)
from coursehub.services import request_workflow

router = APIRouter(prefix="/api/course-request", tags=["course-requests"])


@router.post("", response_model=ApiResponse[CourseRequestResponse])
@limiter.limit(API_LIMIT)
def create_request(
    request: Request,
    req: CourseRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Submit a request, or reopen a rejected/cancelled one for the same course."""
    course_request = request_workflow.submit_request(
        db, current_user, req.course_id, req.contact_method, req.message
    )
    return ApiResponse(data=request_to_response(course_request), message="Request sent to the administrator")


@router.delete("", response_model=ApiResponse[CourseRequestResponse])
def cancel_request(
    course_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    course_request = request_workflow.cancel_request(db, current_user, course_id)
    return ApiResponse(data=request_to_response(course_request), message="Request cancelled")


@router.get("/status", response_model=ApiResponse[RequestStatusResponse])
def get_request_status(
    course_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApiResponse(data=RequestStatusResponse(**request_workflow.request_status(db, current_user, course_id)))
