"""Course access request schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

ContactMethod = Literal["email", "phone", "telegram"]
RequestStatusName = Literal["new", "approved", "rejected", "cancelled"]


class CourseRequestCreate(BaseModel):
    course_id: str = Field(min_length=1)
    contact_method: ContactMethod
    message: Optional[str] = Field(default=None, max_length=1000)


class RequestProcess(BaseModel):
    status: Literal["approved", "rejected"]


class RequestUser(BaseModel):
    id: str
    name: Optional[str]
    email: str
    phone: Optional[str] = None
    telegram: Optional[str] = None
    preferred_contact: Optional[str] = None


class RequestCourse(BaseModel):
    id: str
    title: str
    price: Optional[float]


class CourseRequestResponse(BaseModel):
    id: str
    status: str
    contact_method: str
    message: Optional[str]
    created_at: str
    processed_at: Optional[str]
    processed_by: Optional[str]
    user: Optional[RequestUser] = None
    course: Optional[RequestCourse] = None


class RequestStats(BaseModel):
    total: int
    new: int
    approved: int
    rejected: int
    cancelled: int


class RequestListResponse(BaseModel):
    requests: list[CourseRequestResponse]
    grouped: dict[str, list[CourseRequestResponse]]
    stats: RequestStats


class RequestStatusResponse(BaseModel):
    has_access: bool
    status: str  # access_granted | new | approved | rejected | free_course | no_request
    request_id: Optional[str] = None
    granted_at: Optional[str] = None
    created_at: Optional[str] = None
    processed_at: Optional[str] = None
    can_cancel: bool = False
    can_request: bool = False


def request_to_response(course_request, include_contacts: bool = False) -> CourseRequestResponse:
    user = course_request.user
    course = course_request.course
    return CourseRequestResponse(
        id=course_request.id,
        status=course_request.status,
        contact_method=course_request.contact_method,
        message=course_request.message,
        created_at=course_request.created_at.isoformat(),
        processed_at=course_request.processed_at.isoformat() if course_request.processed_at else None,
        processed_by=course_request.processed_by,
        user=RequestUser(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone if include_contacts else None,
            telegram=user.telegram if include_contacts else None,
            preferred_contact=user.preferred_contact if include_contacts else None,
        ) if user else None,
        course=RequestCourse(id=course.id, title=course.title, price=course.price) if course else None,
    )
