"""Admin user-management and profile schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from coursehub.schemas.common import Pagination
from coursehub.schemas.course_request import ContactMethod
from coursehub.schemas.review import ReviewResponse


class AdminUserResponse(BaseModel):
    id: str
    name: Optional[str]
    display_name: Optional[str]
    email: str
    role: str
    phone: Optional[str]
    telegram: Optional[str]
    preferred_contact: str
    created_at: str
    courses_access: int
    active_requests: int


class AdminUserListResponse(BaseModel):
    users: list[AdminUserResponse]
    pagination: Pagination


class ProfileUpdate(BaseModel):
    phone: Optional[str] = Field(default=None, max_length=50)
    telegram: Optional[str] = Field(default=None, max_length=100)
    preferred_contact: ContactMethod = "email"
    display_name: Optional[str] = Field(default=None, max_length=100)


class ProfileUser(BaseModel):
    id: str
    email: str
    name: str
    display_name: Optional[str]
    phone: str
    telegram: str
    preferred_contact: str
    role: str
    created_at: str


class ProfileResponse(BaseModel):
    user: ProfileUser
    reviews: list[ReviewResponse] = []


class ProfileStats(BaseModel):
    purchased_courses: int
    member_since: str
