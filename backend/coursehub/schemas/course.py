"""Course request/response schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

CourseType = Literal["all", "free", "paid", "featured"]


class CourseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    short_description: Optional[str] = Field(default=None, max_length=150)
    full_description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[float] = Field(default=None, ge=1, le=999999)
    is_free: bool = False
    is_active: bool = True
    thumbnail: Optional[str] = None


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    short_description: Optional[str] = Field(default=None, max_length=150)
    full_description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[float] = Field(default=None, ge=1, le=999999)
    is_free: Optional[bool] = None
    is_active: Optional[bool] = None
    thumbnail: Optional[str] = None


class CourseReorder(BaseModel):
    course_ids: list[str] = Field(min_length=1)


class DurationRecalculate(BaseModel):
    course_id: Optional[str] = None


class CourseSummary(BaseModel):
    """Catalog card."""

    id: str
    title: str
    short_description: Optional[str]
    price: Optional[float]
    is_free: bool
    has_access: bool
    videos_count: int
    free_videos_count: int
    total_duration: int
    thumbnail: Optional[str]


class CourseVideoItem(BaseModel):
    id: str
    title: str
    description: Optional[str]
    is_free: bool
    duration: Optional[int]
    order_index: int
    has_access: bool


class CourseDetail(BaseModel):
    id: str
    title: str
    short_description: Optional[str]
    full_description: Optional[str]
    price: Optional[float]
    is_free: bool
    thumbnail: Optional[str]
    has_access: bool
    videos_count: int
    free_videos_count: int
    total_duration: int
    videos: list[CourseVideoItem] = []


class AdminVideoBrief(BaseModel):
    id: str
    title: str
    display_name: str
    description: Optional[str]
    filename: str
    is_free: bool
    duration: Optional[int]
    order_index: int
    created_at: str


class AdminCourseResponse(BaseModel):
    id: str
    title: str
    short_description: Optional[str]
    full_description: Optional[str]
    price: Optional[float]
    is_free: bool
    is_active: bool
    thumbnail: Optional[str]
    total_duration: int
    order_index: int
    created_at: str
    videos_count: int = 0
    users_with_access: int = 0
    pending_requests: int = 0
    videos: list[AdminVideoBrief] = []


class CourseDeleteResult(BaseModel):
    deleted_files: list[str]
    failed_files: list[str]


class DurationResult(BaseModel):
    course_id: Optional[str] = None
    duration: Optional[int] = None
    courses_updated: int = 0


class AccessGrantResponse(BaseModel):
    user_id: str
    email: str
    name: Optional[str]
    granted_at: str
    granted_by: Optional[str]
