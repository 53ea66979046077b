"""Video request/response schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class VideoCreate(BaseModel):
    course_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    filename: str = Field(min_length=1)
    order_index: Optional[int] = Field(default=None, ge=0)
    is_free: bool = False
    duration: Optional[int] = Field(default=None, ge=0)
    file_size: Optional[int] = Field(default=None, ge=0)
    poster: Optional[str] = None


class VideoUpdate(BaseModel):
    # course_id and filename are fixed once the video exists
    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    order_index: Optional[int] = Field(default=None, ge=0)
    is_free: Optional[bool] = None
    duration: Optional[int] = Field(default=None, ge=0)
    file_size: Optional[int] = Field(default=None, ge=0)


class VideoReorder(BaseModel):
    video_ids: list[str] = Field(min_length=1)


class VideoResponse(BaseModel):
    id: str
    course_id: str
    course_title: str
    title: str
    display_name: str
    description: Optional[str]
    filename: str
    duration: Optional[int]
    file_size: Optional[int]
    poster: Optional[str]
    order_index: int
    is_free: bool
    created_at: str


class VideoDetail(BaseModel):
    """Public view of a single video."""

    id: str
    title: str
    description: Optional[str]
    duration: Optional[int]
    is_free: bool
    order_index: int
    course_id: str
    course_title: str
    has_access: bool
    video_url: Optional[str] = None
