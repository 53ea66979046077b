"""News schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from coursehub.schemas.common import Pagination


class NewsCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    short_description: str = Field(min_length=1, max_length=150)
    full_description: str = Field(min_length=1, max_length=2000)
    image: Optional[str] = None
    is_active: bool = True


class NewsUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    short_description: Optional[str] = Field(default=None, min_length=1, max_length=150)
    full_description: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    image: Optional[str] = None
    is_active: Optional[bool] = None


class NewsResponse(BaseModel):
    id: str
    title: str
    short_description: str
    full_description: Optional[str] = None
    image: Optional[str]
    is_active: bool
    author_name: Optional[str] = None
    created_at: str
    updated_at: str


class NewsListResponse(BaseModel):
    news: list[NewsResponse]
    pagination: Pagination


def news_to_response(item, full: bool = True) -> NewsResponse:
    author = item.author
    return NewsResponse(
        id=item.id,
        title=item.title,
        short_description=item.short_description,
        full_description=item.full_description if full else None,
        image=item.image,
        is_active=item.is_active,
        author_name=(author.display_name or author.name) if author else None,
        created_at=item.created_at.isoformat(),
        updated_at=item.updated_at.isoformat(),
    )
