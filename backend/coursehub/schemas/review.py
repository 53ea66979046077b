"""Review schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from coursehub.schemas.common import Pagination

ReviewStatus = Literal["pending", "approved", "rejected"]


class ReviewCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)


class ReviewModerate(BaseModel):
    status: ReviewStatus


class ReviewResponse(BaseModel):
    id: str
    user_id: str
    author_name: Optional[str]
    rating: int
    comment: Optional[str]
    status: str
    created_at: str
    updated_at: str


class ReviewStats(BaseModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    pagination: Pagination
    stats: ReviewStats


def review_to_response(review) -> ReviewResponse:
    author = review.user
    return ReviewResponse(
        id=review.id,
        user_id=review.user_id,
        author_name=(author.display_name or author.name) if author else None,
        rating=review.rating,
        comment=review.comment,
        status=review.status,
        created_at=review.created_at.isoformat(),
        updated_at=review.updated_at.isoformat(),
    )
