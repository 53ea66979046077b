"""Reviews router — public testimonials and the author's own review management."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import ConflictError, NotFoundError
from coursehub.middleware.auth import get_current_user
from coursehub.middleware.rate_limit import limiter, API_LIMIT
from coursehub.models.review import Review
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.review import ReviewCreate, ReviewResponse, review_to_response

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@router.get("", response_model=ApiResponse[list[ReviewResponse]])
def list_reviews(db: Session = Depends(get_db)):
    """Approved reviews, newest first."""
    reviews = (
        db.query(Review)
        .filter(Review.status == "approved")
        .order_by(Review.created_at.desc())
        .all()
    )
    return ApiResponse(data=[review_to_response(r) for r in reviews])


@router.post("", response_model=ApiResponse[ReviewResponse], status_code=201)
@limiter.limit(API_LIMIT)
def create_review(
    request: Request,
    req: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    pending = (
        db.query(Review.id)
        .filter(Review.user_id == current_user.id, Review.status == "pending")
        .first()
    )
    if pending:
        raise ConflictError("You already have a review awaiting moderation")

    review = Review(
        user_id=current_user.id,
        rating=req.rating,
        comment=req.comment.strip() if req.comment else None,
        status="pending",
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return ApiResponse(data=review_to_response(review), message="Review submitted for moderation")


@router.delete("/{review_id}", response_model=ApiResponse)
def delete_review(
    review_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review = (
        db.query(Review)
        .filter(Review.id == review_id, Review.user_id == current_user.id)
        .first()
    )
    if not review:
        raise NotFoundError("Review")
    db.delete(review)
    db.commit()
    return ApiResponse(message="Review deleted")
