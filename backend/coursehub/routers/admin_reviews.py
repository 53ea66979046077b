"""Admin reviews router — moderation queue."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError
from coursehub.middleware.auth import require_admin
from coursehub.models.review import Review
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse, Pagination
from coursehub.schemas.review import (
    ReviewListResponse,
    ReviewModerate,
    ReviewResponse,
    ReviewStats,
    ReviewStatus,
    review_to_response,
)
from coursehub.services.audit import log_action

router = APIRouter(prefix="/api/admin/reviews", tags=["admin-reviews"])


@router.get("", response_model=ApiResponse[ReviewListResponse])
def list_reviews(
    status: Optional[ReviewStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    query = db.query(Review)
    if status:
        query = query.filter(Review.status == status)
    total = query.count()
    reviews = (
        query.order_by(Review.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    counts = dict(db.query(Review.status, func.count()).group_by(Review.status).all())
    stats = ReviewStats(
        pending=counts.get("pending", 0),
        approved=counts.get("approved", 0),
        rejected=counts.get("rejected", 0),
        total=sum(counts.values()),
    )
    return ApiResponse(
        data=ReviewListResponse(
            reviews=[review_to_response(r) for r in reviews],
            pagination=Pagination.build(page, limit, total),
            stats=stats,
        )
    )


def _get_review(db: Session, review_id: str) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review")
    return review


@router.patch("/{review_id}", response_model=ApiResponse[ReviewResponse])
def moderate_review(
    review_id: str,
    req: ReviewModerate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    review = _get_review(db, review_id)
    review.status = req.status
    log_action(
        db,
        "review_moderated",
        f"Admin {admin.email} set review {review.id} to {req.status}",
        actor_id=admin.id,
        entity_type="review",
        entity_id=review.id,
    )
    db.commit()
    db.refresh(review)
    return ApiResponse(data=review_to_response(review), message="Review updated")


@router.delete("/{review_id}", response_model=ApiResponse)
def delete_review(review_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    review = _get_review(db, review_id)
    db.delete(review)
    log_action(
        db,
        "review_deleted",
        f"Admin {admin.email} deleted review {review_id}",
        actor_id=admin.id,
        entity_type="review",
        entity_id=review_id,
    )
    db.commit()
    return ApiResponse(message="Review deleted")
