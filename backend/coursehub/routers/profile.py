"""Profile router — the signed-in user's contact details and stats."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.middleware.auth import get_current_user
from coursehub.models.course_access import CourseAccess
from coursehub.models.review import Review
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.review import review_to_response
from coursehub.schemas.user import ProfileResponse, ProfileStats, ProfileUpdate, ProfileUser

router = APIRouter(prefix="/api/profile", tags=["profile"])


def _profile_user(user: User) -> ProfileUser:
    return ProfileUser(
        id=user.id,
        email=user.email,
        name=user.name or "",
        display_name=user.display_name,
        phone=user.phone or "",
        telegram=user.telegram or "",
        preferred_contact=user.preferred_contact,
        role=user.role,
        created_at=user.created_at.isoformat(),
    )


@router.get("", response_model=ApiResponse[ProfileResponse])
def get_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    reviews = (
        db.query(Review)
        .filter(Review.user_id == current_user.id)
        .order_by(Review.created_at.desc())
        .all()
    )
    return ApiResponse(
        data=ProfileResponse(
            user=_profile_user(current_user),
            reviews=[review_to_response(r) for r in reviews],
        )
    )


@router.patch("", response_model=ApiResponse[ProfileResponse])
def update_profile(
    req: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # blank strings clear the field
    current_user.phone = (req.phone or "").strip() or None
    current_user.telegram = (req.telegram or "").strip() or None
    current_user.preferred_contact = req.preferred_contact
    if req.display_name is not None:
        current_user.display_name = req.display_name.strip() or None
    db.commit()
    db.refresh(current_user)
    return ApiResponse(data=ProfileResponse(user=_profile_user(current_user)), message="Profile updated")


@router.get("/stats", response_model=ApiResponse[ProfileStats])
def get_profile_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    purchased = db.query(CourseAccess).filter(CourseAccess.user_id == current_user.id).count()
    return ApiResponse(
        data=ProfileStats(
            purchased_courses=purchased,
            member_since=current_user.created_at.date().isoformat(),
        )
    )
