"""Auth router — Google sign-in, admin password login, and user info."""

import logging

from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from coursehub.config import settings
from coursehub.database import get_db
from coursehub.errors import AuthenticationError
from coursehub.middleware.auth import create_access_token, get_current_user, hash_password, verify_password
from coursehub.middleware.rate_limit import limiter, AUTH_LIMIT
from coursehub.models.user import User
from coursehub.schemas.auth import AdminLoginRequest, TokenResponse, UserResponse
from coursehub.schemas.common import ApiResponse
from coursehub.services.oauth import oauth, upsert_google_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        display_name=user.display_name,
        image=user.image,
        role=user.role,
        created_at=user.created_at.isoformat(),
    )


def _issue_token(user: User) -> TokenResponse:
    return TokenResponse(access_token=create_access_token({"sub": user.id, "role": user.role}))


def ensure_bootstrap_admin(db: Session) -> None:
    """Create or refresh the password-login admin configured in the environment."""
    email = settings.ADMIN_BOOTSTRAP_EMAIL.strip().lower()
    if not email or not settings.ADMIN_BOOTSTRAP_PASSWORD:
        return
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email, name="Administrator")
        db.add(user)
        logger.info("Created bootstrap admin %s", email)
    user.role = "admin"
    if not verify_password(settings.ADMIN_BOOTSTRAP_PASSWORD, user.password_hash):
        user.password_hash = hash_password(settings.ADMIN_BOOTSTRAP_PASSWORD)
    db.commit()


@router.get("/google/login")
@limiter.limit(AUTH_LIMIT)
async def google_login(request: Request):
    """Redirect the browser to Google's consent screen."""
    redirect_uri = settings.GOOGLE_REDIRECT_URI or str(request.url_for("google_callback"))
    return await oauth.google.authorize_redirect(request, redirect_uri)


@router.get("/google/callback", response_model=ApiResponse[TokenResponse])
async def google_callback(request: Request, db: Session = Depends(get_db)):
    """Finish the OAuth dance, upsert the user and hand back a JWT."""
    try:
        token = await oauth.google.authorize_access_token(request)
    except OAuthError as exc:
        logger.warning("Google sign-in failed: %s", exc.error)
        raise AuthenticationError("Google sign-in failed")

    userinfo = token.get("userinfo") or await oauth.google.userinfo(token=token)
    user = upsert_google_user(db, dict(userinfo))
    return ApiResponse(data=_issue_token(user))


@router.post("/admin/login", response_model=ApiResponse[TokenResponse])
@limiter.limit(AUTH_LIMIT)
def admin_login(request: Request, req: AdminLoginRequest, db: Session = Depends(get_db)):
    """Password login, only for admin accounts that have a password set."""
    user = db.query(User).filter(User.email == req.email.strip().lower()).first()
    if not user or not user.is_admin or not verify_password(req.password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return ApiResponse(data=_issue_token(user))


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return ApiResponse(data=_user_to_response(current_user))
