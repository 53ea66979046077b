"""Google sign-in through authlib's Starlette client."""

import logging

from authlib.integrations.starlette_client import OAuth
from sqlalchemy.orm import Session

from coursehub.config import settings
from coursehub.errors import AuthenticationError
from coursehub.models.user import User

logger = logging.getLogger(__name__)

oauth = OAuth()
oauth.register(
    name="google",
    client_id=settings.GOOGLE_CLIENT_ID,
    client_secret=settings.GOOGLE_CLIENT_SECRET,
    server_metadata_url=settings.GOOGLE_METADATA_URL,
    client_kwargs={"scope": "openid email profile"},
)


def upsert_google_user(db: Session, userinfo: dict) -> User:
    """Create or refresh the local user for a verified Google identity."""
    email = (userinfo.get("email") or "").strip().lower()
    if not email:
        raise AuthenticationError("Google account has no email address")
    if userinfo.get("email_verified") is False:
        raise AuthenticationError("Google email is not verified")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(email=email)
        db.add(user)
        logger.info("New user signed up via Google: %s", email)

    user.name = userinfo.get("name") or user.name
    user.image = userinfo.get("picture") or user.image
    if userinfo.get("sub"):
        user.google_id = userinfo["sub"]
    if email in settings.admin_emails:
        user.role = "admin"

    db.commit()
    db.refresh(user)
    return user
