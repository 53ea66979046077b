"""Contact router — site contact form and public admin contact."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import AppError, NotFoundError, ServiceUnavailableError
from coursehub.middleware.rate_limit import limiter, CONTACT_LIMIT
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse
from coursehub.schemas.contact import ContactForm, ContactInfo
from coursehub.services import mailer
from coursehub.services.audit import log_action
from coursehub.services.site_settings import support_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("/send", response_model=ApiResponse)
@limiter.limit(CONTACT_LIMIT)
async def send_contact(request: Request, req: ContactForm, db: Session = Depends(get_db)):
    """Forward the form to the support address from admin settings."""
    to = support_email(db)
    if not to:
        raise ServiceUnavailableError("Support email is not configured")

    try:
        email_subject = await mailer.send_contact_mail(to, req.name, req.email, req.subject, req.message)
    except Exception:
        logger.exception("Contact mail from %s could not be sent", req.email)
        raise AppError("Could not send the message")

    log_action(
        db,
        "contact_form_sent",
        f"Message from {req.email} ({req.name}) with subject: {email_subject}",
        entity_type="contact",
    )
    db.commit()
    return ApiResponse(message="Message sent")


@router.get("/info", response_model=ApiResponse[ContactInfo])
def contact_info(db: Session = Depends(get_db)):
    """Telegram handle of an administrator, for the contact page."""
    admin = (
        db.query(User)
        .filter(User.role == "admin", User.telegram.isnot(None), User.telegram != "")
        .order_by(User.created_at)
        .first()
    )
    if not admin:
        raise NotFoundError("Administrator telegram")
    return ApiResponse(data=ContactInfo(telegram=admin.telegram))
