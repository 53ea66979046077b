"""Outgoing mail via fastapi-mail."""

import html
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from coursehub.config import settings

logger = logging.getLogger(__name__)

SUBJECTS = {
    "general": "General question",
    "courses": "Questions about courses",
    "enrollment": "Enrollment",
    "technical": "Technical support",
    "partnership": "Partnership",
    "other": "Other",
}


def _connection_config() -> ConnectionConfig:
    return ConnectionConfig(
        MAIL_USERNAME=settings.MAIL_USERNAME,
        MAIL_PASSWORD=settings.MAIL_PASSWORD,
        MAIL_FROM=settings.MAIL_FROM,
        MAIL_PORT=settings.MAIL_PORT,
        MAIL_SERVER=settings.MAIL_SERVER,
        MAIL_STARTTLS=settings.MAIL_STARTTLS,
        MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
        SUPPRESS_SEND=1 if settings.MAIL_SUPPRESS_SEND else 0,
        USE_CREDENTIALS=bool(settings.MAIL_USERNAME),
    )


def contact_subject(subject: Optional[str]) -> str:
    if not subject:
        return "[Site] New message"
    return f"[Site] {SUBJECTS.get(subject, subject)}"


def render_contact_body(name: str, email: str, subject: Optional[str], message: str) -> str:
    topic = SUBJECTS.get(subject, subject) if subject else "Not specified"
    sent_at = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    body = html.escape(message).replace("\n", "<br>")
    return (
        "<h2>New message from the site</h2>"
        f"<p><strong>Name:</strong> {html.escape(name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>"
        f"<p><strong>Subject:</strong> {html.escape(topic)}</p>"
        "<hr><h3>Message:</h3>"
        f"<p>{body}</p>"
        f"<hr><p><small>Sent: {sent_at}</small></p>"
    )


async def send_contact_mail(to: str, name: str, email: str, subject: Optional[str], message: str) -> str:
    """Send the contact form to the support address and return the subject used."""
    email_subject = contact_subject(subject)
    msg = MessageSchema(
        subject=email_subject,
        recipients=[to],
        body=render_contact_body(name, email, subject, message),
        subtype=MessageType.html,
        reply_to=[email],
    )
    fm = FastMail(_connection_config())
    await fm.send_message(msg)
    logger.info("Contact mail from %s sent to %s", email, to)
    return email_subject
