"""Email notifications for new contact form submissions."""

import html
import logging
from typing import Optional
from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from fastapi_mail.schemas import MultipartSubtypeEnum

from portfolio_api.config import Settings
from portfolio_api.models import ContactSubmission

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "New Contact Form Submission"


def build_mail_config(settings: Settings) -> ConnectionConfig:
    """
    Build the SMTP configuration for the mail provider.

    The provider API key is used as the SMTP password (SendGrid relay).
    """
    return ConnectionConfig(
        MAIL_USERNAME=settings.mail_username,
        MAIL_PASSWORD=settings.mail_api_key or "",
        MAIL_FROM=settings.mail_from,
        MAIL_PORT=settings.mail_port,
        MAIL_SERVER=settings.mail_server,
        MAIL_STARTTLS=True,
        MAIL_SSL_TLS=False,
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
    )


def _submitted_at(submission: ContactSubmission) -> str:
    return submission.created_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def render_contact_text(submission: ContactSubmission) -> str:
    """Render the plain-text notification body."""
    return (
        "You have received a new contact form submission:\n\n"
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Subject: {submission.subject or 'No subject'}\n\n"
        f"Message:\n{submission.message}\n\n"
        f"This message was submitted on {_submitted_at(submission)}."
    )


def render_contact_html(submission: ContactSubmission) -> str:
    """Render the HTML notification body, escaping every submitted value."""
    submitted = _submitted_at(submission)
    return f"""
      <h2>New Contact Form Submission</h2>
      <p><strong>Name:</strong> {html.escape(submission.name)}</p>
      <p><strong>Email:</strong> {html.escape(submission.email)}</p>
      <p><strong>Subject:</strong> {html.escape(submission.subject or "No subject")}</p>
      <p><strong>Message:</strong></p>
      <div style="background: #f5f5f5; padding: 15px; border-radius: 5px; margin: 10px 0; white-space: pre-wrap;">
        {html.escape(submission.message)}
      </div>
      <p><em>Submitted on {submitted}</em></p>
    """


def build_contact_message(submission: ContactSubmission, recipient: str) -> MessageSchema:
    """
    Build the notification email for a stored submission.

    Args:
        submission: The stored contact submission
        recipient: Address that receives the notification

    Returns:
        MessageSchema: multipart/alternative message (HTML and plain text) replying
            to the submitter
    """
    return MessageSchema(
        subject=f"Contact Form: {submission.subject or DEFAULT_SUBJECT}",
        recipients=[recipient],
        reply_to=[submission.email],
        body=render_contact_html(submission),
        alternative_body=render_contact_text(submission),
        subtype=MessageType.html,
        multipart_subtype=MultipartSubtypeEnum.alternative,
    )


class ContactNotifier:
    """Best-effort sender of contact notifications; failures are only logged."""

    def __init__(self, settings: Settings, fastmail: Optional[FastMail] = None):
        self.recipient = settings.contact_email
        self.fastmail = fastmail

        if self.fastmail is None:
            if settings.mail_configured:
                self.fastmail = FastMail(build_mail_config(settings))
            else:
                logger.warning("SENDGRID_API_KEY not configured - email functionality disabled")

    async def notify(self, submission: ContactSubmission) -> bool:
        """
        Send the notification for ``submission``.

        Returns:
            bool: True if the provider accepted the message
        """
        if self.fastmail is None:
            logger.warning(f"Mail not configured - no notification for submission {submission.id}")
            return False

        if not self.recipient:
            logger.warning(f"CONTACT_EMAIL not configured - no notification for submission {submission.id}")
            return False

        try:
            message = build_contact_message(submission, self.recipient)
            await self.fastmail.send_message(message)
        except Exception as e:
            logger.error(f"Failed to send notification for contact submission {submission.id}: {e}")
            return False

        logger.info(f"Notification sent for contact submission {submission.id}")
        return True
