import logging
import smtplib
from email.message import EmailMessage

from course_checkout.config import Settings

logger = logging.getLogger(__name__)


def send_email(settings: Settings, to: str, subject: str, html: str):
    """Send one HTML mail over SMTP with STARTTLS."""
    if not settings.mail_user or not settings.mail_password:
        raise RuntimeError("MAIL_USER / MAIL_PASSWORD not configured")

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.mail_from
    msg["To"] = to
    msg.set_content("This message requires an HTML capable mail client.")
    msg.add_alternative(html, subtype="html")

    with smtplib.SMTP(settings.mail_host, settings.mail_port, timeout=10) as server:
        server.starttls()
        server.login(settings.mail_user, settings.mail_password)
        server.send_message(msg)
    logger.info("Sent mail %r to %s", subject, to)
