"""Transactional mail sent after an enrollment commits.

Delivery is fire-and-forget: messages are handed to FastAPI background tasks
after the response is produced, and every failure stops at a log line.
"""
import html
import logging
from dataclasses import dataclass, asdict
from typing import List, Optional

from fastapi import BackgroundTasks

from course_checkout import events, mailer
from course_checkout.config import Settings
from course_checkout.qr import format_amount

logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str


def _layout(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><head><meta charset=\"UTF-8\">"
        f"<title>{title}</title></head>"
        "<body style=\"font-family: Arial, sans-serif; color: #000814;\">"
        f"<div style=\"max-width: 600px; margin: 0 auto; padding: 20px; text-align: center;\">"
        f"<div style=\"font-size: 18px; font-weight: bold; margin-bottom: 20px;\">{title}</div>"
        f"<div style=\"font-size: 16px; margin-bottom: 20px;\">{body}</div>"
        "<div style=\"font-size: 14px; color: #999999;\">If you have any questions, "
        "reply to this email and we will be happy to help.</div>"
        "</div></body></html>"
    )


def course_enrollment_email(course_name: str, name: str) -> str:
    course_name, name = html.escape(course_name), html.escape(name)
    return _layout(
        "Course Registration Confirmation",
        f"<p>Dear {name},</p>"
        f"<p>You have successfully registered for the course <strong>\"{course_name}\"</strong>. "
        "We are excited to have you as a participant!</p>"
        "<p>Please log in to your learning dashboard to access the course materials.</p>",
    )


def payment_success_email(course_name: str, name: str, amount, transaction_id: str, payment_method: str) -> str:
    course_name, name = html.escape(course_name), html.escape(name)
    return _layout(
        "Payment Confirmation",
        f"<p>Dear {name},</p>"
        f"<p>We have received a payment of <strong>&#8377;{format_amount(amount)}</strong> "
        f"for <strong>\"{course_name}\"</strong>.</p>"
        f"<p>Transaction ID: <strong>{html.escape(transaction_id)}</strong></p>"
        f"<p>Payment method: <strong>{html.escape(payment_method)}</strong></p>",
    )


def enrollment_messages(user, course, transaction_id: str, payment_method: str) -> List[EmailMessage]:
    return [
        EmailMessage(
            to=user.email,
            subject="Course Enrollment Confirmation",
            html=course_enrollment_email(course.course_name, user.first_name),
        ),
        EmailMessage(
            to=user.email,
            subject="Payment Success",
            html=payment_success_email(
                course.course_name, user.first_name, course.price, transaction_id, payment_method
            ),
        ),
    ]


def dispatch_email(settings: Settings, message: EmailMessage):
    """Queue a message for the mail worker, or send it inline when no broker is configured."""
    try:
        if settings.rabbitmq_url:
            events.publish_event(
                settings.rabbitmq_url,
                events.MAIL_ROUTING_KEY,
                {"type": "SendEmail", "payload": asdict(message)},
                queue=settings.mail_queue,
                binding_key=events.MAIL_BINDING_KEY,
            )
        else:
            mailer.send_email(settings, message.to, message.subject, message.html)
    except Exception:
        logger.exception("Error sending email %r to %s", message.subject, message.to)


class EmailNotifier:
    def __init__(self, settings: Settings, background_tasks: Optional[BackgroundTasks] = None):
        self.settings = settings
        self.background_tasks = background_tasks

    def notify_enrollment(self, user, course, transaction_id: str, payment_method: str):
        if not self.settings.notifications_enabled:
            logger.info("Notifications disabled, skipping enrollment mail for user=%s", user.id)
            return
        try:
            messages = enrollment_messages(user, course, transaction_id, payment_method)
        except Exception:
            logger.exception("Error rendering enrollment mail for user=%s course=%s", user.id, course.id)
            return
        for message in messages:
            if self.background_tasks is not None:
                self.background_tasks.add_task(dispatch_email, self.settings, message)
            else:
                dispatch_email(self.settings, message)
