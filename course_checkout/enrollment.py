import logging
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from course_checkout import models
from course_checkout.config import Settings
from course_checkout.errors import (
    AlreadyEnrolledError,
    NotFoundError,
    UnauthenticatedError,
    UnexpectedError,
    ValidationError,
)
from course_checkout.intents import build_google_pay_intent
from course_checkout.qr import generate_upi_qr
from course_checkout.schemas import EnrollmentConfirmation

UPI_QR = "UPI_QR"
GOOGLE_PAY = "GOOGLE_PAY"
PAYMENT_METHODS = (UPI_QR, GOOGLE_PAY)

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EnrollmentService:
    """
    Quotes a course and enrolls the caller once they report a payment.

    The transaction id and payment method handed to confirm_enrollment are
    taken on the caller's word: nothing here checks them against a gateway.
    Two concurrent confirmations for the same pair can both pass the
    already-enrolled read and both write.
    """

    def __init__(self, db: Session, settings: Settings, notifier=None):
        self.db = db
        self.settings = settings
        self.notifier = notifier

    def _load(self, course_id: str, caller_id: str) -> Tuple[models.Course, models.User]:
        course = self.db.query(models.Course).filter(models.Course.id == course_id).first()
        user = self.db.query(models.User).filter(models.User.id == caller_id).first()
        if not course:
            raise NotFoundError("Course not found")
        if not user:
            raise UnauthenticatedError("User not authenticated")
        return course, user

    @staticmethod
    def _ensure_not_enrolled(course: models.Course, user: models.User):
        if course.id in (user.courses or []) or user.id in (course.students_enrolled or []):
            raise AlreadyEnrolledError("You are already enrolled in this course")

    def request_quote(self, course_id: Optional[str], caller_id: str, method: str = UPI_QR):
        if _blank(course_id):
            raise ValidationError("Please provide course ID")
        if method not in PAYMENT_METHODS:
            raise ValidationError(f"Unsupported payment method: {method}")

        course, user = self._load(course_id, caller_id)
        self._ensure_not_enrolled(course, user)

        if method == GOOGLE_PAY:
            return build_google_pay_intent(course.price, self.settings)
        return generate_upi_qr(course, self.settings)

    def confirm_enrollment(
        self,
        course_id: Optional[str],
        caller_id: str,
        transaction_id: Optional[str],
        payment_method: Optional[str],
    ) -> EnrollmentConfirmation:
        if any(_blank(v) for v in (course_id, caller_id, transaction_id, payment_method)):
            raise ValidationError("Please provide all required fields")

        course, user = self._load(course_id, caller_id)
        self._ensure_not_enrolled(course, user)

        try:
            progress = models.CourseProgress(course_id=course.id, user_id=user.id, completed_videos=[])
            self.db.add(progress)
            self.db.flush()

            user.courses.append(course.id)
            user.course_progress.append(progress.id)

            course.students_enrolled.append(user.id)

            self.db.add(models.Payment(
                student_id=user.id,
                course_id=course.id,
                amount=course.price,
                method=payment_method,
                status="SUCCESS",
                transaction_ref=transaction_id,
            ))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Enrollment write failed course=%s user=%s", course_id, caller_id)
            raise UnexpectedError("Failed to verify payment", error=str(exc)) from exc

        logger.info(
            "Enrolled user=%s in course=%s via %s transaction=%s (unverified)",
            user.id, course.id, payment_method, transaction_id,
        )

        if self.notifier is not None:
            try:
                self.notifier.notify_enrollment(user, course, transaction_id, payment_method)
            except Exception:
                logger.exception("Error queueing enrollment mail for user=%s", user.id)

        return EnrollmentConfirmation(
            course_id=course.id,
            course_name=course.course_name,
            transaction_id=transaction_id,
        )
