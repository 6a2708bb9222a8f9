"""UPI deep links and their QR rendering.

Everything here is pure: the same course, price and payee always produce the
same link and the same image.
"""
import base64
import io
import logging

import qrcode

from course_checkout.config import Settings
from course_checkout.errors import EncodingError
from course_checkout.schemas import UpiPaymentDescriptor

logger = logging.getLogger(__name__)


def format_amount(amount) -> str:
    """Render a price the way it is stored: 499, not 499.0."""
    value = float(amount)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def build_upi_string(upi_id: str, amount, course_id: str, payee_name: str = "StudyNotion") -> str:
    return f"upi://pay?pa={upi_id}&pn={payee_name}&am={format_amount(amount)}&tn=Course-{course_id}"


def build_qr(payload: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M)
    qr.add_data(payload)
    qr.make(fit=True)
    return qr


def render_qr_data_uri(payload: str) -> str:
    try:
        img = build_qr(payload).make_image()
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    except Exception as exc:
        logger.exception("QR encoding failed for payload of length %s", len(payload))
        raise EncodingError(error=str(exc)) from exc
    b64 = base64.b64encode(buf.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{b64}"


def generate_upi_qr(course, settings: Settings) -> UpiPaymentDescriptor:
    upi_string = build_upi_string(settings.upi_id, course.price, course.id, settings.merchant_name)
    return UpiPaymentDescriptor(
        qr_code=render_qr_data_uri(upi_string),
        amount=course.price,
        course=course.course_name,
        upi_string=upi_string,
    )
