# course_checkout/main.py
import logging

from fastapi import FastAPI, BackgroundTasks, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from course_checkout import database, events, schemas
from course_checkout.auth import Caller, require_student
from course_checkout.config import Settings, get_settings
from course_checkout.enrollment import EnrollmentService, GOOGLE_PAY, UPI_QR
from course_checkout.errors import CheckoutError, UnexpectedError
from course_checkout.notifications import EmailNotifier

# logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("course-checkout")

app = FastAPI(title="Course Checkout Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup: initialize DB and, when asked to, run the mail worker in-process
@app.on_event("startup")
def startup():
    settings = get_settings()
    logger.info("Initializing DB...")
    database.init_db(settings.database_url)
    if settings.run_mail_consumer and settings.rabbitmq_url:
        logger.info("Starting mail consumer on queue=%s", settings.mail_queue)
        events.start_mail_consumer(settings)
    logger.info("Startup complete.")


def _envelope(status_code: int, message: str, error: str = None) -> JSONResponse:
    body = schemas.ApiResponse(success=False, message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.dump())


@app.exception_handler(CheckoutError)
def checkout_error_handler(request: Request, exc: CheckoutError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error)
    return _envelope(exc.status_code, exc.message, exc.error)


@app.exception_handler(RequestValidationError)
def request_validation_handler(request: Request, exc: RequestValidationError):
    return _envelope(400, "Please provide all required fields", str(exc.errors()))


@app.exception_handler(StarletteHTTPException)
def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail))


def get_notifier(background_tasks: BackgroundTasks, settings: Settings = Depends(get_settings)):
    return EmailNotifier(settings, background_tasks)


def get_enrollment_service(
    db: Session = Depends(database.get_db),
    settings: Settings = Depends(get_settings),
    notifier=Depends(get_notifier),
) -> EnrollmentService:
    return EnrollmentService(db, settings, notifier)


def _guard(failure_message: str, call):
    """Run a service call, turning anything outside the taxonomy into a 500."""
    try:
        return call()
    except CheckoutError:
        raise
    except Exception as exc:
        logger.exception(failure_message)
        raise UnexpectedError(failure_message, error=str(exc)) from exc


# Root and health endpoints
@app.get("/")
def root():
    return {
        "service": "Course Checkout Service",
        "status": "running",
        "endpoints": ["/payment/generate-qr", "/payment/verify", "/payment/google-pay-intent", "/docs"],
    }


@app.get("/health")
def health(db: Session = Depends(database.get_db)):
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.exception("Health check failed: %s", e)
        raise HTTPException(status_code=503, detail="Database unreachable")
    return {"status": "ok"}


@app.post("/payment/generate-qr")
def generate_payment_qr(
    body: schemas.QuoteRequest,
    caller: Caller = Depends(require_student),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    descriptor = _guard(
        "Failed to generate QR code",
        lambda: service.request_quote(body.course_id, caller.id, UPI_QR),
    )
    logger.info("Generated UPI QR course=%s user=%s", body.course_id, caller.id)
    return schemas.ApiResponse(
        success=True,
        message="QR Code generated successfully",
        data=descriptor.model_dump(by_alias=True),
    ).dump()


@app.post("/payment/verify")
def verify_payment(
    body: schemas.VerifyPaymentRequest,
    caller: Caller = Depends(require_student),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    confirmation = _guard(
        "Failed to verify payment",
        lambda: service.confirm_enrollment(body.course_id, caller.id, body.transaction_id, body.payment_method),
    )
    return schemas.ApiResponse(
        success=True,
        message="Course enrollment successful",
        data=confirmation.model_dump(by_alias=True),
    ).dump()


@app.post("/payment/google-pay-intent")
def create_google_pay_intent(
    body: schemas.QuoteRequest,
    caller: Caller = Depends(require_student),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    intent = _guard(
        "Failed to create payment intent",
        lambda: service.request_quote(body.course_id, caller.id, GOOGLE_PAY),
    )
    logger.info("Created Google Pay intent course=%s user=%s", body.course_id, caller.id)
    return schemas.ApiResponse(
        success=True,
        message="Payment intent created successfully",
        data=intent.model_dump(by_alias=True),
    ).dump()
