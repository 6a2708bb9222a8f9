class CheckoutError(Exception):
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str = None, error: str = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(CheckoutError):
    status_code = 400
    default_message = "Please provide all required fields"


class NotFoundError(CheckoutError):
    status_code = 404
    default_message = "Course not found"


class UnauthenticatedError(CheckoutError):
    status_code = 401
    default_message = "User not authenticated"


class ForbiddenError(CheckoutError):
    status_code = 403
    default_message = "This is a protected route for students"


class AlreadyEnrolledError(CheckoutError):
    status_code = 400
    default_message = "You are already enrolled in this course"


class EncodingError(CheckoutError):
    status_code = 500
    default_message = "Failed to generate QR code"


class UnexpectedError(CheckoutError):
    status_code = 500
