"""
Booking error taxonomy
Every error carries the HTTP status and the message returned to the caller
"""

from fastapi import status


class BookingError(Exception):
    """Base class for errors mapped directly to an HTTP response"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Error processing request"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class VerificationError(BookingError):
    """Email verification code could not be accepted"""

    status_code = status.HTTP_400_BAD_REQUEST


class CodeNotFoundError(VerificationError):
    message = "No verification code found for this email. Please request a new code."


class CodeExpiredError(VerificationError):
    message = "Verification code has expired. Please request a new code."


class CodeMismatchError(VerificationError):
    message = "Invalid verification code. Please try again."


class AppointmentNotFoundError(BookingError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Appointment not found"


class InvalidStatusError(BookingError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid status value"


class EmailNotVerifiedError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    message = "Email address has not been verified for this appointment"


class PaymentGatewayError(BookingError):
    """PayMongo rejected the request or could not be reached"""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Failed to create payment link"


class EmailTransportError(BookingError):
    """Email provider failed to accept the message"""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Failed to send email"


class AuthenticationError(BookingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class PermissionDeniedError(BookingError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden: insufficient role"


class AdminExistsError(BookingError):
    status_code = status.HTTP_409_CONFLICT
    message = "Could not create user: email already registered"
