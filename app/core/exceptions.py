"""Error taxonomy for form submissions, rendered as ``{"error": message}``."""

from app.constants.constants import NOT_FOUND_MESSAGE, RATE_LIMIT_MESSAGE


class SubmissionError(Exception):
    """Base class for errors that map straight onto an HTTP response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(SubmissionError):
    """Missing or malformed submission fields."""

    status_code = 400
    message = "Missing required fields"


class FileRejected(SubmissionError):
    """Uploaded file failed the size or type checks."""

    status_code = 400
    message = "Only PDF and Word documents are allowed"


class RateLimited(SubmissionError):
    status_code = 429
    message = RATE_LIMIT_MESSAGE


class DeliveryError(SubmissionError):
    """The SMTP relay refused or failed to deliver a message."""

    status_code = 500
    message = "Failed to send email"


class NotFound(SubmissionError):
    status_code = 404
    message = NOT_FOUND_MESSAGE
