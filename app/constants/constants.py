"""Constants for upload filtering, required form fields, placeholders and response messages."""


# ------------------------------
# Uploads
# ------------------------------
RESUME_FIELD = "resume"

ALLOWED_DOCUMENT_EXTENSIONS = {".pdf", ".doc", ".docx"}
ALLOWED_DOCUMENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# ------------------------------
# Validation
# ------------------------------
EMAIL_PATTERN = r"[^\s@]+@[^\s@]+\.[^\s@]+"

DRIVER_REQUIRED_FIELDS = ("firstName", "lastName", "email", "phone")
HIRING_REQUIRED_FIELDS = ("companyName", "contactPerson", "email", "phone")

# ------------------------------
# Rendering placeholders
# ------------------------------
PLACEHOLDER_NA = "N/A"
PLACEHOLDER_NONE = "None"
PLACEHOLDER_NOT_SPECIFIED = "Not specified"

# ------------------------------
# Response messages
# ------------------------------
RATE_LIMIT_MESSAGE = "Too many requests, please try again later."
CORS_REJECTED_MESSAGE = "Not allowed by CORS"
NOT_FOUND_MESSAGE = "Endpoint not found"
INTERNAL_ERROR_MESSAGE = "Internal server error"

DRIVER_SUCCESS_MESSAGE = "Application submitted successfully"
DRIVER_TEST_MODE_MESSAGE = "Application submitted successfully (test mode)"
DRIVER_ERROR_MESSAGE = "Error submitting application. Please try again."

HIRING_SUCCESS_MESSAGE = "Hiring request submitted successfully"
HIRING_TEST_MODE_MESSAGE = "Request submitted successfully (test mode)"
HIRING_ERROR_MESSAGE = "Error submitting hiring request. Please try again."
