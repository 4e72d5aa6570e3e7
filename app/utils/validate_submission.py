import re
from typing import Any, Iterable, Mapping

from app.constants.constants import EMAIL_PATTERN
from app.core.exceptions import ValidationError

EMAIL_REGEX = re.compile(EMAIL_PATTERN)


def is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value)


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_REGEX.fullmatch(value) is not None


def validate_required(fields: Mapping[str, Any], required: Iterable[str]) -> None:
    """Raise ValidationError if any required field is absent or empty."""
    missing = [name for name in required if is_missing(fields.get(name))]
    if missing:
        raise ValidationError("Missing required fields")


def validate_email_fields(fields: Mapping[str, Any], email_fields: Iterable[str]) -> None:
    for name in email_fields:
        if not is_valid_email(fields.get(name)):
            raise ValidationError("Invalid email format")


def validate_submission(
    fields: Mapping[str, Any],
    required: Iterable[str],
    email_fields: Iterable[str] = ("email",),
) -> None:
    """
    Validate sanitized submission fields.

    Required fields are checked before email formats so a blank email reports
    as missing rather than malformed.
    """
    validate_required(fields, required)
    validate_email_fields(fields, email_fields)
