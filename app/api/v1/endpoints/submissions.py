"""API endpoints for driver applications and company hiring requests with email notifications."""

import logging
from typing import Iterable

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData
from starlette.exceptions import HTTPException

from app.constants.constants import (
    DRIVER_ERROR_MESSAGE,
    DRIVER_REQUIRED_FIELDS,
    DRIVER_SUCCESS_MESSAGE,
    DRIVER_TEST_MODE_MESSAGE,
    HIRING_ERROR_MESSAGE,
    HIRING_REQUIRED_FIELDS,
    HIRING_SUCCESS_MESSAGE,
    HIRING_TEST_MODE_MESSAGE,
)
from app.core.config import settings
from app.core.exceptions import DeliveryError, SubmissionError, ValidationError
from app.core.ratelimit import submission_limit
from app.schemas.driverapplicationSchema import DriverApplication
from app.schemas.hiringrequestSchema import HiringRequest
from app.schemas.submissionSchema import SubmissionResponse
from app.services.SmtpMailClient import SmtpMailClient, get_mail_client
from app.services.SubmissionNotifications import dispatch_driver_application, dispatch_hiring_request
from app.utils.sanitize_input import sanitize_fields
from app.utils.uploads.val_upload_resume import cleanup_file, extract_resume, store_resume
from app.utils.validate_submission import validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(tags=["submissions"])


def form_fields(form: FormData, list_fields: Iterable[str] = ()) -> dict:
    """
    Flatten parsed form data into a field mapping, skipping file parts.

    Repeated keys keep their last value, except list fields, which keep every
    value (e.g. routeType=OTR&routeType=Regional).
    """
    fields = {}
    for key in form.keys():
        values = [value for value in form.getlist(key) if isinstance(value, str)]
        if not values:
            continue
        if key in list_fields and len(values) > 1:
            fields[key] = values
        else:
            fields[key] = values[-1]
    return fields


async def read_submission_fields(request: Request, list_fields: Iterable[str] = ()) -> dict:
    """Read a JSON object body, or url-encoded/multipart form fields."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Invalid request body")
        if not isinstance(body, dict):
            raise ValidationError("Invalid request body")
        return body

    async with request.form() as form:
        return form_fields(form, list_fields)


@router.post("/submit-application", response_model=SubmissionResponse)
@submission_limit
async def submit_driver_application(
    request: Request,
    mail_client: SmtpMailClient = Depends(get_mail_client)
):
    """
    Submit a driver job application.

    Multipart form with the applicant's fields and an optional "resume" file
    (PDF or Word, max 5MB). The admin receives the application with the
    resume attached; the applicant receives a confirmation.
    """
    logger.info("Received driver application")
    resume = None

    try:
        async with request.form() as form:
            upload = extract_resume(form)
            if upload is not None:
                resume = await store_resume(upload, settings.UPLOAD_DIR, settings.MAX_UPLOAD_SIZE)
            fields = form_fields(form, DriverApplication.list_field_aliases())

        fields = sanitize_fields(fields)
        validate_submission(fields, DRIVER_REQUIRED_FIELDS)
        application = DriverApplication.model_validate(fields)

        delivered = await dispatch_driver_application(application, mail_client, resume)

    except DeliveryError as e:
        logger.error(f"Error submitting application: {e.message}")
        raise SubmissionError(DRIVER_ERROR_MESSAGE) from e
    except SubmissionError as se:
        logger.warning(f"Driver application rejected: {se.message}")
        raise
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting application: {str(e)}", exc_info=True)
        raise SubmissionError(DRIVER_ERROR_MESSAGE) from e
    finally:
        # the relay has read the attachment once dispatch returns
        if resume is not None:
            cleanup_file(resume.path)

    if not delivered:
        return {"message": DRIVER_TEST_MODE_MESSAGE}
    return {"message": DRIVER_SUCCESS_MESSAGE}


@router.post("/company-hiring", response_model=SubmissionResponse)
@submission_limit
async def submit_company_hiring_request(
    request: Request,
    mail_client: SmtpMailClient = Depends(get_mail_client)
):
    """
    Submit a company hiring request.

    Accepts a JSON object or form fields. "positions" may be a JSON array, a
    JSON-encoded array string or a single string.
    """
    logger.info("Received company hiring request")

    try:
        fields = await read_submission_fields(request, HiringRequest.list_field_aliases())
        fields = sanitize_fields(fields)
        validate_submission(fields, HIRING_REQUIRED_FIELDS)
        hiring_request = HiringRequest.model_validate(fields)

        delivered = await dispatch_hiring_request(hiring_request, mail_client)

    except DeliveryError as e:
        logger.error(f"Error submitting hiring request: {e.message}")
        raise SubmissionError(HIRING_ERROR_MESSAGE) from e
    except SubmissionError as se:
        logger.warning(f"Hiring request rejected: {se.message}")
        raise
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting hiring request: {str(e)}", exc_info=True)
        raise SubmissionError(HIRING_ERROR_MESSAGE) from e

    if not delivered:
        return {"message": HIRING_TEST_MODE_MESSAGE}
    return {"message": HIRING_SUCCESS_MESSAGE}
