"""Email templates and senders for driver applications and company hiring requests."""

import html
import logging
from typing import Iterable, Optional

from app.constants.constants import PLACEHOLDER_NA, PLACEHOLDER_NONE, PLACEHOLDER_NOT_SPECIFIED
from app.core.config import settings
from app.schemas.driverapplicationSchema import DriverApplication
from app.schemas.hiringrequestSchema import HiringRequest
from app.services.SmtpMailClient import SmtpMailClient
from app.utils.uploads.val_upload_resume import StoredUpload

logger = logging.getLogger(__name__)


# Shared head for every template. Literal braces are doubled for str.format.
EMAIL_HEAD = """
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .header {{ background: linear-gradient(135deg, #0A2463 0%, #1e40af 100%); color: white; padding: 30px; border-radius: 10px 10px 0 0; }}
            .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
            .details {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #ffc007; }}
            .footer {{ text-align: center; margin-top: 20px; color: #6b7280; font-size: 12px; }}
            h1 {{ margin: 0; }}
            h3 {{ margin-top: 0; color: #0A2463; }}
        </style>
    </head>
"""

DRIVER_APPLICATION_ADMIN_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    """ + EMAIL_HEAD + """
    <body>
        <div class="container">
            <div class="header">
                <h1>New Driver Application Received</h1>
            </div>
            <div class="content">
                <div class="details">
                    <p><strong>Name:</strong> {first_name} {last_name}</p>
                    <p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>
                    <p><strong>Phone:</strong> {phone}</p>
                    <p><strong>Age:</strong> {age}</p>
                    <p><strong>CDL License:</strong> {cdl_license}</p>
                    <p><strong>OTR Experience:</strong> {otr_experience}</p>
                    <p><strong>Years Experience:</strong> {years_experience}</p>
                    <p><strong>Clean Driving Record:</strong> {clean_record}</p>
                    <p><strong>DOT Physical:</strong> {dot_physical}</p>
                    <p><strong>Preferred Routes:</strong> {routes}</p>
                    <p><strong>Home Time:</strong> {home_time}</p>
                    <p><strong>Salary Expectation:</strong> {pay_expectation}</p>
                    <p><strong>Additional Info:</strong> {additional_info}</p>
                    <p><strong>Resume:</strong> {resume}</p>
                </div>
                <p class="footer">Click Reply to respond directly to the applicant</p>
            </div>
        </div>
    </body>
    </html>
    """

DRIVER_APPLICATION_CONFIRMATION_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    """ + EMAIL_HEAD + """
    <body>
        <div class="container">
            <div class="header">
                <h1>Thank you for your application!</h1>
            </div>
            <div class="content">
                <p>Hi {first_name},</p>
                <p>We have received your driver application and will review it shortly.</p>
                <p>Our team will contact you within 2-3 business days.</p>
                <br>
                <p>Best regards,<br>{company_name} Team</p>
            </div>
        </div>
    </body>
    </html>
    """

HIRING_REQUEST_ADMIN_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    """ + EMAIL_HEAD + """
    <body>
        <div class="container">
            <div class="header">
                <h1>New Company Hiring Request</h1>
            </div>
            <div class="content">
                <div class="details">
                    <h3>Company Information</h3>
                    <p><strong>Company:</strong> {company_name}</p>
                    <p><strong>Industry:</strong> {industry}</p>
                    <p><strong>Contact Person:</strong> {contact_person}</p>
                    <p><strong>Email:</strong> <a href="mailto:{email}">{email}</a></p>
                    <p><strong>Phone:</strong> {phone}</p>
                    <p><strong>Website:</strong> {website}</p>
                    <p><strong>Address:</strong> {address}</p>
                </div>
                <div class="details">
                    <h3>Hiring Details</h3>
                    <p><strong>Positions:</strong> {positions}</p>
                    <p><strong>Drivers Needed:</strong> {number_of_drivers_needed}</p>
                    <p><strong>Experience Required:</strong> {experience_level}</p>
                    <p><strong>Salary Range:</strong> {salary}</p>
                    <p><strong>Benefits:</strong> {benefits}</p>
                    <p><strong>Job Description:</strong> {job_description}</p>
                    <p><strong>Additional Info:</strong> {additional_info}</p>
                </div>
                <p class="footer">Click Reply to respond directly to the company contact</p>
            </div>
        </div>
    </body>
    </html>
    """

HIRING_REQUEST_CONFIRMATION_TEMPLATE = """
    <!DOCTYPE html>
    <html>
    """ + EMAIL_HEAD + """
    <body>
        <div class="container">
            <div class="header">
                <h1>Thank you for your interest!</h1>
            </div>
            <div class="content">
                <p>Hi {contact_person},</p>
                <p>We have received your hiring request{drivers_phrase}.</p>
                <p>Our recruitment team will review your requirements and contact you within 1-2 business days.</p>
                <br>
                <p>Best regards,<br>{company_name_signature} Team</p>
            </div>
        </div>
    </body>
    </html>
    """

DRIVER_ADMIN_SUBJECT = "New Driver Application: {first_name} {last_name}"
DRIVER_CONFIRMATION_SUBJECT = "Application Received - {company_name}"
HIRING_ADMIN_SUBJECT = "New Hiring Request: {company_name}"
HIRING_CONFIRMATION_SUBJECT = "Hiring Request Received - {company_name_signature}"


def or_placeholder(value: Optional[str], placeholder: str = PLACEHOLDER_NA) -> str:
    return value if value else placeholder


def join_list(values: Optional[Iterable[str]], placeholder: str = PLACEHOLDER_NA) -> str:
    """Comma-join a list field, e.g. ["OTR", "Regional"] -> "OTR, Regional"."""
    if not values:
        return placeholder
    return ", ".join(values)


def format_address(request: HiringRequest) -> str:
    """Street, City, State Zip with missing parts left out."""
    region = " ".join(part for part in (request.state, request.zip_code) if part)
    parts = [part for part in (request.address, request.city, region) if part]
    return ", ".join(parts) if parts else PLACEHOLDER_NA


def driver_application_vars(application: DriverApplication, resume: StoredUpload = None) -> dict:
    return {
        "first_name": application.first_name,
        "last_name": application.last_name,
        "email": html.escape(application.email, quote=True),
        "phone": application.phone,
        "age": or_placeholder(application.age),
        "cdl_license": or_placeholder(application.cdl_license),
        "otr_experience": or_placeholder(application.otr_experience),
        "years_experience": or_placeholder(application.years_experience),
        "clean_record": or_placeholder(application.clean_record),
        "dot_physical": or_placeholder(application.dot_physical),
        "routes": join_list(application.route_type),
        "home_time": or_placeholder(application.home_time),
        "pay_expectation": or_placeholder(application.pay_expectation),
        "additional_info": or_placeholder(application.additional_info, PLACEHOLDER_NONE),
        "resume": resume.original_filename if resume else "Not attached",
        "company_name": settings.COMPANY_NAME,
    }


def hiring_request_vars(request: HiringRequest) -> dict:
    drivers = request.number_of_drivers_needed
    return {
        "company_name": request.company_name,
        "industry": or_placeholder(request.industry),
        "contact_person": request.contact_person,
        "email": html.escape(request.email, quote=True),
        "phone": request.phone,
        "website": or_placeholder(request.website),
        "address": format_address(request),
        "positions": join_list(request.positions),
        "number_of_drivers_needed": or_placeholder(drivers),
        "drivers_phrase": f" for {drivers} driver(s)" if drivers else "",
        "experience_level": or_placeholder(request.experience_level),
        "salary": or_placeholder(request.salary),
        "benefits": or_placeholder(request.benefits, PLACEHOLDER_NOT_SPECIFIED),
        "job_description": or_placeholder(request.job_description),
        "additional_info": or_placeholder(request.additional_info, PLACEHOLDER_NONE),
        # the submitter's company_name is taken above, so our own name gets its own key
        "company_name_signature": settings.COMPANY_NAME,
    }


def render_driver_application_admin(application: DriverApplication, resume: StoredUpload = None) -> str:
    return DRIVER_APPLICATION_ADMIN_TEMPLATE.format(**driver_application_vars(application, resume))


def render_driver_application_confirmation(application: DriverApplication) -> str:
    return DRIVER_APPLICATION_CONFIRMATION_TEMPLATE.format(**driver_application_vars(application))


def render_hiring_request_admin(request: HiringRequest) -> str:
    return HIRING_REQUEST_ADMIN_TEMPLATE.format(**hiring_request_vars(request))


def render_hiring_request_confirmation(request: HiringRequest) -> str:
    return HIRING_REQUEST_CONFIRMATION_TEMPLATE.format(**hiring_request_vars(request))


async def notify_admin_new_driver_application(
    application: DriverApplication,
    mail_client: SmtpMailClient,
    resume: StoredUpload = None,
    admin_emails: list = None
) -> dict:
    """Notify the admin about a new driver application, with the resume attached."""
    if admin_emails is None:
        admin_emails = [settings.ADMIN_EMAIL]

    result = await mail_client.send_admin_notification(
        admin_emails=admin_emails,
        subject=DRIVER_ADMIN_SUBJECT.format(**driver_application_vars(application, resume)),
        template_html=render_driver_application_admin(application, resume),
        reply_to_applicant=application.email,
        attachments=[resume] if resume else None
    )
    logger.info(f"Admin notified about driver application from {application.first_name} {application.last_name}")
    return result


async def notify_driver_application_received(
    application: DriverApplication,
    mail_client: SmtpMailClient
) -> dict:
    """Send confirmation email for a driver application."""
    result = await mail_client.send_user_confirmation(
        to_email=application.email,
        subject=DRIVER_CONFIRMATION_SUBJECT.format(**driver_application_vars(application)),
        template_html=render_driver_application_confirmation(application)
    )
    logger.info(f"Confirmation email sent to: {application.email}")
    return result


async def notify_admin_new_hiring_request(
    request: HiringRequest,
    mail_client: SmtpMailClient,
    admin_emails: list = None
) -> dict:
    """Notify the admin about a new company hiring request."""
    if admin_emails is None:
        admin_emails = [settings.ADMIN_EMAIL]

    result = await mail_client.send_admin_notification(
        admin_emails=admin_emails,
        subject=HIRING_ADMIN_SUBJECT.format(**hiring_request_vars(request)),
        template_html=render_hiring_request_admin(request),
        reply_to_applicant=request.email
    )
    logger.info(f"Admin notified about hiring request from {request.company_name}")
    return result


async def notify_hiring_request_received(
    request: HiringRequest,
    mail_client: SmtpMailClient
) -> dict:
    """Send confirmation email for a company hiring request."""
    result = await mail_client.send_user_confirmation(
        to_email=request.email,
        subject=HIRING_CONFIRMATION_SUBJECT.format(**hiring_request_vars(request)),
        template_html=render_hiring_request_confirmation(request)
    )
    logger.info(f"Confirmation email sent to: {request.email}")
    return result


async def dispatch_driver_application(
    application: DriverApplication,
    mail_client: SmtpMailClient,
    resume: StoredUpload = None
) -> bool:
    """
    Send the admin notice, then the applicant confirmation.

    Returns False in test mode, where the admin notice is only logged and no
    confirmation is attempted. DeliveryError from either send propagates.
    """
    await notify_admin_new_driver_application(application, mail_client, resume)
    if mail_client.disabled:
        return False
    await notify_driver_application_received(application, mail_client)
    return True


async def dispatch_hiring_request(request: HiringRequest, mail_client: SmtpMailClient) -> bool:
    """Same sequence as dispatch_driver_application for a hiring request."""
    await notify_admin_new_hiring_request(request, mail_client)
    if mail_client.disabled:
        return False
    await notify_hiring_request_received(request, mail_client)
    return True
