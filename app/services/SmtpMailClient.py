"""SMTP client for admin notices and submitter confirmations."""

import logging
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

import aiosmtplib
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import DeliveryError
from app.utils.uploads.val_upload_resume import StoredUpload

logger = logging.getLogger(__name__)


class SmtpMailClient:
    """
    Client for sending HTML emails through an SMTP relay.

    A single authenticated sender is used for every message. Admin notices set
    the reply-to header to the submitter so the team can answer directly.

    When ``disabled`` is set nothing is sent: callers log the admin notice and
    skip the confirmation (test mode).
    """

    def __init__(
        self,
        hostname: str,
        port: int,
        username: str = None,
        password: str = None,
        default_sender: str = None,
        use_tls: bool = True,
        timeout: float = 30.0,
        disabled: bool = False
    ):
        self.hostname = hostname
        self.port = port
        self.username = username or None
        self.password = password or None
        self.default_sender = default_sender or username
        self.use_tls = use_tls
        self.timeout = timeout
        self.disabled = disabled

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)

    async def verify_connection(self) -> bool:
        """Connect and authenticate once. Only logs the outcome."""
        smtp = aiosmtplib.SMTP(
            hostname=self.hostname,
            port=self.port,
            use_tls=self.use_tls,
            timeout=self.timeout,
        )
        try:
            async with smtp:
                if self.username:
                    await smtp.login(self.username, self.password)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Email configuration error: {e}")
            return False

        logger.info(f"📧 Email server ready ({self.hostname}:{self.port})")
        return True

    async def _build_message(
        self,
        to_emails: list[str],
        subject: str,
        body_html: str,
        reply_to: str = None,
        attachments: list[StoredUpload] = None
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.default_sender
        message["To"] = ", ".join(to_emails)
        # header values cannot carry line breaks
        message["Subject"] = " ".join(subject.split())
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid(domain=(self.default_sender or "localhost").rpartition("@")[2])
        if reply_to:
            message["Reply-To"] = reply_to

        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(body_html, subtype="html")

        for attachment in attachments or []:
            data = await run_in_threadpool(attachment.path.read_bytes)
            maintype, _, subtype = (attachment.content_type or "application/octet-stream").partition("/")
            message.add_attachment(
                data,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.original_filename
            )

        return message

    async def send_email(
        self,
        to_emails: list[str],
        subject: str,
        body_html: str,
        reply_to: str = None,
        attachments: list[StoredUpload] = None
    ) -> dict:
        """
        Send an HTML email.

        Args:
            to_emails: List of recipient email addresses
            subject: Email subject
            body_html: HTML body content
            reply_to: Reply-to address (optional)
            attachments: Stored uploads to attach (optional)

        Returns:
            dict with status information

        Raises:
            DeliveryError if the relay rejects the message or cannot be reached
        """
        if self.disabled:
            logger.info(f"Emails disabled. Would send: {subject}")
            return {"status": "skipped", "to": to_emails, "subject": subject}

        message = await self._build_message(to_emails, subject, body_html, reply_to, attachments)

        try:
            await aiosmtplib.send(
                message,
                hostname=self.hostname,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Failed to send email to {', '.join(to_emails)}: {e}")
            raise DeliveryError(f"Failed to send email: {e}") from e

        logger.info(f"✅ Email sent to {', '.join(to_emails)} (reply-to: {reply_to or 'none'})")

        return {
            "status": "sent",
            "from": self.default_sender,
            "to": to_emails,
            "reply_to": reply_to,
            "subject": subject
        }

    async def send_email_with_template(
        self,
        to_emails: list[str],
        subject: str,
        template_html: str,
        template_vars: dict = None,
        reply_to: str = None,
        attachments: list[StoredUpload] = None
    ) -> dict:
        """
        Send an email using a template with variable substitution.

        Example:
            await client.send_email_with_template(
                to_emails=["jane@example.com"],
                subject="Welcome {name}!",
                template_html="<h1>Hi {name}!</h1>",
                template_vars={"name": "Jane"},
            )
        """
        if template_vars:
            subject = subject.format(**template_vars)
            body_html = template_html.format(**template_vars)
        else:
            body_html = template_html

        return await self.send_email(
            to_emails=to_emails,
            subject=subject,
            body_html=body_html,
            reply_to=reply_to,
            attachments=attachments
        )

    async def send_user_confirmation(
        self,
        to_email: str,
        subject: str,
        template_html: str,
        template_vars: dict = None
    ) -> dict:
        """Convenience method for sending a confirmation to the submitter."""
        return await self.send_email_with_template(
            to_emails=[to_email],
            subject=subject,
            template_html=template_html,
            template_vars=template_vars
        )

    async def send_admin_notification(
        self,
        admin_emails: list[str],
        subject: str,
        template_html: str,
        template_vars: dict = None,
        reply_to_applicant: str = None,
        attachments: list[StoredUpload] = None
    ) -> dict:
        """
        Convenience method for sending admin notification emails.
        Reply-to is set to the applicant's email for easy response.
        """
        return await self.send_email_with_template(
            to_emails=admin_emails,
            subject=subject,
            template_html=template_html,
            template_vars=template_vars,
            reply_to=reply_to_applicant,
            attachments=attachments
        )


def get_mail_client() -> SmtpMailClient:
    """Create and return an SMTP client from the current settings."""
    return SmtpMailClient(
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.EMAIL_USER,
        password=settings.EMAIL_PASS,
        default_sender=settings.sender_address,
        use_tls=settings.SMTP_USE_TLS,
        timeout=settings.SMTP_TIMEOUT,
        disabled=settings.DISABLE_EMAILS
    )
