"""
Email Service using SMTP (primary) or Resend (fallback)
Provides email functionality using MJML templates for responsive design
"""

import logging
import smtplib
import ssl
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

import resend
from fastapi import Request
from mjml import mjml_to_html

from .config import (
    EMAIL_FROM_ADDRESS,
    EMAIL_HOST,
    EMAIL_PASS,
    EMAIL_PORT,
    EMAIL_USER,
    FRONTEND_URL,
    RESEND_API_KEY,
)
from .email_templates import (
    booking_confirmation_template,
    password_changed_template,
    password_reset_template,
)

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(Exception):
    pass


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        if hasattr(result, "html"):
            if getattr(result, "errors", None):
                logger.warning(f"MJML compilation warnings: {result.errors}")
            return result.html
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


class Mailer:
    """SMTP mailer with Resend as fallback transport"""

    def __init__(
        self,
        host: Optional[str] = EMAIL_HOST,
        port: int = EMAIL_PORT,
        username: Optional[str] = EMAIL_USER,
        password: Optional[str] = EMAIL_PASS,
        from_address: str = EMAIL_FROM_ADDRESS,
        resend_api_key: Optional[str] = RESEND_API_KEY,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.resend_api_key = resend_api_key
        if resend_api_key:
            resend.api_key = resend_api_key

    @property
    def smtp_configured(self) -> bool:
        return bool(self.host and self.username and self.password)

    def _send_via_smtp(self, recipients: list[str], subject: str, html_content: str) -> dict:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = ", ".join(recipients)
        msg.attach(MIMEText(html_content, "html"))

        if self.port == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=30)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=30)

        try:
            if self.port != 465:
                server.starttls(context=ssl.create_default_context())
            server.login(self.username, self.password)
            server.sendmail(self.from_address.split("<")[-1].rstrip(">"), recipients, msg.as_string())
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                # Connection already dropped, QUIT cannot be delivered
                server.close()

        logger.info(f"✅ SMTP email sent successfully via {self.host}")
        return {"id": f"smtp-{datetime.utcnow().timestamp()}", "success": True}

    def send_email(self, to: Union[str, list[str]], subject: str, mjml_content: str) -> dict:
        """Send an email using SMTP (if configured) or Resend (fallback)"""
        html_content = compile_mjml_to_html(mjml_content)
        recipients = [to] if isinstance(to, str) else to

        if self.smtp_configured:
            try:
                logger.info(f"📧 Sending email via SMTP: {self.host}")
                return self._send_via_smtp(recipients, subject, html_content)
            except Exception as e:
                if not self.resend_api_key:
                    raise
                logger.warning(f"⚠️ SMTP failed, falling back to Resend: {e}")

        if not self.resend_api_key:
            logger.error("❌ No email service configured - EMAIL_HOST/USER/PASS and RESEND_API_KEY missing")
            raise EmailNotConfiguredError("Email service not configured")

        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": self.from_address,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response

    # ============================================
    # Pre-built emails
    # ============================================

    def send_password_reset_email(self, to: str, name: str, token: str) -> dict:
        reset_link = f"{FRONTEND_URL}/reset-password?token={token}"
        return self.send_email(
            to=to,
            subject="Reset Your Spot2Go Password",
            mjml_content=password_reset_template(name, reset_link),
        )

    def send_password_changed_email(self, to: str, name: str) -> dict:
        return self.send_email(
            to=to,
            subject="Your Spot2Go Password Has Been Changed",
            mjml_content=password_changed_template(name),
        )

    def send_booking_confirmation_email(
        self,
        to: str,
        name: str,
        place_name: str,
        ticket_id: str,
        date: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> dict:
        return self.send_email(
            to=to,
            subject=f"Booking Received for {place_name}!",
            mjml_content=booking_confirmation_template(
                name,
                place_name,
                ticket_id,
                date=date,
                start_time=start_time,
                end_time=end_time,
                booking_url=f"{FRONTEND_URL}/confirmation?ticket={ticket_id}",
            ),
        )


def get_mailer(request: Request) -> Mailer:
    """Dependency injection for the mailer built at startup"""
    return request.app.state.mailer
