"""
Email Service using Resend
Compiles MJML templates to HTML and delivers clinic notifications
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import CLINIC_NAME, EMAIL_FROM_ADDRESS, RESEND_API_KEY, VERIFICATION_CODE_TTL_SECONDS
from .email_templates import appointment_confirmation_template, verification_code_template
from .exceptions import EmailTransportError

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        errors = getattr(result, "errors", None) or (
            result.get("errors") if isinstance(result, dict) else None
        )
        if errors:
            logger.warning(f"MJML compilation warnings: {errors}")
        html = getattr(result, "html", None)
        if html is None and isinstance(result, dict):
            html = result.get("html", "")
        return html if html is not None else str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailTransportError(f"Failed to compile email template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Resend response dict (contains the message id)
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or EMAIL_FROM_ADDRESS

    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailTransportError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailTransportError(f"Failed to send email: {str(e)}") from e


async def send_verification_code_email(to: str, verification_code: str) -> dict:
    """Send the one-time email verification code"""
    mjml_content = verification_code_template(
        verification_code, expires_in_minutes=max(1, VERIFICATION_CODE_TTL_SECONDS // 60)
    )
    return await send_email(
        to=to,
        subject=f"{CLINIC_NAME} - Verify Your Email Address",
        mjml_content=mjml_content,
    )


async def send_appointment_confirmation(appointment_data: dict) -> dict:
    """Send the appointment summary to the patient"""
    mjml_content = appointment_confirmation_template(appointment_data)
    return await send_email(
        to=appointment_data["email"],
        subject=f"{CLINIC_NAME} - Appointment Confirmation",
        mjml_content=mjml_content,
    )
