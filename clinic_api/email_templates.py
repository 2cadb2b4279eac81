"""
MJML Email Templates
Clinic emails rendered through MJML for responsive, cross-client output
"""

from html import escape
from typing import Optional

from .config import CLINIC_CONTACT_NO, CLINIC_NAME

# Clinic theme colors - Blue/Slate color scheme
THEME = {
    "primary": "#0066cc",
    "primary_light": "#e6f0fa",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}


def get_base_template(title: str, preview_text: str, content_sections: str) -> str:
    """Base MJML template wrapper for all clinic emails"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, 'Helvetica Neue', sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 20px 0 20px">
          <mj-column>
            <mj-text align="center" font-size="22px" font-weight="700" color="{THEME['primary']}" padding="0">
              {CLINIC_NAME}
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 0 0 0" />
          </mj-column>
        </mj-section>

        {content_sections}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              This is an automated message, please do not reply.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def verification_code_template(verification_code: str, expires_in_minutes: int = 5) -> str:
    """Email verification code MJML template"""
    content = f"""
        <mj-section background-color="#ffffff" padding="24px 40px 20px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" padding="0 0 16px 0">
              Verify your email address
            </mj-text>
            <mj-text>Hello,</mj-text>
            <mj-text>
              Please enter the following verification code to verify your email address.
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="{THEME['primary_light']}" padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="36px" font-weight="700" color="{THEME['text_primary']}" letter-spacing="8px" font-family="'Courier New', monospace" padding="0">
              {verification_code}
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="20px 40px 40px 40px">
          <mj-column>
            <mj-text>The code will expire in {expires_in_minutes} minutes.</mj-text>
            <mj-text color="{THEME['text_muted']}" font-size="14px">
              If you did not request this code, please ignore this email.
            </mj-text>
          </mj-column>
        </mj-section>
    """
    return get_base_template(
        title="Verify your email address",
        preview_text=f"Your verification code is {verification_code}",
        content_sections=content,
    )


def _detail_row(label: str, value: Optional[str]) -> str:
    return f"""
            <mj-text padding="2px 0">
              <strong>{label}:</strong> {escape(str(value)) if value else "-"}
            </mj-text>"""


def appointment_confirmation_template(data: dict) -> str:
    """
    Appointment summary MJML template

    data keys: fullName, gender, email, dateOfBirth, contactNo, address, reason,
    service, procedure, price, time, date
    """
    basic_rows = "".join(
        _detail_row(label, data.get(key))
        for label, key in (
            ("Full Name", "fullName"),
            ("Gender", "gender"),
            ("Email Address", "email"),
            ("Date of Birth", "dateOfBirth"),
            ("Contact No", "contactNo"),
            ("Address", "address"),
            ("Reason", "reason"),
        )
    )
    appointment_rows = "".join(
        _detail_row(label, data.get(key))
        for label, key in (
            ("Service", "service"),
            ("Procedure", "procedure"),
            ("Price", "price"),
            ("Appointment Time", "time"),
            ("Appointment Date", "date"),
        )
    )

    content = f"""
        <mj-section background-color="#ffffff" padding="24px 40px 0 40px">
          <mj-column>
            <mj-text align="center" font-size="24px" font-weight="600" color="{THEME['primary']}" padding="0">
              SUMMARY
            </mj-text>
            <mj-text align="center" color="{THEME['text_muted']}">
              Please review your details before your appointment
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 20px 40px">
          <mj-column>
            <mj-text font-weight="600" color="{THEME['primary']}">BASIC INFORMATION</mj-text>
            {basic_rows}
          </mj-column>
          <mj-column>
            <mj-text font-weight="600" color="{THEME['primary']}">APPOINTMENT INFORMATION</mj-text>
            {appointment_rows}
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 20px 40px">
          <mj-column>
            <mj-text font-size="14px">
              By receiving this email, you have read, understood and agreed to our Privacy Policy &amp; Terms and Conditions.
            </mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 40px 40px">
          <mj-column background-color="#f5f5f5" padding="10px">
            <mj-text align="center">Need to reschedule?<br />Contact us at: {CLINIC_CONTACT_NO}</mj-text>
          </mj-column>
          <mj-column background-color="{THEME['primary']}" padding="10px">
            <mj-text align="center" color="#ffffff">Appointment Confirmed<br />Please arrive 15 minutes early</mj-text>
          </mj-column>
        </mj-section>

        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-text align="center">Thank you for choosing {CLINIC_NAME}!</mj-text>
          </mj-column>
        </mj-section>
    """
    return get_base_template(
        title="Appointment Confirmation",
        preview_text="Your appointment is confirmed",
        content_sections=content,
    )
