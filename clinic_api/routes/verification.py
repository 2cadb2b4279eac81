"""
Email Verification Routes
Sends, verifies and resends one-time codes, and mails appointment summaries
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from .. import email_service
from ..services.verification_service import send_verification_code
from ..shared.validators import validate_email
from ..verification_store import VerificationStore, get_verification_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/email", tags=["verification"])


class SendCodeRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


class VerifyCodeRequest(SendCodeRequest):
    code: str


class AppointmentDetailsRequest(BaseModel):
    """Appointment summary fields rendered into the confirmation email"""

    email: str
    fullName: Optional[str] = None
    gender: Optional[str] = None
    dateOfBirth: Optional[str] = None
    contactNo: Optional[str] = None
    address: Optional[str] = None
    reason: Optional[str] = None
    service: Optional[str] = None
    procedure: Optional[str] = None
    price: Optional[str] = None
    time: Optional[str] = None
    date: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)


def _expires_in(store: VerificationStore) -> str:
    return f"{store.ttl.seconds // 60} minutes"


@router.post("/send-verification-code")
async def send_code(
    request: SendCodeRequest, store: VerificationStore = Depends(get_verification_store)
):
    """Generate and email a verification code; the code is never returned"""
    await send_verification_code(store, request.email)
    return {
        "success": True,
        "message": "Verification code sent successfully",
        "email": request.email,
        "expiresIn": _expires_in(store),
    }


@router.post("/verify-email-code")
async def verify_code(
    request: VerifyCodeRequest, store: VerificationStore = Depends(get_verification_store)
):
    """Consume the code for an email address"""
    logger.info(f"🔍 Verification attempt for {request.email}")
    store.verify(request.email, request.code)
    return {"success": True, "message": "Email verified successfully"}


@router.post("/resend-verification-code")
async def resend_code(
    request: SendCodeRequest, store: VerificationStore = Depends(get_verification_store)
):
    """Invalidate any pending code and send a new one"""
    store.discard(request.email)
    await send_verification_code(store, request.email)
    return {
        "success": True,
        "message": "Verification code resent successfully",
        "email": request.email,
        "expiresIn": _expires_in(store),
    }


@router.post("/send-appointment-details")
async def send_appointment_details(request: AppointmentDetailsRequest):
    """Email an appointment summary built from the request body"""
    response = await email_service.send_appointment_confirmation(request.model_dump())
    return {
        "success": True,
        "message": "Appointment confirmation email sent successfully",
        "messageId": response.get("id") if isinstance(response, dict) else None,
    }
