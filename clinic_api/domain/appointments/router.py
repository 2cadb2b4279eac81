"""Appointment router - Public patient-facing booking endpoints"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...database import get_db
from ...services.paymongo_service import PayMongoService, get_paymongo_service
from ...verification_store import VerificationStore, get_verification_store
from .schemas import AppointmentSubmit, ConfirmEmailRequest, public_appointment_view
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointment", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db),
    store: VerificationStore = Depends(get_verification_store),
    gateway: PayMongoService = Depends(get_paymongo_service),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, store, gateway)


@router.post("/submit-appointment", status_code=status.HTTP_201_CREATED)
async def submit_appointment(
    body: AppointmentSubmit,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Create a pending appointment and send the email verification code"""
    appointment, email_error = await service.submit(body)

    if email_error:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "success": False,
                "message": "Appointment saved but the verification code could not be sent",
                "error": email_error,
                "appointment_id": appointment.id,
            },
        )

    return {
        "success": True,
        "message": "Appointment submitted. A verification code was sent to your email.",
        "appointment_id": appointment.id,
        "expiresIn": f"{service.store.ttl.seconds // 60} minutes",
    }


@router.post("/{appointment_id}/confirm-email")
async def confirm_appointment_email(
    appointment_id: int,
    body: ConfirmEmailRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Verify the emailed code and create the payment link"""
    appointment, payment_error, already_verified = await service.confirm_email(
        appointment_id, body.code
    )

    if already_verified:
        return {
            "success": True,
            "message": "Email already verified",
            "email_verified": True,
            "appointment": public_appointment_view(appointment),
        }

    if payment_error:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "success": False,
                "message": "Email verified but the payment link could not be created",
                "error": payment_error,
                "email_verified": True,
                "appointment": public_appointment_view(appointment),
            },
        )

    return {
        "success": True,
        "message": "Email verified successfully",
        "email_verified": True,
        "payment_url": appointment.payment_url,
        "appointment": public_appointment_view(appointment),
    }


@router.post("/{appointment_id}/payment-link")
async def request_payment_link(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get the appointment's payment link, creating it if the last attempt failed"""
    appointment = await service.request_payment_link(appointment_id)
    return {
        "success": True,
        "message": "Payment link ready",
        "payment_url": appointment.payment_url,
        "appointment": public_appointment_view(appointment),
    }


@router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Public appointment view; payment metadata only once paid"""
    appointment = service.get_appointment(appointment_id)
    return {"success": True, "appointment": public_appointment_view(appointment)}
