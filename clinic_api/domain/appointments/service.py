"""Appointment service - Booking flow, staff status updates and payment reconciliation"""

import logging
import math
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ... import email_service
from ...config import CLINIC_NAME, PAYMENT_CURRENCY
from ...exceptions import (
    AppointmentNotFoundError,
    EmailNotVerifiedError,
    EmailTransportError,
    InvalidStatusError,
    PaymentGatewayError,
)
from ...models import (
    APPOINTMENT_STATUSES,
    PAYMENT_STATUS_PENDING,
    PAYMENT_STATUS_SUCCEEDED,
    Appointment,
)
from ...services.paymongo_service import PayMongoService
from ...services.verification_service import send_verification_code
from ...verification_store import VerificationStore
from .repository import AppointmentRepository
from .schemas import AppointmentSubmit

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for the appointment lifecycle"""

    def __init__(self, db: Session, store: VerificationStore, gateway: PayMongoService):
        self.db = db
        self.store = store
        self.gateway = gateway
        self.repo = AppointmentRepository()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise AppointmentNotFoundError()
        return appointment

    # ------------------------------------------------------------------
    # Patient flow
    # ------------------------------------------------------------------

    async def submit(self, data: AppointmentSubmit) -> tuple[Appointment, Optional[str]]:
        """
        Create a pending appointment and email a verification code.

        The appointment is kept when delivery fails; the transport error
        message is returned so the patient can ask for a resend.
        """
        procedure = self.repo.get_procedure(self.db, data.procedure_id)
        if not procedure:
            raise AppointmentNotFoundError("Procedure not found")

        appointment = self.repo.create_appointment(
            self.db,
            basic_info={
                "first_name": data.first_name,
                "last_name": data.last_name,
                "email": data.email,
                "contact_no": data.contact_no,
                "sex": data.sex,
                "age": data.age,
                "date_of_birth": data.date_of_birth,
                "address": data.address,
            },
            procedure_id=procedure.id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            reason=data.reason,
            status="pending",
            email_verified=False,
            payment_status=None,
        )
        logger.info(f"📥 Appointment {appointment.id} submitted for {data.email}")

        try:
            await send_verification_code(self.store, data.email)
        except EmailTransportError as e:
            return appointment, e.message
        return appointment, None

    async def confirm_email(
        self, appointment_id: int, code: str
    ) -> tuple[Appointment, Optional[str], bool]:
        """
        Verify the patient's code, then request a payment link.

        Returns the appointment, the gateway error message when link creation
        failed, and whether the appointment was already verified. An already
        verified appointment is returned untouched and the code is ignored;
        POST /payment-link serves its link.
        """
        appointment = self.get_appointment(appointment_id)

        if appointment.email_verified:
            logger.info(f"ℹ️ Appointment {appointment.id} email already verified")
            return appointment, None, True

        self.store.verify(appointment.basic_info.email, code)
        appointment = self.repo.update_appointment(self.db, appointment, email_verified=True)
        logger.info(f"✅ Appointment {appointment.id} email verified")

        try:
            appointment = await self._create_payment_link(appointment)
        except PaymentGatewayError as e:
            logger.error(f"❌ Payment link failed for appointment {appointment.id}: {e.message}")
            return appointment, e.message, False

        return appointment, None, False

    async def request_payment_link(self, appointment_id: int) -> Appointment:
        """Return the open payment link, creating one when none exists"""
        appointment = self.get_appointment(appointment_id)

        if not appointment.email_verified:
            raise EmailNotVerifiedError()

        if appointment.payment_status == PAYMENT_STATUS_SUCCEEDED:
            return appointment
        if appointment.payment_id and appointment.payment_url:
            return appointment

        return await self._create_payment_link(appointment)

    async def _create_payment_link(self, appointment: Appointment) -> Appointment:
        procedure = appointment.procedure
        patient = appointment.basic_info
        service_name = procedure.service.name if procedure.service else None
        description = " - ".join(filter(None, [CLINIC_NAME, service_name, procedure.name]))

        link = await self.gateway.create_link(
            amount=procedure.price,
            description=description,
            name=patient.full_name,
            email=patient.email,
        )
        return self.repo.update_appointment(
            self.db,
            appointment,
            payment_id=link.payment_id,
            payment_url=link.payment_url,
            payment_status=PAYMENT_STATUS_PENDING,
        )

    # ------------------------------------------------------------------
    # Staff operations
    # ------------------------------------------------------------------

    def update_status(self, appointment_id: int, status: str) -> Appointment:
        """Set the staff-facing status; any allowed value may replace any other"""
        if status not in APPOINTMENT_STATUSES:
            raise InvalidStatusError()

        appointment = self.get_appointment(appointment_id)
        old_status = appointment.status
        appointment = self.repo.update_appointment(self.db, appointment, status=status)
        logger.info(f"🔄 Appointment {appointment.id} status: {old_status} → {status}")
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)
        self.repo.delete_appointment(self.db, appointment)
        logger.info(f"🗑️ Appointment {appointment_id} deleted")

    def list_appointments(self, page: int, limit: int, **filters) -> dict:
        appointments, total = self.repo.list_appointments(self.db, page=page, limit=limit, **filters)
        return {
            "appointments": appointments,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def list_archived(self) -> list[Appointment]:
        return self.repo.list_archived(self.db, date.today())

    def get_archived(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment or appointment.appointment_date >= date.today():
            raise AppointmentNotFoundError("Archived appointment not found")
        return appointment

    def dashboard_insights(self) -> dict:
        return self.repo.get_insight_counts(self.db, date.today())

    # ------------------------------------------------------------------
    # Payment reconciliation
    # ------------------------------------------------------------------

    async def reconcile_paid_link(self, link_id: str) -> bool:
        """
        Mark the appointment holding link_id as paid and send the confirmation.

        Returns False when no unpaid appointment matches (unknown link or a
        repeated delivery).
        """
        updated = self.repo.mark_payment_succeeded(self.db, link_id)
        if not updated:
            logger.info(f"ℹ️ No unpaid appointment found for payment link {link_id}")
            return False

        appointment = self.repo.get_appointment_by_payment_id(self.db, link_id)
        logger.info(f"💰 Payment succeeded for appointment {appointment.id} ({link_id})")

        try:
            await email_service.send_appointment_confirmation(build_confirmation_data(appointment))
        except EmailTransportError as e:
            logger.error(f"❌ Confirmation email failed for appointment {appointment.id}: {e.message}")

        return True


def format_price(price) -> Optional[str]:
    if price is None:
        return None
    return f"{PAYMENT_CURRENCY} {float(price):,.2f}"


def build_confirmation_data(appointment: Appointment) -> dict:
    """Appointment summary consumed by the confirmation email template"""
    patient = appointment.basic_info
    procedure = appointment.procedure
    return {
        "fullName": patient.full_name,
        "gender": patient.sex,
        "email": patient.email,
        "dateOfBirth": patient.date_of_birth.strftime("%B %d, %Y") if patient.date_of_birth else None,
        "contactNo": patient.contact_no,
        "address": patient.address,
        "reason": appointment.reason,
        "service": procedure.service.name if procedure and procedure.service else None,
        "procedure": procedure.name if procedure else None,
        "price": format_price(procedure.price) if procedure else None,
        "time": appointment.appointment_time,
        "date": appointment.appointment_date.strftime("%B %d, %Y")
        if appointment.appointment_date
        else None,
    }
