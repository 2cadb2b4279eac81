"""Appointment domain schemas - Pydantic models and response serializers"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ...models import PAYMENT_STATUS_SUCCEEDED, Appointment, BasicInfo, Procedure
from ...shared.validators import validate_email, validate_ph_mobile


class AppointmentSubmit(BaseModel):
    """Patient appointment request"""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str
    contact_no: Optional[str] = None
    sex: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    reason: Optional[str] = None
    procedure_id: int
    appointment_date: date
    appointment_time: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator("contact_no")
    @classmethod
    def validate_contact_no(cls, v):
        return validate_ph_mobile(v)


class ConfirmEmailRequest(BaseModel):
    code: str = Field(..., min_length=1)


class StatusUpdateRequest(BaseModel):
    # Checked against the allow-list in the service so bad values map to 400
    status: str


def serialize_basic_info(basic_info: Optional[BasicInfo]) -> Optional[dict[str, Any]]:
    if basic_info is None:
        return None
    return {
        "id": basic_info.id,
        "first_name": basic_info.first_name,
        "last_name": basic_info.last_name,
        "email": basic_info.email,
        "contact_no": basic_info.contact_no,
        "sex": basic_info.sex,
        "age": basic_info.age,
    }


def serialize_procedure(procedure: Optional[Procedure]) -> Optional[dict[str, Any]]:
    if procedure is None:
        return None
    return {
        "id": procedure.id,
        "name": procedure.name,
        "price": float(procedure.price) if procedure.price is not None else None,
        "service_id": procedure.service_id,
        "service": procedure.service.name if procedure.service else None,
    }


def serialize_appointment(appointment: Appointment, include_patient: bool = True) -> dict[str, Any]:
    """Full appointment record, enriched with patient and procedure"""
    data = {
        "id": appointment.id,
        "basic_info_id": appointment.basic_info_id,
        "procedure_id": appointment.procedure_id,
        "appointment_date": appointment.appointment_date.isoformat()
        if appointment.appointment_date
        else None,
        "appointment_time": appointment.appointment_time,
        "reason": appointment.reason,
        "status": appointment.status,
        "email_verified": appointment.email_verified,
        "payment_id": appointment.payment_id,
        "payment_url": appointment.payment_url,
        "payment_status": appointment.payment_status,
        "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
        "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None,
        "procedure": serialize_procedure(appointment.procedure),
    }
    if include_patient:
        data["basic_info"] = serialize_basic_info(appointment.basic_info)
    return data


def redact_payment_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Drop payment_id/payment_status unless the payment has succeeded"""
    if data.get("payment_status") != PAYMENT_STATUS_SUCCEEDED:
        data = {k: v for k, v in data.items() if k not in ("payment_id", "payment_status")}
    return data


def public_appointment_view(appointment: Appointment) -> dict[str, Any]:
    """Appointment as exposed to unauthenticated callers"""
    return redact_payment_fields(serialize_appointment(appointment, include_patient=False))
