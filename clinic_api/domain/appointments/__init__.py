"""Appointment domain - Booking flow, staff status management and payment reconciliation"""

from .router import get_appointment_service, router
from .service import AppointmentService

__all__ = ["router", "get_appointment_service", "AppointmentService"]
