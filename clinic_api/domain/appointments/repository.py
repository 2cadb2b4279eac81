"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from ...models import (
    PAYMENT_STATUS_SUCCEEDED,
    Appointment,
    BasicInfo,
    Procedure,
)

SORTABLE_FIELDS = {
    "appointment_date": Appointment.appointment_date,
    "created_at": Appointment.created_at,
    "updated_at": Appointment.updated_at,
    "status": Appointment.status,
    "id": Appointment.id,
}


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def _with_relations(db: Session):
        return db.query(Appointment).options(
            joinedload(Appointment.basic_info),
            joinedload(Appointment.procedure).joinedload(Procedure.service),
        )

    @staticmethod
    def get_procedure(db: Session, procedure_id: int) -> Optional[Procedure]:
        return db.query(Procedure).filter(Procedure.id == procedure_id).first()

    @staticmethod
    def create_appointment(db: Session, basic_info: dict, **appointment_data) -> Appointment:
        """Create the patient profile and its appointment in one commit"""
        patient = BasicInfo(**basic_info)
        db.add(patient)
        db.flush()

        appointment = Appointment(basic_info_id=patient.id, **appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
        return (
            AppointmentRepository._with_relations(db)
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def get_appointment_by_payment_id(db: Session, payment_id: str) -> Optional[Appointment]:
        return (
            AppointmentRepository._with_relations(db)
            .filter(Appointment.payment_id == payment_id)
            .first()
        )

    @staticmethod
    def update_appointment(db: Session, appointment: Appointment, **updates) -> Appointment:
        for key, value in updates.items():
            if hasattr(appointment, key):
                setattr(appointment, key, value)

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()

    @staticmethod
    def mark_payment_succeeded(db: Session, payment_id: str) -> int:
        """
        Flip payment_status to succeeded for the appointment holding payment_id.

        Single conditional UPDATE; returns the number of rows changed, so a
        repeated webhook delivery returns 0.
        """
        updated = (
            db.query(Appointment)
            .filter(
                Appointment.payment_id == payment_id,
                or_(
                    Appointment.payment_status.is_(None),
                    Appointment.payment_status != PAYMENT_STATUS_SUCCEEDED,
                ),
            )
            .update(
                {
                    Appointment.payment_status: PAYMENT_STATUS_SUCCEEDED,
                    Appointment.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated

    @staticmethod
    def list_appointments(
        db: Session,
        page: int = 1,
        limit: int = 10,
        sort: str = "appointment_date",
        order: str = "desc",
        status: Optional[str] = None,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[list[Appointment], int]:
        """Filtered, searched and paginated appointments with total count"""
        query = db.query(Appointment)

        if status:
            query = query.filter(Appointment.status == status)
        if start_date:
            query = query.filter(Appointment.appointment_date >= start_date)
        if end_date:
            query = query.filter(Appointment.appointment_date <= end_date)
        if search:
            pattern = f"%{search}%"
            query = query.join(BasicInfo, Appointment.basic_info_id == BasicInfo.id).filter(
                or_(
                    BasicInfo.first_name.ilike(pattern),
                    BasicInfo.last_name.ilike(pattern),
                    BasicInfo.email.ilike(pattern),
                    BasicInfo.contact_no.ilike(pattern),
                )
            )

        total = query.count()

        sort_column = SORTABLE_FIELDS.get(sort, Appointment.appointment_date)
        sort_clause = sort_column.asc() if order == "asc" else sort_column.desc()

        appointments = (
            query.options(
                joinedload(Appointment.basic_info),
                joinedload(Appointment.procedure).joinedload(Procedure.service),
            )
            .order_by(sort_clause, Appointment.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return appointments, total

    @staticmethod
    def list_archived(db: Session, today: date) -> list[Appointment]:
        """Appointments dated before today, newest first"""
        return (
            AppointmentRepository._with_relations(db)
            .filter(Appointment.appointment_date < today)
            .order_by(Appointment.appointment_date.desc(), Appointment.id.desc())
            .all()
        )

    @staticmethod
    def get_insight_counts(db: Session, today: date) -> dict:
        """Counts backing the admin dashboard"""
        status_rows = (
            db.query(Appointment.status, func.count(Appointment.id))
            .group_by(Appointment.status)
            .all()
        )
        return {
            "total_appointments": db.query(Appointment).count(),
            "by_status": {status: count for status, count in status_rows},
            "email_verified": db.query(Appointment)
            .filter(Appointment.email_verified.is_(True))
            .count(),
            "payments_succeeded": db.query(Appointment)
            .filter(Appointment.payment_status == PAYMENT_STATUS_SUCCEEDED)
            .count(),
            "today": db.query(Appointment).filter(Appointment.appointment_date == today).count(),
            "upcoming": db.query(Appointment).filter(Appointment.appointment_date > today).count(),
        }
