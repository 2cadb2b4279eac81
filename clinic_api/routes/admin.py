"""
Admin Routes
Staff-facing appointment management; every endpoint requires an admin token
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ..auth import get_current_admin
from ..domain.appointments import AppointmentService, get_appointment_service
from ..domain.appointments.schemas import StatusUpdateRequest, serialize_appointment

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)]
)


@router.get("/dashboard-insights")
async def dashboard_insights(service: AppointmentService = Depends(get_appointment_service)):
    """Appointment counts for the admin dashboard"""
    return {"success": True, "data": service.dashboard_insights()}


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.get("/appointments")
async def list_appointments(
    service: AppointmentService = Depends(get_appointment_service),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: str = Query("appointment_date"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
):
    """List appointments with filters, search on patient details, and pagination"""
    result = service.list_appointments(
        page=page,
        limit=limit,
        sort=sort,
        order=order,
        status=status_filter,
        search=search,
        start_date=start_date,
        end_date=end_date,
    )
    return {
        "success": True,
        "appointments": [serialize_appointment(a) for a in result["appointments"]],
        "pagination": result["pagination"],
    }


@router.get("/appointments/{appointment_id}")
async def get_appointment(
    appointment_id: int, service: AppointmentService = Depends(get_appointment_service)
):
    appointment = service.get_appointment(appointment_id)
    return {"success": True, "appointment": serialize_appointment(appointment)}


@router.delete("/appointments/{appointment_id}")
async def delete_appointment(
    appointment_id: int, service: AppointmentService = Depends(get_appointment_service)
):
    service.delete_appointment(appointment_id)
    return {"success": True, "message": "Appointment deleted successfully", "id": appointment_id}


@router.patch("/appointments/{appointment_id}/status")
async def update_appointment_status(
    appointment_id: int,
    body: StatusUpdateRequest,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Set the staff-facing status (pending, checked-in, in_consultation, complete, cancelled)"""
    appointment = service.update_status(appointment_id, body.status)
    return {"success": True, "appointment": serialize_appointment(appointment)}


# ============================================================================
# ARCHIVE (read-only history of past-dated appointments)
# ============================================================================


@router.get("/archived-appointments")
async def list_archived_appointments(
    service: AppointmentService = Depends(get_appointment_service),
):
    archived = service.list_archived()
    return {"success": True, "archived": [serialize_appointment(a) for a in archived]}


@router.get("/archived-appointments/{appointment_id}")
async def get_archived_appointment(
    appointment_id: int, service: AppointmentService = Depends(get_appointment_service)
):
    appointment = service.get_archived(appointment_id)
    return {"success": True, "archivedAppointment": serialize_appointment(appointment)}


def _read_only():
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"success": False, "message": "Archived records are read-only"},
    )


@router.post("/archived-appointments")
async def create_archived_appointment():
    return _read_only()


@router.put("/archived-appointments/{appointment_id}")
async def update_archived_appointment(appointment_id: int):
    return _read_only()


@router.delete("/archived-appointments/{appointment_id}")
async def delete_archived_appointment(appointment_id: int):
    return _read_only()
