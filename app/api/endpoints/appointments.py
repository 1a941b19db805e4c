"""
Appointment management API endpoints
"""
import datetime
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_storage
from app.core.cache import invalidate_dashboard
from app.core.error_handling import ValidationException
from app.models import Appointment, PayerType
from app.schemas.appointment import (
    AgendaSummaryResponse,
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdate,
    GeneratedAppointment,
)
from app.services.dashboard_service import filter_appointments, month_bounds, parse_month, summarize_agenda
from app.services.recurrence import expand_recurrence
from app.services.storage import StorageRepository, related_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def to_response(appointment: Appointment) -> AppointmentResponse:
    response = AppointmentResponse.model_validate(appointment)
    response.patient_name = related_name(appointment.patient)
    return response


async def _agenda(
    storage: StorageRepository,
    month: Optional[str],
    start_date: Optional[datetime.date],
    end_date: Optional[datetime.date],
    search: Optional[str],
    insurer: Optional[str],
    payer_type: Optional[PayerType],
) -> List[Appointment]:
    where = []
    if month:
        try:
            month_start, month_end = month_bounds(parse_month(month))
        except ValueError:
            raise ValidationException(f"Invalid month: {month}", details={"month": month})
        where += [Appointment.start_datetime >= month_start, Appointment.start_datetime <= month_end]
    if start_date:
        where.append(Appointment.start_datetime >= datetime.datetime.combine(start_date, datetime.time.min))
    if end_date:
        where.append(Appointment.start_datetime <= datetime.datetime.combine(end_date, datetime.time.max))

    appointments = await storage.select("appointments", where=where, order_by="start_datetime", load=["patient"])
    return filter_appointments(appointments, search=search, insurer=insurer, payer_type=payer_type)


@router.post("/preview", response_model=List[GeneratedAppointment])
async def preview_appointments(appointment_in: AppointmentCreate):
    """
    Expand a draft and its recurrence without saving anything
    """
    return expand_recurrence(appointment_in, appointment_in.recurrence)


@router.post("", response_model=List[AppointmentResponse], status_code=status.HTTP_201_CREATED)
async def create_appointments(
    appointment_in: AppointmentCreate,
    storage: StorageRepository = Depends(get_storage),
):
    """
    Create an appointment, or the whole recurring series, in one transaction
    """
    occurrences = expand_recurrence(appointment_in, appointment_in.recurrence)
    await storage.get("patients", appointment_in.patient_id)

    rows = await storage.insert("appointments", [o.model_dump() for o in occurrences])
    await invalidate_dashboard()

    ids = [row.id for row in rows]
    created = await storage.select(
        "appointments",
        where=[Appointment.id.in_(ids)],
        order_by="start_datetime",
        load=["patient"],
    )
    return [to_response(a) for a in created]


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    start_date: Optional[datetime.date] = Query(None),
    end_date: Optional[datetime.date] = Query(None),
    search: Optional[str] = Query(None, description="Patient name"),
    insurer: Optional[str] = Query(None),
    payer_type: Optional[PayerType] = Query(None),
    storage: StorageRepository = Depends(get_storage),
):
    """
    List appointments with optional filters, ordered by start
    """
    appointments = await _agenda(storage, month, start_date, end_date, search, insurer, payer_type)
    return [to_response(a) for a in appointments]


@router.get("/summary", response_model=AgendaSummaryResponse)
async def agenda_summary(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    start_date: Optional[datetime.date] = Query(None),
    end_date: Optional[datetime.date] = Query(None),
    search: Optional[str] = Query(None),
    insurer: Optional[str] = Query(None),
    payer_type: Optional[PayerType] = Query(None),
    storage: StorageRepository = Depends(get_storage),
):
    appointments = await _agenda(storage, month, start_date, end_date, search, insurer, payer_type)
    return summarize_agenda(appointments)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    return to_response(await storage.get("appointments", appointment_id, load=["patient"]))


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: int,
    appointment_in: AppointmentUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    patch = appointment_in.model_dump(exclude_unset=True)
    if patch.get("payer_type") == PayerType.INDIVIDUAL:
        patch["insurer_name"] = None
        patch["insurer_plan"] = None
    if patch.get("patient_id") is not None:
        await storage.get("patients", patch["patient_id"])

    await storage.update("appointments", appointment_id, patch)
    await invalidate_dashboard()
    return to_response(await storage.get("appointments", appointment_id, load=["patient"]))


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    status_in: AppointmentStatusUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    """
    Mark an appointment as scheduled, completed or cancelled
    """
    await storage.update("appointments", appointment_id, {"status": status_in.status})
    await invalidate_dashboard()
    logger.info(f"Appointment {appointment_id} status set to {status_in.status.value}")
    return to_response(await storage.get("appointments", appointment_id, load=["patient"]))


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.delete("appointments", appointment_id)
    await invalidate_dashboard()
    return None
