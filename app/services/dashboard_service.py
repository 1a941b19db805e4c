"""
Dashboard Service
Aggregations behind the home dashboard and the agenda header: totals of
patients, today's appointments, and the month's income and expenses.
"""

import calendar
import datetime
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from config import settings
from app.core.cache import cache_manager, dashboard_cache_key
from app.models import Appointment, AppointmentStatus, Expense, PayerType
from app.services.storage import StorageRepository, related_name

logger = logging.getLogger(__name__)

UNKNOWN_PATIENT = "Paciente não encontrado"


def sum_amounts(records: Iterable[Any], attr: str) -> Decimal:
    """Sum a money attribute; missing values count as zero"""
    total = Decimal("0")
    for record in records:
        value = getattr(record, attr, None)
        if value is not None:
            total += Decimal(str(value))
    return total


def month_bounds(day: datetime.date) -> Tuple[datetime.datetime, datetime.datetime]:
    """First and last instant of the month containing `day`"""
    last_day = calendar.monthrange(day.year, day.month)[1]
    start = datetime.datetime(day.year, day.month, 1)
    end = datetime.datetime.combine(datetime.date(day.year, day.month, last_day), datetime.time.max)
    return start, end


def day_bounds(day: datetime.date) -> Tuple[datetime.datetime, datetime.datetime]:
    return datetime.datetime.combine(day, datetime.time.min), datetime.datetime.combine(day, datetime.time.max)


def parse_month(value: str) -> datetime.date:
    """'2024-03' -> 2024-03-01"""
    year, month = value.split("-")
    return datetime.date(int(year), int(month), 1)


def summarize_agenda(appointments: Iterable[Any]) -> Dict[str, Any]:
    """Counts per status and total fee for a list of appointments"""
    appointments = list(appointments)
    counts = {status: 0 for status in AppointmentStatus}
    for appointment in appointments:
        counts[AppointmentStatus(appointment.status)] += 1
    return {
        "total": len(appointments),
        "scheduled": counts[AppointmentStatus.SCHEDULED],
        "completed": counts[AppointmentStatus.COMPLETED],
        "cancelled": counts[AppointmentStatus.CANCELLED],
        "total_fee": sum_amounts(appointments, "fee"),
    }


def filter_appointments(
    appointments: Iterable[Any],
    search: Optional[str] = None,
    insurer: Optional[str] = None,
    payer_type: Optional[PayerType] = None,
) -> List[Any]:
    """
    Agenda filters: patient name and insurer are case-insensitive substrings,
    payer type must match exactly
    """
    search_lower = search.strip().lower() if search else ""
    insurer_lower = insurer.strip().lower() if insurer else ""

    filtered = []
    for appointment in appointments:
        patient_name = (related_name(appointment.patient, "") or "").lower()
        if search_lower and search_lower not in patient_name:
            continue
        insurer_text = f"{appointment.insurer_name or ''} {appointment.insurer_plan or ''}".lower()
        if insurer_lower and insurer_lower not in insurer_text:
            continue
        if payer_type and appointment.payer_type != payer_type:
            continue
        filtered.append(appointment)
    return filtered


def today_entry(appointment: Appointment) -> Dict[str, Any]:
    return {
        "id": appointment.id,
        "start_datetime": appointment.start_datetime,
        "time": appointment.start_datetime.strftime("%H:%M"),
        "duration_minutes": appointment.duration_minutes,
        "status": AppointmentStatus(appointment.status).value,
        "fee": appointment.fee if appointment.fee is not None else Decimal("0"),
        "patient_name": related_name(appointment.patient, UNKNOWN_PATIENT),
    }


async def build_dashboard_summary(storage: StorageRepository, today: datetime.date) -> Dict[str, Any]:
    """
    Home dashboard numbers for `today`. Month income is the sum of the fees
    of the month's appointments; month expenses sum the expense entries.
    """
    day_start, day_end = day_bounds(today)
    month_start, month_end = month_bounds(today)

    total_patients = await storage.count("patients")

    todays = await storage.select(
        "appointments",
        where=[Appointment.start_datetime >= day_start, Appointment.start_datetime <= day_end],
        order_by="start_datetime",
        load=["patient"],
    )
    month_appointments = await storage.select(
        "appointments",
        where=[Appointment.start_datetime >= month_start, Appointment.start_datetime <= month_end],
    )
    month_expenses = await storage.select(
        "expenses",
        where=[Expense.date >= month_start.date(), Expense.date <= month_end.date()],
    )

    income = sum_amounts(month_appointments, "fee")
    expenses = sum_amounts(month_expenses, "amount")
    return {
        "reference_date": today,
        "total_patients": total_patients,
        "appointments_today": len(todays),
        "today": [today_entry(a) for a in todays],
        "income_month": income,
        "expenses_month": expenses,
        "balance_month": income - expenses,
        "last_update": datetime.datetime.now(),
    }


async def get_dashboard_summary(storage: StorageRepository, today: Optional[datetime.date] = None) -> Dict[str, Any]:
    """Cached wrapper around build_dashboard_summary"""
    today = today or datetime.date.today()
    key = dashboard_cache_key(today)

    cached = await cache_manager.get(key)
    if cached is not None:
        return cached

    summary = await build_dashboard_summary(storage, today)
    await cache_manager.set(key, summary, ttl=settings.DASHBOARD_CACHE_TTL)
    logger.info(
        f"Dashboard summary for {today}: {summary['appointments_today']} appointments today, "
        f"income {summary['income_month']}, expenses {summary['expenses_month']}"
    )
    return summary
