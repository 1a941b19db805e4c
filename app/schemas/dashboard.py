"""
Dashboard summary schemas
"""
import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel


class TodayAppointment(BaseModel):
    id: int
    start_datetime: datetime.datetime
    time: str
    duration_minutes: int
    status: str
    fee: Decimal
    patient_name: str


class DashboardSummaryResponse(BaseModel):
    reference_date: datetime.date
    total_patients: int
    appointments_today: int
    today: List[TodayAppointment]
    income_month: Decimal
    expenses_month: Decimal
    balance_month: Decimal
    last_update: Optional[datetime.datetime] = None
