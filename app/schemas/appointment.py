"""
Appointment Pydantic schemas for request/response validation
"""
import datetime
import enum
from typing import Optional, Union
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from config import settings
from app.models import AppointmentStatus, PayerType


class RecurrenceFrequency(str, enum.Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class RecurrenceRule(BaseModel):
    """
    Repetition of an appointment draft. Range checks on occurrence_count are
    enforced by the recurrence expander, not here.
    """
    enabled: bool = False
    frequency: RecurrenceFrequency = RecurrenceFrequency.WEEKLY
    occurrence_count: int = Field(4, description="Number of occurrences, 1 to 52")


class AppointmentDraft(BaseModel):
    """
    Unsaved appointment request. start_datetime is local wall-clock time;
    ISO strings are accepted and parsed by the recurrence expander.
    """
    patient_id: int
    start_datetime: Union[datetime.datetime, str]
    duration_minutes: int = settings.DEFAULT_APPOINTMENT_DURATION
    fee: Decimal = Field(Decimal("0.00"), ge=0)
    payer_type: PayerType = PayerType.INDIVIDUAL
    insurer_name: Optional[str] = Field(None, max_length=100)
    insurer_plan: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _drop_insurer_for_individual(self):
        # Insurer data only travels with insurance appointments
        if self.payer_type == PayerType.INDIVIDUAL:
            self.insurer_name = None
            self.insurer_plan = None
        return self


class AppointmentCreate(AppointmentDraft):
    recurrence: RecurrenceRule = Field(default_factory=RecurrenceRule)


class GeneratedAppointment(BaseModel):
    """One concrete occurrence produced from a draft"""
    patient_id: int
    start_datetime: datetime.datetime
    duration_minutes: int
    fee: Decimal
    payer_type: PayerType
    insurer_name: Optional[str] = None
    insurer_plan: Optional[str] = None
    notes: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class AppointmentUpdate(BaseModel):
    patient_id: Optional[int] = None
    start_datetime: Optional[datetime.datetime] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    fee: Optional[Decimal] = Field(None, ge=0)
    payer_type: Optional[PayerType] = None
    insurer_name: Optional[str] = Field(None, max_length=100)
    insurer_plan: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    status: Optional[AppointmentStatus] = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    start_datetime: datetime.datetime
    duration_minutes: int
    fee: Decimal
    payer_type: PayerType
    insurer_name: Optional[str] = None
    insurer_plan: Optional[str] = None
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    # Related data
    patient_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AgendaSummaryResponse(BaseModel):
    total: int
    scheduled: int
    completed: int
    cancelled: int
    total_fee: Decimal
