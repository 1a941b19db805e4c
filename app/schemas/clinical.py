"""
Clinical record and evolution schemas
"""
import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ClinicalRecordBase(BaseModel):
    patient_id: int
    consultation_date: datetime.date
    chief_complaint: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None


class ClinicalRecordCreate(ClinicalRecordBase):
    pass


class ClinicalRecordUpdate(BaseModel):
    consultation_date: Optional[datetime.date] = None
    chief_complaint: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    notes: Optional[str] = None


class ClinicalRecordResponse(ClinicalRecordBase):
    id: int
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None
    patient_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EvolutionBase(BaseModel):
    patient_id: int
    date: datetime.date
    description: str = Field(..., min_length=1)


class EvolutionCreate(EvolutionBase):
    pass


class EvolutionUpdate(BaseModel):
    date: Optional[datetime.date] = None
    description: Optional[str] = Field(None, min_length=1)


class EvolutionResponse(EvolutionBase):
    id: int
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None
    patient_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
