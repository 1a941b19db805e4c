"""
Patient Pydantic schemas
"""
import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from app.models import PayerType


class PatientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    birth_date: Optional[datetime.date] = None
    cpf: Optional[str] = Field(None, max_length=14)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=200)
    guardian: Optional[str] = Field(None, max_length=200)
    payer_type: PayerType = PayerType.INDIVIDUAL
    insurer_name: Optional[str] = Field(None, max_length=100)
    insurer_plan: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=9)
    street: Optional[str] = Field(None, max_length=200)
    number: Optional[str] = Field(None, max_length=20)
    complement: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=2)


class PatientCreate(PatientBase):
    pass


class PatientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    birth_date: Optional[datetime.date] = None
    cpf: Optional[str] = Field(None, max_length=14)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=200)
    guardian: Optional[str] = Field(None, max_length=200)
    payer_type: Optional[PayerType] = None
    insurer_name: Optional[str] = Field(None, max_length=100)
    insurer_plan: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=9)
    street: Optional[str] = Field(None, max_length=200)
    number: Optional[str] = Field(None, max_length=20)
    complement: Optional[str] = Field(None, max_length=100)
    district: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=2)


class PatientResponse(PatientBase):
    id: int
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: str = Field("", max_length=200)
    crm: str = Field("", max_length=30)
    specialty: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=200)
    letterhead_url: Optional[str] = Field(None, max_length=500)
    signature_url: Optional[str] = Field(None, max_length=500)


class ProfileResponse(ProfileUpdate):
    id: int
    updated_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)
