"""
Income and expense schemas
"""
import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from app.models import PayerType
from app.models.financial import EXPENSE_CATEGORIES, PAYMENT_METHODS


class IncomeBase(BaseModel):
    patient_id: int
    date: datetime.date
    payer_type: PayerType = PayerType.INDIVIDUAL
    insurer_name: Optional[str] = Field(None, max_length=100)
    insurer_plan: Optional[str] = Field(None, max_length=100)
    amount: Decimal = Field(..., ge=0)
    notes: Optional[str] = None


class IncomeCreate(IncomeBase):

    @model_validator(mode="after")
    def _check_insurer(self):
        if self.payer_type == PayerType.INSURANCE:
            if not self.insurer_name or not self.insurer_plan:
                raise ValueError("insurer_name and insurer_plan are required for insurance payments")
        else:
            self.insurer_name = None
            self.insurer_plan = None
        return self


class IncomeUpdate(BaseModel):
    date: Optional[datetime.date] = None
    payer_type: Optional[PayerType] = None
    insurer_name: Optional[str] = Field(None, max_length=100)
    insurer_plan: Optional[str] = Field(None, max_length=100)
    amount: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class IncomeResponse(IncomeBase):
    id: int
    created_at: datetime.datetime
    patient_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ExpenseBase(BaseModel):
    description: str = Field(..., min_length=1, max_length=255)
    date: datetime.date
    amount: Decimal = Field(..., ge=0)
    category: str
    payment_method: str
    notes: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if value not in EXPENSE_CATEGORIES:
            raise ValueError(f"category must be one of: {', '.join(EXPENSE_CATEGORIES)}")
        return value

    @field_validator("payment_method")
    @classmethod
    def _known_payment_method(cls, value: str) -> str:
        if value not in PAYMENT_METHODS:
            raise ValueError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
        return value


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[datetime.date] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    category: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in EXPENSE_CATEGORIES:
            raise ValueError(f"category must be one of: {', '.join(EXPENSE_CATEGORIES)}")
        return value

    @field_validator("payment_method")
    @classmethod
    def _known_payment_method(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in PAYMENT_METHODS:
            raise ValueError(f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}")
        return value


class ExpenseResponse(ExpenseBase):
    id: int
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ExpenseOptionsResponse(BaseModel):
    categories: List[str]
    payment_methods: List[str]
