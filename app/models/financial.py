"""
Financial models: income entries (receitas) and expenses (despesas)
"""
import datetime
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from database import Base
from app.models import PayerType


EXPENSE_CATEGORIES = [
    "Material de Escritório",
    "Equipamentos",
    "Serviços",
    "Impostos",
    "Aluguel",
    "Água",
    "Luz",
    "Internet",
    "Telefone",
    "Outros",
]

PAYMENT_METHODS = [
    "Dinheiro",
    "Cartão de Débito",
    "Cartão de Crédito",
    "PIX",
    "Transferência",
    "Boleto",
]


class Income(Base):
    """Payment received for a patient, either directly or through an insurer"""
    __tablename__ = "incomes"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    payer_type = Column(SQLEnum(PayerType), nullable=False, default=PayerType.INDIVIDUAL)
    insurer_name = Column(String(100), nullable=True)  # Operadora
    insurer_plan = Column(String(100), nullable=True)  # Plano de saúde
    amount = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    patient = relationship("Patient", back_populates="incomes")

    def __repr__(self):
        return f"<Income(id={self.id}, patient_id={self.patient_id}, amount={self.amount})>"


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    payment_method = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    def __repr__(self):
        return f"<Expense(id={self.id}, category='{self.category}', amount={self.amount})>"
