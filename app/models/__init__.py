"""
Core models: patients, the practice profile and appointments
"""
import datetime
import enum
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship
from database import Base


class PayerType(str, enum.Enum):
    """Who pays for the appointment: the patient directly or an insurer"""
    INDIVIDUAL = "individual"
    INSURANCE = "insurance"


class AppointmentStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    birth_date = Column(Date, nullable=True)
    cpf = Column(String(14), nullable=True, index=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(200), nullable=True)
    guardian = Column(String(200), nullable=True)  # Responsável (minors)

    # Default billing for the patient's appointments
    payer_type = Column(SQLEnum(PayerType), nullable=False, default=PayerType.INDIVIDUAL)
    insurer_name = Column(String(100), nullable=True)
    insurer_plan = Column(String(100), nullable=True)

    # Address
    zip_code = Column(String(9), nullable=True)
    street = Column(String(200), nullable=True)
    number = Column(String(20), nullable=True)
    complement = Column(String(100), nullable=True)
    district = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    appointments = relationship("Appointment", back_populates="patient", cascade="all, delete-orphan")
    clinical_records = relationship("ClinicalRecord", back_populates="patient", cascade="all, delete-orphan")
    evolutions = relationship("Evolution", back_populates="patient", cascade="all, delete-orphan")
    incomes = relationship("Income", back_populates="patient", cascade="all, delete-orphan")
    documents = relationship("GeneratedDocument", back_populates="patient", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Patient(id={self.id}, name='{self.name}')>"


class Profile(Base):
    """
    Professional profile of the practice
    Feeds the letterhead, signature block and the {{profissional.*}} template tokens
    """
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(200), nullable=False, default="")
    crm = Column(String(30), nullable=False, default="")
    specialty = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(200), nullable=True)
    letterhead_url = Column(String(500), nullable=True)  # Papel timbrado
    signature_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    def __repr__(self):
        return f"<Profile(id={self.id}, crm='{self.crm}')>"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    # Local wall-clock time, stored without timezone conversion
    start_datetime = Column(DateTime, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False, default=30)
    fee = Column(Numeric(10, 2), nullable=False, default=0)

    payer_type = Column(SQLEnum(PayerType), nullable=False, default=PayerType.INDIVIDUAL)
    insurer_name = Column(String(100), nullable=True)  # Convênio
    insurer_plan = Column(String(100), nullable=True)  # Operadora / plano

    notes = Column(Text, nullable=True)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.SCHEDULED, index=True)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    patient = relationship("Patient", back_populates="appointments")

    __table_args__ = (
        Index('ix_appointments_patient_start', 'patient_id', 'start_datetime'),
    )

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, start={self.start_datetime}, status={self.status})>"


# Register the remaining tables on Base.metadata
from app.models.clinical import ClinicalRecord, Evolution  # noqa: E402
from app.models.financial import Income, Expense  # noqa: E402
from app.models.document_template import DocumentTemplate, GeneratedDocument, TemplateKind  # noqa: E402

__all__ = [
    "PayerType",
    "AppointmentStatus",
    "Patient",
    "Profile",
    "Appointment",
    "ClinicalRecord",
    "Evolution",
    "Income",
    "Expense",
    "DocumentTemplate",
    "GeneratedDocument",
    "TemplateKind",
]
