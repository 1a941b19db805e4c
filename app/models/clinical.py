"""
Clinical notes: the per-visit clinical record (ficha clínica) and free-form evolution notes
"""
import datetime
from sqlalchemy import Column, Integer, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from database import Base


class ClinicalRecord(Base):
    __tablename__ = "clinical_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    consultation_date = Column(Date, nullable=False)
    chief_complaint = Column(Text, nullable=True)  # Queixa principal
    diagnosis = Column(Text, nullable=True)
    treatment = Column(Text, nullable=True)  # Conduta
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    patient = relationship("Patient", back_populates="clinical_records")

    __table_args__ = (
        Index('ix_clinical_records_patient_date', 'patient_id', 'consultation_date'),
    )

    def __repr__(self):
        return f"<ClinicalRecord(id={self.id}, patient_id={self.patient_id}, date={self.consultation_date})>"


class Evolution(Base):
    __tablename__ = "evolutions"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    patient = relationship("Patient", back_populates="evolutions")

    def __repr__(self):
        return f"<Evolution(id={self.id}, patient_id={self.patient_id}, date={self.date})>"
