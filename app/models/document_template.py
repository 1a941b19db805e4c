"""
Document Template and Generated Document Models
Stores user-authored templates for certificates, referrals and other documents.
Text templates carry a body with {{namespace.field}} tokens; file templates only
point to an uploaded file. Every issued document is kept in generated_documents.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
import datetime

from database import Base


class TemplateKind(str, enum.Enum):
    TEXT = "text"
    FILE = "file"


class DocumentTemplate(Base):
    __tablename__ = "document_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    kind = Column(SQLEnum(TemplateKind, native_enum=False), nullable=False, default=TemplateKind.TEXT)

    body = Column(Text, nullable=True)  # Only for kind=text
    file_url = Column(String(500), nullable=True)  # Only for kind=file

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False)
    updated_at = Column(DateTime, onupdate=datetime.datetime.now)

    def __repr__(self):
        return f"<DocumentTemplate(id={self.id}, name='{self.name}', kind={self.kind.value})>"


class GeneratedDocument(Base):
    """
    History of issued documents
    Keeps the composed HTML together with the values typed in the form, for
    simple documents (no template) and for rendered templates.
    """
    __tablename__ = "generated_documents"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=True, index=True)  # None for templates issued without a patient
    template_id = Column(Integer, ForeignKey("document_templates.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)  # Composed HTML
    field_values = Column(JSON, nullable=True)  # e.g. {"content": "..."} or the record ids used

    created_at = Column(DateTime, default=datetime.datetime.now, nullable=False, index=True)

    patient = relationship("Patient", back_populates="documents")

    def __repr__(self):
        return f"<GeneratedDocument(id={self.id}, patient_id={self.patient_id}, title='{self.title}')>"
