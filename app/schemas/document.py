"""
Pydantic schemas for document templates and generated documents
"""
import datetime
import enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from app.models.document_template import TemplateKind


class DocumentTemplateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    kind: TemplateKind = TemplateKind.TEXT
    body: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=500)


class DocumentTemplateCreate(DocumentTemplateBase):

    @model_validator(mode="after")
    def _check_kind(self):
        if self.kind == TemplateKind.TEXT:
            if not self.body:
                raise ValueError("body is required for text templates")
            self.file_url = None
        else:
            if not self.file_url:
                raise ValueError("file_url is required for file templates")
            self.body = None
        return self


class DocumentTemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    body: Optional[str] = None
    file_url: Optional[str] = Field(None, max_length=500)


class DocumentTemplateResponse(DocumentTemplateBase):
    id: int
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TemplateRenderRequest(BaseModel):
    """Entities whose fields feed the template tokens"""
    patient_id: Optional[int] = None
    appointment_id: Optional[int] = None
    clinical_record_id: Optional[int] = None
    income_id: Optional[int] = None
    escape_html: bool = False


class TemplateRenderResponse(BaseModel):
    template_id: int
    content: str
    unresolved_tokens: List[str] = []


class TemplateTokensResponse(BaseModel):
    namespaces: Dict[str, List[str]]
    system: List[str]


class SimpleDocumentType(str, enum.Enum):
    CERTIFICATE = "atestado"
    REFERRAL = "encaminhamento"
    EXAM_REQUEST = "exame"
    OTHER = "outro"


class SimpleDocumentRequest(BaseModel):
    patient_id: int
    document_type: SimpleDocumentType = SimpleDocumentType.CERTIFICATE
    custom_type: Optional[str] = Field(None, max_length=100)
    content: str

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Document content cannot be empty")
        return value


class SimpleDocumentResponse(BaseModel):
    title: str
    filename: str
    html: str


class GeneratedDocumentResponse(BaseModel):
    """An issued document kept in the history"""
    id: int
    patient_id: Optional[int] = None
    template_id: Optional[int] = None
    title: str
    content: str
    field_values: Optional[Dict[str, Any]] = None
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)
