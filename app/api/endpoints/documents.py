"""
Simple document API endpoints
Free-text certificates, referrals and exam requests for a patient, and the
history of every issued document.
"""
import datetime
import logging
from io import BytesIO
from typing import Any, Dict, List, Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from app.api.deps import get_storage
from app.api.endpoints.profile import load_profile
from app.models import GeneratedDocument
from app.schemas.document import GeneratedDocumentResponse, SimpleDocumentRequest, SimpleDocumentResponse
from app.services.documents import (
    compose_document_html,
    document_filename,
    document_title,
    render_document_content,
)
from app.services.pdf_generator import generate_document_pdf
from app.services.storage import StorageRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


def pdf_response(pdf: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        BytesIO(pdf),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
        }
    )


async def record_document(
    storage: StorageRepository,
    title: str,
    content: str,
    patient_id: Optional[int] = None,
    template_id: Optional[int] = None,
    field_values: Optional[Dict[str, Any]] = None,
) -> GeneratedDocument:
    """Keep an issued document in the history"""
    [document] = await storage.insert("generated_documents", [{
        "patient_id": patient_id,
        "template_id": template_id,
        "title": title,
        "content": content,
        "field_values": field_values,
    }])
    logger.info(f"Recorded document {document.id} '{title}' for patient {patient_id}")
    return document


@router.get("", response_model=List[GeneratedDocumentResponse])
async def list_documents(
    patient_id: Optional[int] = Query(None, description="Only documents issued for this patient"),
    storage: StorageRepository = Depends(get_storage),
):
    """
    Issued documents, newest first
    """
    filters = {"patient_id": patient_id} if patient_id is not None else None
    return await storage.select("generated_documents", filters=filters, order_by="id", descending=True)


@router.get("/{document_id}", response_model=GeneratedDocumentResponse)
async def get_document(
    document_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    return await storage.get("generated_documents", document_id)


@router.post("/simple", response_model=SimpleDocumentResponse)
async def preview_simple_document(
    document_in: SimpleDocumentRequest,
    storage: StorageRepository = Depends(get_storage),
):
    """
    HTML preview of the document as it will be printed
    """
    patient = await storage.get("patients", document_in.patient_id)
    profile = await load_profile(storage, create=False)
    now = datetime.datetime.now()

    title = document_title(document_in.document_type, document_in.custom_type)
    return SimpleDocumentResponse(
        title=title,
        filename=document_filename(title, patient.name, now.date()),
        html=compose_document_html(
            title, document_in.content, patient=patient, profile=profile, issued_on=now.date(), now=now
        ),
    )


@router.post("/simple/pdf")
async def download_simple_document(
    document_in: SimpleDocumentRequest,
    storage: StorageRepository = Depends(get_storage),
):
    """
    Generate the PDF and record the document in the history
    """
    patient = await storage.get("patients", document_in.patient_id)
    profile = await load_profile(storage, create=False)
    now = datetime.datetime.now()

    title = document_title(document_in.document_type, document_in.custom_type)
    content = render_document_content(document_in.content, patient=patient, profile=profile, now=now)
    pdf = generate_document_pdf(title, content, profile=profile, patient=patient, issued_on=now.date())

    await record_document(
        storage,
        title,
        compose_document_html(
            title, document_in.content, patient=patient, profile=profile, issued_on=now.date(), now=now
        ),
        patient_id=patient.id,
        field_values={
            "document_type": document_in.document_type.value,
            "custom_type": document_in.custom_type,
            "content": document_in.content,
        },
    )
    return pdf_response(pdf, document_filename(title, patient.name, now.date()))
