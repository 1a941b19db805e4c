"""
Document template API endpoints
"""
import datetime
import logging
from typing import List
from fastapi import APIRouter, Depends, status

from app.api.deps import get_storage
from app.api.endpoints.documents import pdf_response, record_document
from app.api.endpoints.profile import load_profile
from app.core.error_handling import ValidationException
from app.models import DocumentTemplate, TemplateKind
from app.schemas.document import (
    DocumentTemplateCreate,
    DocumentTemplateUpdate,
    DocumentTemplateResponse,
    TemplateRenderRequest,
    TemplateRenderResponse,
    TemplateTokensResponse,
)
from app.services.documents import document_filename
from app.services.pdf_generator import generate_document_pdf
from app.services.render_context import build_render_context
from app.services.storage import StorageRepository, first_related
from app.services.template_renderer import SystemToken, available_tokens, render_template, unresolved_tokens

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["Templates"])


async def _render(storage: StorageRepository, template: DocumentTemplate, render_in: TemplateRenderRequest):
    """Fetch the referenced records, build the context and render the body"""
    if template.kind != TemplateKind.TEXT:
        raise ValidationException(
            "Only text templates can be rendered",
            details={"template_id": template.id, "kind": TemplateKind(template.kind).value},
        )

    appointment = clinical_record = income = None
    if render_in.appointment_id:
        appointment = await storage.get("appointments", render_in.appointment_id, load=["patient"])
    if render_in.clinical_record_id:
        clinical_record = await storage.get("clinical_records", render_in.clinical_record_id, load=["patient"])
    if render_in.income_id:
        income = await storage.get("incomes", render_in.income_id, load=["patient"])

    if render_in.patient_id:
        patient = await storage.get("patients", render_in.patient_id)
    else:
        # Fall back to the patient of whichever record was given
        patient = next(
            (first_related(r.patient) for r in (appointment, clinical_record, income) if r is not None),
            None,
        )

    profile = await load_profile(storage, create=False)
    context = build_render_context(
        patient=patient,
        appointment=appointment,
        clinical_record=clinical_record,
        income=income,
        profile=profile,
    )
    content = render_template(template.body, context, escape_html=render_in.escape_html)
    return content, patient, profile


@router.get("", response_model=List[DocumentTemplateResponse])
async def list_templates(storage: StorageRepository = Depends(get_storage)):
    return await storage.select("document_templates", order_by="name")


@router.get("/tokens", response_model=TemplateTokensResponse)
async def list_tokens():
    """
    Tokens accepted in template bodies, grouped by namespace
    """
    return TemplateTokensResponse(
        namespaces=available_tokens(),
        system=[token.value for token in SystemToken],
    )


@router.post("", response_model=DocumentTemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    template_in: DocumentTemplateCreate,
    storage: StorageRepository = Depends(get_storage),
):
    [template] = await storage.insert("document_templates", [template_in.model_dump()])
    unknown = unresolved_tokens(template.body)
    if unknown:
        logger.info(f"Template {template.id} has tokens that will not be substituted: {unknown}")
    return template


@router.get("/{template_id}", response_model=DocumentTemplateResponse)
async def get_template(
    template_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    return await storage.get("document_templates", template_id)


@router.put("/{template_id}", response_model=DocumentTemplateResponse)
async def update_template(
    template_id: int,
    template_in: DocumentTemplateUpdate,
    storage: StorageRepository = Depends(get_storage),
):
    return await storage.update("document_templates", template_id, template_in.model_dump(exclude_unset=True))


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: int,
    storage: StorageRepository = Depends(get_storage),
):
    await storage.delete("document_templates", template_id)
    return None


@router.post("/{template_id}/render", response_model=TemplateRenderResponse)
async def render_document_template(
    template_id: int,
    render_in: TemplateRenderRequest,
    storage: StorageRepository = Depends(get_storage),
):
    """
    Substitute the template's tokens with data from the given records
    """
    template = await storage.get("document_templates", template_id)
    content, _, _ = await _render(storage, template, render_in)
    return TemplateRenderResponse(
        template_id=template.id,
        content=content,
        unresolved_tokens=unresolved_tokens(template.body),
    )


@router.post("/{template_id}/pdf")
async def render_template_pdf(
    template_id: int,
    render_in: TemplateRenderRequest,
    storage: StorageRepository = Depends(get_storage),
):
    template = await storage.get("document_templates", template_id)
    content, patient, profile = await _render(storage, template, render_in)

    today = datetime.date.today()
    title = template.name.upper()
    pdf = generate_document_pdf(title, content, profile=profile, patient=patient, issued_on=today, html=True)

    await record_document(
        storage,
        title,
        content,
        patient_id=patient.id if patient else None,
        template_id=template.id,
        field_values=render_in.model_dump(exclude={"escape_html"}, exclude_none=True),
    )
    return pdf_response(pdf, document_filename(title, patient.name if patient else "", today))
