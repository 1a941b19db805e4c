"""
Simple documents: certificate, referral, exam request or a custom title,
typed free-hand for one patient and issued on the professional's letterhead.
"""

import datetime
from html import escape
from typing import Any, Optional

from app.schemas.document import SimpleDocumentType
from app.services.pdf_generator import NOT_INFORMED, contact_line
from app.services.render_context import build_render_context, format_date, format_long_date
from app.services.template_renderer import render_template

DOCUMENT_TITLES = {
    SimpleDocumentType.CERTIFICATE: "ATESTADO MÉDICO",
    SimpleDocumentType.REFERRAL: "ENCAMINHAMENTO",
    SimpleDocumentType.EXAM_REQUEST: "SOLICITAÇÃO DE EXAME",
}
DEFAULT_TITLE = "DOCUMENTO"


def document_title(document_type: SimpleDocumentType, custom_type: Optional[str] = None) -> str:
    if document_type == SimpleDocumentType.OTHER and custom_type and custom_type.strip():
        return custom_type.strip().upper()
    return DOCUMENT_TITLES.get(document_type, DEFAULT_TITLE)


def document_filename(title: str, patient_name: str, day: datetime.date) -> str:
    """atestado_médico_maria_15012024.pdf"""
    first_name = (patient_name or "").split(" ")[0].lower()
    return f"{'_'.join(title.lower().split())}_{first_name}_{day.strftime('%d%m%Y')}.pdf"


def _esc(value: Optional[str]) -> str:
    return escape(value or "")


def render_document_content(
    content: str,
    patient: Any = None,
    profile: Any = None,
    now: Optional[datetime.datetime] = None,
    escape_html: bool = False,
) -> str:
    """Substitute the template tokens typed in the content with the patient and profile data"""
    context = build_render_context(patient=patient, profile=profile)
    return render_template(content, context, now=now, escape_html=escape_html)


def compose_document_html(
    title: str,
    content: str,
    patient: Any = None,
    profile: Any = None,
    issued_on: Optional[datetime.date] = None,
    now: Optional[datetime.datetime] = None,
) -> str:
    issued_on = issued_on or datetime.date.today()
    full_name = _esc(getattr(profile, "full_name", None))
    specialty = _esc(getattr(profile, "specialty", None))
    crm = _esc(getattr(profile, "crm", None))

    letterhead = getattr(profile, "letterhead_url", None)
    if letterhead:
        header = f'<div class="letterhead"><img src="{_esc(letterhead)}" style="width: 100%; max-height: 150px;" /></div>'
    else:
        header = f'<div class="header" style="text-align: center;"><h2>{full_name}</h2><p>{specialty} - {crm}</p></div>'

    patient_block = ""
    if patient is not None:
        lines = [
            f"<p><strong>Paciente:</strong> {_esc(patient.name)}</p>",
            f"<p><strong>CPF:</strong> {_esc(patient.cpf) or NOT_INFORMED}</p>",
        ]
        if patient.birth_date:
            lines.append(f"<p><strong>Data de Nascimento:</strong> {format_date(patient.birth_date)}</p>")
        patient_block = '<div class="patient">' + "".join(lines) + "</div>"

    signature_url = getattr(profile, "signature_url", None)
    if signature_url:
        signature = f'<img src="{_esc(signature_url)}" style="max-width: 250px; max-height: 70px;" />'
    else:
        signature = '<div style="border-top: 1px solid #000; width: 200px; margin: 5px auto;"></div>'

    contact = contact_line(profile)
    footer = f'<div class="contact">{_esc(contact)}</div>' if contact else ""

    # Typed text is escaped first, so only the substituted values need escaping
    body = render_document_content(_esc(content), patient, profile, now=now, escape_html=True).replace("\n", "<br>")
    return (
        '<div class="document" style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto;">'
        f"{header}"
        f'<h1 style="text-align: center;">{_esc(title)}</h1>'
        f"{patient_block}"
        f'<div class="content" style="text-align: justify; line-height: 1.5;">{body}</div>'
        f'<div class="date" style="text-align: center;"><p>{format_long_date(issued_on)}</p></div>'
        f'<div class="signature" style="text-align: center;">{signature}'
        f"<p>{full_name}<br>{specialty}<br>{crm}</p></div>"
        f"{footer}"
        "</div>"
    )
