"""
PDF document generation using ReportLab's Platypus framework.

Layout of every document:
- Header: letterhead image when the profile points at a local file, otherwise
  the professional's name, specialty and CRM
- Title
- Patient block (name, CPF, birth date)
- Body: plain text with its line breaks, or the paragraphs of an HTML body
- Long-form issuance date, signature line and contact footer
"""

from __future__ import annotations

import datetime
import logging
import os
import re
from html import unescape
from io import BytesIO
from typing import Any, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer

from app.services.render_context import format_date, format_long_date

logger = logging.getLogger(__name__)

NOT_INFORMED = "Não informado"

_HTML_TAG = re.compile(r"<(/?)([a-zA-Z][a-zA-Z0-9]*)\b[^>]*?(/?)>")
_ANY_TAG = re.compile(r"<[^>]+>")
BLOCK_TAGS = {"p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "ul", "ol", "table", "tr", "blockquote"}
INLINE_TAGS = {"b": "b", "strong": "b", "i": "i", "em": "i", "u": "u"}


def professional_line(profile: Any) -> str:
    """'Cardiologia - CRM 12345', skipping what is missing"""
    if profile is None:
        return ""
    specialty = getattr(profile, "specialty", None)
    crm = getattr(profile, "crm", None)
    parts = [specialty, f"CRM {crm}" if crm else None]
    return " - ".join(part for part in parts if part)


def contact_line(profile: Any) -> str:
    if profile is None:
        return ""
    parts = [getattr(profile, "phone", None), getattr(profile, "email", None)]
    return " | ".join(part for part in parts if part)


def text_to_markup(content: Optional[str]) -> str:
    """Escape for Platypus markup and keep line breaks"""
    return escape(content or "").replace("\n", "<br/>")


def html_to_markup(content: Optional[str]) -> List[str]:
    """
    Convert an HTML body (a rendered template) into Platypus paragraphs.

    Block tags start a new paragraph and <br> becomes <br/>. Bold, italic and
    underline are kept, every other tag is dropped. Text is unescaped before
    being escaped for Platypus, so entities come out exactly once.
    """
    content = content or ""
    paragraphs: List[str] = []
    current: List[str] = []
    open_tags: List[str] = []

    def flush():
        while open_tags:
            current.append(f"</{open_tags.pop()}>")
        markup = "".join(current).strip()
        if _ANY_TAG.sub("", markup).strip():
            paragraphs.append(markup)
        current.clear()

    pos = 0
    for match in _HTML_TAG.finditer(content):
        current.append(escape(unescape(content[pos:match.start()])))
        pos = match.end()
        closing, name = match.group(1), match.group(2).lower()
        if name in BLOCK_TAGS:
            flush()
        elif name == "br":
            current.append("<br/>")
        elif name in INLINE_TAGS and not match.group(3):
            tag = INLINE_TAGS[name]
            if not closing:
                open_tags.append(tag)
                current.append(f"<{tag}>")
            elif tag in open_tags:
                while open_tags:
                    top = open_tags.pop()
                    current.append(f"</{top}>")
                    if top == tag:
                        break
    current.append(escape(unescape(content[pos:])))
    flush()
    return paragraphs


class PDFGenerator:
    """
    Builds the single-page style documents the practice prints: certificates,
    referrals, exam requests and rendered templates.
    """

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.setup_custom_styles()

    def setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='DocumentTitle',
            parent=self.styles['Heading1'],
            fontSize=16,
            alignment=TA_CENTER,
            spaceBefore=12,
            spaceAfter=18,
            fontName='Helvetica-Bold',
        ))
        self.styles.add(ParagraphStyle(
            name='HeaderName',
            parent=self.styles['Normal'],
            fontSize=13,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold',
        ))
        self.styles.add(ParagraphStyle(
            name='HeaderDetail',
            parent=self.styles['Normal'],
            fontSize=9,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#444444'),
        ))
        self.styles.add(ParagraphStyle(
            name='DocumentBody',
            parent=self.styles['Normal'],
            fontSize=11,
            leading=16,
            alignment=TA_JUSTIFY,
            spaceAfter=6,
        ))
        self.styles.add(ParagraphStyle(
            name='DocumentDate',
            parent=self.styles['Normal'],
            fontSize=10,
            alignment=TA_RIGHT,
            spaceBefore=24,
        ))
        self.styles.add(ParagraphStyle(
            name='DocumentFooter',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.grey,
            alignment=TA_CENTER,
            fontName='Helvetica-Oblique',
        ))

    def _header(self, profile: Any) -> List[Any]:
        letterhead = getattr(profile, "letterhead_url", None) if profile is not None else None
        if letterhead and os.path.exists(letterhead):
            return [Image(letterhead, width=17 * cm, height=3 * cm, kind='proportional'), Spacer(1, 0.4 * cm)]

        story: List[Any] = []
        name = getattr(profile, "full_name", None) if profile is not None else None
        if name:
            story.append(Paragraph(escape(name), self.styles['HeaderName']))
        detail = professional_line(profile)
        if detail:
            story.append(Paragraph(escape(detail), self.styles['HeaderDetail']))
        story.append(Spacer(1, 0.4 * cm))
        return story

    def _patient_block(self, patient: Any) -> List[Any]:
        if patient is None:
            return []
        lines = [
            f"<b>Paciente:</b> {escape(patient.name or '')}",
            f"<b>CPF:</b> {escape(patient.cpf or NOT_INFORMED)}",
        ]
        if patient.birth_date:
            lines.append(f"<b>Data de nascimento:</b> {format_date(patient.birth_date)}")
        return [Paragraph(line, self.styles['Normal']) for line in lines] + [Spacer(1, 0.6 * cm)]

    def _signature(self, profile: Any) -> List[Any]:
        story: List[Any] = [Spacer(1, 1.8 * cm), Paragraph("_" * 40, self.styles['HeaderDetail'])]
        name = getattr(profile, "full_name", None) if profile is not None else None
        if name:
            story.append(Paragraph(escape(name), self.styles['HeaderName']))
        detail = professional_line(profile)
        if detail:
            story.append(Paragraph(escape(detail), self.styles['HeaderDetail']))
        return story

    def generate_document(
        self,
        title: str,
        content: str,
        profile: Any = None,
        patient: Any = None,
        issued_on: Optional[datetime.date] = None,
        html: bool = False,
    ) -> bytes:
        """Render a titled document to PDF bytes. `html` marks content as an HTML body"""
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            topMargin=1.5 * cm,
            bottomMargin=1.5 * cm,
            leftMargin=2 * cm,
            rightMargin=2 * cm,
            title=title,
        )

        story: List[Any] = []
        story.extend(self._header(profile))
        story.append(Paragraph(escape(title), self.styles['DocumentTitle']))
        story.extend(self._patient_block(patient))
        if html:
            story.extend(Paragraph(markup, self.styles['DocumentBody']) for markup in html_to_markup(content))
        else:
            story.append(Paragraph(text_to_markup(content), self.styles['DocumentBody']))
        story.append(Paragraph(
            format_long_date(issued_on or datetime.date.today()),
            self.styles['DocumentDate'],
        ))
        story.extend(self._signature(profile))

        contact = contact_line(profile)
        if contact:
            story.append(Spacer(1, 0.8 * cm))
            story.append(Paragraph(escape(contact), self.styles['DocumentFooter']))

        doc.build(story)
        pdf = buffer.getvalue()
        buffer.close()
        logger.info(f"Generated PDF '{title}' ({len(pdf)} bytes)")
        return pdf


def generate_document_pdf(
    title: str,
    content: str,
    profile: Any = None,
    patient: Any = None,
    issued_on: Optional[datetime.date] = None,
    html: bool = False,
) -> bytes:
    return PDFGenerator().generate_document(
        title, content, profile=profile, patient=patient, issued_on=issued_on, html=html
    )
