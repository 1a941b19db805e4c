"""
Tests for document composition and PDF generation
"""
import datetime
from types import SimpleNamespace

import pytest

from app.schemas.document import SimpleDocumentType
from app.services.documents import (
    compose_document_html,
    document_filename,
    document_title,
    render_document_content,
)
from app.services.pdf_generator import (
    PDFGenerator,
    generate_document_pdf,
    html_to_markup,
    professional_line,
    text_to_markup,
)


@pytest.mark.unit
class TestPDFGeneration:
    """Test suite for PDF generation functionality"""

    def setup_method(self):
        self.pdf_generator = PDFGenerator()
        self.profile = SimpleNamespace(
            full_name="Dra. Ana Lima",
            crm="12345-SP",
            specialty="Clínica Geral",
            phone="(11) 3333-3333",
            email="ana@example.com",
            letterhead_url=None,
            signature_url=None,
        )
        self.patient = SimpleNamespace(
            name="João Silva",
            cpf=None,
            birth_date=datetime.date(1989, 5, 15),
        )

    def test_generate_document(self):
        pdf = self.pdf_generator.generate_document(
            "ATESTADO MÉDICO",
            "Atesto para os devidos fins.\nRepouso de 2 dias.",
            profile=self.profile,
            patient=self.patient,
            issued_on=datetime.date(2024, 1, 15),
        )
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_generate_without_profile_or_patient(self):
        pdf = generate_document_pdf("DOCUMENTO", "Texto livre")
        assert pdf.startswith(b"%PDF")

    def test_markup_characters_in_content(self):
        pdf = generate_document_pdf("EXAME", "Glicemia < 100 & HbA1c", profile=self.profile)
        assert pdf.startswith(b"%PDF")

    def test_missing_letterhead_file_falls_back_to_text_header(self):
        self.profile.letterhead_url = "/nonexistent/letterhead.png"
        pdf = generate_document_pdf("DOCUMENTO", "Texto", profile=self.profile)
        assert pdf.startswith(b"%PDF")

    def test_text_to_markup(self):
        assert text_to_markup("a < b\nc & d") == "a &lt; b<br/>c &amp; d"

    def test_generate_document_from_html_body(self):
        pdf = generate_document_pdf(
            "ATESTADO",
            "<p>Atesto que <strong>João Silva</strong> compareceu.</p><p>Linha 1<br>Linha 2</p>",
            profile=self.profile,
            patient=self.patient,
            html=True,
        )
        assert pdf.startswith(b"%PDF")

    def test_professional_line(self):
        assert professional_line(self.profile) == "Clínica Geral - CRM 12345-SP"
        assert professional_line(None) == ""


@pytest.mark.unit
class TestSimpleDocuments:

    @pytest.mark.parametrize("document_type,custom,expected", [
        (SimpleDocumentType.CERTIFICATE, None, "ATESTADO MÉDICO"),
        (SimpleDocumentType.REFERRAL, None, "ENCAMINHAMENTO"),
        (SimpleDocumentType.EXAM_REQUEST, "ignored", "SOLICITAÇÃO DE EXAME"),
        (SimpleDocumentType.OTHER, "Declaração de comparecimento", "DECLARAÇÃO DE COMPARECIMENTO"),
        (SimpleDocumentType.OTHER, "  ", "DOCUMENTO"),
        (SimpleDocumentType.OTHER, None, "DOCUMENTO"),
    ])
    def test_document_title(self, document_type, custom, expected):
        assert document_title(document_type, custom) == expected

    def test_document_filename(self):
        filename = document_filename("ATESTADO MÉDICO", "Maria Souza", datetime.date(2024, 1, 15))
        assert filename == "atestado_médico_maria_15012024.pdf"

    def test_compose_html(self):
        profile = SimpleNamespace(
            full_name="Dra. Ana Lima", crm="12345-SP", specialty="Clínica Geral",
            phone="(11) 3333-3333", email=None, letterhead_url=None, signature_url=None,
        )
        patient = SimpleNamespace(
            name="João Silva", cpf=None, birth_date=datetime.date(1989, 5, 15), email=None, phone=None,
        )
        html = compose_document_html(
            "ENCAMINHAMENTO", "Linha 1\nLinha <2>", patient=patient, profile=profile,
            issued_on=datetime.date(2024, 1, 15),
        )
        assert "<h1" in html and "ENCAMINHAMENTO</h1>" in html
        assert "<strong>CPF:</strong> Não informado" in html
        assert "15/05/1989" in html
        assert "Linha 1<br>Linha &lt;2&gt;" in html
        assert "15 de janeiro de 2024" in html
        assert "<h2>Dra. Ana Lima</h2>" in html
        assert "(11) 3333-3333" in html

    def test_compose_html_with_letterhead(self):
        profile = SimpleNamespace(
            full_name="Dra. Ana Lima", crm="1", specialty=None, phone=None, email=None,
            letterhead_url="https://cdn.example.com/timbrado.png", signature_url="https://cdn.example.com/sig.png",
        )
        html = compose_document_html("DOCUMENTO", "x", profile=profile)
        assert 'src="https://cdn.example.com/timbrado.png"' in html
        assert 'src="https://cdn.example.com/sig.png"' in html
        assert "<h2>" not in html

    def test_compose_html_substitutes_tokens(self):
        profile = SimpleNamespace(
            full_name="Dra. Ana Lima", crm="12345-SP", specialty=None, phone=None, email=None,
            letterhead_url=None, signature_url=None,
        )
        patient = SimpleNamespace(
            name="João <Silva>", cpf="111.222.333-44", birth_date=None, email=None, phone=None,
        )
        html = compose_document_html(
            "ATESTADO MÉDICO",
            "Atesto que {{paciente.nome}} ({{paciente.cpf}}) compareceu em {{data_atual}}.\n{{profissional.crm}}",
            patient=patient,
            profile=profile,
            now=datetime.datetime(2024, 1, 15, 9, 30),
        )
        assert (
            "Atesto que João &lt;Silva&gt; (111.222.333-44) compareceu em 15/01/2024.<br>12345-SP"
        ) in html

    def test_render_document_content(self):
        patient = SimpleNamespace(name="Maria", cpf=None, birth_date=None, email=None, phone=None)
        rendered = render_document_content("{{paciente.nome}} & {{paciente.cpf}} {{consulta.data}}", patient=patient)
        assert rendered == "Maria &  "


@pytest.mark.unit
class TestHtmlToMarkup:

    def test_paragraphs_and_line_breaks(self):
        body = '<p class="x">Linha 1<br>Linha 2</p><p>Outro<br/>parágrafo</p>'
        assert html_to_markup(body) == ["Linha 1<br/>Linha 2", "Outro<br/>parágrafo"]

    def test_inline_formatting_is_kept(self):
        body = "<div><strong>Nome:</strong> <em>Maria</em> <u>Souza</u></div>"
        assert html_to_markup(body) == ["<b>Nome:</b> <i>Maria</i> <u>Souza</u>"]

    def test_other_tags_are_dropped(self):
        body = '<h2>Título</h2><span style="color: red">texto</span> <img src="x.png"> fim'
        assert html_to_markup(body) == ["Título", "texto  fim"]

    def test_entities_are_escaped_once(self):
        assert html_to_markup("<p>Ana &amp; Cia &lt;b&gt;</p>") == ["Ana &amp; Cia &lt;b&gt;"]
        assert html_to_markup("Glicemia < 100 & HbA1c") == ["Glicemia &lt; 100 &amp; HbA1c"]

    def test_unclosed_inline_tags_are_closed_per_paragraph(self):
        assert html_to_markup("<p><b>negrito</p><p>normal</b></p>") == ["<b>negrito</b>", "normal"]

    def test_empty_paragraphs_are_skipped(self):
        assert html_to_markup("<p></p><p><br></p><p> </p>") == []
        assert html_to_markup(None) == []
