"""
Tests for render context building and pt-BR formatting
"""
import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models import AppointmentStatus, PayerType
from app.services.render_context import (
    build_render_context,
    format_address,
    format_brl,
    format_long_date,
)
from app.services.template_renderer import render_template


def patient(**overrides):
    values = dict(
        name="Maria Souza", email="maria@example.com", phone="(11) 99999-0000", cpf="123.456.789-00",
        birth_date=datetime.date(1985, 3, 10), street="Av. Paulista", number="1000", complement=None,
        district="Bela Vista", city="São Paulo", state="SP", zip_code="01310-100",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.unit
class TestFormatting:

    @pytest.mark.parametrize("value,expected", [
        (Decimal("1234.56"), "R$ 1.234,56"),
        (Decimal("0"), "R$ 0,00"),
        (150, "R$ 150,00"),
        (Decimal("1234567.8"), "R$ 1.234.567,80"),
        (Decimal("-10.5"), "-R$ 10,50"),
        (None, ""),
    ])
    def test_format_brl(self, value, expected):
        assert format_brl(value) == expected

    def test_format_long_date(self):
        assert format_long_date(datetime.date(2024, 1, 5)) == "05 de janeiro de 2024"
        assert format_long_date(datetime.date(2023, 3, 15)) == "15 de março de 2023"

    def test_format_address_full(self):
        assert format_address(patient(complement="Apto 2")) == \
            "Av. Paulista, 1000 - Apto 2 - Bela Vista - São Paulo/SP - CEP 01310-100"

    def test_format_address_skips_blank_parts(self):
        sparse = patient(street=None, number=None, district=None, zip_code=None, state=None)
        assert format_address(sparse) == "São Paulo"


@pytest.mark.unit
class TestBuildRenderContext:

    def test_only_present_namespaces(self):
        context = build_render_context(patient=patient())
        assert list(context) == ["paciente"]
        assert context["paciente"]["data_nascimento"] == "10/03/1985"

    def test_appointment_labels(self):
        appointment = SimpleNamespace(
            start_datetime=datetime.datetime(2024, 1, 15, 14, 30),
            duration_minutes=45,
            status=AppointmentStatus.COMPLETED,
            notes=None,
        )
        fields = build_render_context(appointment=appointment)["consulta"]
        assert fields == {
            "data": "15/01/2024 14:30",
            "duracao": "45 minutos",
            "status": "Concluída",
            "observacoes": "",
        }

    def test_income_fields(self):
        income = SimpleNamespace(
            date=datetime.date(2024, 2, 1),
            payer_type=PayerType.INSURANCE,
            insurer_name="Unimed",
            insurer_plan="Nacional",
            amount=Decimal("1234.56"),
            notes="",
        )
        fields = build_render_context(income=income)["receita"]
        assert fields["tipo_pagamento"] == "Convênio"
        assert fields["valor"] == "R$ 1.234,56"

    def test_renders_through_template(self):
        profile = SimpleNamespace(
            full_name="Dra. Ana Lima", crm="12345-SP", specialty="Clínica Geral", phone=None, email=None,
        )
        context = build_render_context(patient=patient(), profile=profile)
        body = "{{paciente.nome}}, CPF {{paciente.cpf}}. {{profissional.nome_completo}} - CRM {{profissional.crm}}"
        assert render_template(body, context) == "Maria Souza, CPF 123.456.789-00. Dra. Ana Lima - CRM 12345-SP"
