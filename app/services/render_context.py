"""
Builds the render context for document templates from stored records.
All values are pre-formatted strings in the pt-BR conventions the documents use.
"""

import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

from app.models import AppointmentStatus, PayerType
from app.services.template_renderer import Namespace

STATUS_LABELS = {
    AppointmentStatus.SCHEDULED: "Agendada",
    AppointmentStatus.COMPLETED: "Concluída",
    AppointmentStatus.CANCELLED: "Cancelada",
}

PAYER_LABELS = {
    PayerType.INDIVIDUAL: "Particular",
    PayerType.INSURANCE: "Convênio",
}

MONTH_NAMES = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def format_date(value: Optional[datetime.date]) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def format_datetime(value: Optional[datetime.datetime]) -> str:
    return value.strftime("%d/%m/%Y %H:%M") if value else ""


def format_long_date(value: datetime.date) -> str:
    """15 de janeiro de 2024"""
    return f"{value.day:02d} de {MONTH_NAMES[value.month - 1]} de {value.year}"


def format_brl(value: Any) -> str:
    """R$ 1.234,56"""
    if value is None:
        return ""
    amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    us_style = f"{abs(amount):,.2f}"
    return f"{sign}R$ " + us_style.replace(",", "_").replace(".", ",").replace("_", ".")


def format_address(patient: Any) -> str:
    """Rua X, 10 - Apto 2 - Centro - Cidade/UF - CEP 00000-000, skipping blank parts"""
    street = getattr(patient, "street", None)
    number = getattr(patient, "number", None)
    first = ", ".join(part for part in (street, number) if part)

    city = getattr(patient, "city", None)
    state = getattr(patient, "state", None)
    city_state = "/".join(part for part in (city, state) if part)

    zip_code = getattr(patient, "zip_code", None)
    parts = [
        first,
        getattr(patient, "complement", None),
        getattr(patient, "district", None),
        city_state,
        f"CEP {zip_code}" if zip_code else None,
    ]
    return " - ".join(part for part in parts if part)


def _label(labels: Dict[Any, str], value: Any) -> str:
    if value is None:
        return ""
    return labels.get(value, str(getattr(value, "value", value)))


def patient_fields(patient: Any) -> Dict[str, str]:
    return {
        "nome": patient.name or "",
        "email": patient.email or "",
        "telefone": patient.phone or "",
        "cpf": patient.cpf or "",
        "data_nascimento": format_date(patient.birth_date),
        "endereco": format_address(patient),
    }


def appointment_fields(appointment: Any) -> Dict[str, str]:
    duration = appointment.duration_minutes
    return {
        "data": format_datetime(appointment.start_datetime),
        "duracao": f"{duration} minutos" if duration else "",
        "status": _label(STATUS_LABELS, appointment.status),
        "observacoes": appointment.notes or "",
    }


def clinical_record_fields(record: Any) -> Dict[str, str]:
    return {
        "data_consulta": format_date(record.consultation_date),
        "queixa_principal": record.chief_complaint or "",
        "diagnostico": record.diagnosis or "",
        "conduta": record.treatment or "",
        "observacoes": record.notes or "",
    }


def income_fields(income: Any) -> Dict[str, str]:
    return {
        "data": format_date(income.date),
        "tipo_pagamento": _label(PAYER_LABELS, income.payer_type),
        "operadora": income.insurer_name or "",
        "plano_saude": income.insurer_plan or "",
        "valor": format_brl(income.amount),
        "observacoes": income.notes or "",
    }


def profile_fields(profile: Any) -> Dict[str, str]:
    return {
        "nome_completo": profile.full_name or "",
        "crm": profile.crm or "",
        "especialidade": profile.specialty or "",
        "telefone": profile.phone or "",
        "email": profile.email or "",
    }


def build_render_context(
    patient: Any = None,
    appointment: Any = None,
    clinical_record: Any = None,
    income: Any = None,
    profile: Any = None,
) -> Dict[str, Dict[str, str]]:
    """Namespaces whose record is missing are left out; their tokens render empty"""
    context: Dict[str, Dict[str, str]] = {}
    if patient is not None:
        context[Namespace.PATIENT.value] = patient_fields(patient)
    if appointment is not None:
        context[Namespace.APPOINTMENT.value] = appointment_fields(appointment)
    if clinical_record is not None:
        context[Namespace.CLINICAL_RECORD.value] = clinical_record_fields(clinical_record)
    if income is not None:
        context[Namespace.INCOME.value] = income_fields(income)
    if profile is not None:
        context[Namespace.PROFESSIONAL.value] = profile_fields(profile)
    return context
