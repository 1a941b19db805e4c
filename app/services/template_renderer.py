"""
Template renderer
Substitutes {{namespace.field}} tokens in a document template body with values
from a render context.

The token grammar is closed: the namespaces and their fields are listed in
TEMPLATE_FIELDS, plus the bare system tokens {{data_atual}} and {{hora_atual}}.
Anything else that looks like a token (unknown namespace or field, whitespace
inside the braces) is left in the output verbatim. Rendering never fails.

Values are inserted as-is unless escape_html=True.
"""

import datetime
import enum
import html
import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class Namespace(str, enum.Enum):
    PATIENT = "paciente"
    APPOINTMENT = "consulta"
    CLINICAL_RECORD = "ficha"
    INCOME = "receita"
    PROFESSIONAL = "profissional"


class SystemToken(str, enum.Enum):
    CURRENT_DATE = "data_atual"
    CURRENT_TIME = "hora_atual"


TEMPLATE_FIELDS: Dict[Namespace, Tuple[str, ...]] = {
    Namespace.PATIENT: ("nome", "email", "telefone", "cpf", "data_nascimento", "endereco"),
    Namespace.APPOINTMENT: ("data", "duracao", "status", "observacoes"),
    Namespace.CLINICAL_RECORD: ("data_consulta", "queixa_principal", "diagnostico", "conduta", "observacoes"),
    Namespace.INCOME: ("data", "tipo_pagamento", "operadora", "plano_saude", "valor", "observacoes"),
    Namespace.PROFESSIONAL: ("nome_completo", "crm", "especialidade", "telefone", "email"),
}

DATE_FORMAT = "%d/%m/%Y"
TIME_FORMAT = "%H:%M:%S"

# {{ + anything without braces or whitespace + }}
TOKEN_PATTERN = re.compile(r"\{\{([^{}\s]+)\}\}")

# namespace -> field -> value
RenderContext = Mapping[str, Mapping[str, Optional[object]]]


@dataclass(frozen=True)
class FieldToken:
    namespace: Namespace
    field: str

    @property
    def text(self) -> str:
        return f"{{{{{self.namespace.value}.{self.field}}}}}"


@dataclass(frozen=True)
class SystemTokenRef:
    token: SystemToken

    @property
    def text(self) -> str:
        return f"{{{{{self.token.value}}}}}"


Token = Union[FieldToken, SystemTokenRef]


def parse_token(inner: str) -> Optional[Token]:
    """Parse the text between the braces; None when it is outside the grammar"""
    if "." not in inner:
        try:
            return SystemTokenRef(SystemToken(inner))
        except ValueError:
            return None

    namespace_name, _, field = inner.partition(".")
    try:
        namespace = Namespace(namespace_name)
    except ValueError:
        return None
    if field not in TEMPLATE_FIELDS[namespace]:
        return None
    return FieldToken(namespace, field)


def find_tokens(body: Optional[str]) -> List[Token]:
    """Recognized tokens in order of first appearance, without duplicates"""
    seen: List[Token] = []
    for match in TOKEN_PATTERN.finditer(body or ""):
        token = parse_token(match.group(1))
        if token is not None and token not in seen:
            seen.append(token)
    return seen


def unresolved_tokens(body: Optional[str]) -> List[str]:
    """Token-like text the renderer will leave untouched"""
    unknown: List[str] = []
    for match in TOKEN_PATTERN.finditer(body or ""):
        if parse_token(match.group(1)) is None and match.group(0) not in unknown:
            unknown.append(match.group(0))
    return unknown


def available_tokens() -> Dict[str, List[str]]:
    return {namespace.value: list(fields) for namespace, fields in TEMPLATE_FIELDS.items()}


def _field_value(context: RenderContext, token: FieldToken) -> str:
    fields = context.get(token.namespace.value) or {}
    value = fields.get(token.field)
    return "" if value is None else str(value)


def render_template(
    body: Optional[str],
    context: RenderContext,
    now: Optional[datetime.datetime] = None,
    escape_html: bool = False,
) -> str:
    """
    Render a template body.

    `now` is captured once, so every {{data_atual}} / {{hora_atual}} in the
    body resolves to the same instant.
    """
    if not body:
        return ""

    now = now or datetime.datetime.now()
    system_values = {
        SystemToken.CURRENT_DATE: now.strftime(DATE_FORMAT),
        SystemToken.CURRENT_TIME: now.strftime(TIME_FORMAT),
    }

    def substitute(match: "re.Match[str]") -> str:
        token = parse_token(match.group(1))
        if token is None:
            return match.group(0)
        if isinstance(token, SystemTokenRef):
            value = system_values[token.token]
        else:
            value = _field_value(context, token)
        return html.escape(value) if escape_html else value

    rendered = TOKEN_PATTERN.sub(substitute, body)
    logger.debug(f"Rendered template ({len(body)} -> {len(rendered)} chars)")
    return rendered
