"""
Seed script for the default document templates
Run this after the migrations have created the tables
"""

import asyncio
from sqlalchemy import select
from dotenv import load_dotenv

from app.models import DocumentTemplate, TemplateKind
from database import AsyncSessionLocal, engine

load_dotenv()

TEMPLATES_DATA = [
    {
        "name": "Atestado de comparecimento",
        "body": (
            "<p>Atesto, para os devidos fins, que {{paciente.nome}}, CPF {{paciente.cpf}}, "
            "esteve em consulta médica em {{consulta.data}}.</p>"
            "<p>{{profissional.nome_completo}}<br>CRM {{profissional.crm}}</p>"
        ),
    },
    {
        "name": "Atestado de afastamento",
        "body": (
            "<p>Atesto que {{paciente.nome}} necessita de afastamento de suas atividades "
            "a partir de {{data_atual}}.</p>"
            "<p>Diagnóstico: {{ficha.diagnostico}}</p>"
            "<p>{{profissional.nome_completo}}<br>CRM {{profissional.crm}}</p>"
        ),
    },
    {
        "name": "Encaminhamento",
        "body": (
            "<p>Encaminho {{paciente.nome}}, nascido(a) em {{paciente.data_nascimento}}, "
            "para avaliação.</p>"
            "<p>Queixa principal: {{ficha.queixa_principal}}</p>"
            "<p>Conduta até o momento: {{ficha.conduta}}</p>"
            "<p>{{profissional.nome_completo}} - {{profissional.especialidade}}<br>"
            "CRM {{profissional.crm}} - {{profissional.telefone}}</p>"
        ),
    },
    {
        "name": "Recibo",
        "body": (
            "<p>Recebi de {{paciente.nome}}, CPF {{paciente.cpf}}, a importância de "
            "{{receita.valor}} referente a consulta médica realizada em {{receita.data}}.</p>"
            "<p>{{profissional.nome_completo}}<br>CRM {{profissional.crm}}</p>"
        ),
    },
]


async def seed_templates():
    async with AsyncSessionLocal() as session:
        try:
            print("🌱 Seeding document templates...")

            for template_data in TEMPLATES_DATA:
                result = await session.execute(
                    select(DocumentTemplate).filter(DocumentTemplate.name == template_data["name"])
                )
                if result.scalar_one_or_none():
                    print(f"  ⏭️  Template '{template_data['name']}' already exists, skipping...")
                    continue

                session.add(DocumentTemplate(kind=TemplateKind.TEXT, **template_data))
                print(f"  ✅ Created template: {template_data['name']}")

            await session.commit()
            print("✅ Document templates seeded successfully!")
            print(f"   Total templates: {len(TEMPLATES_DATA)}")

        except Exception as e:
            await session.rollback()
            print(f"❌ Error seeding templates: {str(e)}")
            raise
        finally:
            await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_templates())
