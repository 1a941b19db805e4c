"""
Pytest configuration and fixtures
"""
import datetime
import os
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_async_session
from app.models import Patient, PayerType, Profile
from app.services.storage import StorageRepository
from main import app


# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite+aiosqlite:///:memory:"
)


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {},
        poolclass=StaticPool if "sqlite" in TEST_DATABASE_URL else None,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_maker() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def storage(db_session: AsyncSession) -> StorageRepository:
    return StorageRepository(db_session)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client against the app, with every request bound to the test session
    """
    async def override_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def test_patient(db_session: AsyncSession) -> Patient:
    patient = Patient(
        name="Maria Souza",
        birth_date=datetime.date(1985, 3, 10),
        cpf="123.456.789-00",
        phone="(11) 99999-0000",
        email="maria@example.com",
        payer_type=PayerType.INSURANCE,
        insurer_name="Unimed",
        insurer_plan="Nacional",
        zip_code="01310-100",
        street="Av. Paulista",
        number="1000",
        district="Bela Vista",
        city="São Paulo",
        state="SP",
    )
    db_session.add(patient)
    await db_session.commit()
    await db_session.refresh(patient)
    return patient


@pytest.fixture
async def test_profile(db_session: AsyncSession) -> Profile:
    profile = Profile(
        full_name="Dra. Ana Lima",
        crm="12345-SP",
        specialty="Clínica Geral",
        phone="(11) 3333-3333",
        email="ana@example.com",
    )
    db_session.add(profile)
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


@pytest.fixture
def appointment_payload(test_patient: Patient) -> dict:
    return {
        "patient_id": test_patient.id,
        "start_datetime": "2024-01-01T10:00:00",
        "duration_minutes": 30,
        "fee": str(Decimal("150.00")),
        "payer_type": "insurance",
        "insurer_name": "Unimed",
        "insurer_plan": "Nacional",
    }
