"""
Dashboard aggregation tests
"""
import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models import AppointmentStatus, PayerType
from app.services.dashboard_service import (
    build_dashboard_summary,
    filter_appointments,
    month_bounds,
    summarize_agenda,
    sum_amounts,
)


def appointment(status=AppointmentStatus.SCHEDULED, fee="100.00", name="Maria Souza", **overrides):
    values = dict(
        status=status,
        fee=Decimal(fee),
        patient=SimpleNamespace(name=name),
        payer_type=PayerType.INDIVIDUAL,
        insurer_name=None,
        insurer_plan=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.unit
class TestAggregations:

    def test_sum_amounts_ignores_missing(self):
        records = [SimpleNamespace(amount=Decimal("10.50")), SimpleNamespace(amount=None), SimpleNamespace(amount=2)]
        assert sum_amounts(records, "amount") == Decimal("12.50")

    def test_month_bounds_leap_february(self):
        start, end = month_bounds(datetime.date(2024, 2, 10))
        assert start == datetime.datetime(2024, 2, 1)
        assert end.date() == datetime.date(2024, 2, 29)

    def test_summarize_agenda(self):
        summary = summarize_agenda([
            appointment(),
            appointment(status=AppointmentStatus.COMPLETED, fee="250.00"),
            appointment(status=AppointmentStatus.CANCELLED, fee="0"),
        ])
        assert summary == {
            "total": 3,
            "scheduled": 1,
            "completed": 1,
            "cancelled": 1,
            "total_fee": Decimal("350.00"),
        }

    def test_filter_appointments(self):
        rows = [
            appointment(name="Maria Souza"),
            appointment(name="João Lima", payer_type=PayerType.INSURANCE, insurer_name="Unimed", insurer_plan="Nacional"),
            appointment(name=None, patient=None),
        ]
        assert len(filter_appointments(rows, search="JOÃO")) == 1
        assert len(filter_appointments(rows, insurer="nacional")) == 1
        assert len(filter_appointments(rows, payer_type=PayerType.INDIVIDUAL)) == 2
        assert len(filter_appointments(rows)) == 3


@pytest.mark.asyncio
@pytest.mark.integration
class TestDashboardSummary:

    async def test_build_summary(self, storage, test_patient):
        today = datetime.date(2024, 3, 15)
        rows = [
            {"start_datetime": datetime.datetime(2024, 3, 15, 14, 0), "fee": Decimal("200.00")},
            {"start_datetime": datetime.datetime(2024, 3, 15, 9, 30), "fee": Decimal("150.00")},
            {"start_datetime": datetime.datetime(2024, 3, 2, 10, 0), "fee": Decimal("100.00")},
            {"start_datetime": datetime.datetime(2024, 4, 1, 10, 0), "fee": Decimal("999.00")},
        ]
        await storage.insert("appointments", [
            dict(row, patient_id=test_patient.id, duration_minutes=30, payer_type=PayerType.INDIVIDUAL)
            for row in rows
        ])
        await storage.insert("expenses", [
            {"description": "Aluguel", "date": datetime.date(2024, 3, 5), "amount": Decimal("120.00"),
             "category": "Aluguel", "payment_method": "PIX"},
            {"description": "Luz", "date": datetime.date(2024, 2, 28), "amount": Decimal("80.00"),
             "category": "Luz", "payment_method": "PIX"},
        ])

        summary = await build_dashboard_summary(storage, today)

        assert summary["total_patients"] == 1
        assert summary["appointments_today"] == 2
        assert [a["time"] for a in summary["today"]] == ["09:30", "14:00"]
        assert summary["today"][0]["patient_name"] == "Maria Souza"
        assert summary["income_month"] == Decimal("450.00")
        assert summary["expenses_month"] == Decimal("120.00")
        assert summary["balance_month"] == Decimal("330.00")

    async def test_summary_endpoint(self, client, appointment_payload):
        await client.post("/api/v1/appointments", json=appointment_payload)
        response = await client.get("/api/v1/dashboard/summary", params={"reference_date": "2024-01-01"})
        assert response.status_code == 200
        data = response.json()
        assert data["appointments_today"] == 1
        assert data["today"][0]["time"] == "10:00"
        assert Decimal(data["income_month"]) == Decimal("150.00")
        assert Decimal(data["balance_month"]) == Decimal("150.00")
