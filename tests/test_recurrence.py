"""
Tests for the recurrence expander
"""
import datetime
from decimal import Decimal

import pytest

from app.core.error_handling import InvalidInputError
from app.models import AppointmentStatus, PayerType
from app.schemas.appointment import AppointmentDraft, RecurrenceFrequency, RecurrenceRule
from app.services.recurrence import expand_recurrence, occurrence_datetime, parse_start_datetime


def make_draft(**overrides) -> AppointmentDraft:
    values = {
        "patient_id": 1,
        "start_datetime": "2024-01-01T10:00:00",
        "duration_minutes": 30,
        "fee": Decimal("150.00"),
        "payer_type": PayerType.INSURANCE,
        "insurer_name": "Unimed",
        "insurer_plan": "Nacional",
        "notes": "Retorno",
    }
    values.update(overrides)
    return AppointmentDraft(**values)


def starts(series):
    return [a.start_datetime for a in series]


@pytest.mark.unit
class TestExpandRecurrence:

    def test_disabled_rule_yields_single_appointment(self):
        series = expand_recurrence(make_draft(), RecurrenceRule(enabled=False, occurrence_count=10))
        assert starts(series) == [datetime.datetime(2024, 1, 1, 10, 0)]

    def test_weekly_series(self):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.WEEKLY, occurrence_count=4)
        series = expand_recurrence(make_draft(), rule)
        assert starts(series) == [
            datetime.datetime(2024, 1, 1, 10, 0),
            datetime.datetime(2024, 1, 8, 10, 0),
            datetime.datetime(2024, 1, 15, 10, 0),
            datetime.datetime(2024, 1, 22, 10, 0),
        ]

    def test_biweekly_series(self):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.BIWEEKLY, occurrence_count=3)
        series = expand_recurrence(make_draft(), rule)
        assert starts(series) == [
            datetime.datetime(2024, 1, 1, 10, 0),
            datetime.datetime(2024, 1, 15, 10, 0),
            datetime.datetime(2024, 1, 29, 10, 0),
        ]

    def test_monthly_series(self):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.MONTHLY, occurrence_count=3)
        series = expand_recurrence(make_draft(start_datetime="2024-01-15T09:30:00"), rule)
        assert starts(series) == [
            datetime.datetime(2024, 1, 15, 9, 30),
            datetime.datetime(2024, 2, 15, 9, 30),
            datetime.datetime(2024, 3, 15, 9, 30),
        ]

    def test_monthly_clamps_to_last_day_of_month(self):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.MONTHLY, occurrence_count=3)
        series = expand_recurrence(make_draft(start_datetime="2024-01-31T10:00:00"), rule)
        assert starts(series) == [
            datetime.datetime(2024, 1, 31, 10, 0),
            datetime.datetime(2024, 2, 29, 10, 0),
            datetime.datetime(2024, 3, 31, 10, 0),
        ]

    def test_series_is_ordered_and_time_of_day_is_kept(self):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.WEEKLY, occurrence_count=52)
        series = expand_recurrence(make_draft(start_datetime="2024-03-01T17:45:00"), rule)
        assert len(series) == 52
        assert starts(series) == sorted(starts(series))
        assert {a.start_datetime.time() for a in series} == {datetime.time(17, 45)}

    def test_shared_fields_are_copied_to_every_occurrence(self):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.WEEKLY, occurrence_count=3)
        series = expand_recurrence(make_draft(), rule)
        for appointment in series:
            assert appointment.patient_id == 1
            assert appointment.duration_minutes == 30
            assert appointment.fee == Decimal("150.00")
            assert appointment.payer_type == PayerType.INSURANCE
            assert appointment.insurer_name == "Unimed"
            assert appointment.insurer_plan == "Nacional"
            assert appointment.notes == "Retorno"
            assert appointment.status == AppointmentStatus.SCHEDULED

    def test_individual_payer_drops_insurer_fields(self):
        series = expand_recurrence(make_draft(payer_type=PayerType.INDIVIDUAL), RecurrenceRule())
        assert series[0].insurer_name is None
        assert series[0].insurer_plan is None

    def test_accepts_datetime_object(self):
        draft = make_draft(start_datetime=datetime.datetime(2024, 5, 2, 8, 0))
        series = expand_recurrence(draft, RecurrenceRule())
        assert starts(series) == [datetime.datetime(2024, 5, 2, 8, 0)]

    @pytest.mark.parametrize("count", [0, -1, 53])
    def test_occurrence_count_out_of_range(self, count):
        rule = RecurrenceRule(enabled=True, frequency=RecurrenceFrequency.WEEKLY, occurrence_count=count)
        with pytest.raises(InvalidInputError):
            expand_recurrence(make_draft(), rule)

    def test_occurrence_count_checked_even_when_disabled(self):
        with pytest.raises(InvalidInputError):
            expand_recurrence(make_draft(), RecurrenceRule(enabled=False, occurrence_count=0))

    @pytest.mark.parametrize("duration", [0, -15])
    def test_non_positive_duration(self, duration):
        with pytest.raises(InvalidInputError):
            expand_recurrence(make_draft(duration_minutes=duration), RecurrenceRule())

    def test_invalid_start_string(self):
        with pytest.raises(InvalidInputError) as exc_info:
            expand_recurrence(make_draft(start_datetime="31/01/2024 10h"), RecurrenceRule())
        assert exc_info.value.status_code == 422
        assert exc_info.value.details["field"] == "start_datetime"


@pytest.mark.unit
class TestRecurrenceHelpers:

    def test_parse_start_drops_timezone(self):
        parsed = parse_start_datetime("2024-01-01T10:00:00+03:00")
        assert parsed == datetime.datetime(2024, 1, 1, 10, 0)
        assert parsed.tzinfo is None

    def test_parse_start_accepts_space_separator(self):
        assert parse_start_datetime("2024-01-01 10:00") == datetime.datetime(2024, 1, 1, 10, 0)

    def test_monthly_occurrence_returns_to_day_31(self):
        base = datetime.datetime(2024, 1, 31, 10, 0)
        assert occurrence_datetime(base, RecurrenceFrequency.MONTHLY, 3) == datetime.datetime(2024, 4, 30, 10, 0)
        assert occurrence_datetime(base, RecurrenceFrequency.MONTHLY, 4) == datetime.datetime(2024, 5, 31, 10, 0)
