"""
Recurrence expander
Turns one appointment draft plus a recurrence rule into the ordered list of
concrete appointments to persist. Pure: nothing is read or written here, the
caller persists the whole series in a single insert.

Monthly series add calendar months to the base date. When the base day does
not exist in the target month the date is clamped to the month's last day
(Jan 31 -> Feb 29 in a leap year). Every occurrence is computed from the base,
so a series started on the 31st returns to the 31st whenever the month has one.
"""

import datetime
import logging
from typing import List, Union

from dateutil.relativedelta import relativedelta

from config import settings
from app.core.error_handling import InvalidInputError
from app.schemas.appointment import (
    AppointmentDraft,
    GeneratedAppointment,
    RecurrenceFrequency,
    RecurrenceRule,
)
from app.models import AppointmentStatus

logger = logging.getLogger(__name__)

MIN_OCCURRENCES = 1


def parse_start_datetime(value: Union[datetime.datetime, str]) -> datetime.datetime:
    """
    Accepts a datetime or an ISO-8601 string ("2024-01-01T10:00", "2024-01-01 10:00").
    Timezone information is dropped: appointments are local wall-clock times.
    """
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidInputError(
                f"Invalid start date/time: {value!r}",
                details={"field": "start_datetime"},
            )
    else:
        raise InvalidInputError(
            "Start date/time is required",
            details={"field": "start_datetime"},
        )
    return parsed.replace(tzinfo=None)


def occurrence_datetime(base: datetime.datetime, frequency: RecurrenceFrequency, index: int) -> datetime.datetime:
    """Start of the index-th occurrence (index 0 is the base itself)"""
    if frequency == RecurrenceFrequency.WEEKLY:
        return base + datetime.timedelta(days=7 * index)
    if frequency == RecurrenceFrequency.BIWEEKLY:
        return base + datetime.timedelta(days=14 * index)
    if frequency == RecurrenceFrequency.MONTHLY:
        # relativedelta clamps the day to the end of the target month
        return base + relativedelta(months=index)
    raise InvalidInputError(
        f"Unknown recurrence frequency: {frequency!r}",
        details={"field": "recurrence.frequency"},
    )


def _validate(draft: AppointmentDraft, rule: RecurrenceRule) -> datetime.datetime:
    max_occurrences = settings.MAX_RECURRENCE_COUNT
    if not MIN_OCCURRENCES <= rule.occurrence_count <= max_occurrences:
        raise InvalidInputError(
            f"Number of occurrences must be between {MIN_OCCURRENCES} and {max_occurrences}",
            details={"field": "recurrence.occurrence_count", "value": rule.occurrence_count},
        )
    if draft.duration_minutes is None or draft.duration_minutes <= 0:
        raise InvalidInputError(
            "Duration must be a positive number of minutes",
            details={"field": "duration_minutes", "value": draft.duration_minutes},
        )
    return parse_start_datetime(draft.start_datetime)


def expand_recurrence(draft: AppointmentDraft, rule: RecurrenceRule) -> List[GeneratedAppointment]:
    """
    Expand a draft into its appointments, ordered by start date/time.

    Raises InvalidInputError before producing anything when the rule or the
    draft is invalid.
    """
    base = _validate(draft, rule)

    shared = {
        "patient_id": draft.patient_id,
        "duration_minutes": draft.duration_minutes,
        "fee": draft.fee,
        "payer_type": draft.payer_type,
        "insurer_name": draft.insurer_name,
        "insurer_plan": draft.insurer_plan,
        "notes": draft.notes,
        "status": AppointmentStatus.SCHEDULED,
    }

    if not rule.enabled:
        return [GeneratedAppointment(start_datetime=base, **shared)]

    try:
        frequency = RecurrenceFrequency(rule.frequency)
    except ValueError:
        raise InvalidInputError(
            f"Unknown recurrence frequency: {rule.frequency!r}",
            details={"field": "recurrence.frequency"},
        )
    series = [
        GeneratedAppointment(start_datetime=occurrence_datetime(base, frequency, i), **shared)
        for i in range(rule.occurrence_count)
    ]
    logger.info(
        f"Expanded {frequency.value} series for patient {draft.patient_id}: "
        f"{len(series)} appointments from {series[0].start_datetime:%Y-%m-%d %H:%M} "
        f"to {series[-1].start_datetime:%Y-%m-%d %H:%M}"
    )
    return series
