# presant/services/recurrence_evaluator.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Protocol, TypeVar

from presant.schemas.recurrence import RecurrenceType


class SupportsRecurrence(Protocol):
    """
    Anything carrying the recurrence fields of an event instance, e.g. an
    EventOccurrence schema or an EventInstance ORM row.
    """

    start_date: Any
    recurrence_type: Any
    recurrence_end_date: Any


T = TypeVar("T", bound=SupportsRecurrence)


class RecurrenceEvaluator:
    """
    Decides whether an event instance is active on a given calendar day.

    Rules
    -----
    1) reference_date < start_date                      => inactive
    2) recurrence_end_date set and reference_date > it  => inactive
    3) none    => active only on start_date itself
    4) daily   => active on every day of the window
    5) weekly  => active when the weekday matches start_date's weekday
    6) monthly => active when the day of month matches start_date's
    7) anything else                                    => inactive

    Note
    ----
    - Monthly recurrence on day 29-31 never matches in shorter months; there
      is no end-of-month clamping.
    - recurrence_end_date earlier than start_date is not rejected; such an
      instance is simply never active.
    - Malformed dates or recurrence values never raise, they yield False.
    """

    @staticmethod
    def is_active_on(occurrence: SupportsRecurrence, reference_date: date) -> bool:
        """
        Return True if `occurrence` is active on `reference_date`.

        Time of day is ignored when `reference_date` is a datetime.
        """
        day = _as_date(reference_date)
        start = _as_date(occurrence.start_date)
        if day is None or start is None:
            return False

        if day < start:
            return False

        raw_end = occurrence.recurrence_end_date
        if raw_end is not None and raw_end != "":
            end = _as_date(raw_end)
            if end is None:
                return False
            if day > end:
                return False

        recurrence = _as_recurrence(occurrence.recurrence_type)

        if recurrence is RecurrenceType.NONE:
            return day == start
        if recurrence is RecurrenceType.DAILY:
            return True
        if recurrence is RecurrenceType.WEEKLY:
            return day.weekday() == start.weekday()
        if recurrence is RecurrenceType.MONTHLY:
            return day.day == start.day

        # Unrecognised recurrence: fail closed
        return False

    @classmethod
    def filter_active(cls, occurrences: Iterable[T], reference_date: date) -> list[T]:
        """
        Keep only the occurrences active on `reference_date`, preserving order.
        """
        return [occ for occ in occurrences if cls.is_active_on(occ, reference_date)]


def _as_date(value: Any) -> date | None:
    # datetime is a subclass of date, so it has to be checked first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def _as_recurrence(value: Any) -> RecurrenceType | None:
    if value is None or value == "":
        return RecurrenceType.NONE
    if isinstance(value, RecurrenceType):
        return value
    try:
        return RecurrenceType(value)
    except ValueError:
        return None
