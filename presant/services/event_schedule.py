# presant/services/event_schedule.py
from __future__ import annotations

import logging
from datetime import date as date_type

from presant.core import dates
from presant.models.event_instance import EventInstance
from presant.repositories.interfaces import EventInstanceRepository
from presant.services.recurrence_evaluator import RecurrenceEvaluator

logger = logging.getLogger(__name__)


async def list_active_event_instances(
    events: EventInstanceRepository,
    on_date: date_type | None = None,
) -> list[EventInstance]:
    """
    Return the event instances active on `on_date`, ordered by start date.

    When `on_date` is omitted, today's date in the configured application
    timezone is used.
    """
    if on_date is None:
        on_date = dates.today()

    instances = await events.list()
    active = RecurrenceEvaluator.filter_active(instances, on_date)

    logger.debug(
        "%d of %d event instances active on %s", len(active), len(instances), on_date
    )
    return active
