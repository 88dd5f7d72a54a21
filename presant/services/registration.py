# presant/services/registration.py
from __future__ import annotations

import logging

from presant.repositories.interfaces import EventInstanceRepository, ParticipantRepository
from presant.schemas.event_instance import RegistrationResult

logger = logging.getLogger(__name__)


async def register_participant(
    events: EventInstanceRepository,
    participants: ParticipantRepository,
    event_id: int,
    participant_id: int,
) -> RegistrationResult:
    """
    Register a participant to an event instance.

    Registering an already registered participant is a no-op reported with
    `changed=False`. Raises LookupError if either record does not exist.
    """
    if await events.get(event_id) is None:
        raise LookupError(f"Event instance with id={event_id} not found")
    if await participants.get(participant_id) is None:
        raise LookupError(f"Participant with id={participant_id} not found")

    changed = await events.register(event_id, participant_id)
    if changed:
        logger.info("Registered participant %s to event %s", participant_id, event_id)

    return RegistrationResult(
        event_id=event_id,
        participant_id=participant_id,
        registered=True,
        changed=changed,
    )


async def unregister_participant(
    events: EventInstanceRepository,
    event_id: int,
    participant_id: int,
) -> RegistrationResult:
    """
    Remove a participant from an event instance.

    Unregistering a non-member is a no-op. Stored attendance entries are kept.
    """
    if await events.get(event_id) is None:
        raise LookupError(f"Event instance with id={event_id} not found")

    changed = await events.unregister(event_id, participant_id)
    if changed:
        logger.info("Unregistered participant %s from event %s", participant_id, event_id)

    return RegistrationResult(
        event_id=event_id,
        participant_id=participant_id,
        registered=False,
        changed=changed,
    )
