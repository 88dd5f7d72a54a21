# tests/test_attendance_services.py
from datetime import date, datetime, timedelta, timezone

import pytest

from presant.models.attendance import Attendance
from presant.models.event_instance import EventInstance
from presant.models.participant import Participant
from presant.schemas.attendance import AttendanceEntry, AttendanceStatus, AttendanceSubmission
from presant.services.attendance_service import (
    get_event_roster,
    record_attendance,
    submit_bulk_attendance,
)
from presant.services.event_schedule import list_active_event_instances
from presant.services.registration import register_participant, unregister_participant
from presant.services.reporting import (
    compute_event_report,
    compute_events_overview,
    compute_participant_report,
)

T0 = datetime(2024, 1, 8, 9, 0, tzinfo=timezone.utc)


class FakeParticipantRepo:
    def __init__(self, participants):
        self._by_id = {p.id: p for p in participants}

    async def get(self, participant_id):
        return self._by_id.get(participant_id)


class FakeEventRepo:
    def __init__(self, events, participants, registrations=None):
        self._events = {e.id: e for e in events}
        self._participants = {p.id: p for p in participants}
        self.registrations = {e.id: list((registrations or {}).get(e.id, [])) for e in events}

    async def get(self, event_id):
        return self._events.get(event_id)

    async def list(self, *, master_event_id=None):
        items = sorted(self._events.values(), key=lambda e: (e.start_date, e.id))
        if master_event_id is not None:
            items = [e for e in items if e.master_event_id == master_event_id]
        return items

    async def list_for_participant(self, participant_id):
        return [
            self._events[event_id]
            for event_id, members in self.registrations.items()
            if participant_id in members
        ]

    async def registered_participants(self, event_id):
        members = [self._participants[pid] for pid in self.registrations.get(event_id, [])]
        return sorted(members, key=lambda p: (p.name, p.id))

    async def register(self, event_id, participant_id):
        members = self.registrations.setdefault(event_id, [])
        if participant_id in members:
            return False
        members.append(participant_id)
        return True

    async def unregister(self, event_id, participant_id):
        members = self.registrations.get(event_id, [])
        if participant_id not in members:
            return False
        members.remove(participant_id)
        return True


class FakeAttendanceRepo:
    def __init__(self):
        self.records = {}
        self.upsert_calls = 0
        self.batches = []

    def seed(self, participant_id, event_id, status, timestamp=T0):
        self.records[(participant_id, event_id)] = Attendance(
            id=len(self.records) + 1,
            participant_id=participant_id,
            event_instance_id=event_id,
            status=status.value,
            timestamp=timestamp,
        )

    def _entries(self, rows):
        return [
            AttendanceEntry(
                participant_id=row.participant_id,
                occurrence_id=row.event_instance_id,
                status=AttendanceStatus.from_stored(row.status),
                timestamp=row.timestamp,
            )
            for row in rows
        ]

    async def list_for_event(self, event_id):
        return self._entries(r for r in self.records.values() if r.event_instance_id == event_id)

    async def list_for_participant(self, participant_id):
        return self._entries(r for r in self.records.values() if r.participant_id == participant_id)

    async def upsert(self, *, participant_id, event_id, status, timestamp, notes=None):
        self.upsert_calls += 1
        record = self.records.get((participant_id, event_id))
        if record is None:
            record = Attendance(
                id=len(self.records) + 1,
                participant_id=participant_id,
                event_instance_id=event_id,
            )
            self.records[(participant_id, event_id)] = record
        record.status = status.value
        record.timestamp = timestamp
        record.notes = notes
        return record

    async def upsert_many(self, rows):
        self.batches.append(len(rows))
        return [
            await self.upsert(
                participant_id=row.participant_id,
                event_id=row.event_id,
                status=row.status,
                timestamp=row.timestamp,
                notes=row.notes,
            )
            for row in rows
        ]


def _participant(pid, name, phone="0812000000"):
    return Participant(id=pid, name=name, phone_number=phone, gender="L", age=30)


def _event(eid, title="Choir Practice", start=date(2024, 1, 1), recurrence="none", master_id=1, end=None):
    return EventInstance(
        id=eid,
        master_event_id=master_id,
        title=title,
        start_date=start,
        recurrence_type=recurrence,
        recurrence_end_date=end,
    )


@pytest.fixture()
def world():
    participants = [
        _participant(1, "Andi", "081111"),
        _participant(2, "Budi", "082222"),
        _participant(3, "Citra", "083333"),
    ]
    events = [
        _event(10, "Choir Practice", date(2024, 1, 1), "weekly", end=date(2024, 1, 31)),
        _event(11, "Bible Study", date(2024, 2, 5)),
    ]
    event_repo = FakeEventRepo(events, participants, registrations={10: [1, 2, 3], 11: [1]})
    return event_repo, FakeParticipantRepo(participants), FakeAttendanceRepo()


# --------------------------------------------------------------------------
# Registration
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_participant_is_idempotent(world):
    events, participants, _ = world

    first = await register_participant(events, participants, 11, 2)
    second = await register_participant(events, participants, 11, 2)

    assert first.changed is True
    assert second.changed is False
    assert second.registered is True
    assert events.registrations[11] == [1, 2]


@pytest.mark.asyncio
async def test_register_unknown_participant_raises_lookup_error(world):
    events, participants, _ = world

    with pytest.raises(LookupError):
        await register_participant(events, participants, 10, 404)
    with pytest.raises(LookupError):
        await register_participant(events, participants, 404, 1)


@pytest.mark.asyncio
async def test_unregister_non_member_is_a_noop(world):
    events, _, _ = world

    result = await unregister_participant(events, 11, 3)

    assert result.changed is False
    assert result.registered is False
    assert events.registrations[11] == [1]


# --------------------------------------------------------------------------
# Recording
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_record_attendance_upserts_single_entry(world):
    events, participants, attendance = world

    await record_attendance(
        events,
        participants,
        attendance,
        AttendanceSubmission(participant_id=1, event_id=10, status="absent", timestamp=T0),
    )
    record = await record_attendance(
        events,
        participants,
        attendance,
        AttendanceSubmission(
            participant_id=1,
            event_id=10,
            status="present",
            timestamp=T0 + timedelta(minutes=5),
            notes="late arrival",
        ),
    )

    assert len(attendance.records) == 1
    assert record.status == "present"
    assert record.notes == "late arrival"


@pytest.mark.asyncio
async def test_record_attendance_defaults_timestamp_to_now(world):
    events, participants, attendance = world

    before = datetime.now(tz=timezone.utc)
    record = await record_attendance(
        events,
        participants,
        attendance,
        AttendanceSubmission(participant_id=2, event_id=10, status="sick"),
    )

    assert record.timestamp.tzinfo is not None
    assert record.timestamp >= before


@pytest.mark.asyncio
async def test_record_attendance_rejects_unknown_references(world):
    events, participants, attendance = world

    with pytest.raises(LookupError):
        await record_attendance(
            events,
            participants,
            attendance,
            AttendanceSubmission(participant_id=1, event_id=999, status="present"),
        )
    with pytest.raises(LookupError):
        await record_attendance(
            events,
            participants,
            attendance,
            AttendanceSubmission(participant_id=999, event_id=10, status="present"),
        )

    assert attendance.records == {}


@pytest.mark.asyncio
async def test_bulk_submission_last_in_payload_wins(world):
    events, participants, attendance = world

    records = await submit_bulk_attendance(
        events,
        participants,
        attendance,
        [
            AttendanceSubmission(participant_id=1, event_id=10, status="present"),
            AttendanceSubmission(participant_id=2, event_id=10, status="excused"),
            AttendanceSubmission(participant_id=1, event_id=10, status="sick"),
        ],
    )

    assert len(records) == 2
    assert attendance.upsert_calls == 2
    # One batch for the whole payload
    assert attendance.batches == [2]
    assert attendance.records[(1, 10)].status == "sick"
    assert attendance.records[(2, 10)].status == "excused"


@pytest.mark.asyncio
async def test_bulk_submission_validates_before_writing(world):
    events, participants, attendance = world

    with pytest.raises(LookupError):
        await submit_bulk_attendance(
            events,
            participants,
            attendance,
            [
                AttendanceSubmission(participant_id=1, event_id=10, status="present"),
                AttendanceSubmission(participant_id=77, event_id=10, status="present"),
            ],
        )

    assert attendance.upsert_calls == 0
    assert attendance.batches == []


# --------------------------------------------------------------------------
# Roster
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_roster_defaults_unrecorded_participants_to_absent(world):
    events, _, attendance = world
    attendance.seed(1, 10, AttendanceStatus.PRESENT)

    roster = await get_event_roster(events, attendance, 10)

    assert [(row.participant.id, row.status, row.recorded) for row in roster] == [
        (1, AttendanceStatus.PRESENT, True),
        (2, AttendanceStatus.ABSENT, False),
        (3, AttendanceStatus.ABSENT, False),
    ]


@pytest.mark.asyncio
async def test_roster_filters_by_status_and_query(world):
    events, _, attendance = world
    attendance.seed(1, 10, AttendanceStatus.PRESENT)
    attendance.seed(2, 10, AttendanceStatus.SICK)

    absent = await get_event_roster(events, attendance, 10, status=AttendanceStatus.ABSENT)
    assert [row.participant.name for row in absent] == ["Citra"]

    by_name = await get_event_roster(events, attendance, 10, query="BUD")
    assert [row.participant.id for row in by_name] == [2]

    by_phone = await get_event_roster(events, attendance, 10, query="0833")
    assert [row.participant.id for row in by_phone] == [3]


@pytest.mark.asyncio
async def test_roster_for_unknown_event_raises(world):
    events, _, attendance = world

    with pytest.raises(LookupError):
        await get_event_roster(events, attendance, 12345)


# --------------------------------------------------------------------------
# Schedule
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_active_event_instances_for_explicit_date(world):
    events, _, _ = world

    assert [e.id for e in await list_active_event_instances(events, date(2024, 1, 15))] == [10]
    assert [e.id for e in await list_active_event_instances(events, date(2024, 2, 5))] == [11]
    assert await list_active_event_instances(events, date(2024, 1, 16)) == []


@pytest.mark.asyncio
async def test_active_event_instances_default_to_today(world, monkeypatch):
    events, _, _ = world
    monkeypatch.setattr("presant.core.dates.today", lambda: date(2024, 1, 22))

    active = await list_active_event_instances(events)

    assert [e.id for e in active] == [10]


# --------------------------------------------------------------------------
# Reports
# --------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_event_report_counts_only_present(world):
    events, _, attendance = world
    attendance.seed(1, 10, AttendanceStatus.PRESENT)
    attendance.seed(2, 10, AttendanceStatus.SICK)

    detail = await compute_event_report(events, attendance, 10)

    assert detail.report.total_registered == 3
    assert detail.report.present_count == 1
    assert detail.report.attendance_rate == 33.3
    assert [p.status for p in detail.participants] == [
        AttendanceStatus.PRESENT,
        AttendanceStatus.SICK,
        AttendanceStatus.ABSENT,
    ]


@pytest.mark.asyncio
async def test_events_overview_filters_by_master_event(world):
    events, _, attendance = world
    events._events[12] = _event(12, "Youth Camp", date(2024, 3, 1), master_id=2)
    events.registrations[12] = []

    overview = await compute_events_overview(events, attendance)
    assert [s.event_id for s in overview] == [10, 11, 12]
    assert overview[-1].report.attendance_rate == 0.0

    only_second = await compute_events_overview(events, attendance, master_event_id=2)
    assert [s.event_id for s in only_second] == [12]


@pytest.mark.asyncio
async def test_participant_report_totals_and_monthly_breakdown(world):
    events, participants, attendance = world
    attendance.seed(1, 10, AttendanceStatus.PRESENT)
    attendance.seed(1, 11, AttendanceStatus.EXCUSED)

    report = await compute_participant_report(events, participants, attendance, 1)

    assert report.total_events == 2
    assert report.present_count == 1
    assert report.attendance_rate == 50.0
    # Most recent first
    assert [row.event_id for row in report.events] == [11, 10]
    assert [(m.event_title, m.year, m.month, m.attendance_rate) for m in report.monthly] == [
        ("Bible Study", 2024, 2, 0.0),
        ("Choir Practice", 2024, 1, 100.0),
    ]


@pytest.mark.asyncio
async def test_participant_report_without_registrations_is_zero(world):
    events, participants, attendance = world
    events.registrations[10].remove(3)

    report = await compute_participant_report(events, participants, attendance, 3)

    assert report.total_events == 0
    assert report.attendance_rate == 0.0
    assert report.events == []
    assert report.monthly == []


@pytest.mark.asyncio
async def test_participant_report_for_unknown_participant_raises(world):
    events, participants, attendance = world

    with pytest.raises(LookupError):
        await compute_participant_report(events, participants, attendance, 404)
