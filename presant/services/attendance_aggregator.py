# presant/services/attendance_aggregator.py
from __future__ import annotations

from typing import Dict, Iterable

from presant.core.dates import as_utc
from presant.schemas.attendance import AggregatedReport, AttendanceEntry, AttendanceStatus


class AttendanceAggregator:
    """
    Computes attendance figures for one event instance from its set of
    registered participant ids and the attendance entries recorded for it.

    Steps
    -----
    1) Reduce entries to one per participant (see `latest_by_participant`).
    2) total_registered = number of registered ids.
    3) Effective status per registered id = its entry's status, else ABSENT.
    4) present_count = registered ids whose effective status is PRESENT.
    5) attendance_rate = present_count / total_registered * 100, rounded to
       one decimal; 0.0 when nobody is registered.

    Only PRESENT counts as attendance. EXCUSED and SICK are reported in
    `status_counts` but never raise the rate. Entries for participants that
    are not registered are ignored.
    """

    @staticmethod
    def latest_by_participant(
        entries: Iterable[AttendanceEntry],
    ) -> Dict[int, AttendanceEntry]:
        """
        Reduce entries to a single entry per participant id.

        The entry with the latest timestamp wins. On equal timestamps the one
        encountered later wins, so input given in write order behaves like
        the upsert performed at write time.
        """
        latest: Dict[int, AttendanceEntry] = {}
        for entry in entries:
            current = latest.get(entry.participant_id)
            if current is None or as_utc(entry.timestamp) >= as_utc(current.timestamp):
                latest[entry.participant_id] = entry
        return latest

    @classmethod
    def effective_status(
        cls,
        participant_id: int,
        entries: Iterable[AttendanceEntry],
    ) -> AttendanceStatus:
        """
        Status of `participant_id` given `entries`, defaulting to ABSENT.
        """
        entry = cls.latest_by_participant(entries).get(participant_id)
        if entry is None:
            return AttendanceStatus.ABSENT
        return entry.status

    @classmethod
    def aggregate(
        cls,
        registered_ids: Iterable[int],
        entries: Iterable[AttendanceEntry],
    ) -> AggregatedReport:
        """
        `registered_ids` are participant primary keys; any iterable works
        (set, list, generator) and duplicates are counted once.
        """
        registered = list(dict.fromkeys(registered_ids))
        latest = cls.latest_by_participant(entries)

        statuses: Dict[int, AttendanceStatus] = {}
        counts = {status: 0 for status in AttendanceStatus}
        recorded = 0

        for participant_id in registered:
            entry = latest.get(participant_id)
            if entry is None:
                status = AttendanceStatus.ABSENT
            else:
                status = entry.status
                recorded += 1
            statuses[participant_id] = status
            counts[status] += 1

        present = counts[AttendanceStatus.PRESENT]
        ratio, pct = attendance_rate(present, len(registered))

        return AggregatedReport(
            total_registered=len(registered),
            present_count=present,
            recorded_count=recorded,
            attendance_ratio=ratio,
            attendance_rate=pct,
            status_counts=counts,
            statuses=statuses,
        )


def attendance_rate(present: int, total: int) -> tuple[float, float]:
    """
    Return (unrounded ratio, percentage rounded to one decimal).

    Both are 0.0 when `total` is zero.
    """
    if total <= 0:
        return 0.0, 0.0
    ratio = present / float(total)
    return ratio, round(ratio * 100.0, 1)
