# tests/test_reports_api.py
from http import HTTPStatus


def _record(client, participant_id, event_id, status):
    response = client.post(
        "/attendance",
        json={"participant_id": participant_id, "event_id": event_id, "status": status},
    )
    assert response.status_code == HTTPStatus.OK, response.text


def test_event_report_counts_only_present(client, make_event_instance, make_participant):
    """
    Three registered, one present, one sick, one unrecorded:
    attendance rate is 33.3 and the unrecorded participant is absent.
    """
    people = [make_participant(name) for name in ("Andi", "Budi", "Citra")]
    event = make_event_instance(
        "2024-01-01",
        title="Choir Practice - January",
        registered_participants=[p["id"] for p in people],
    )
    _record(client, people[0]["id"], event["id"], "present")
    _record(client, people[1]["id"], event["id"], "sick")

    response = client.get(f"/reports/events/{event['id']}")

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    report = data["report"]
    assert data["title"] == "Choir Practice - January"
    assert report["total_registered"] == 3
    assert report["present_count"] == 1
    assert report["recorded_count"] == 2
    assert report["attendance_rate"] == 33.3
    assert report["status_counts"] == {"present": 1, "excused": 0, "sick": 1, "absent": 1}
    assert report["statuses"][str(people[2]["id"])] == "absent"
    assert [p["status"] for p in data["participants"]] == ["present", "sick", "absent"]


def test_event_report_with_no_registrations_is_zero(client, make_event_instance):
    event = make_event_instance("2024-01-01")

    report = client.get(f"/reports/events/{event['id']}").json()["report"]

    assert report["total_registered"] == 0
    assert report["present_count"] == 0
    assert report["attendance_rate"] == 0.0


def test_unregistered_attendance_does_not_count(client, make_event_instance, make_participant):
    """
    Attendance recorded for someone who is later unregistered is kept but
    no longer counts towards the event's figures.
    """
    andi = make_participant("Andi")
    budi = make_participant("Budi")
    event = make_event_instance("2024-01-01", registered_participants=[andi["id"], budi["id"]])
    _record(client, andi["id"], event["id"], "present")
    _record(client, budi["id"], event["id"], "present")

    client.delete(f"/event-instances/{event['id']}/participants/{budi['id']}")
    report = client.get(f"/reports/events/{event['id']}").json()["report"]

    assert report["total_registered"] == 1
    assert report["present_count"] == 1
    assert report["attendance_rate"] == 100.0


def test_events_overview_lists_every_instance(client, make_master_event, make_event_instance, make_participant):
    andi = make_participant("Andi")
    choir = make_master_event("Choir")
    study = make_master_event("Bible Study")
    january = make_event_instance(
        "2024-01-01", master_event_id=choir["id"], registered_participants=[andi["id"]]
    )
    february = make_event_instance("2024-02-01", master_event_id=study["id"])
    _record(client, andi["id"], january["id"], "present")

    overview = client.get("/reports/events").json()
    assert [row["event_id"] for row in overview] == [january["id"], february["id"]]
    assert overview[0]["report"]["attendance_rate"] == 100.0
    assert overview[1]["report"]["attendance_rate"] == 0.0

    filtered = client.get("/reports/events", params={"master_event_id": study["id"]}).json()
    assert [row["event_id"] for row in filtered] == [february["id"]]


def test_participant_report(client, make_master_event, make_event_instance, make_participant):
    andi = make_participant("Andi")
    master = make_master_event("Choir")
    jan_1 = make_event_instance(
        "2024-01-01", master_event_id=master["id"], registered_participants=[andi["id"]]
    )
    jan_8 = make_event_instance(
        "2024-01-08", master_event_id=master["id"], registered_participants=[andi["id"]]
    )
    feb = make_event_instance(
        "2024-02-05", master_event_id=master["id"], registered_participants=[andi["id"]]
    )
    _record(client, andi["id"], jan_1["id"], "present")
    _record(client, andi["id"], jan_8["id"], "excused")

    response = client.get(f"/reports/participants/{andi['id']}")

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data["participant"]["id"] == andi["id"]
    assert data["total_events"] == 3
    assert data["present_count"] == 1
    assert data["attendance_rate"] == 33.3
    assert [row["event_id"] for row in data["events"]] == [feb["id"], jan_8["id"], jan_1["id"]]
    assert [row["status"] for row in data["events"]] == ["absent", "excused", "present"]
    assert [(m["year"], m["month"], m["attendance_rate"]) for m in data["monthly"]] == [
        (2024, 1, 50.0),
        (2024, 2, 0.0),
    ]


def test_reports_for_unknown_records_return_404(client):
    assert client.get("/reports/events/999").status_code == HTTPStatus.NOT_FOUND
    assert client.get("/reports/participants/999").status_code == HTTPStatus.NOT_FOUND
