from datetime import timedelta

import pytest

from groomroute.models import Appointment
from groomroute.models_routing import Route
from groomroute.shared.dates import utc_today


@pytest.fixture
def today():
    return utc_today().isoformat()


@pytest.fixture
def day_of_stops(make_customer, make_appointment):
    a = make_customer("Avery", 40.0, -75.0)
    b = make_customer("Blake", 40.0, -74.5)
    c = make_customer("Casey", 40.0, -74.95)
    return {
        "a": make_appointment(a, 9),
        "b": make_appointment(b, 10),
        "c": make_appointment(c, 11),
    }


def _times(changes):
    return {change["id"]: change["newStartAt"][11:16] for change in changes}


def test_preview_orders_by_nearest_neighbor(client, day_of_stops, today):
    response = client.post("/routes/optimize-preview", json={"date": today})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    ids = [change["id"] for change in data["changes"]]
    assert ids == [day_of_stops["a"].id, day_of_stops["c"].id, day_of_stops["b"].id]
    assert _times(data["changes"]) == {
        day_of_stops["a"].id: "09:00",
        day_of_stops["c"].id: "10:15",
        day_of_stops["b"].id: "11:30",
    }
    assert data["appointmentsAffected"] == 2
    assert data["estimatedFinish"] == "12:30 PM"
    assert data["preferredMessaging"] == "SMS"
    assert data["routeDetails"]["stops"] == 3
    assert data["changes"][0]["customerName"] == "Avery"
    assert data["changes"][0]["petName"] == "Biscuit"


def test_preview_does_not_write(client, db, day_of_stops, today):
    client.post("/routes/optimize-preview", json={"date": today})

    db.expire_all()
    assert db.get(Appointment, day_of_stops["b"].id).start_at.hour == 10
    assert db.query(Route).count() == 0


def test_preview_starts_at_earliest_appointment_even_without_location(
    client, make_customer, make_appointment, day_of_stops, today
):
    unlocated = make_customer("Drew")
    make_appointment(unlocated, 8)

    data = client.post("/routes/optimize-preview", json={"date": today}).json()

    assert [change["newStartAt"][11:16] for change in data["changes"]] == [
        "08:00",
        "09:15",
        "10:30",
    ]


def test_preview_skips_cancelled_and_completed(
    client, make_customer, make_appointment, day_of_stops, today
):
    make_appointment(make_customer("Eden", 40.0, -74.99), 12, status="CANCELLED")
    make_appointment(make_customer("Finn", 40.0, -74.98), 13, status="COMPLETED")

    data = client.post("/routes/optimize-preview", json={"date": today}).json()

    assert data["routeDetails"]["stops"] == 3


def test_preview_without_locations(client, make_customer, make_appointment, today):
    make_appointment(make_customer("Drew"), 9)

    data = client.post("/routes/optimize-preview", json={"date": today}).json()

    assert data["success"] is False
    assert data["message"] == "No appointments with verified locations found"


def test_preview_rejects_other_days(client, day_of_stops):
    tomorrow = (utc_today() + timedelta(days=1)).isoformat()

    response = client.post("/routes/optimize-preview", json={"date": tomorrow})

    assert response.status_code == 400
    assert response.json()["detail"] == "Can only optimize today's route"


def test_preview_rejects_bad_date(client):
    response = client.post("/routes/optimize-preview", json={"date": "03/02/2026"})

    assert response.status_code == 422


def test_optimize_applies_times_and_records_route(client, db, day_of_stops, today):
    response = client.post("/routes/optimize", json={"date": today})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Route optimized! 3 appointments reordered."
    assert [stop["order"] for stop in data["optimizedOrder"]] == [1, 2, 3]
    assert data["totalDistance"] > 0

    db.expire_all()
    assert db.get(Appointment, day_of_stops["c"].id).start_at.strftime("%H:%M") == "10:15"
    assert db.get(Appointment, day_of_stops["b"].id).start_at.strftime("%H:%M") == "11:30"
    route = db.query(Route).one()
    assert route.total_drive_minutes == data["estimatedDriveTime"]
    assert route.has_assistant is False


def test_optimizing_twice_leaves_the_day_unchanged(client, db, day_of_stops, today):
    first = client.post("/routes/optimize", json={"date": today}).json()
    second = client.post("/routes/optimize", json={"date": today}).json()

    assert [(s["id"], s["newStartAt"]) for s in second["optimizedOrder"]] == [
        (s["id"], s["newStartAt"]) for s in first["optimizedOrder"]
    ]
    assert second["totalDistance"] == first["totalDistance"]
    db.expire_all()
    assert sorted(a.id for a in db.query(Appointment).all()) == sorted(
        a.id for a in day_of_stops.values()
    )
    assert db.query(Route).count() == 1


def test_optimize_uses_assistant_mode(client, day_of_stops, today):
    client.post("/routes/assistant", json={"hasAssistant": True})

    preview = client.post("/routes/optimize-preview", json={"date": today}).json()
    applied = client.post("/routes/optimize", json={"date": today}).json()

    expected = ["09:00", "09:57", "10:54"]
    assert [c["newStartAt"][11:16] for c in preview["changes"]] == expected
    assert [s["newStartAt"][11:16] for s in applied["optimizedOrder"]] == expected


def test_optimize_from_start_location(client, day_of_stops, today):
    data = client.post(
        "/routes/optimize-preview",
        json={"date": today, "startLat": 40.0, "startLng": -74.4},
    ).json()

    assert data["changes"][0]["id"] == day_of_stops["b"].id


def test_reorder_swaps_into_existing_slots(client, db, day_of_stops, today):
    ids = [day_of_stops["b"].id, day_of_stops["a"].id, day_of_stops["c"].id]

    response = client.post("/routes/reorder", json={"date": today, "appointmentIds": ids})

    assert response.status_code == 200
    data = response.json()
    assert data["affectedCount"] == 2
    assert data["message"] == "Route reordered. 2 appointments updated."
    db.expire_all()
    assert db.get(Appointment, day_of_stops["b"].id).start_at.hour == 9
    assert db.get(Appointment, day_of_stops["a"].id).start_at.hour == 10
    assert db.get(Appointment, day_of_stops["c"].id).start_at.hour == 11


def test_reorder_same_order_changes_nothing(client, day_of_stops, today):
    ids = [day_of_stops["a"].id, day_of_stops["b"].id, day_of_stops["c"].id]

    data = client.post("/routes/reorder", json={"date": today, "appointmentIds": ids}).json()

    assert data["affectedCount"] == 0
    assert data["message"] == "Route order confirmed (no time changes needed)."


@pytest.mark.parametrize(
    "ids,detail",
    [
        ([], "Date and appointmentIds array are required"),
        ("dup", "Duplicate appointment IDs"),
        ("missing", "Some appointments not found or already completed"),
    ],
)
def test_reorder_validation(client, day_of_stops, today, ids, detail):
    if ids == "dup":
        ids = [day_of_stops["a"].id, day_of_stops["a"].id]
    elif ids == "missing":
        ids = [day_of_stops["a"].id, 9999]

    response = client.post("/routes/reorder", json={"date": today, "appointmentIds": ids})

    assert response.status_code == 400
    assert response.json()["detail"] == detail


def test_reorder_rejects_other_days(client, day_of_stops):
    yesterday = (utc_today() - timedelta(days=1)).isoformat()

    response = client.post(
        "/routes/reorder", json={"date": yesterday, "appointmentIds": [day_of_stops["a"].id]}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Can only reorder today's route"


def test_assistant_status_round_trip(client, db, groomer):
    status = client.get("/routes/assistant").json()
    assert status == {"hasAssistant": False, "defaultHasAssistant": False, "hasRouteForToday": False}

    response = client.post("/routes/assistant", json={"hasAssistant": True, "setAsDefault": True})
    assert response.json()["message"] == "Working with assistant today"

    status = client.get("/routes/assistant").json()
    assert status == {"hasAssistant": True, "defaultHasAssistant": True, "hasRouteForToday": True}


def test_assistant_for_today_only(client, db, groomer):
    client.post("/routes/assistant", json={"hasAssistant": True})

    status = client.get("/routes/assistant").json()

    assert status["hasAssistant"] is True
    assert status["defaultHasAssistant"] is False


def test_start_workday(client, db):
    response = client.post("/routes/start-workday")

    assert response.status_code == 200
    assert response.json()["workdayStarted"] is True
    assert db.query(Route).one().workday_started is True


def test_missing_bearer_token_is_rejected():
    from fastapi.testclient import TestClient

    from groomroute.main import app

    response = TestClient(app).get("/routes/assistant")

    assert response.status_code in (401, 403)
