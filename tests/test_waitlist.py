from datetime import date, timedelta

import pytest

from groomroute.domain.waitlist.suggest import (
    distance_to_route,
    proximity_points,
    recency_points,
    reliability_tier,
    value_thresholds,
    value_tier,
)
from groomroute.models import CustomerWaitlist
from groomroute.shared.dates import utc_today

MONDAY = date(2026, 3, 2)


@pytest.mark.parametrize(
    "no_shows,cancellations,tier",
    [(0, 0, "excellent"), (1, 0, "good"), (0, 2, "good"), (2, 0, "fair"), (0, 3, "fair"), (3, 0, "poor"), (0, 5, "poor")],
)
def test_reliability_tier(no_shows, cancellations, tier):
    assert reliability_tier(no_shows, cancellations) == tier


def test_value_thresholds_use_quartiles_of_paying_customers():
    assert value_thresholds([0, 100, 200, 300, 400]) == (400, 200)
    assert value_thresholds([0, 0]) == (500.0, 100.0)
    assert value_tier(400, 400, 200) == "high"
    assert value_tier(250, 400, 200) == "medium"
    assert value_tier(10, 400, 200) == "low"


def test_proximity_and_recency_points():
    assert proximity_points(None) == (0, None)
    assert proximity_points(1.5) == (20, "Very close to route (<2 mi)")
    assert proximity_points(12) == (5, None)
    assert proximity_points(30) == (0, None)
    assert recency_points(61, 3) == (10, "Due for appointment (60+ days)")
    assert recency_points(10, 3) == (0, None)
    assert recency_points(None, 0) == (8, "New customer")
    assert recency_points(None, 2) == (0, None)


def test_distance_to_route_falls_back_to_base():
    assert distance_to_route(None, -75.0, [(40.0, -75.0)], None) is None
    assert distance_to_route(40.0, -75.0, [(40.0, -75.0), (41.0, -75.0)], None) == 0
    assert distance_to_route(40.0, -75.0, [], (40.0, -75.0)) == 0
    assert distance_to_route(40.0, -75.0, [], None) is None


@pytest.fixture
def waitlist_day(db, account, make_customer, make_appointment):
    make_appointment(make_customer("Avery", 40.0, -75.0), 9, day=MONDAY)

    casey = make_customer("Casey", 40.0, -75.01)
    drew = make_customer("Drew", cancellation_count=5)
    eli = make_customer("Eli", no_show_count=3)
    finn = make_customer("Finn")
    make_appointment(
        finn, 0, day=utc_today() - timedelta(days=70), status="COMPLETED", price=120.0
    )

    for customer, days, flexible in [
        (casey, ["MONDAY"], False),
        (drew, [], True),
        (eli, ["FRIDAY"], False),
        (finn, [], False),
    ]:
        db.add(
            CustomerWaitlist(
                account_id=account.id,
                customer_id=customer.id,
                preferred_days=days,
                preferred_times=[],
                flexible_timing=flexible,
            )
        )
    db.commit()
    return {"casey": casey, "drew": drew, "eli": eli, "finn": finn}


def test_suggestions_ranked_by_score(client, waitlist_day):
    response = client.get("/waitlist/suggest", params={"date": "2026-03-02"})

    assert response.status_code == 200
    data = response.json()
    assert data["dayOfWeek"] == "Monday"
    assert [(s["customerName"], s["matchScore"]) for s in data["suggestions"]] == [
        ("Casey", 68),
        ("Finn", 35),
        ("Drew", 8),
    ]

    casey = data["suggestions"][0]
    assert casey["matchReasons"] == [
        "Prefers Mondays",
        "Very close to route (<2 mi)",
        "Excellent reliability",
        "New customer",
    ]
    assert casey["distanceToRoute"] == pytest.approx(0.5, abs=0.1)
    assert casey["completionRate"] == 100

    finn = data["suggestions"][1]
    assert finn["valueTier"] == "high"
    assert finn["daysSinceLastAppointment"] == 70
    assert finn["appointmentCount"] == 1

    assert data["meta"]["totalWaitlistCount"] == 4
    assert data["meta"]["suggestionsReturned"] == 3
    assert data["meta"]["todaysAppointmentCount"] == 1


def test_suggestions_filters(client, waitlist_day):
    reliable = client.get(
        "/waitlist/suggest", params={"date": "2026-03-02", "minReliability": "good"}
    ).json()
    assert [s["customerName"] for s in reliable["suggestions"]] == ["Casey", "Finn"]

    nearby = client.get("/waitlist/suggest", params={"date": "2026-03-02", "maxDistance": 0.1}).json()
    # customers without coordinates are not filtered by distance
    assert [s["customerName"] for s in nearby["suggestions"]] == ["Finn", "Drew"]

    high = client.get("/waitlist/suggest", params={"date": "2026-03-02", "valueTier": "high"}).json()
    assert [s["customerName"] for s in high["suggestions"]] == ["Finn"]
    assert high["meta"]["filters"]["valueTier"] == ["high"]

    limited = client.get("/waitlist/suggest", params={"date": "2026-03-02", "limit": 1}).json()
    assert len(limited["suggestions"]) == 1


def test_suggestions_reject_unknown_tiers(client):
    assert client.get("/waitlist/suggest", params={"minReliability": "great"}).status_code == 400
    assert client.get("/waitlist/suggest", params={"valueTier": "gold"}).status_code == 400


def test_average_value_rounds_half_up(client, db, account, make_customer, make_appointment):
    gray = make_customer("Gray")
    for price in (12.0, 12.25):
        make_appointment(
            gray, 0, day=utc_today() - timedelta(days=10), status="COMPLETED", price=price
        )
    db.add(
        CustomerWaitlist(
            account_id=account.id,
            customer_id=gray.id,
            preferred_days=[],
            preferred_times=[],
            flexible_timing=True,
        )
    )
    db.commit()

    suggestion = client.get("/waitlist/suggest", params={"date": "2026-03-02"}).json()[
        "suggestions"
    ][0]

    # 12.125 is exact in binary; banker's rounding would give 12.12
    assert suggestion["averageAppointmentValue"] == 12.13
    assert suggestion["appointmentCount"] == 2


def test_waitlist_add_update_remove(client, make_customer):
    customer = make_customer("Casey")

    added = client.post(
        "/waitlist",
        json={"customerId": customer.id, "preferredDays": ["monday"], "preferredTimes": ["morning"]},
    ).json()
    assert added["message"] == "Client added to waitlist"
    assert added["entry"]["preferredDays"] == ["MONDAY"]
    assert added["entry"]["preferredTimes"] == ["MORNING"]

    updated = client.post(
        "/waitlist", json={"customerId": customer.id, "preferredDays": ["TUESDAY"]}
    ).json()
    assert updated["message"] == "Waitlist preferences updated"
    assert updated["entry"]["id"] == added["entry"]["id"]
    assert [e["customerName"] for e in client.get("/waitlist").json()] == ["Casey"]

    removed = client.delete("/waitlist", params={"customerId": customer.id})
    assert removed.json() == {"success": True, "message": "Removed from waitlist"}
    assert client.get("/waitlist").json() == []
    assert client.delete("/waitlist", params={"customerId": customer.id}).status_code == 404

    readded = client.post("/waitlist", json={"customerId": customer.id}).json()
    assert readded["message"] == "Client added to waitlist"
    assert readded["entry"]["isActive"] is True


def test_waitlist_validation(client, make_customer):
    customer = make_customer("Casey")

    assert client.post("/waitlist", json={"customerId": 999}).status_code == 404
    assert (
        client.post("/waitlist", json={"customerId": customer.id, "preferredDays": ["FUNDAY"]}).status_code
        == 422
    )
    assert client.delete("/waitlist").status_code == 400
