from datetime import date, datetime

from groomroute.domain.gaps.gap_finder import (
    BookedSlot,
    WaitlistPreference,
    find_gaps,
    score_gap_match,
    time_of_day,
)
from groomroute.models import CustomerWaitlist
from groomroute.models_routing import AreaDayAssignment, ServiceArea


def at(hour, minute=0):
    return datetime(2026, 3, 2, hour, minute)


def test_empty_day_is_one_gap():
    gaps = find_gaps(at(8), at(17), [])

    assert len(gaps) == 1
    assert gaps[0].duration_minutes == 540


def test_gaps_between_appointments_respect_minimum():
    booked = [
        BookedSlot(id=2, customer_name="Blake", start=at(10, 30), minutes=90),
        BookedSlot(id=1, customer_name="Avery", start=at(9), minutes=60),
    ]

    gaps = find_gaps(at(8), at(17), booked, min_gap_minutes=45)

    assert [(g.start, g.end) for g in gaps] == [(at(8), at(9)), (at(12), at(17))]
    assert gaps[0].previous is None
    assert gaps[0].next.id == 1
    assert gaps[1].previous.id == 2


def test_small_gaps_kept_with_lower_minimum():
    booked = [
        BookedSlot(id=1, customer_name="Avery", start=at(9), minutes=60),
        BookedSlot(id=2, customer_name="Blake", start=at(10, 30), minutes=90),
    ]

    gaps = find_gaps(at(8), at(17), booked, min_gap_minutes=30)

    assert len(gaps) == 3


def test_time_of_day():
    assert time_of_day(at(11, 59)) == "MORNING"
    assert time_of_day(at(12)) == "AFTERNOON"
    assert time_of_day(at(17)) == "EVENING"


def test_score_preferred_day_time_and_area():
    preference = WaitlistPreference(
        preferred_days=["MONDAY"], preferred_times=["MORNING"], service_area_id=3
    )

    score, reasons = score_gap_match(preference, "MONDAY", at(9), area_id=3, area_name="North")

    assert score == 100
    assert reasons == ["Prefers Mondays", "Prefers morning appointments", "In today's area (North)"]


def test_score_flexible_timing():
    preference = WaitlistPreference(flexible_timing=True)

    score, reasons = score_gap_match(preference, "FRIDAY", at(14))

    assert score == 25
    assert reasons == ["Flexible timing"]


def test_score_no_match():
    assert score_gap_match(WaitlistPreference(preferred_days=["TUESDAY"]), "MONDAY", at(9)) == (0, [])


def test_gaps_endpoint(client, db, account, groomer, make_customer, make_appointment):
    day = date(2026, 3, 2)
    area = ServiceArea(account_id=account.id, name="North", color="#22C55E")
    db.add(area)
    db.commit()
    db.add(AreaDayAssignment(account_id=account.id, groomer_id=groomer.id, area_id=area.id, day_of_week=1))

    make_appointment(make_customer("Avery"), 9, day=day)
    make_appointment(make_customer("Blake"), 10, 30, day=day, minutes=90)
    waiting = make_customer("Casey", pet="Noodle", service_area_id=area.id)
    db.add(
        CustomerWaitlist(
            account_id=account.id,
            customer_id=waiting.id,
            preferred_days=["MONDAY"],
            preferred_times=["MORNING"],
        )
    )
    db.commit()

    response = client.get("/gaps", params={"date": "2026-03-02"})

    assert response.status_code == 200
    data = response.json()
    assert data["dayOfWeek"] == "MONDAY"
    assert data["areaForDay"]["name"] == "North"
    assert data["workingHours"] == {"start": "08:00", "end": "17:00"}
    assert data["appointmentCount"] == 2
    assert [g["startTime24h"] for g in data["gaps"]] == ["08:00", "12:00"]
    assert data["totalGapMinutes"] == 360

    morning = data["gaps"][0]["suggestedClients"][0]
    assert morning["customerName"] == "Casey"
    assert morning["matchScore"] == 100
    assert morning["pets"][0]["name"] == "Noodle"
    assert data["gaps"][1]["suggestedClients"][0]["matchScore"] == 70


def test_gaps_endpoint_bad_date(client):
    assert client.get("/gaps", params={"date": "tomorrow"}).status_code == 400
