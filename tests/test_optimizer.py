import random
from datetime import datetime

import pytest

from groomroute.benchmarks import (
    format_clock_time,
    format_drive_time,
    get_adjusted_service_minutes,
    get_buffer_minutes,
    get_route_efficiency_label,
    round_half_up,
)
from groomroute.domain.routing.optimizer import (
    Stop,
    haversine_miles,
    nearest_neighbor_order,
    plan_route,
    route_distance_miles,
)

NINE_AM = datetime(2026, 3, 2, 9, 0)


def _stop(id, lat, lng, hour=9, minute=0, minutes=60):
    return Stop(
        id=id,
        lat=lat,
        lng=lng,
        start_at=datetime(2026, 3, 2, hour, minute),
        service_minutes=minutes,
    )


def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_miles(0, 0, 0, 1) == pytest.approx(69.1, abs=0.05)
    assert haversine_miles(40.0, -75.0, 40.0, -75.0) == 0


def test_nearest_neighbor_starts_from_first_stop_without_start_point():
    a = _stop(1, 0, 0)
    far = _stop(2, 0, 1)
    near = _stop(3, 0, 0.1)

    ordered = nearest_neighbor_order([a, far, near])

    assert [s.id for s in ordered] == [1, 3, 2]


def test_nearest_neighbor_from_start_point():
    a = _stop(1, 0, 0)
    b = _stop(2, 0, 1)

    ordered = nearest_neighbor_order([a, b], start=(0, 0.9))

    assert [s.id for s in ordered] == [2, 1]


def test_nearest_neighbor_tie_keeps_input_order():
    a = _stop(1, 0, 1)
    b = _stop(2, 0, -1)

    ordered = nearest_neighbor_order([a, b], start=(0, 0))

    assert [s.id for s in ordered] == [1, 2]


def test_plan_route_retimes_back_to_back_solo():
    stops = [_stop(1, 0, 0, 9), _stop(2, 0, 1, 10), _stop(3, 0, 0.1, 14)]

    plan = plan_route(stops, first_start_at=NINE_AM)

    assert [s.id for s in plan.stops] == [1, 3, 2]
    assert [s.order for s in plan.stops] == [1, 2, 3]
    assert [s.new_start_at.strftime("%H:%M") for s in plan.stops] == ["09:00", "10:15", "11:30"]
    # stop 1 kept its 9:00 slot
    assert plan.appointments_affected == 2
    assert plan.summary.estimated_finish == datetime(2026, 3, 2, 12, 30)


def test_plan_route_with_assistant_shortens_service_and_buffer():
    stops = [_stop(1, 0, 0, 9), _stop(2, 0, 1, 10), _stop(3, 0, 0.1, 14)]

    plan = plan_route(stops, first_start_at=NINE_AM, has_assistant=True)

    assert [s.new_start_at.strftime("%H:%M") for s in plan.stops] == ["09:00", "09:57", "10:54"]
    assert plan.stops[0].adjusted_service_minutes == 45


def test_plan_route_conserves_stops_and_is_repeatable():
    stops = [
        _stop(i, 40.0 + (i % 3) * 0.02, -75.0 + i * 0.013, 8 + i)
        for i in range(1, 8)
    ]
    random.Random(7).shuffle(stops)

    first = plan_route(stops, first_start_at=NINE_AM, start=(40.01, -74.98))
    second = plan_route(stops, first_start_at=NINE_AM, start=(40.01, -74.98))

    assert sorted(s.id for s in first.stops) == list(range(1, 8))
    assert [(s.id, s.new_start_at) for s in first.stops] == [
        (s.id, s.new_start_at) for s in second.stops
    ]
    assert first.summary == second.summary


def test_plan_route_starts_at_given_first_start():
    stops = [_stop(1, 0, 0, 11), _stop(2, 0, 0.1, 12)]

    plan = plan_route(stops, first_start_at=datetime(2026, 3, 2, 8, 30))

    assert plan.stops[0].new_start_at == datetime(2026, 3, 2, 8, 30)
    assert plan.appointments_affected == 2


def test_plan_route_single_stop_is_unchanged():
    stop = _stop(7, 40.7, -74.0, 13, 15)

    plan = plan_route([stop], first_start_at=NINE_AM, start=(40.0, -74.0))

    assert len(plan.stops) == 1
    assert plan.stops[0].new_start_at == stop.start_at
    assert plan.appointments_affected == 0
    assert plan.summary.total_distance_miles > 0


def test_plan_route_empty():
    plan = plan_route([])

    assert plan.stops == []
    assert plan.summary.total_distance_miles == 0
    assert plan.summary.estimated_finish is None


def test_route_summary_drive_time_and_efficiency():
    # roughly 6.9 miles apart -> 14 minutes at 30 mph
    stops = [_stop(1, 0, 0), _stop(2, 0, 0.1, 10)]

    plan = plan_route(stops, first_start_at=NINE_AM)

    assert plan.summary.total_drive_minutes == 14
    assert plan.summary.avg_minutes_between_stops == 14
    assert plan.summary.efficiency == "Excellent"
    assert plan.summary.formatted_drive_time == "14m"


def test_route_distance_includes_leg_from_start():
    stops = [_stop(1, 0, 1)]

    assert route_distance_miles(stops) == 0
    assert route_distance_miles(stops, start=(0, 0)) == pytest.approx(69.1, abs=0.05)


@pytest.mark.parametrize(
    "minutes,has_assistant,expected",
    [(60, False, 60), (60, True, 45), (90, True, 68), (30, True, 23)],
)
def test_adjusted_service_minutes(minutes, has_assistant, expected):
    assert get_adjusted_service_minutes(minutes, has_assistant) == expected


def test_buffer_minutes():
    assert get_buffer_minutes(False) == 15
    assert get_buffer_minutes(True) == 12


@pytest.mark.parametrize(
    "avg,label",
    [(0, "Excellent"), (18, "Excellent"), (19, "Good"), (25, "Good"), (35, "Okay"), (36, "Needs work")],
)
def test_efficiency_labels(avg, label):
    assert get_route_efficiency_label(avg) == label


def test_formatting_helpers():
    assert format_drive_time(75) == "1h 15m"
    assert format_drive_time(45) == "45m"
    assert format_clock_time(datetime(2026, 3, 2, 9, 5)) == "9:05 AM"
    assert format_clock_time(datetime(2026, 3, 2, 12, 0)) == "12:00 PM"
    assert format_clock_time(datetime(2026, 3, 2, 0, 30)) == "12:30 AM"
    assert round_half_up(2.5) == 3
    assert round_half_up(12.345, 1) == 12.3
