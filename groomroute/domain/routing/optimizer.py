"""
Daily route optimizer.

Orders a groomer's stops with a greedy nearest-neighbor tour over Haversine
distances, then hands out back-to-back start times from the first
appointment of the day. Days rarely have more than 20 stops, so the O(n²)
search is fine.
"""

import math
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from ...benchmarks import (
    AVERAGE_SPEED_MPH,
    METERS_PER_MILE,
    format_drive_time,
    get_adjusted_service_minutes,
    get_buffer_minutes,
    get_route_efficiency_label,
    get_route_efficiency_rating,
    round_half_up,
)

EARTH_RADIUS_MILES = 3959

Coordinate = tuple[float, float]


class Stop(BaseModel):
    """A geocoded appointment on the day's route"""

    id: int
    lat: float
    lng: float
    start_at: datetime
    service_minutes: int


class ScheduledStop(BaseModel):
    id: int
    order: int  # 1-based position in the route
    lat: float
    lng: float
    old_start_at: datetime
    new_start_at: datetime
    service_minutes: int
    adjusted_service_minutes: int

    @property
    def time_changed(self) -> bool:
        return self.old_start_at != self.new_start_at


class RouteSummary(BaseModel):
    stops: int
    total_distance_miles: float
    total_distance_meters: int
    total_drive_minutes: int
    avg_minutes_between_stops: int
    efficiency_rating: str
    efficiency: str
    formatted_drive_time: str
    estimated_finish: Optional[datetime] = None


class RoutePlan(BaseModel):
    stops: list[ScheduledStop]
    summary: RouteSummary

    @property
    def appointments_affected(self) -> int:
        return sum(1 for stop in self.stops if stop.time_changed)


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in miles"""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def nearest_neighbor_order(stops: list[Stop], start: Optional[Coordinate] = None) -> list[Stop]:
    """
    Greedy tour: from the start point (or the first stop) always drive to the
    closest stop not yet visited. Ties go to the earlier stop in the input.
    """
    if len(stops) <= 1:
        return list(stops)

    unvisited = list(stops)
    route: list[Stop] = []
    current = start if start is not None else (unvisited[0].lat, unvisited[0].lng)

    while unvisited:
        nearest_index = 0
        nearest_distance = math.inf
        for i, stop in enumerate(unvisited):
            distance = haversine_miles(current[0], current[1], stop.lat, stop.lng)
            if distance < nearest_distance:
                nearest_distance = distance
                nearest_index = i

        nearest = unvisited.pop(nearest_index)
        route.append(nearest)
        current = (nearest.lat, nearest.lng)

    return route


def assign_start_times(
    ordered: list[Stop], first_start_at: datetime, has_assistant: bool
) -> list[ScheduledStop]:
    """Back-to-back start times: each stop starts after the previous service plus a travel buffer"""
    buffer_minutes = get_buffer_minutes(has_assistant)
    current_time = first_start_at
    scheduled = []

    for index, stop in enumerate(ordered):
        adjusted = get_adjusted_service_minutes(stop.service_minutes, has_assistant)
        scheduled.append(
            ScheduledStop(
                id=stop.id,
                order=index + 1,
                lat=stop.lat,
                lng=stop.lng,
                old_start_at=stop.start_at,
                new_start_at=current_time,
                service_minutes=stop.service_minutes,
                adjusted_service_minutes=adjusted,
            )
        )
        current_time = current_time + timedelta(minutes=adjusted + buffer_minutes)

    return scheduled


def route_distance_miles(ordered: list, start: Optional[Coordinate] = None) -> float:
    """Total straight-line distance of the route, including the leg from the start point"""
    if not ordered:
        return 0.0

    total = 0.0
    if start is not None:
        total += haversine_miles(start[0], start[1], ordered[0].lat, ordered[0].lng)

    for previous, following in zip(ordered, ordered[1:]):
        total += haversine_miles(previous.lat, previous.lng, following.lat, following.lng)

    return total


def summarize_route(
    scheduled: list[ScheduledStop], start: Optional[Coordinate] = None
) -> RouteSummary:
    total_distance = route_distance_miles(scheduled, start)
    total_drive_minutes = round_half_up(total_distance / AVERAGE_SPEED_MPH * 60)

    stops = len(scheduled)
    avg_minutes_between_stops = (
        round_half_up(total_drive_minutes / (stops - 1)) if stops > 1 else 0
    )

    estimated_finish = None
    if scheduled:
        last = scheduled[-1]
        estimated_finish = last.new_start_at + timedelta(minutes=last.adjusted_service_minutes)

    return RouteSummary(
        stops=stops,
        total_distance_miles=total_distance,
        total_distance_meters=round_half_up(total_distance * METERS_PER_MILE),
        total_drive_minutes=total_drive_minutes,
        avg_minutes_between_stops=avg_minutes_between_stops,
        efficiency_rating=get_route_efficiency_rating(avg_minutes_between_stops),
        efficiency=get_route_efficiency_label(avg_minutes_between_stops),
        formatted_drive_time=format_drive_time(total_drive_minutes),
        estimated_finish=estimated_finish,
    )


def plan_route(
    stops: list[Stop],
    first_start_at: Optional[datetime] = None,
    start: Optional[Coordinate] = None,
    has_assistant: bool = False,
) -> RoutePlan:
    """
    Reorder and retime a day's stops.

    first_start_at is the day's earliest appointment time (which may belong to
    an appointment without coordinates); it defaults to the earliest stop.
    With zero or one stop nothing moves.
    """
    if len(stops) <= 1:
        scheduled = [
            ScheduledStop(
                id=stop.id,
                order=1,
                lat=stop.lat,
                lng=stop.lng,
                old_start_at=stop.start_at,
                new_start_at=stop.start_at,
                service_minutes=stop.service_minutes,
                adjusted_service_minutes=get_adjusted_service_minutes(
                    stop.service_minutes, has_assistant
                ),
            )
            for stop in stops
        ]
        return RoutePlan(stops=scheduled, summary=summarize_route(scheduled, start))

    if first_start_at is None:
        first_start_at = min(stop.start_at for stop in stops)

    ordered = nearest_neighbor_order(stops, start)
    scheduled = assign_start_times(ordered, first_start_at, has_assistant)
    return RoutePlan(stops=scheduled, summary=summarize_route(scheduled, start))
