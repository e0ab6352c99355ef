"""
Smart waitlist suggestions.

Ranks waitlisted customers for a date by how well they fit it:
- day preference and today's service area
- proximity to the day's stops (or the groomer's base)
- customer value (revenue quartiles) and reliability (cancellations/no-shows)
- how long since their last completed appointment
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...benchmarks import round_half_up
from ...models import Groomer
from ...shared.dates import day_name_upper, utc_now
from ..appointments.repository import AppointmentRepository
from ..areas.area_matcher import AreaMatch, get_groomer_area_for_date
from ..routing.optimizer import haversine_miles
from .repository import WaitlistRepository
from .schemas import AreaRef, PetSummary, WaitlistSuggestion

logger = logging.getLogger(__name__)

TIER_ORDER = {"excellent": 4, "good": 3, "fair": 2, "poor": 1}

# Used when no customer has any revenue yet
DEFAULT_HIGH_VALUE = 500.0
DEFAULT_MEDIUM_VALUE = 100.0

MAX_SCORE = 100


@dataclass
class SuggestFilter:
    limit: int = 10
    min_reliability: Optional[str] = None
    value_tiers: Optional[list[str]] = None
    max_distance: Optional[float] = None


def reliability_tier(no_show_count: int, cancellation_count: int) -> str:
    if no_show_count >= 3 or cancellation_count >= 5:
        return "poor"
    if no_show_count >= 2 or cancellation_count >= 3:
        return "fair"
    if no_show_count >= 1 or cancellation_count >= 2:
        return "good"
    return "excellent"


def value_thresholds(revenues: list[float]) -> tuple[float, float]:
    """(high, medium) revenue thresholds at the 75th and 25th percentile of paying customers"""
    paying = sorted(r for r in revenues if r > 0)
    if not paying:
        return DEFAULT_HIGH_VALUE, DEFAULT_MEDIUM_VALUE
    return paying[int(len(paying) * 0.75)], paying[int(len(paying) * 0.25)]


def value_tier(revenue: float, high: float, medium: float) -> str:
    if revenue >= high:
        return "high"
    if revenue >= medium:
        return "medium"
    return "low"


def proximity_points(distance: Optional[float]) -> tuple[int, Optional[str]]:
    if distance is None:
        return 0, None
    if distance <= 2:
        return 20, "Very close to route (<2 mi)"
    if distance <= 5:
        return 15, "Near route (<5 mi)"
    if distance <= 10:
        return 10, "Within 10 miles"
    if distance <= 15:
        return 5, None
    return 0, None


def recency_points(days_since_last: Optional[int], appointment_count: int) -> tuple[int, Optional[str]]:
    if days_since_last is not None:
        if days_since_last >= 60:
            return 10, "Due for appointment (60+ days)"
        if days_since_last >= 45:
            return 7, "Due for appointment (45+ days)"
        if days_since_last >= 30:
            return 5, "Due for appointment (30+ days)"
        return 0, None
    if appointment_count == 0:
        return 8, "New customer"
    return 0, None


def distance_to_route(
    lat: Optional[float],
    lng: Optional[float],
    stops: list[tuple[float, float]],
    base: Optional[tuple[float, float]],
) -> Optional[float]:
    """Miles to the nearest stop of the day, or to the groomer's base on an empty day"""
    if lat is None or lng is None:
        return None
    if stops:
        return min(haversine_miles(lat, lng, s_lat, s_lng) for s_lat, s_lng in stops)
    if base is not None:
        return haversine_miles(lat, lng, base[0], base[1])
    return None


def get_waitlist_suggestions(
    db: Session, groomer: Groomer, target_date: date, filters: SuggestFilter
) -> list[WaitlistSuggestion]:
    repo = WaitlistRepository()
    account_id = groomer.account_id
    weekday = day_name_upper(target_date)

    appointments = AppointmentRepository.get_for_day(
        db, account_id, groomer.id, target_date, blocking_only=True
    )
    stops = [
        (apt.customer.lat, apt.customer.lng)
        for apt in appointments
        if apt.customer.lat is not None and apt.customer.lng is not None
    ]
    base = None
    if groomer.base_lat is not None and groomer.base_lng is not None:
        base = (groomer.base_lat, groomer.base_lng)

    area_for_day: Optional[AreaMatch] = get_groomer_area_for_date(db, groomer.id, target_date)

    entries = repo.list_active_entries(db, account_id)
    customer_ids = [entry.customer_id for entry in entries]
    totals = repo.appointment_totals(db, account_id, customer_ids)
    completed = repo.completed_stats(db, account_id, customer_ids)
    high, medium = value_thresholds([revenue for _, revenue in totals.values()])
    now = utc_now()

    suggestions = []
    for entry in entries:
        customer = entry.customer
        count, revenue = totals.get(customer.id, (0, 0.0))
        completed_count, last_completed = completed.get(customer.id, (0, None))
        days_since_last = (now - last_completed).days if last_completed else None
        completion_rate = completed_count / count * 100 if count else 100.0

        reliability = reliability_tier(customer.no_show_count or 0, customer.cancellation_count or 0)
        if filters.min_reliability and TIER_ORDER[reliability] < TIER_ORDER[filters.min_reliability]:
            continue

        tier = value_tier(revenue, high, medium)
        if filters.value_tiers and tier not in filters.value_tiers:
            continue

        distance = distance_to_route(customer.lat, customer.lng, stops, base)
        if distance is not None:
            if filters.max_distance and distance > filters.max_distance:
                continue
            if entry.max_distance and distance > entry.max_distance:
                continue

        in_area = area_for_day is not None and customer.service_area_id == area_for_day.area_id

        score = 0
        reasons = []

        if weekday in (entry.preferred_days or []):
            score += 30
            reasons.append(f"Prefers {weekday.capitalize()}s")
        elif entry.flexible_timing:
            score += 10
            reasons.append("Has flexible timing")

        if in_area:
            score += 25
            reasons.append(f"In today's area ({area_for_day.area_name})")

        points, reason = proximity_points(distance)
        score += points
        if reason:
            reasons.append(reason)

        if tier == "high":
            score += 15
            reasons.append("High-value customer")
        elif tier == "medium":
            score += 8
            reasons.append("Regular customer")

        if reliability == "excellent":
            score += 10
            reasons.append("Excellent reliability")
        elif reliability == "good":
            score += 5
        elif reliability == "poor":
            score -= 10
            reasons.append("History of cancellations/no-shows")

        points, reason = recency_points(days_since_last, count)
        score += points
        if reason:
            reasons.append(reason)

        if score <= 0:
            continue

        area = customer.service_area
        suggestions.append(
            WaitlistSuggestion(
                customerId=customer.id,
                customerName=customer.name,
                customerPhone=customer.phone,
                customerEmail=customer.email,
                customerAddress=customer.address,
                pets=[
                    PetSummary(id=p.id, name=p.name, breed=p.breed, weight=p.weight)
                    for p in customer.pets
                ],
                serviceArea=AreaRef(id=area.id, name=area.name, color=area.color) if area else None,
                preferredDays=entry.preferred_days or [],
                preferredTimes=entry.preferred_times or [],
                flexibleTiming=entry.flexible_timing,
                maxDistance=entry.max_distance,
                matchScore=min(score, MAX_SCORE),
                matchReasons=reasons,
                totalRevenue=revenue,
                averageAppointmentValue=round_half_up(revenue / count, 2) if count else 0.0,
                appointmentCount=count,
                lastAppointmentDate=last_completed.date().isoformat() if last_completed else None,
                daysSinceLastAppointment=days_since_last,
                completionRate=round_half_up(completion_rate),
                cancellationCount=customer.cancellation_count or 0,
                noShowCount=customer.no_show_count or 0,
                reliabilityTier=reliability,
                distanceToRoute=round_half_up(distance, 1) if distance is not None else None,
                isInTodaysArea=in_area,
                valueTier=tier,
            )
        )

    # Stable sort keeps waitlist order among equal scores
    suggestions.sort(key=lambda s: s.matchScore, reverse=True)
    logger.info(
        f"📋 {len(suggestions)} waitlist suggestions for groomer {groomer.id} on {target_date}"
    )
    return suggestions[: filters.limit]
