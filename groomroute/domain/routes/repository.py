"""Route repository - Database operations for routes and the day's stops"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import CLOSED_STATUSES, Appointment
from ...models_routing import Route
from ...shared.dates import day_bounds


class RouteRepository:
    """Repository for route database operations"""

    @staticmethod
    def get_route(db: Session, groomer_id: int, route_date: date) -> Optional[Route]:
        return (
            db.query(Route)
            .filter(Route.groomer_id == groomer_id, Route.route_date == route_date)
            .first()
        )

    @staticmethod
    def get_or_create_route(
        db: Session, account_id: int, groomer_id: int, route_date: date, has_assistant: bool
    ) -> Route:
        """Route for the day, added to the session (not committed) when missing"""
        route = RouteRepository.get_route(db, groomer_id, route_date)
        if route is None:
            route = Route(
                account_id=account_id,
                groomer_id=groomer_id,
                route_date=route_date,
                has_assistant=has_assistant,
                status="DRAFT",
                provider="LOCAL",
            )
            db.add(route)
        return route

    @staticmethod
    def get_open_appointments(
        db: Session, account_id: int, groomer_id: int, route_date: date
    ) -> list[Appointment]:
        """The day's appointments still to be driven to, earliest first"""
        start, end = day_bounds(route_date)
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.customer), joinedload(Appointment.pet))
            .filter(
                Appointment.account_id == account_id,
                Appointment.groomer_id == groomer_id,
                Appointment.start_at >= start,
                Appointment.start_at <= end,
                Appointment.status.notin_(CLOSED_STATUSES),
            )
            .order_by(Appointment.start_at.asc(), Appointment.id.asc())
            .all()
        )

    @staticmethod
    def get_open_appointments_by_ids(
        db: Session, account_id: int, groomer_id: int, appointment_ids: list[int]
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.customer), joinedload(Appointment.pet))
            .filter(
                Appointment.account_id == account_id,
                Appointment.groomer_id == groomer_id,
                Appointment.id.in_(appointment_ids),
                Appointment.status.notin_(CLOSED_STATUSES),
            )
            .all()
        )
