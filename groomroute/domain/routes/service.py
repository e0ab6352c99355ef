"""Route service - today's route: optimize, reorder, assistant mode, workday start"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...benchmarks import format_clock_time, round_half_up
from ...models import Appointment, Groomer
from ...shared.dates import utc_today
from ...shared.validators import parse_date
from ..routing.optimizer import Coordinate, RoutePlan, Stop, plan_route
from .repository import RouteRepository
from .schemas import (
    AssistantStatusResponse,
    OptimizedStop,
    OptimizePreviewResponse,
    OptimizeRouteRequest,
    OptimizeRouteResponse,
    ReorderRouteRequest,
    ReorderRouteResponse,
    RouteChange,
    RouteDetails,
    SetAssistantRequest,
    SetAssistantResponse,
    StartWorkdayResponse,
)

logger = logging.getLogger(__name__)

NO_LOCATIONS_MESSAGE = "No appointments with verified locations found"


def _change_for(appointment: Appointment, **fields) -> RouteChange:
    customer = appointment.customer
    return RouteChange(
        id=appointment.id,
        customerName=customer.name,
        petName=appointment.pet.name if appointment.pet else "Pet",
        customerPhone=customer.phone,
        **fields,
    )


class RouteService:
    """Service layer for the groomer's route of the day"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = RouteRepository()

    def _require_today(self, value: str, action: str) -> date:
        route_date = parse_date(value)
        if route_date != utc_today():
            raise HTTPException(status_code=400, detail=f"Can only {action} today's route")
        return route_date

    def get_has_assistant(self, groomer: Groomer, route_date: date) -> bool:
        """The day's route decides; the groomer default applies until a route exists"""
        route = self.repo.get_route(self.db, groomer.id, route_date)
        if route is not None:
            return route.has_assistant
        return bool(groomer.default_has_assistant)

    def _plan(
        self, groomer: Groomer, data: OptimizeRouteRequest
    ) -> tuple[list[Appointment], Optional[RoutePlan], bool, Optional[Coordinate]]:
        route_date = self._require_today(data.date, "optimize")
        has_assistant = self.get_has_assistant(groomer, route_date)
        appointments = self.repo.get_open_appointments(
            self.db, groomer.account_id, groomer.id, route_date
        )

        stops = [
            Stop(
                id=apt.id,
                lat=apt.customer.lat,
                lng=apt.customer.lng,
                start_at=apt.start_at,
                service_minutes=apt.service_minutes,
            )
            for apt in appointments
            if apt.customer.lat is not None and apt.customer.lng is not None
        ]
        if not stops:
            return appointments, None, has_assistant, None

        start = None
        if data.startLat is not None and data.startLng is not None:
            start = (data.startLat, data.startLng)

        plan = plan_route(
            stops,
            first_start_at=appointments[0].start_at,
            start=start,
            has_assistant=has_assistant,
        )
        return appointments, plan, has_assistant, start

    def preview_optimization(
        self, groomer: Groomer, data: OptimizeRouteRequest
    ) -> OptimizePreviewResponse:
        """What optimizing would change, without writing anything"""
        appointments, plan, has_assistant, _ = self._plan(groomer, data)
        if plan is None:
            return OptimizePreviewResponse(success=False, message=NO_LOCATIONS_MESSAGE)

        by_id = {apt.id: apt for apt in appointments}
        changes = [
            _change_for(
                by_id[stop.id],
                order=stop.order,
                address=by_id[stop.id].customer.address,
                oldStartAt=stop.old_start_at,
                newStartAt=stop.new_start_at,
                timeChanged=stop.time_changed,
                serviceMinutes=stop.service_minutes,
            )
            for stop in plan.stops
        ]

        summary = plan.summary
        logger.info(
            f"🗺️ Route preview for groomer {groomer.id}: {summary.stops} stops, "
            f"{plan.appointments_affected} retimed, assistant={has_assistant}"
        )
        return OptimizePreviewResponse(
            success=True,
            changes=changes,
            appointmentsAffected=plan.appointments_affected,
            estimatedFinish=(
                format_clock_time(summary.estimated_finish) if summary.estimated_finish else None
            ),
            preferredMessaging=groomer.preferred_messaging or "SMS",
            routeDetails=RouteDetails(
                stops=summary.stops,
                avgMinutesBetweenStops=summary.avg_minutes_between_stops,
                totalDriveMinutes=summary.total_drive_minutes,
                formattedDriveTime=summary.formatted_drive_time,
                efficiency=summary.efficiency,
                totalDistanceMiles=round_half_up(summary.total_distance_miles, 1),
            ),
        )

    def apply_optimization(
        self, groomer: Groomer, data: OptimizeRouteRequest
    ) -> OptimizeRouteResponse:
        """Write the optimized start times and record the day's route totals"""
        appointments, plan, has_assistant, _ = self._plan(groomer, data)
        if plan is None:
            return OptimizeRouteResponse(success=False, message=NO_LOCATIONS_MESSAGE)

        by_id = {apt.id: apt for apt in appointments}
        for stop in plan.stops:
            by_id[stop.id].start_at = stop.new_start_at

        route = self.repo.get_or_create_route(
            self.db, groomer.account_id, groomer.id, parse_date(data.date), has_assistant
        )
        route.total_distance_meters = plan.summary.total_distance_meters
        route.total_drive_minutes = plan.summary.total_drive_minutes
        route.status = "DRAFT"

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to save optimized route for groomer {groomer.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to optimize route") from e

        logger.info(
            f"✅ Route optimized for groomer {groomer.id}: {len(plan.stops)} stops, "
            f"{plan.summary.total_distance_miles:.1f} mi"
        )
        return OptimizeRouteResponse(
            success=True,
            message=f"Route optimized! {len(plan.stops)} appointments reordered.",
            optimizedOrder=[
                OptimizedStop(id=stop.id, newStartAt=stop.new_start_at, order=stop.order)
                for stop in plan.stops
            ],
            totalDistance=round_half_up(plan.summary.total_distance_miles, 1),
            estimatedDriveTime=plan.summary.total_drive_minutes,
        )

    def reorder(self, groomer: Groomer, data: ReorderRouteRequest) -> ReorderRouteResponse:
        """
        Manual reorder: the day's time slots stay put and appointments swap
        into them by their new position.
        """
        if not data.appointmentIds:
            raise HTTPException(status_code=400, detail="Date and appointmentIds array are required")
        if len(set(data.appointmentIds)) != len(data.appointmentIds):
            raise HTTPException(status_code=400, detail="Duplicate appointment IDs")

        self._require_today(data.date, "reorder")

        appointments = self.repo.get_open_appointments_by_ids(
            self.db, groomer.account_id, groomer.id, data.appointmentIds
        )
        if len(appointments) != len(data.appointmentIds):
            raise HTTPException(
                status_code=400, detail="Some appointments not found or already completed"
            )

        by_id = {apt.id: apt for apt in appointments}
        slots = sorted(apt.start_at for apt in appointments)

        changes = []
        for apt_id, slot in zip(data.appointmentIds, slots):
            appointment = by_id[apt_id]
            old_start_at = appointment.start_at
            changes.append(
                _change_for(
                    appointment,
                    oldStartAt=old_start_at,
                    newStartAt=slot,
                    timeChanged=old_start_at != slot,
                )
            )
            appointment.start_at = slot

        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to reorder route for groomer {groomer.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to reorder route") from e

        affected = sum(1 for change in changes if change.timeChanged)
        if affected:
            message = f"Route reordered. {affected} appointment{'' if affected == 1 else 's'} updated."
        else:
            message = "Route order confirmed (no time changes needed)."
        logger.info(f"🔀 Route reordered for groomer {groomer.id}: {affected} changed")

        return ReorderRouteResponse(
            success=True, message=message, appointments=changes, affectedCount=affected
        )

    def get_assistant_status(self, groomer: Groomer) -> AssistantStatusResponse:
        route = self.repo.get_route(self.db, groomer.id, utc_today())
        default = bool(groomer.default_has_assistant)
        return AssistantStatusResponse(
            hasAssistant=route.has_assistant if route is not None else default,
            defaultHasAssistant=default,
            hasRouteForToday=route is not None,
        )

    def set_assistant_status(
        self, groomer: Groomer, data: SetAssistantRequest
    ) -> SetAssistantResponse:
        route = self.repo.get_or_create_route(
            self.db, groomer.account_id, groomer.id, utc_today(), data.hasAssistant
        )
        route.has_assistant = data.hasAssistant
        if data.setAsDefault:
            groomer.default_has_assistant = data.hasAssistant

        self.db.commit()
        logger.info(f"👥 Groomer {groomer.id} assistant today: {data.hasAssistant}")
        return SetAssistantResponse(
            success=True,
            hasAssistant=route.has_assistant,
            message="Working with assistant today" if data.hasAssistant else "Working solo today",
        )

    def start_workday(self, groomer: Groomer) -> StartWorkdayResponse:
        route = self.repo.get_or_create_route(
            self.db,
            groomer.account_id,
            groomer.id,
            utc_today(),
            bool(groomer.default_has_assistant),
        )
        route.workday_started = True
        self.db.commit()
        logger.info(f"🚐 Groomer {groomer.id} started the workday")
        return StartWorkdayResponse(success=True, workdayStarted=True)
