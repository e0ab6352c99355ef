"""Service area repository - areas, weekday assignments and date overrides"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Customer, Groomer
from ...models_routing import AreaDateOverride, AreaDayAssignment, ServiceArea


class AreaRepository:
    """Repository for service area database operations"""

    @staticmethod
    def list_areas(db: Session, account_id: int) -> list[ServiceArea]:
        return (
            db.query(ServiceArea)
            .filter(ServiceArea.account_id == account_id)
            .order_by(ServiceArea.name.asc())
            .all()
        )

    @staticmethod
    def get_area(db: Session, area_id: int, account_id: int) -> Optional[ServiceArea]:
        return (
            db.query(ServiceArea)
            .filter(ServiceArea.id == area_id, ServiceArea.account_id == account_id)
            .first()
        )

    @staticmethod
    def get_area_by_name(db: Session, account_id: int, name: str) -> Optional[ServiceArea]:
        return (
            db.query(ServiceArea)
            .filter(
                ServiceArea.account_id == account_id,
                func.lower(ServiceArea.name) == name.lower(),
            )
            .first()
        )

    @staticmethod
    def count_areas(db: Session, account_id: int) -> int:
        return db.query(ServiceArea).filter(ServiceArea.account_id == account_id).count()

    @staticmethod
    def customer_counts(db: Session, account_id: int) -> dict[int, int]:
        rows = (
            db.query(Customer.service_area_id, func.count(Customer.id))
            .filter(Customer.account_id == account_id, Customer.service_area_id.isnot(None))
            .group_by(Customer.service_area_id)
            .all()
        )
        return {area_id: count for area_id, count in rows}

    @staticmethod
    def list_assignments(db: Session, account_id: int) -> list[AreaDayAssignment]:
        return (
            db.query(AreaDayAssignment)
            .options(joinedload(AreaDayAssignment.area))
            .filter(AreaDayAssignment.account_id == account_id)
            .all()
        )

    @staticmethod
    def get_assignment(db: Session, groomer_id: int, day_of_week: int) -> Optional[AreaDayAssignment]:
        return (
            db.query(AreaDayAssignment)
            .filter(
                AreaDayAssignment.groomer_id == groomer_id,
                AreaDayAssignment.day_of_week == day_of_week,
            )
            .first()
        )

    @staticmethod
    def list_active_groomers(db: Session, account_id: int) -> list[Groomer]:
        return (
            db.query(Groomer)
            .filter(Groomer.account_id == account_id, Groomer.is_active.is_(True))
            .order_by(Groomer.name.asc())
            .all()
        )

    @staticmethod
    def get_groomer(db: Session, groomer_id: int, account_id: int) -> Optional[Groomer]:
        return (
            db.query(Groomer)
            .filter(Groomer.id == groomer_id, Groomer.account_id == account_id)
            .first()
        )

    @staticmethod
    def get_override(db: Session, groomer_id: int, value: date) -> Optional[AreaDateOverride]:
        return (
            db.query(AreaDateOverride)
            .filter(AreaDateOverride.groomer_id == groomer_id, AreaDateOverride.date == value)
            .first()
        )

    @staticmethod
    def list_overrides(
        db: Session, groomer_id: int, start: date, end: date
    ) -> list[AreaDateOverride]:
        return (
            db.query(AreaDateOverride)
            .options(joinedload(AreaDateOverride.area))
            .filter(
                AreaDateOverride.groomer_id == groomer_id,
                AreaDateOverride.date >= start,
                AreaDateOverride.date <= end,
            )
            .order_by(AreaDateOverride.date.asc())
            .all()
        )

    @staticmethod
    def delete_area(db: Session, area: ServiceArea) -> int:
        """Delete an area with its assignments and overrides; returns customers unassigned"""
        unassigned = (
            db.query(Customer)
            .filter(Customer.service_area_id == area.id)
            .update({Customer.service_area_id: None}, synchronize_session=False)
        )
        db.query(AreaDayAssignment).filter(AreaDayAssignment.area_id == area.id).delete(
            synchronize_session=False
        )
        db.query(AreaDateOverride).filter(AreaDateOverride.area_id == area.id).delete(
            synchronize_session=False
        )
        db.delete(area)
        db.commit()
        return unassigned
