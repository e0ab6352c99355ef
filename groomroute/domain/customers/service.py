"""Customer service - customers, pets, geocoding and area assignment"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Customer, Pet
from ...models_routing import ServiceArea
from ...services.geocoding_service import try_geocode
from .repository import CustomerRepository
from .schemas import (
    AssignAreaRequest,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
    PetCreate,
    PetResponse,
    PetUpdate,
)

logger = logging.getLogger(__name__)


def to_customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        id=customer.id,
        name=customer.name,
        address=customer.address,
        phone=customer.phone,
        email=customer.email,
        lat=customer.lat,
        lng=customer.lng,
        geocoded=customer.lat is not None and customer.lng is not None,
        serviceAreaId=customer.service_area_id,
        cancellationCount=customer.cancellation_count or 0,
        noShowCount=customer.no_show_count or 0,
        notes=customer.notes,
        pets=[PetResponse.model_validate(p) for p in customer.pets],
        createdAt=customer.created_at,
    )


class CustomerService:
    """Service layer for customer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository()

    def list_customers(self, account_id: int) -> list[Customer]:
        return self.repo.list_customers(self.db, account_id)

    def get_customer(self, customer_id: int, account_id: int) -> Customer:
        customer = self.repo.get_customer(self.db, customer_id, account_id)
        if not customer:
            raise HTTPException(status_code=404, detail="Customer not found")
        return customer

    async def _coordinates_for(
        self, address: str, lat: Optional[float], lng: Optional[float]
    ) -> tuple[Optional[float], Optional[float]]:
        if lat is not None and lng is not None:
            return lat, lng
        result = await try_geocode(address)
        if result is None:
            logger.warning(f"⚠️ Address not geocoded, customer will be left off routes: {address}")
            return None, None
        return result.lat, result.lng

    async def create_customer(self, account_id: int, data: CustomerCreate) -> Customer:
        lat, lng = await self._coordinates_for(data.address, data.lat, data.lng)
        customer = self.repo.create_customer(
            self.db,
            pets=[pet.model_dump() for pet in data.pets],
            account_id=account_id,
            name=data.name,
            address=data.address,
            phone=data.phone,
            email=data.email or None,
            lat=lat,
            lng=lng,
            notes=data.notes,
        )
        logger.info(f"👤 Customer {customer.id} created for account {account_id}")
        return customer

    async def update_customer(
        self, customer_id: int, account_id: int, data: CustomerUpdate
    ) -> Customer:
        """Update a customer; a changed address is geocoded again unless coordinates are given"""
        customer = self.get_customer(customer_id, account_id)

        # Only fields present in the request change; an explicit null clears the field
        changes = data.model_dump(exclude_unset=True)
        for required in ("name", "address"):
            if required in changes and not (changes[required] or "").strip():
                raise HTTPException(status_code=400, detail=f"{required} cannot be empty")
        if "email" in changes:
            changes["email"] = changes["email"] or None

        lat, lng = changes.pop("lat", None), changes.pop("lng", None)
        address = changes.pop("address", None)
        if address is not None and address.strip() != customer.address:
            changes["address"] = address.strip()
            # The old coordinates belong to the old address
            changes["lat"], changes["lng"] = await self._coordinates_for(
                changes["address"], lat, lng
            )
        elif lat is not None and lng is not None:
            changes["lat"], changes["lng"] = lat, lng

        return self.repo.update(self.db, customer, **changes)

    def delete_customer(self, customer_id: int, account_id: int) -> dict:
        customer = self.get_customer(customer_id, account_id)
        self.repo.delete_customer(self.db, customer)
        logger.info(f"🗑️ Customer {customer_id} deleted")
        return {"success": True, "message": "Customer deleted successfully"}

    def add_pet(self, customer_id: int, account_id: int, data: PetCreate) -> Pet:
        customer = self.get_customer(customer_id, account_id)
        return self.repo.add_pet(self.db, customer.id, **data.model_dump())

    def update_pet(self, customer_id: int, pet_id: int, account_id: int, data: PetUpdate) -> Pet:
        customer = self.get_customer(customer_id, account_id)
        pet = self.repo.get_pet(self.db, pet_id, customer.id)
        if not pet:
            raise HTTPException(status_code=404, detail="Pet not found")
        changes = data.model_dump(exclude_unset=True)
        # name and species are required; breed and weight can be cleared
        for required in ("name", "species"):
            if required in changes and changes[required] is None:
                del changes[required]
        return self.repo.update(self.db, pet, **changes)

    def delete_pet(self, customer_id: int, pet_id: int, account_id: int) -> dict:
        customer = self.get_customer(customer_id, account_id)
        pet = self.repo.get_pet(self.db, pet_id, customer.id)
        if not pet:
            raise HTTPException(status_code=404, detail="Pet not found")
        self.repo.delete_pet(self.db, pet)
        return {"success": True}

    def assign_area(self, customer_id: int, account_id: int, data: AssignAreaRequest) -> Customer:
        customer = self.get_customer(customer_id, account_id)

        if data.areaId is not None:
            area = (
                self.db.query(ServiceArea)
                .filter(ServiceArea.id == data.areaId, ServiceArea.account_id == account_id)
                .first()
            )
            if not area:
                raise HTTPException(status_code=404, detail="Service area not found")

        customer.service_area_id = data.areaId
        self.db.commit()
        self.db.refresh(customer)
        logger.info(f"🗺️ Customer {customer.id} assigned to area {data.areaId}")
        return customer
