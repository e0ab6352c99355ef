"""Customer router - FastAPI endpoints for customers and pets"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    AssignAreaRequest,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
    PetCreate,
    PetResponse,
    PetUpdate,
)
from .service import CustomerService, to_customer_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency injection for CustomerService"""
    return CustomerService(db)


# ============================================================================
# CUSTOMERS
# ============================================================================


@router.get("", response_model=list[CustomerResponse])
async def list_customers(
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return [to_customer_response(c) for c in service.list_customers(current_user.account_id)]


@router.post("", response_model=CustomerResponse)
async def create_customer(
    data: CustomerCreate,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    """Create a customer, geocoding the address when no coordinates are given"""
    customer = await service.create_customer(current_user.account_id, data)
    return to_customer_response(customer)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return to_customer_response(service.get_customer(customer_id, current_user.account_id))


@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    customer = await service.update_customer(customer_id, current_user.account_id, data)
    return to_customer_response(customer)


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: int,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return service.delete_customer(customer_id, current_user.account_id)


@router.post("/{customer_id}/assign-area", response_model=CustomerResponse)
async def assign_customer_area(
    customer_id: int,
    data: AssignAreaRequest,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    """Put a customer in a service area (areaId null removes them)"""
    customer = service.assign_area(customer_id, current_user.account_id, data)
    return to_customer_response(customer)


# ============================================================================
# PETS
# ============================================================================


@router.post("/{customer_id}/pets", response_model=PetResponse)
async def add_pet(
    customer_id: int,
    data: PetCreate,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return service.add_pet(customer_id, current_user.account_id, data)


@router.patch("/{customer_id}/pets/{pet_id}", response_model=PetResponse)
async def update_pet(
    customer_id: int,
    pet_id: int,
    data: PetUpdate,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return service.update_pet(customer_id, pet_id, current_user.account_id, data)


@router.delete("/{customer_id}/pets/{pet_id}")
async def delete_pet(
    customer_id: int,
    pet_id: int,
    current_user: User = Depends(get_current_user),
    service: CustomerService = Depends(get_customer_service),
):
    return service.delete_pet(customer_id, pet_id, current_user.account_id)
