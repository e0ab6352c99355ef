"""Customer repository - Database operations for customers and pets"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, Customer, CustomerWaitlist, Pet


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def list_customers(db: Session, account_id: int) -> list[Customer]:
        return (
            db.query(Customer)
            .options(joinedload(Customer.pets))
            .filter(Customer.account_id == account_id)
            .order_by(Customer.name.asc())
            .all()
        )

    @staticmethod
    def get_customer(db: Session, customer_id: int, account_id: int) -> Optional[Customer]:
        return (
            db.query(Customer)
            .options(joinedload(Customer.pets))
            .filter(Customer.id == customer_id, Customer.account_id == account_id)
            .first()
        )

    @staticmethod
    def create_customer(db: Session, pets: list[dict], **data) -> Customer:
        customer = Customer(**data)
        customer.pets = [Pet(**pet) for pet in pets]
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def update(db: Session, obj, **updates):
        """Apply the given fields (None clears a column) and commit"""
        for key, value in updates.items():
            if hasattr(obj, key):
                setattr(obj, key, value)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def delete_customer(db: Session, customer: Customer) -> None:
        """Delete a customer with their appointments and waitlist entry (pets cascade)"""
        db.query(Appointment).filter(Appointment.customer_id == customer.id).delete(
            synchronize_session=False
        )
        db.query(CustomerWaitlist).filter(CustomerWaitlist.customer_id == customer.id).delete(
            synchronize_session=False
        )
        db.delete(customer)
        db.commit()

    @staticmethod
    def get_pet(db: Session, pet_id: int, customer_id: int) -> Optional[Pet]:
        return db.query(Pet).filter(Pet.id == pet_id, Pet.customer_id == customer_id).first()

    @staticmethod
    def add_pet(db: Session, customer_id: int, **data) -> Pet:
        pet = Pet(customer_id=customer_id, **data)
        db.add(pet)
        db.commit()
        db.refresh(pet)
        return pet

    @staticmethod
    def delete_pet(db: Session, pet: Pet) -> None:
        # Past appointments keep their row but lose the pet link
        db.query(Appointment).filter(Appointment.pet_id == pet.id).update(
            {Appointment.pet_id: None}, synchronize_session=False
        )
        db.delete(pet)
        db.commit()
