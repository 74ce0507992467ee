# crm_backend/crud/address_crud.py
from sqlalchemy.orm import Session

from crm_backend.core.logging import get_logger
from crm_backend.db.models import Address
from crm_backend.schemas.address_schemas import AddressCreate, AddressUpdate

logger = get_logger(__name__)


def create_address(db: Session, address_in: AddressCreate, customer_id: int) -> Address:
    """
    Creates a new address for a customer.
    The caller checks that the customer exists before calling this.
    """
    db_address = Address(**address_in.model_dump(), customer_id=customer_id)
    db.add(db_address)
    db.commit()
    db.refresh(db_address)
    logger.info(f"Added address {db_address.id} to customer {customer_id}")
    return db_address


def get_address_by_id(db: Session, address_id: int) -> Address | None:
    return db.query(Address).filter(Address.id == address_id).first()


def get_addresses_by_customer(db: Session, customer_id: int) -> list[Address]:
    """All addresses of a customer; empty when the customer has none or does not exist."""
    return db.query(Address).filter(Address.customer_id == customer_id).order_by(Address.id).all()


def update_address(db: Session, db_address: Address, address_in: AddressUpdate) -> Address:
    """Updates an existing address's details."""
    for key, value in address_in.model_dump().items():
        setattr(db_address, key, value)

    db.add(db_address)
    db.commit()
    db.refresh(db_address)
    logger.info(f"Updated address {db_address.id}")
    return db_address


def delete_address(db: Session, db_address: Address):
    address_id = db_address.id
    db.delete(db_address)
    db.commit()
    logger.info(f"Deleted address {address_id}")
