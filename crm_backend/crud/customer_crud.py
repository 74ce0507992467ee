# crm_backend/crud/customer_crud.py
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from crm_backend.core.logging import get_logger
from crm_backend.crud.customer_query import compose_customer_query
from crm_backend.db.models import Address, Customer
from crm_backend.schemas.customer_schemas import CustomerCreate, CustomerListParams, CustomerUpdate

logger = get_logger(__name__)


class DuplicatePhoneNumberError(ValueError):
    """Raised when a customer write collides with an existing phone number."""

    def __init__(self, phone_number: str):
        super().__init__("Phone number already exists")
        self.phone_number = phone_number


def _is_phone_number_conflict(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: customers.phone_number"
    # PostgreSQL: 'duplicate key value violates unique constraint "customers_phone_number_key"'
    message = str(exc.orig).lower()
    return "phone_number" in message and ("unique" in message or "duplicate" in message)


def _commit_customer(db: Session, db_customer: Customer) -> Customer:
    phone_number = db_customer.phone_number
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_phone_number_conflict(e):
            logger.info(f"Rejected duplicate phone number {phone_number}")
            raise DuplicatePhoneNumberError(phone_number) from e
        raise
    db.refresh(db_customer)
    return db_customer


def create_customer(db: Session, customer_in: CustomerCreate) -> Customer:
    """Creates a new customer record."""
    db_customer = Customer(**customer_in.model_dump())
    db.add(db_customer)
    _commit_customer(db, db_customer)
    logger.info(f"Created customer {db_customer.id}")
    return db_customer


def get_customer_by_id(db: Session, customer_id: int) -> Customer | None:
    """Fetches a single customer by their ID."""
    return db.query(Customer).filter(Customer.id == customer_id).first()


def customer_exists(db: Session, customer_id: int) -> bool:
    return db.query(Customer.id).filter(Customer.id == customer_id).first() is not None


def list_customers(db: Session, params: CustomerListParams) -> tuple[list[Customer], int, int]:
    """
    Fetches one page of customers matching the listing parameters.
    Returns the page, the total number of matches and the number of pages.
    """
    query = compose_customer_query(params)
    total_items = db.execute(query.count).scalar_one()
    customers = list(db.execute(query.fetch).scalars().all())
    return customers, total_items, query.total_pages(total_items)


def update_customer(db: Session, db_customer: Customer, customer_in: CustomerUpdate) -> Customer:
    """Updates an existing customer's details."""
    for key, value in customer_in.model_dump().items():
        setattr(db_customer, key, value)

    db.add(db_customer)
    _commit_customer(db, db_customer)
    logger.info(f"Updated customer {db_customer.id}")
    return db_customer


def delete_customer(db: Session, db_customer: Customer):
    """Deletes a customer together with all of their addresses."""
    customer_id = db_customer.id
    db.delete(db_customer)
    db.commit()
    logger.info(f"Deleted customer {customer_id}")


def _customers_by_address_count(db: Session, having) -> list[tuple[Customer, int]]:
    address_count = func.count(Address.id)
    rows = (
        db.query(Customer, address_count.label("address_count"))
        .join(Address, Address.customer_id == Customer.id)
        .group_by(Customer.id)
        .having(having(address_count))
        .order_by(Customer.id)
        .all()
    )
    return [(customer, count) for customer, count in rows]


def get_customers_with_multiple_addresses(db: Session) -> list[tuple[Customer, int]]:
    """Customers owning more than one address, with their address count."""
    return _customers_by_address_count(db, lambda count: count > 1)


def get_customers_with_single_address(db: Session) -> list[tuple[Customer, int]]:
    """Customers owning exactly one address, with their address count."""
    return _customers_by_address_count(db, lambda count: count == 1)
