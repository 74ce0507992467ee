# crm_backend/api/dependencies.py
from fastapi import Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from crm_backend.api.middleware import describe_validation_errors
from crm_backend.crud import customer_crud
from crm_backend.db.models import Customer
from crm_backend.db.session import get_db
from crm_backend.schemas.customer_schemas import CustomerListParams


def get_customer_list_params(
        page: int = Query(1, description="Page number, starting at 1"),
        limit: int = Query(10, description="Customers per page"),
        search: str | None = Query(None, description="Substring of first name, last name or phone number"),
        city: str | None = Query(None),
        state: str | None = Query(None),
        pin_code: str | None = Query(None),
        sort_by: str = Query("id", alias="sortBy"),
        sort_order: str = Query("ASC", alias="sortOrder"),
) -> CustomerListParams:
    """Collects the listing query string into a validated CustomerListParams."""
    try:
        return CustomerListParams(
            page=page,
            limit=limit,
            search=search,
            city=city,
            state=state,
            pin_code=pin_code,
            sortBy=sort_by,
            sortOrder=sort_order,
        )
    except ValidationError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, describe_validation_errors(e.errors()))


def get_customer_or_404(customer_id: int, db: Session = Depends(get_db)) -> Customer:
    db_customer = customer_crud.get_customer_by_id(db, customer_id=customer_id)
    if db_customer is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return db_customer
