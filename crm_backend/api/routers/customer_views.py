# crm_backend/api/routers/customer_views.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crm_backend.crud import customer_crud
from crm_backend.db.session import get_db
from crm_backend.schemas.customer_schemas import CustomerRead, CustomerViewResponse, CustomerWithAddressCount

router = APIRouter()


def _to_view_response(rows) -> CustomerViewResponse:
    return CustomerViewResponse(
        message="success",
        data=[
            CustomerWithAddressCount(
                **CustomerRead.model_validate(customer).model_dump(),
                address_count=address_count,
            )
            for customer, address_count in rows
        ],
    )


@router.get("/customers-with-multiple-addresses", response_model=CustomerViewResponse)
def get_customers_with_multiple_addresses(db: Session = Depends(get_db)):
    """Every customer with more than one address. Not paginated."""
    return _to_view_response(customer_crud.get_customers_with_multiple_addresses(db))


@router.get("/customers-single-address", response_model=CustomerViewResponse)
def get_customers_with_single_address(db: Session = Depends(get_db)):
    """Every customer with exactly one address. Not paginated."""
    return _to_view_response(customer_crud.get_customers_with_single_address(db))
