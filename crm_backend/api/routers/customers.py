# crm_backend/api/routers/customers.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crm_backend.api.dependencies import get_customer_list_params, get_customer_or_404
from crm_backend.crud import customer_crud
from crm_backend.crud.customer_crud import DuplicatePhoneNumberError
from crm_backend.db.models import Customer
from crm_backend.db.session import get_db
from crm_backend.schemas.common_schemas import CreatedResponse, MessageResponse
from crm_backend.schemas.customer_schemas import (
    CustomerCreate,
    CustomerDetailResponse,
    CustomerListParams,
    CustomerListResponse,
    CustomerRead,
    CustomerUpdate,
    PaginationMeta,
)

router = APIRouter()


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_new_customer(
        payload: CustomerCreate,
        db: Session = Depends(get_db),
):
    """Create a new customer."""
    try:
        db_customer = customer_crud.create_customer(db=db, customer_in=payload)
    except DuplicatePhoneNumberError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))

    return CreatedResponse(message="Customer created successfully", id=db_customer.id)


@router.get("", response_model=CustomerListResponse)
def get_all_customers(
        params: CustomerListParams = Depends(get_customer_list_params),
        db: Session = Depends(get_db),
):
    """
    List customers one page at a time.
    Supports search on name and phone number, exact city/state/pin_code
    filters on the customer's addresses, and sorting.
    """
    customers, total_items, total_pages = customer_crud.list_customers(db=db, params=params)

    return CustomerListResponse(
        message="success",
        data=[CustomerRead.model_validate(c) for c in customers],
        pagination=PaginationMeta(
            current_page=params.page,
            total_pages=total_pages,
            total_items=total_items,
            items_per_page=params.limit,
        ),
    )


@router.get("/{customer_id}", response_model=CustomerDetailResponse)
def get_customer_details(db_customer: Customer = Depends(get_customer_or_404)):
    """Get a single customer by their ID."""
    return CustomerDetailResponse(message="success", data=CustomerRead.model_validate(db_customer))


@router.put("/{customer_id}", response_model=CustomerDetailResponse)
def update_existing_customer(
        payload: CustomerUpdate,
        db_customer: Customer = Depends(get_customer_or_404),
        db: Session = Depends(get_db),
):
    """Update a customer's details."""
    try:
        db_customer = customer_crud.update_customer(db=db, db_customer=db_customer, customer_in=payload)
    except DuplicatePhoneNumberError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))

    return CustomerDetailResponse(
        message="Customer updated successfully",
        data=CustomerRead.model_validate(db_customer),
    )


@router.delete("/{customer_id}", response_model=MessageResponse)
def delete_existing_customer(
        db_customer: Customer = Depends(get_customer_or_404),
        db: Session = Depends(get_db),
):
    """Delete a customer and all of their addresses."""
    customer_crud.delete_customer(db=db, db_customer=db_customer)
    return MessageResponse(message="Customer deleted successfully")
