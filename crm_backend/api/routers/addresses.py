# crm_backend/api/routers/addresses.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crm_backend.crud import address_crud, customer_crud
from crm_backend.db.session import get_db
from crm_backend.schemas.address_schemas import (
    AddressCreate,
    AddressDetailResponse,
    AddressListResponse,
    AddressRead,
    AddressUpdate,
)
from crm_backend.schemas.common_schemas import CreatedResponse, MessageResponse

router = APIRouter()


@router.post(
    "/customers/{customer_id}/addresses",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_customer_address(
        customer_id: int,
        payload: AddressCreate,
        db: Session = Depends(get_db),
):
    """Add an address to an existing customer."""
    if not customer_crud.customer_exists(db, customer_id=customer_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Customer not found")

    db_address = address_crud.create_address(db=db, address_in=payload, customer_id=customer_id)
    return CreatedResponse(message="Address added successfully", id=db_address.id)


@router.get("/customers/{customer_id}/addresses", response_model=AddressListResponse)
def get_customer_addresses(customer_id: int, db: Session = Depends(get_db)):
    """List a customer's addresses. Unknown customers simply have none."""
    addresses = address_crud.get_addresses_by_customer(db, customer_id=customer_id)
    return AddressListResponse(
        message="success",
        data=[AddressRead.model_validate(a) for a in addresses],
    )


@router.put("/addresses/{address_id}", response_model=AddressDetailResponse)
def update_existing_address(
        address_id: int,
        payload: AddressUpdate,
        db: Session = Depends(get_db),
):
    """Update an address."""
    db_address = address_crud.get_address_by_id(db, address_id=address_id)
    if db_address is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Address not found")

    db_address = address_crud.update_address(db=db, db_address=db_address, address_in=payload)
    return AddressDetailResponse(
        message="Address updated successfully",
        data=AddressRead.model_validate(db_address),
    )


@router.delete("/addresses/{address_id}", response_model=MessageResponse)
def delete_existing_address(address_id: int, db: Session = Depends(get_db)):
    """Delete an address."""
    db_address = address_crud.get_address_by_id(db, address_id=address_id)
    if db_address is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Address not found")

    address_crud.delete_address(db=db, db_address=db_address)
    return MessageResponse(message="Address deleted successfully")
