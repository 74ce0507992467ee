import re

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Literal

from crm_backend.schemas.common_schemas import MessageResponse

SortField = Literal["id", "first_name", "last_name", "phone_number", "created_at"]
SortOrder = Literal["ASC", "DESC"]

MAX_PAGE_SIZE = 100


class CustomerBase(BaseModel):
    first_name: str = Field(..., min_length=1, description="The customer's first name.")
    last_name: str = Field(..., min_length=1, description="The customer's last name.")
    phone_number: str = Field(..., min_length=1, description="Phone number, unique across all customers.")

    class Config:
        str_strip_whitespace = True

    @field_validator("phone_number")
    @classmethod
    def phone_number_has_ten_digits(cls, value: str) -> str:
        # Separators such as spaces or dashes are allowed, as in the UI form
        if len(re.sub(r"\D", "", value)) != 10:
            raise ValueError("phone number must contain exactly 10 digits")
        return value

# Properties to receive on customer creation
class CustomerCreate(CustomerBase):
    pass

# Updates replace every field, same body as create
class CustomerUpdate(CustomerBase):
    pass

class CustomerRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    phone_number: str
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True

class CustomerWithAddressCount(CustomerRead):
    address_count: int


class CustomerListParams(BaseModel):
    """
    Recognized query parameters of the customer listing.
    Blank filters are treated as absent, sortOrder is case-insensitive.
    """
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=MAX_PAGE_SIZE)
    search: str | None = None
    city: str | None = None
    state: str | None = None
    pin_code: str | None = None
    sort_by: SortField = Field("id", alias="sortBy")
    sort_order: SortOrder = Field("ASC", alias="sortOrder")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("search", "city", "state", "pin_code", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("sort_order", mode="before")
    @classmethod
    def normalize_sort_order(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def has_location_filter(self) -> bool:
        return any([self.city, self.state, self.pin_code])


class PaginationMeta(BaseModel):
    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_items: int = Field(..., alias="totalItems")
    items_per_page: int = Field(..., alias="itemsPerPage")

    class Config:
        populate_by_name = True


class CustomerListResponse(MessageResponse):
    data: List[CustomerRead]
    pagination: PaginationMeta


class CustomerDetailResponse(MessageResponse):
    data: CustomerRead


class CustomerViewResponse(MessageResponse):
    data: List[CustomerWithAddressCount]
