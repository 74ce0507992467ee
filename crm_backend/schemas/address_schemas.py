import re

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List

from crm_backend.schemas.common_schemas import MessageResponse

class AddressBase(BaseModel):
    address_details: str = Field(..., min_length=1, description="Street, building, landmark.")
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    pin_code: str = Field(..., min_length=1, description="Postal code of the address.")

    class Config:
        str_strip_whitespace = True

    @field_validator("pin_code")
    @classmethod
    def pin_code_has_six_digits(cls, value: str) -> str:
        if len(re.sub(r"\D", "", value)) != 6:
            raise ValueError("pin code must contain exactly 6 digits")
        return value

# Properties to receive on address creation
class AddressCreate(AddressBase):
    pass

# Properties to receive on address update
class AddressUpdate(AddressBase):
    pass

# Properties to return to the client
class AddressRead(AddressBase):
    id: int
    customer_id: int
    created_at: datetime | None
    updated_at: datetime | None

    class Config:
        from_attributes = True


class AddressDetailResponse(MessageResponse):
    data: AddressRead


class AddressListResponse(MessageResponse):
    data: List[AddressRead]
