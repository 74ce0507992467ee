# crm_backend/schemas/common_schemas.py
from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class CreatedResponse(MessageResponse):
    id: int


class ErrorResponse(BaseModel):
    error: str
