from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional


class CustomerBase(BaseModel):
    """Base schema for Customer with common attributes."""
    name: str = Field(..., min_length=1, max_length=200, description="Customer name")
    email: Optional[str] = Field(None, max_length=200, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)


class CustomerCreate(CustomerBase):
    """Schema for registering a customer."""
    pass


class CustomerUpdate(BaseModel):
    """Schema for updating a customer. All fields are optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, max_length=200, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=500)


class CustomerResponse(CustomerBase):
    id: int
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class CustomerListResponse(BaseModel):
    items: list[CustomerResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
