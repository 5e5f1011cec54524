from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional

from retailpos.models.sale import PaymentMethod


class CartLineIn(BaseModel):
    """One cart line submitted for checkout."""
    product_id: int = Field(..., description="ID of the product to sell")
    quantity: int = Field(default=1, description="Quantity to sell")
    unit_price: Optional[Decimal] = Field(
        None,
        max_digits=18,
        decimal_places=2,
        description="Price snapshot taken when the line was added; current catalog price if omitted",
    )


class CheckoutRequest(BaseModel):
    """Schema for committing a cart as a sale."""
    lines: list[CartLineIn] = Field(..., description="Cart lines, in cart order")
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    customer_id: Optional[int] = Field(None, description="Registered customer, if any")
    customer_name: Optional[str] = Field(None, max_length=200, description="Walk-in customer name")


class SaleItemResponse(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class SaleResponse(BaseModel):
    """Schema for sale response including its items."""
    id: int
    sale_date: datetime
    total_amount: Decimal
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    payment_method: PaymentMethod
    items: list[SaleItemResponse]

    model_config = ConfigDict(from_attributes=True)


class SaleListResponse(BaseModel):
    """Schema for paginated sales history."""
    items: list[SaleResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
