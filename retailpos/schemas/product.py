from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import Optional


class ProductBase(BaseModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    sku: Optional[str] = Field(None, max_length=50, description="Stock Keeping Unit")
    price: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2, description="Product price (must be positive)")
    currency: Optional[str] = Field(None, min_length=3, max_length=10, description="Currency code, defaults to the configured currency")
    stock_quantity: int = Field(..., ge=0, description="Units on hand (must be non-negative)")
    low_stock_threshold: int = Field(5, ge=0, description="Alert when stock falls to this level")
    reorder_quantity: int = Field(20, ge=0, description="Units suggested when restocking")
    category_id: Optional[int] = Field(None, description="Owning category")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    pass


class ProductUpdate(BaseModel):
    """Schema for updating an existing product. All fields are optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=200, description="Product name")
    sku: Optional[str] = Field(None, max_length=50, description="Stock Keeping Unit")
    price: Optional[Decimal] = Field(None, gt=0, max_digits=18, decimal_places=2, description="Product price")
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    stock_quantity: Optional[int] = Field(None, ge=0, description="Units on hand")
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    reorder_quantity: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = None


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    currency: str
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    """Schema for paginated product list response."""
    items: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class CategoryCreate(BaseModel):
    """Schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class CategoryResponse(CategoryCreate):
    id: int
    
    model_config = ConfigDict(from_attributes=True)
