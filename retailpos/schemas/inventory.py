from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional
import enum


class AlertSeverity(str, enum.Enum):
    """Enum for how urgently a product needs restocking, most urgent first."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = [
    AlertSeverity.CRITICAL,
    AlertSeverity.HIGH,
    AlertSeverity.MEDIUM,
    AlertSeverity.LOW,
]


class LowStockAlert(BaseModel):
    product_id: int
    product_name: str
    sku: Optional[str] = None
    current_stock: int
    threshold: int
    reorder_quantity: int
    severity: AlertSeverity


class ReorderSuggestion(BaseModel):
    product_id: int
    product_name: str
    sku: str
    current_stock: int
    suggested_order_quantity: int
    estimated_cost: Decimal
    priority: AlertSeverity


class LowStockCount(BaseModel):
    count: int


class ThresholdUpdate(BaseModel):
    threshold: int = Field(..., ge=0, description="New low-stock threshold")


class ReorderQuantityUpdate(BaseModel):
    quantity: int = Field(..., ge=0, description="New reorder quantity")
