from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from retailpos.database import get_db
from retailpos.schemas.inventory import (
    LowStockAlert,
    LowStockCount,
    ReorderQuantityUpdate,
    ReorderSuggestion,
    ThresholdUpdate,
)
from retailpos.schemas.product import ProductResponse
from retailpos.services.exceptions import ProductNotFoundError
from retailpos.services.inventory_alert_service import InventoryAlertService

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get(
    "/alerts",
    response_model=list[LowStockAlert],
    summary="Low-stock alerts",
    description="Products at or below their threshold, most severe first."
)
def low_stock_alerts(db: Session = Depends(get_db)):
    return InventoryAlertService(db).low_stock_alerts()


@router.get(
    "/alerts/count",
    response_model=LowStockCount,
    summary="Number of low-stock products"
)
def low_stock_count(db: Session = Depends(get_db)):
    return LowStockCount(count=InventoryAlertService(db).low_stock_count())


@router.get(
    "/out-of-stock",
    response_model=list[ProductResponse],
    summary="Products with no stock left"
)
def out_of_stock(db: Session = Depends(get_db)):
    return InventoryAlertService(db).out_of_stock_products()


@router.get(
    "/reorder-suggestions",
    response_model=list[ReorderSuggestion],
    summary="Reorder suggestions",
    description="One suggestion per alert with the estimated restocking cost."
)
def reorder_suggestions(db: Session = Depends(get_db)):
    return InventoryAlertService(db).reorder_suggestions()


@router.put(
    "/{product_id}/threshold",
    response_model=ProductResponse,
    summary="Set a product's low-stock threshold"
)
def update_threshold(
    product_id: int,
    data: ThresholdUpdate,
    db: Session = Depends(get_db)
):
    try:
        return InventoryAlertService(db).update_threshold(product_id, data.threshold)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.put(
    "/{product_id}/reorder-quantity",
    response_model=ProductResponse,
    summary="Set a product's reorder quantity"
)
def update_reorder_quantity(
    product_id: int,
    data: ReorderQuantityUpdate,
    db: Session = Depends(get_db)
):
    try:
        return InventoryAlertService(db).update_reorder_quantity(product_id, data.quantity)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
