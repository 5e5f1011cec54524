from sqlalchemy.orm import Session
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
import logging

from retailpos.models.product import Product
from retailpos.schemas.inventory import AlertSeverity, LowStockAlert, ReorderSuggestion
from retailpos.services.exceptions import ValidationError
from retailpos.services.product_service import ProductService

logger = logging.getLogger(__name__)


def classify_severity(current_stock: int, threshold: int) -> AlertSeverity:
    """
    Classify how urgently a product needs restocking.

    Rules are checked in order: empty is critical, at or below half the
    threshold (floored) is high, at or below the threshold is medium.
    LOW is returned only for stock above the threshold, which never
    becomes an alert.
    """
    if current_stock == 0:
        return AlertSeverity.CRITICAL
    if current_stock <= threshold // 2:
        return AlertSeverity.HIGH
    if current_stock <= threshold:
        return AlertSeverity.MEDIUM
    return AlertSeverity.LOW


class InventoryAlertService:
    """Read-only stock monitoring over the catalog, plus alert settings updates."""

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductService(db)

    def _low_stock_query(self):
        return self.db.query(Product).filter(Product.stock_quantity <= Product.low_stock_threshold)

    def low_stock_alerts(self, product_ids: Optional[Iterable[int]] = None) -> List[LowStockAlert]:
        """
        One alert per product at or below its low-stock threshold.

        Ordered by severity (critical first), then current stock ascending,
        then product id.

        Args:
            product_ids: Restrict the scan to these products
        """
        query = self._low_stock_query()
        if product_ids is not None:
            query = query.filter(Product.id.in_(list(product_ids)))

        alerts = [
            LowStockAlert(
                product_id=p.id,
                product_name=p.name,
                sku=p.sku,
                current_stock=p.stock_quantity,
                threshold=p.low_stock_threshold,
                reorder_quantity=p.reorder_quantity,
                severity=classify_severity(p.stock_quantity, p.low_stock_threshold),
            )
            for p in query.all()
        ]
        alerts.sort(key=lambda a: (a.severity.rank, a.current_stock, a.product_id))
        return alerts

    def low_stock_count(self) -> int:
        return self._low_stock_query().count()

    def out_of_stock_products(self) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.stock_quantity == 0)
            .order_by(Product.id)
            .all()
        )

    def reorder_suggestions(self) -> List[ReorderSuggestion]:
        """Restock suggestions derived from the current alerts, in alert order."""
        prices = {}
        alerts = self.low_stock_alerts()
        if alerts:
            rows = (
                self.db.query(Product.id, Product.price)
                .filter(Product.id.in_([a.product_id for a in alerts]))
                .all()
            )
            prices = {product_id: price for product_id, price in rows}

        return [
            ReorderSuggestion(
                product_id=a.product_id,
                product_name=a.product_name,
                sku=a.sku or "",
                current_stock=a.current_stock,
                suggested_order_quantity=a.reorder_quantity,
                estimated_cost=(Decimal(prices[a.product_id]) * a.reorder_quantity).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_UP
                ),
                priority=a.severity,
            )
            for a in alerts
        ]

    def update_threshold(self, product_id: int, threshold: int) -> Product:
        """
        Raises:
            ProductNotFoundError: If the product doesn't exist
            ValidationError: If the threshold is negative
        """
        if threshold < 0:
            raise ValidationError("Low-stock threshold cannot be negative")
        product = self.products.get_or_raise(product_id)
        product.low_stock_threshold = threshold
        self.db.commit()
        self.db.refresh(product)
        self.products.invalidate_cache(product_id)
        return product

    def update_reorder_quantity(self, product_id: int, quantity: int) -> Product:
        if quantity < 0:
            raise ValidationError("Reorder quantity cannot be negative")
        product = self.products.get_or_raise(product_id)
        product.reorder_quantity = quantity
        self.db.commit()
        self.db.refresh(product)
        self.products.invalidate_cache(product_id)
        return product
