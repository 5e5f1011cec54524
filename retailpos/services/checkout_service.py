from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, List, Optional, Sequence
import logging

from retailpos.config import get_settings
from retailpos.models.customer import Customer
from retailpos.models.product import Product
from retailpos.models.sale import PaymentMethod, Sale, SaleItem
from retailpos.services.concurrency import lock_for_update, run_with_retry
from retailpos.services.exceptions import (
    ConsistencyError,
    CustomerNotFoundError,
    InsufficientStockError,
    NotFoundError,
    PersistenceError,
    ProductNotFoundError,
    ValidationError,
)
from retailpos.services.product_service import ProductService
from retailpos.services.sale_service import SaleService
from retailpos.utils.cache import cache_service

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class CheckoutService:
    """
    Turns a cart into a persisted sale and decrements catalog stock.

    CONSISTENCY STRATEGY:
    =====================
    The sale insert and every stock decrement run in one database
    transaction. Any failure rolls the whole transaction back, so either
    the sale and all stock changes are stored, or neither is.

    Concurrent checkouts touching the same product are serialised by:

    1. SELECT ... FOR UPDATE on the affected product rows, taken in
       ascending id order so two checkouts cannot deadlock each other
    2. The product version counter: a stale UPDATE raises StaleDataError
       (this is what protects SQLite, which ignores FOR UPDATE)
    3. Retrying the whole attempt on lock timeouts and version conflicts

    Stock floor: a checkout asking for more units than are on hand is
    rejected with InsufficientStockError. Stock never goes negative.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = None):
        self.db = db
        self.clock = clock or datetime.now
        self.sales = SaleService(db)

    def commit(
        self,
        lines: Sequence,
        payment_method: PaymentMethod = PaymentMethod.CASH,
        customer_id: Optional[int] = None,
        customer_name: Optional[str] = None,
    ) -> Sale:
        """
        Commit cart lines as a single sale.

        Args:
            lines: Cart lines in cart order; each has ``product_id``,
                ``quantity`` and an optional ``unit_price`` snapshot
            payment_method: Tender used for the sale
            customer_id: Registered customer, if any
            customer_name: Name recorded for walk-in customers

        Returns:
            The committed sale with its items

        Raises:
            ValidationError: Empty cart, non-positive quantity or price
            ProductNotFoundError / CustomerNotFoundError: Missing references
            InsufficientStockError: Not enough stock for a product
            PersistenceError: The storage engine failed
        """
        lines = list(lines or [])
        method = self._validate(lines, payment_method)
        settings = get_settings()

        try:
            sale = run_with_retry(
                self.db,
                lambda: self._commit_once(lines, method, customer_id, customer_name),
                attempts=settings.CHECKOUT_RETRY_ATTEMPTS,
                backoff_base=settings.CHECKOUT_RETRY_BACKOFF,
            )
        except (NotFoundError, ConsistencyError) as e:
            self.db.rollback()
            logger.warning(f"Checkout rejected: {e}")
            raise
        except IntegrityError as e:
            # Check constraints caught a stock or quantity violation
            self.db.rollback()
            logger.error(f"Integrity error during checkout: {e}")
            raise InsufficientStockError("Stock constraint violated - concurrent modification detected") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Storage failure during checkout: {e}")
            raise PersistenceError(f"Checkout could not be saved: {e}") from e
        except Exception:
            self.db.rollback()
            raise

        cache_service.delete_many(ProductService.CACHE_PREFIX, sorted({line.product_id for line in lines}))
        logger.info(f"Sale #{sale.id} committed: {len(lines)} line(s), total {sale.total_amount}")

        return sale

    def _validate(self, lines: List, payment_method) -> PaymentMethod:
        if not lines:
            raise ValidationError("Cannot check out an empty cart")

        for line in lines:
            if line.quantity is None or line.quantity <= 0:
                raise ValidationError(
                    f"Quantity for product {line.product_id} must be positive, got {line.quantity}"
                )
            if line.unit_price is not None and Decimal(str(line.unit_price)) <= 0:
                raise ValidationError(
                    f"Unit price for product {line.product_id} must be positive, got {line.unit_price}"
                )

        try:
            return PaymentMethod(payment_method)
        except ValueError:
            raise ValidationError(f"Unknown payment method: {payment_method}")

    def _commit_once(
        self,
        lines: List,
        payment_method: PaymentMethod,
        customer_id: Optional[int],
        customer_name: Optional[str],
    ) -> Sale:
        customer = None
        if customer_id is not None:
            customer = self.db.get(Customer, customer_id)
            if customer is None:
                raise CustomerNotFoundError(f"Customer with ID {customer_id} not found")

        # Summed quantity per distinct product, in first-seen order
        requested: Dict[int, int] = {}
        for line in lines:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        products = lock_for_update(
            self.db.query(Product)
            .filter(Product.id.in_(list(requested)))
            .order_by(Product.id)
        ).all()
        by_id = {product.id: product for product in products}

        for product_id in requested:
            if product_id not in by_id:
                raise ProductNotFoundError(f"Product with ID {product_id} not found")

        for product_id, quantity in requested.items():
            product = by_id[product_id]
            if product.stock_quantity < quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for product #{product_id}. "
                    f"Available: {product.stock_quantity}, Requested: {quantity}"
                )

        items = []
        for line in lines:
            product = by_id[line.product_id]
            unit_price = Decimal(str(line.unit_price if line.unit_price is not None else product.price))
            unit_price = unit_price.quantize(CENT, rounding=ROUND_HALF_UP)
            items.append(
                SaleItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    total_price=unit_price * line.quantity,
                )
            )

        sale = Sale(
            sale_date=self.clock(),
            total_amount=sum((item.total_price for item in items), Decimal("0.00")),
            customer_id=customer.id if customer else None,
            customer_name=customer.name if customer else customer_name,
            payment_method=payment_method,
            items=items,
        )
        self.sales.append_sale(sale)

        for product_id, quantity in requested.items():
            by_id[product_id].stock_quantity -= quantity

        self.db.flush()
        self.db.commit()

        return sale
