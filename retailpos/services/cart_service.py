"""
In-memory cart for one POS session.

The cart is never persisted. Checkout turns its lines into sale items;
clearing the cart afterwards is up to the caller.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional
import enum
import logging

from retailpos.services.exceptions import ValidationError

logger = logging.getLogger(__name__)


class CartAction(str, enum.Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    CLEARED = "cleared"


@dataclass
class CartLine:
    product_id: int
    product_name: str
    unit_price: Optional[Decimal]
    quantity: int = 1

    @property
    def total_price(self) -> Decimal:
        return (self.unit_price or Decimal("0")) * self.quantity


@dataclass(frozen=True)
class CartEvent:
    """Published to subscribers after every cart mutation."""
    action: CartAction
    line: Optional[CartLine]
    subtotal: Decimal


CartListener = Callable[[CartEvent], None]


class Cart:
    """
    Ordered collection of cart lines with a change-notification channel.

    Listeners registered with ``subscribe`` are called synchronously, in
    registration order, on the thread that mutated the cart.
    """

    def __init__(self):
        self._lines: List[CartLine] = []
        self._listeners: List[CartListener] = []

    @property
    def lines(self) -> tuple:
        return tuple(self._lines)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.total_price for line in self._lines), Decimal("0.00"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, product, quantity: int = 1) -> CartLine:
        """
        Add ``quantity`` units of ``product`` to the cart.

        A product already in the cart keeps its line and the price snapshot
        taken when it was first added; only the quantity grows.
        """
        if quantity <= 0:
            raise ValidationError("The quantity must be a positive number")

        line = self._find(product.id)
        if line is not None:
            line.quantity += quantity
            self._publish(CartAction.UPDATED, line)
            return line

        line = CartLine(
            product_id=product.id,
            product_name=product.name,
            unit_price=Decimal(str(product.price)),
            quantity=quantity,
        )
        self._lines.append(line)
        self._publish(CartAction.ADDED, line)
        return line

    def set_quantity(self, product_id: int, quantity: int) -> CartLine:
        if quantity <= 0:
            raise ValidationError("The quantity must be a positive number")

        line = self._find(product_id)
        if line is None:
            raise ValidationError(f"Product {product_id} is not in the cart")

        line.quantity = quantity
        self._publish(CartAction.UPDATED, line)
        return line

    def remove(self, product_id: int) -> None:
        line = self._find(product_id)
        if line is None:
            return
        self._lines.remove(line)
        self._publish(CartAction.REMOVED, line)

    def clear(self) -> None:
        self._lines.clear()
        self._publish(CartAction.CLEARED, None)

    def _find(self, product_id: int) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def _publish(self, action: CartAction, line: Optional[CartLine]) -> None:
        event = CartEvent(action=action, line=line, subtotal=self.subtotal)
        for listener in list(self._listeners):
            listener(event)
