from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from retailpos.database import Base
from retailpos.models.customer import Customer


class PaymentMethod(str, enum.Enum):
    """Enum for the tender used to settle a sale."""
    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"
    CREDIT = "credit"


class Sale(Base):
    """
    Sale model representing a committed checkout.

    Sales are written once by the checkout coordinator and never updated.

    Attributes:
        id: Unique identifier for the sale
        sale_date: Local wall-clock time of the checkout
        total_amount: Sum of the item totals
        customer_id: Optional reference to the buying customer
        customer_name: Customer name as it was at checkout time
        payment_method: Tender used
        items: Line items, ordered by id
    """
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    sale_date = Column(DateTime, nullable=False, index=True)
    total_amount = Column(Numeric(18, 2), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
    customer_name = Column(String(200), nullable=True)
    payment_method = Column(Enum(PaymentMethod), default=PaymentMethod.CASH, nullable=False)

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )
    customer = relationship(Customer)

    def __repr__(self):
        return f"<Sale(id={self.id}, total={self.total_amount}, items={len(self.items)})>"


class SaleItem(Base):
    """
    Line item of a sale.

    ``product_name`` and ``unit_price`` are snapshots taken at checkout and
    do not follow later catalog changes.
    """
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(Integer, ForeignKey("sales.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    product_name = Column(String(200), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(18, 2), nullable=False)
    total_price = Column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        CheckConstraint('quantity > 0', name='check_quantity_positive'),
    )

    sale = relationship("Sale", back_populates="items")

    def __repr__(self):
        return f"<SaleItem(product_id={self.product_id}, quantity={self.quantity})>"
