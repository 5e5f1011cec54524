from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func

from retailpos.database import Base


class Product(Base):
    """
    Product model representing an item in the live catalog.
    
    Attributes:
        id: Unique identifier for the product
        name: Product name
        sku: Stock Keeping Unit (unique by convention, not enforced)
        price: Current selling price (must be positive)
        currency: ISO currency code of the price
        stock_quantity: Units on hand (must be non-negative)
        low_stock_threshold: Stock level at or below which the product raises an alert
        reorder_quantity: Units suggested when restocking
        category_id: Reference to the owning category (nullable)
        version_id: Row version used for optimistic concurrency
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
    """
    __tablename__ = "products"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    sku = Column(String(50), nullable=True, index=True)
    price = Column(Numeric(18, 2), nullable=False)
    currency = Column(String(10), nullable=False, default="USD")
    stock_quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=5)
    reorder_quantity = Column(Integer, nullable=False, default=20)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    version_id = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price > 0', name='check_price_positive'),
        CheckConstraint('stock_quantity >= 0', name='check_stock_non_negative'),
    )
    
    # Concurrent stock updates from a stale read fail with StaleDataError
    __mapper_args__ = {"version_id_col": version_id}
    
    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold
    
    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock_quantity})>"
