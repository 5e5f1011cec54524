from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from retailpos.database import Base


class Customer(Base):
    """
    Customer record. A customer may exist without any sales.
    
    Attributes:
        id: Unique identifier for the customer
        name: Full name
        email: Optional email address
        phone: Optional phone number
        address: Optional postal address
        created_at: Timestamp when the customer was registered
    """
    __tablename__ = "customers"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(200), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"
