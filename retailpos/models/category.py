from sqlalchemy import Column, Integer, String

from retailpos.database import Base


class Category(Base):
    """
    Category grouping catalog products.
    
    Products point at their category through ``Product.category_id``;
    the category does not own them.
    """
    __tablename__ = "categories"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(500), nullable=True)
    
    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
