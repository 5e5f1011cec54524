from sqlalchemy.orm import Session
from typing import List, Optional

from retailpos.models.category import Category
from retailpos.models.product import Product
from retailpos.schemas.product import CategoryCreate
from retailpos.services.exceptions import CategoryNotFoundError, ProductInUseError, ValidationError


class CategoryService:
    """Service class for Category operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, category_data: CategoryCreate) -> Category:
        existing = self.db.query(Category).filter(Category.name == category_data.name).first()
        if existing:
            raise ValidationError(f"Category '{category_data.name}' already exists")

        category = Category(name=category_data.name, description=category_data.description)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self.db.get(Category, category_id)

    def get_all(self) -> List[Category]:
        return self.db.query(Category).order_by(Category.name).all()

    def delete(self, category_id: int) -> None:
        """
        Delete a category that no product points at.

        Raises:
            CategoryNotFoundError: If the category doesn't exist
            ProductInUseError: If products still belong to the category
        """
        category = self.db.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundError(f"Category with ID {category_id} not found")

        in_use = self.db.query(Product.id).filter(Product.category_id == category_id).first()
        if in_use:
            raise ProductInUseError(f"Category with ID {category_id} still has products")

        self.db.delete(category)
        self.db.commit()
