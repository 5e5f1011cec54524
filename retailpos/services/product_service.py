from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional, List
import math
import logging

from retailpos.config import get_settings
from retailpos.models.category import Category
from retailpos.models.product import Product
from retailpos.models.sale import SaleItem
from retailpos.schemas.product import ProductCreate, ProductUpdate
from retailpos.services.exceptions import (
    CategoryNotFoundError,
    ProductInUseError,
    ProductNotFoundError,
)
from retailpos.utils.cache import cache_service

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for the catalog store.

    This service handles:
    - Creating new products
    - Reading products (with caching)
    - Updating products
    - Deleting products that no sale references
    - Cache invalidation
    """

    CACHE_PREFIX = "product"

    def __init__(self, db: Session):
        self.db = db

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            product_data: Product creation data

        Returns:
            Created product instance

        Raises:
            CategoryNotFoundError: If the category doesn't exist
        """
        if product_data.category_id is not None:
            self._ensure_category(product_data.category_id)

        product = Product(
            name=product_data.name,
            sku=product_data.sku,
            price=product_data.price,
            currency=product_data.currency or get_settings().DEFAULT_CURRENCY,
            stock_quantity=product_data.stock_quantity,
            low_stock_threshold=product_data.low_stock_threshold,
            reorder_quantity=product_data.reorder_quantity,
            category_id=product_data.category_id,
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info(f"Product #{product.id} '{product.name}' created")
        return product

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """
        Get a product by ID and refresh its cache entry.

        Args:
            product_id: Product ID to look up

        Returns:
            Product instance or None if not found
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()

        if product:
            self._cache_product(product)

        return product

    def get_or_raise(self, product_id: int) -> Product:
        """Get a product by ID, raising ProductNotFoundError if it is absent."""
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        return product

    def get_by_id_cached(self, product_id: int) -> Optional[dict]:
        """
        Get product details from cache or database.
        Returns a dictionary (suitable for API response).
        """
        cached = cache_service.get(self.CACHE_PREFIX, str(product_id))
        if cached:
            return cached

        product = self.db.query(Product).filter(Product.id == product_id).first()

        if product:
            return self._cache_product(product)

        return None

    def get_all(
        self,
        page: int = 1,
        page_size: int = 10,
        search: str = None,
        category_id: int = None,
    ) -> tuple[List[Product], int, int]:
        """
        Get paginated list of products.

        Args:
            page: Page number (1-indexed)
            page_size: Number of items per page
            search: Optional search term matched against name and SKU
            category_id: Optional category filter

        Returns:
            Tuple of (products list, total count, total pages)
        """
        query = self.db.query(Product)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.sku.ilike(pattern)))
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)

        total = query.count()
        total_pages = math.ceil(total / page_size) if total > 0 else 1

        offset = (page - 1) * page_size
        products = query.order_by(Product.id.desc()).offset(offset).limit(page_size).all()

        return products, total, total_pages

    def update(self, product_id: int, product_data: ProductUpdate) -> Optional[Product]:
        """
        Update an existing product.

        Args:
            product_id: ID of product to update
            product_data: Update data (only non-None fields are updated)

        Returns:
            Updated product or None if not found
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()

        if not product:
            return None

        update_data = product_data.model_dump(exclude_unset=True)
        if update_data.get("category_id") is not None:
            self._ensure_category(update_data["category_id"])
        for field, value in update_data.items():
            if value is not None:
                setattr(product, field, value)

        self.db.commit()
        self.db.refresh(product)

        self.invalidate_cache(product_id)

        return product

    def delete(self, product_id: int) -> bool:
        """
        Delete a product.

        Args:
            product_id: ID of product to delete

        Returns:
            True if deleted, False if not found

        Raises:
            ProductInUseError: If a sale item references the product
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()

        if not product:
            return False

        referenced = (
            self.db.query(SaleItem.id)
            .filter(SaleItem.product_id == product_id)
            .first()
        )
        if referenced:
            raise ProductInUseError(f"Product with ID {product_id} is referenced by recorded sales")

        self.db.delete(product)
        self.db.commit()

        self.invalidate_cache(product_id)

        return True

    def _ensure_category(self, category_id: int) -> None:
        if self.db.get(Category, category_id) is None:
            raise CategoryNotFoundError(f"Category with ID {category_id} not found")

    def _cache_product(self, product: Product) -> dict:
        """Cache a product instance."""
        product_dict = {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "price": str(product.price),
            "currency": product.currency,
            "stock_quantity": product.stock_quantity,
            "low_stock_threshold": product.low_stock_threshold,
            "reorder_quantity": product.reorder_quantity,
            "category_id": product.category_id,
            "created_at": str(product.created_at),
            "updated_at": str(product.updated_at),
        }
        cache_service.set(self.CACHE_PREFIX, str(product.id), product_dict)
        return product_dict

    def invalidate_cache(self, product_id: int) -> None:
        """Invalidate cache for a product."""
        cache_service.delete(self.CACHE_PREFIX, str(product_id))
