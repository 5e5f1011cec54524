from sqlalchemy.orm import Session, selectinload
from datetime import date, datetime, time, timedelta
from typing import Optional, List, Tuple
import math

from retailpos.models.sale import Sale
from retailpos.services.exceptions import SaleNotFoundError


class SaleService:
    """
    Access layer for the sales ledger.

    The ledger is append-only: sales are added inside the checkout
    transaction and never updated or deleted afterwards.
    """

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Sale).options(
            selectinload(Sale.items),
            selectinload(Sale.customer),
        )

    def append_sale(self, sale: Sale) -> Sale:
        """
        Add a sale and its items to the current transaction.

        The caller owns the transaction and decides when to commit.
        """
        self.db.add(sale)
        self.db.flush()
        return sale

    def get_sale(self, sale_id: int) -> Optional[Sale]:
        """Get a sale by ID with its items and customer."""
        return self._query().filter(Sale.id == sale_id).first()

    def get_or_raise(self, sale_id: int) -> Sale:
        sale = self.get_sale(sale_id)
        if sale is None:
            raise SaleNotFoundError(f"Sale with ID {sale_id} not found")
        return sale

    def list_sales(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Sale]:
        """
        Sales with ``start <= sale_date < end``, oldest first.

        Either bound may be omitted. Ties on ``sale_date`` are ordered by id,
        so the same ledger always yields the same sequence.
        """
        query = self._query()
        if start is not None:
            query = query.filter(Sale.sale_date >= start)
        if end is not None:
            query = query.filter(Sale.sale_date < end)
        return query.order_by(Sale.sale_date, Sale.id).all()

    def list_customer_sales(self, customer_id: int) -> List[Sale]:
        """Every sale of one customer, newest first."""
        return (
            self._query()
            .filter(Sale.customer_id == customer_id)
            .order_by(Sale.sale_date.desc(), Sale.id.desc())
            .all()
        )

    def get_sales_page(
        self,
        page: int = 1,
        page_size: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Tuple[List[Sale], int, int]:
        """
        Get paginated sales history, newest first.

        Args:
            page: Page number
            page_size: Items per page
            start_date: First calendar day to include
            end_date: Last calendar day to include

        Returns:
            Tuple of (sales list, total count, total pages)
        """
        query = self.db.query(Sale)

        if start_date is not None:
            query = query.filter(Sale.sale_date >= datetime.combine(start_date, time.min))
        if end_date is not None:
            query = query.filter(Sale.sale_date < datetime.combine(end_date + timedelta(days=1), time.min))

        total = query.count()
        total_pages = math.ceil(total / page_size) if total > 0 else 1

        offset = (page - 1) * page_size
        sales = (
            query.options(selectinload(Sale.items))
            .order_by(Sale.sale_date.desc(), Sale.id.desc())
            .offset(offset)
            .limit(page_size)
            .all()
        )

        return sales, total, total_pages
