from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Tuple, Union
import logging

from retailpos.config import get_settings
from retailpos.models.sale import Sale
from retailpos.schemas.report import (
    CustomerPurchaseHistoryReport,
    DailySalesReport,
    DaySummary,
    MonthlySalesReport,
    PurchaseSummary,
    SalesRangeReport,
    TopCustomer,
    TopProduct,
    WeeklySalesReport,
    WeekSummary,
)
from retailpos.schemas.sale import SaleResponse
from retailpos.services.customer_service import CustomerService
from retailpos.services.exceptions import ValidationError
from retailpos.services.sale_service import SaleService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

DAILY_TOP_PRODUCTS = 5
WEEKLY_TOP_PRODUCTS = 10
MONTHLY_TOP_PRODUCTS = 15
MONTHLY_TOP_CUSTOMERS = 10
RANGE_TOP_PRODUCTS = 10

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time.min)


def money(value) -> Decimal:
    """Quantize an amount to cents."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def total_revenue(sales: Iterable[Sale]) -> Decimal:
    return money(sum((sale.total_amount for sale in sales), ZERO))


def average_order_value(sales: List[Sale]) -> Decimal:
    if not sales:
        return ZERO
    return money(sum((sale.total_amount for sale in sales), ZERO) / len(sales))


def items_sold(sales: Iterable[Sale]) -> int:
    return sum(item.quantity for sale in sales for item in sale.items)


def top_products(sales: Iterable[Sale], limit: int) -> List[TopProduct]:
    """
    Rank products by units sold.

    Items are grouped by product id and the name snapshot, so a product
    renamed between sales appears once per name. Ties on quantity are
    broken by ascending product id, then name.
    """
    groups: Dict[Tuple[int, str], List] = {}
    for sale in sales:
        for item in sale.items:
            key = (item.product_id, item.product_name)
            entry = groups.setdefault(key, [0, ZERO])
            entry[0] += item.quantity
            entry[1] += item.quantity * item.unit_price

    ranked = sorted(groups.items(), key=lambda kv: (-kv[1][0], kv[0][0], kv[0][1]))
    return [
        TopProduct(
            product_id=product_id,
            product_name=product_name,
            quantity_sold=quantity,
            total_revenue=money(revenue),
        )
        for (product_id, product_name), (quantity, revenue) in ranked[:limit]
    ]


def hourly_sales(sales: Iterable[Sale]) -> Dict[int, Decimal]:
    """
    Revenue per hour of day, 24 buckets.

    Each sale's whole total lands in the hour it was rung up.
    """
    buckets = {hour: ZERO for hour in range(24)}
    for sale in sales:
        buckets[sale.sale_date.hour] += sale.total_amount
    return {hour: money(amount) for hour, amount in buckets.items()}


class ReportService:
    """
    Read-only sales analytics over the ledger.

    Every report loads one snapshot of the matching sales and aggregates it
    in memory. Reports never fail on an empty period; they return zeroed
    figures and empty rankings instead.
    """

    def __init__(self, db: Session):
        self.db = db
        self.sales = SaleService(db)
        self.customers = CustomerService(db)

    def daily_summary(self, day: DateLike) -> DailySalesReport:
        """Sales summary for one calendar day."""
        day = _as_date(day)
        sales = self.sales.list_sales(_midnight(day), _midnight(day + timedelta(days=1)))

        return DailySalesReport(
            report_date=day,
            total_sales=len(sales),
            total_revenue=total_revenue(sales),
            average_order_value=average_order_value(sales),
            items_sold=items_sold(sales),
            top_selling_products=top_products(sales, DAILY_TOP_PRODUCTS),
            hourly_sales=hourly_sales(sales),
        )

    def weekly_summary(self, week_start: DateLike) -> WeeklySalesReport:
        """
        Sales summary for the 7 days starting at ``week_start``.

        The week is anchored wherever the caller puts it; it need not
        start on a Monday.
        """
        week_start = _as_date(week_start)
        week_end = week_start + timedelta(days=7)
        sales = self.sales.list_sales(_midnight(week_start), _midnight(week_end))

        by_day: Dict[date, List[Sale]] = {}
        for sale in sales:
            by_day.setdefault(sale.sale_date.date(), []).append(sale)

        daily_breakdown = []
        for offset in range(7):
            day = week_start + timedelta(days=offset)
            day_sales = by_day.get(day, [])
            daily_breakdown.append(
                DaySummary(
                    day=day,
                    day_name=day.strftime("%A"),
                    sales_count=len(day_sales),
                    revenue=total_revenue(day_sales),
                )
            )

        return WeeklySalesReport(
            week_start=week_start,
            week_end=week_end - timedelta(days=1),
            total_sales=len(sales),
            total_revenue=total_revenue(sales),
            average_order_value=average_order_value(sales),
            daily_breakdown=daily_breakdown,
            top_selling_products=top_products(sales, WEEKLY_TOP_PRODUCTS),
        )

    def monthly_summary(self, month: int, year: int) -> MonthlySalesReport:
        """
        Sales summary for one calendar month.

        The weekly breakdown walks 7-day windows from the 1st; the last
        window stops at the end of the month and may be shorter.
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {month}")

        month_start = date(year, month, 1)
        month_end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        sales = self.sales.list_sales(_midnight(month_start), _midnight(month_end))

        weekly_breakdown = []
        window_start = month_start
        week_number = 1
        while window_start < month_end:
            window_end = min(window_start + timedelta(days=7), month_end)
            window_sales = [s for s in sales if window_start <= s.sale_date.date() < window_end]
            weekly_breakdown.append(
                WeekSummary(
                    week_number=week_number,
                    start_date=window_start,
                    end_date=window_end - timedelta(days=1),
                    sales_count=len(window_sales),
                    revenue=total_revenue(window_sales),
                )
            )
            week_number += 1
            window_start = window_end

        return MonthlySalesReport(
            month=month,
            year=year,
            month_name=month_start.strftime("%B"),
            total_sales=len(sales),
            total_revenue=total_revenue(sales),
            average_order_value=average_order_value(sales),
            weekly_breakdown=weekly_breakdown,
            top_selling_products=top_products(sales, MONTHLY_TOP_PRODUCTS),
            top_customers=self._top_customers(sales, MONTHLY_TOP_CUSTOMERS),
        )

    def range_summary(self, start: DateLike, end: DateLike) -> SalesRangeReport:
        """
        Sales summary for the calendar days ``start`` through ``end``, both included.
        """
        start, end = _as_date(start), _as_date(end)
        sales = self._sales_between(start, end)

        recent = sorted(sales, key=lambda s: (s.sale_date, s.id), reverse=True)
        recent = recent[:get_settings().RECENT_SALES_LIMIT]

        return SalesRangeReport(
            start_date=start,
            end_date=end,
            total_sales=len(sales),
            total_revenue=total_revenue(sales),
            average_order_value=average_order_value(sales),
            total_items_sold=items_sold(sales),
            unique_customers=len({s.customer_id for s in sales if s.customer_id is not None}),
            top_products=top_products(sales, RANGE_TOP_PRODUCTS),
            sales=[SaleResponse.model_validate(s) for s in recent],
        )

    def top_selling_products(self, start: DateLike, end: DateLike, limit: int = 10) -> List[TopProduct]:
        """Best sellers for the calendar days ``start`` through ``end``."""
        return top_products(self._sales_between(_as_date(start), _as_date(end)), limit)

    def customer_purchase_history(self, customer_id: int) -> CustomerPurchaseHistoryReport:
        """
        Purchase history of one customer, newest sale first.

        Raises:
            CustomerNotFoundError: If the customer doesn't exist
        """
        customer = self.customers.get_or_raise(customer_id)
        sales = self.sales.list_customer_sales(customer_id)

        return CustomerPurchaseHistoryReport(
            customer_id=customer.id,
            customer_name=customer.name,
            total_purchases=len(sales),
            total_spent=total_revenue(sales),
            average_order_value=average_order_value(sales),
            first_purchase=sales[-1].sale_date if sales else None,
            last_purchase=sales[0].sale_date if sales else None,
            purchases=[
                PurchaseSummary(
                    sale_id=s.id,
                    sale_date=s.sale_date,
                    total_amount=money(s.total_amount),
                    item_count=sum(item.quantity for item in s.items),
                )
                for s in sales
            ],
        )

    def _sales_between(self, start: date, end: date) -> List[Sale]:
        return self.sales.list_sales(_midnight(start), _midnight(end + timedelta(days=1)))

    def _top_customers(self, sales: Iterable[Sale], limit: int) -> List[TopCustomer]:
        """Rank registered customers by spend; ties go to the lower customer id."""
        groups: Dict[int, List] = {}
        for sale in sales:
            if sale.customer_id is None:
                continue
            entry = groups.setdefault(sale.customer_id, [ZERO, 0])
            entry[0] += sale.total_amount
            entry[1] += 1

        ranked = sorted(groups.items(), key=lambda kv: (-kv[1][0], kv[0]))

        result = []
        for customer_id, (spent, order_count) in ranked[:limit]:
            customer = self.customers.get_by_id(customer_id)
            result.append(
                TopCustomer(
                    customer_id=customer_id,
                    customer_name=customer.name if customer else "Unknown",
                    total_spent=money(spent),
                    order_count=order_count,
                )
            )
        return result
