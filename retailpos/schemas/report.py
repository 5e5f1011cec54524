"""
Report records returned by the analytics engine.

Reports carry raw figures only; amounts are ``Decimal`` values quantized
to cents and no field holds presentation text beyond day and month names.
"""
from pydantic import BaseModel
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from retailpos.schemas.sale import SaleResponse


class TopProduct(BaseModel):
    product_id: int
    product_name: str
    quantity_sold: int
    total_revenue: Decimal


class TopCustomer(BaseModel):
    customer_id: int
    customer_name: str
    total_spent: Decimal
    order_count: int


class DaySummary(BaseModel):
    """One day of a weekly breakdown."""
    day: date
    day_name: str
    sales_count: int
    revenue: Decimal


class WeekSummary(BaseModel):
    """One 7-day window of a monthly breakdown; the last one may be shorter."""
    week_number: int
    start_date: date
    end_date: date
    sales_count: int
    revenue: Decimal


class DailySalesReport(BaseModel):
    report_date: date
    total_sales: int
    total_revenue: Decimal
    average_order_value: Decimal
    items_sold: int
    top_selling_products: list[TopProduct]
    hourly_sales: dict[int, Decimal]


class WeeklySalesReport(BaseModel):
    week_start: date
    week_end: date
    total_sales: int
    total_revenue: Decimal
    average_order_value: Decimal
    daily_breakdown: list[DaySummary]
    top_selling_products: list[TopProduct]


class MonthlySalesReport(BaseModel):
    month: int
    year: int
    month_name: str
    total_sales: int
    total_revenue: Decimal
    average_order_value: Decimal
    weekly_breakdown: list[WeekSummary]
    top_selling_products: list[TopProduct]
    top_customers: list[TopCustomer]


class SalesRangeReport(BaseModel):
    start_date: date
    end_date: date
    total_sales: int
    total_revenue: Decimal
    average_order_value: Decimal
    total_items_sold: int
    unique_customers: int
    top_products: list[TopProduct]
    sales: list[SaleResponse]


class PurchaseSummary(BaseModel):
    sale_id: int
    sale_date: datetime
    total_amount: Decimal
    item_count: int


class CustomerPurchaseHistoryReport(BaseModel):
    customer_id: int
    customer_name: str
    total_purchases: int
    total_spent: Decimal
    average_order_value: Decimal
    first_purchase: Optional[datetime] = None
    last_purchase: Optional[datetime] = None
    purchases: list[PurchaseSummary]
