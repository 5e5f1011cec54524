from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from datetime import date

from retailpos.database import get_db
from retailpos.schemas.report import (
    CustomerPurchaseHistoryReport,
    DailySalesReport,
    MonthlySalesReport,
    SalesRangeReport,
    TopProduct,
    WeeklySalesReport,
)
from retailpos.services.exceptions import CustomerNotFoundError, ValidationError
from retailpos.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get(
    "/daily",
    response_model=DailySalesReport,
    summary="Daily sales summary",
    description="Totals, top 5 products and hourly revenue for one calendar day."
)
def daily_report(
    day: date = Query(..., description="Calendar day"),
    db: Session = Depends(get_db)
):
    return ReportService(db).daily_summary(day)


@router.get(
    "/weekly",
    response_model=WeeklySalesReport,
    summary="Weekly sales summary",
    description="Seven days starting at week_start, with a per-day breakdown and top 10 products."
)
def weekly_report(
    week_start: date = Query(..., description="First day of the week"),
    db: Session = Depends(get_db)
):
    return ReportService(db).weekly_summary(week_start)


@router.get(
    "/monthly",
    response_model=MonthlySalesReport,
    summary="Monthly sales summary",
    description="Calendar month totals with 7-day windows, top 15 products and top 10 customers."
)
def monthly_report(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db)
):
    try:
        return ReportService(db).monthly_summary(month, year)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get(
    "/range",
    response_model=SalesRangeReport,
    summary="Sales summary for a date range",
    description="Both start and end days are included. Returns at most the 100 most recent sales."
)
def range_report(
    start: date = Query(..., description="First day to include"),
    end: date = Query(..., description="Last day to include"),
    db: Session = Depends(get_db)
):
    return ReportService(db).range_summary(start, end)


@router.get(
    "/top-products",
    response_model=list[TopProduct],
    summary="Best-selling products",
)
def top_products_report(
    start: date = Query(..., description="First day to include"),
    end: date = Query(..., description="Last day to include"),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db)
):
    return ReportService(db).top_selling_products(start, end, limit)


@router.get(
    "/customers/{customer_id}/history",
    response_model=CustomerPurchaseHistoryReport,
    summary="Customer purchase history",
)
def customer_history_report(
    customer_id: int,
    db: Session = Depends(get_db)
):
    try:
        return ReportService(db).customer_purchase_history(customer_id)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
