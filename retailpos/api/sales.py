from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from retailpos.database import get_db
from retailpos.services.checkout_service import CheckoutService
from retailpos.services.exceptions import (
    ConsistencyError,
    NotFoundError,
    PersistenceError,
    SaleNotFoundError,
    ValidationError,
)
from retailpos.services.sale_service import SaleService
from retailpos.schemas.sale import (
    CheckoutRequest,
    SaleResponse,
    SaleListResponse
)
from retailpos.tasks.stock_tasks import check_stock_levels

router = APIRouter(tags=["Sales"])


@router.post(
    "/checkout/",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Check out a cart",
    description="""
    Commit the cart as one sale and decrement stock for every product in it.
    
    **Consistency:**
    The sale and all stock changes are written in a single transaction.
    If any product is missing, short on stock, or the write fails, nothing
    is stored.
    
    After a successful checkout a background Celery task re-checks the
    stock levels of the products that were sold.
    """
)
def checkout(
    checkout_data: CheckoutRequest,
    db: Session = Depends(get_db)
):
    """
    Commit a checkout.
    
    - **lines**: Cart lines with product_id, quantity and optional unit_price snapshot
    - **payment_method**: cash, card, mobile or credit (default cash)
    - **customer_id**: Registered customer (optional)
    - **customer_name**: Walk-in customer name (optional)
    """
    service = CheckoutService(db)
    
    try:
        sale = service.commit(
            checkout_data.lines,
            payment_method=checkout_data.payment_method,
            customer_id=checkout_data.customer_id,
            customer_name=checkout_data.customer_name,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ConsistencyError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    
    # Re-check stock of the products just sold
    check_stock_levels.delay(sorted({item.product_id for item in sale.items}))
    
    return sale


@router.get(
    "/sales/",
    response_model=SaleListResponse,
    summary="List sales",
    description="Sales history, newest first, optionally limited to a range of calendar days."
)
def list_sales(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Items per page"),
    start_date: Optional[date] = Query(None, description="First day to include"),
    end_date: Optional[date] = Query(None, description="Last day to include"),
    db: Session = Depends(get_db)
):
    """Get paginated sales history."""
    service = SaleService(db)
    sales, total, total_pages = service.get_sales_page(page, page_size, start_date, end_date)
    
    return SaleListResponse(
        items=[SaleResponse.model_validate(s) for s in sales],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages
    )


@router.get(
    "/sales/{sale_id}",
    response_model=SaleResponse,
    summary="Get sale by ID",
    description="Get a recorded sale with its line items."
)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db)
):
    try:
        return SaleService(db).get_or_raise(sale_id)
    except SaleNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
