from fastapi import APIRouter, Depends
from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import redis

from retailpos.database import engine, get_db
from retailpos.models.product import Product
from retailpos.models.sale import Sale
from retailpos.utils.cache import cache_service

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database and Redis are reachable."
)
def readiness_check():
    """
    Readiness check for all dependencies.
    
    The API stays usable without Redis (the cache degrades to misses),
    so only the database decides the overall status.
    """
    checks = {
        "database": False,
        "redis": False
    }
    
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except SQLAlchemyError as e:
        checks["database_error"] = str(e)
    
    try:
        checks["redis"] = cache_service.ping()
    except redis.RedisError as e:
        checks["redis_error"] = str(e)
    
    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }


@router.get(
    "/stats",
    summary="Store statistics",
    description="Catalog and ledger sizes."
)
def store_stats(db: Session = Depends(get_db)):
    return {
        "products": db.query(func.count(Product.id)).scalar(),
        "sales": db.query(func.count(Sale.id)).scalar(),
    }
