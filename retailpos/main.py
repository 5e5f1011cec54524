from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from retailpos.config import get_settings
from retailpos.database import engine, Base
from retailpos.models import category, customer, product, sale  # noqa: F401  (register tables)
from retailpos.api import categories, customers, health, inventory, products, reports, sales

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up application...")

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Checkout and sales analytics core for a retail point of sale.

    - **Catalog**: Products and categories with stock and restock settings
    - **Customers**: Customer records referenced by sales
    - **Checkout**: Atomic cart-to-sale commit with stock decrement
    - **Reports**: Daily, weekly, monthly and range sales summaries
    - **Inventory**: Low-stock alerts and reorder suggestions

    ## Consistency

    A checkout writes the sale and every stock decrement in one
    transaction. Product rows are locked with `SELECT FOR UPDATE` and
    carry a version counter, so concurrent checkouts of the same product
    cannot lose updates. Checkouts that would take stock below zero are
    rejected.

    ## Background Processing
    After each checkout a Celery task re-checks the stock of the products
    sold and logs low-stock alerts.
    """,
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(categories.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(customers.router, prefix="/api/v1")
app.include_router(sales.router, prefix="/api/v1")
app.include_router(reports.router, prefix="/api/v1")
app.include_router(inventory.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/v1/health"
    }
