import logging

from sqlalchemy.exc import SQLAlchemyError

from retailpos.tasks.celery_app import celery_app
from retailpos.database import SessionLocal
from retailpos.services.inventory_alert_service import InventoryAlertService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="check_stock_levels")
def check_stock_levels(self, product_ids: list[int]) -> dict:
    """
    Background task run after a checkout commits.

    Re-reads the products the sale touched and reports every one that is
    now at or below its low-stock threshold.
    
    Args:
        product_ids: IDs of the products in the committed sale
        
    Returns:
        Dictionary with the alerts raised
    """
    logger.info(f"Checking stock levels for products {product_ids}")
    
    db = SessionLocal()
    
    try:
        alerts = InventoryAlertService(db).low_stock_alerts(product_ids)
        
        for alert in alerts:
            logger.warning(
                f"Low stock [{alert.severity.value}] product #{alert.product_id} "
                f"'{alert.product_name}': {alert.current_stock} left "
                f"(threshold {alert.threshold}, reorder {alert.reorder_quantity})"
            )
        
        return {
            "status": "checked",
            "product_ids": product_ids,
            "alerts": [alert.model_dump(mode="json") for alert in alerts],
        }
        
    except SQLAlchemyError as e:
        logger.error(f"Error checking stock levels for {product_ids}: {e}")
        raise self.retry(exc=e, countdown=30, max_retries=3)
        
    finally:
        db.close()
