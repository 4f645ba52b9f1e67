from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inventory_api.database import get_db
from inventory_api.schemas.product import MAX_QUANTITY
from inventory_api.schemas.store import StoreStats
from inventory_api.services.inventory_service import InventoryService, DEFAULT_LOW_STOCK_THRESHOLD

router = APIRouter(prefix="/stores", tags=["Inventory"])


@router.get(
    "/{store_id}/stats",
    response_model=StoreStats,
    summary="Store inventory statistics",
    description="""
    Aggregate figures for one store:

    - total products, total quantity and total inventory value (price x quantity)
    - out-of-stock count (quantity = 0)
    - low-stock count (0 < quantity <= lowStockThreshold)
    - per-category breakdown ordered by category name

    Monetary amounts are returned as decimal strings.
    """
)
def get_store_stats(
    store_id: int,
    low_stock_threshold: int = Query(
        DEFAULT_LOW_STOCK_THRESHOLD,
        alias="lowStockThreshold",
        ge=0,
        le=MAX_QUANTITY,
        description="Highest quantity counted as low stock"
    ),
    db: Session = Depends(get_db)
):
    """Get inventory statistics for a store."""
    service = InventoryService(db)
    return service.get_store_stats(store_id, low_stock_threshold)
