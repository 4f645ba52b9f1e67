from sqlalchemy.orm import Session
from sqlalchemy import Integer, Numeric, type_coerce
from sqlalchemy.sql import func
from decimal import Decimal
import logging

from inventory_api.models.product import Product
from inventory_api.schemas.store import StoreStats, CategoryStats
from inventory_api.services.store_service import StoreService

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 5

CENT = Decimal("0.01")


def _to_money(value) -> Decimal:
    """Normalize an aggregated amount (possibly NULL) to a cent-exact Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT)


def _inventory_value():
    # Numeric result type keeps the sum out of float on drivers that return floats
    return type_coerce(
        func.coalesce(func.sum(Product.price * Product.quantity), 0),
        Numeric(14, 2),
    )


def _quantity_sum():
    return type_coerce(func.coalesce(func.sum(Product.quantity), 0), Integer)


class InventoryService:
    """
    Service computing inventory statistics for a store.

    Every figure is produced by an aggregate query, so the amount of data
    read from the database does not grow with the size of the catalog.
    """

    def __init__(self, db: Session):
        self.db = db
        self.stores = StoreService(db)

    def get_store_stats(
        self,
        store_id: int,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    ) -> StoreStats:
        """
        Get inventory statistics for a store.

        Args:
            store_id: Store to summarize
            low_stock_threshold: Highest quantity still counted as low stock

        Returns:
            Totals, out-of-stock and low-stock counts, and a per-category
            breakdown ordered by category name

        Raises:
            StoreNotFoundError: If the store doesn't exist
        """
        store = self.stores.get_by_id(store_id)
        in_store = Product.store_id == store_id

        total_products, total_quantity, total_value = (
            self.db.query(
                func.count(Product.id),
                _quantity_sum(),
                _inventory_value(),
            )
            .filter(in_store)
            .one()
        )

        out_of_stock = (
            self.db.query(func.count(Product.id))
            .filter(in_store, Product.quantity == 0)
            .scalar()
        )

        low_stock = (
            self.db.query(func.count(Product.id))
            .filter(
                in_store,
                Product.quantity > 0,
                Product.quantity <= low_stock_threshold,
            )
            .scalar()
        )

        category_rows = (
            self.db.query(
                Product.category,
                func.count(Product.id),
                _quantity_sum(),
                _inventory_value(),
            )
            .filter(in_store)
            .group_by(Product.category)
            .order_by(Product.category.asc())
            .all()
        )

        logger.debug(
            f"Computed stats for store #{store_id}: {total_products} products, "
            f"threshold={low_stock_threshold}"
        )

        return StoreStats(
            store_id=store.id,
            store_name=store.name,
            total_products=total_products or 0,
            total_quantity=int(total_quantity or 0),
            total_inventory_value=_to_money(total_value),
            out_of_stock_count=out_of_stock or 0,
            low_stock_count=low_stock or 0,
            category_breakdown=[
                CategoryStats(
                    category=category,
                    product_count=count,
                    total_quantity=int(quantity or 0),
                    total_value=_to_money(value),
                )
                for category, count, quantity, value in category_rows
            ],
        )
