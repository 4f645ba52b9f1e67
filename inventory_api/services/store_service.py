from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from typing import List
import logging

from inventory_api.database import transaction
from inventory_api.models.store import Store
from inventory_api.models.product import Product
from inventory_api.schemas.store import StoreCreate, StoreUpdate
from inventory_api.services.errors import StoreNotFoundError, ConflictError, commit_or_conflict

logger = logging.getLogger(__name__)


class StoreService:
    """
    Service class for Store CRUD operations.

    This service handles:
    - Creating, reading and updating stores
    - Mapping duplicate store names to ConflictError
    - Cascading deletion of a store and its products in one transaction
    """

    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> List[Store]:
        """Get every store in insertion order."""
        return self.db.query(Store).order_by(Store.id.asc()).all()

    def get_by_id(self, store_id: int) -> Store:
        """
        Get a store by ID.

        Raises:
            StoreNotFoundError: If the store doesn't exist
        """
        store = self.db.query(Store).filter(Store.id == store_id).first()

        if not store:
            raise StoreNotFoundError(store_id)

        return store

    def create(self, store_data: StoreCreate) -> Store:
        """
        Create a new store.

        Args:
            store_data: Store creation data

        Returns:
            Created store instance

        Raises:
            ConflictError: If a store with the same name already exists
        """
        store = Store(
            name=store_data.name,
            address=store_data.address,
            phone=store_data.phone
        )
        self.db.add(store)

        try:
            commit_or_conflict(self.db, f'Store with name "{store_data.name}" already exists')
        except ConflictError:
            logger.warning(f"Rejected duplicate store name '{store_data.name}'")
            raise

        self.db.refresh(store)
        logger.info(f"Store #{store.id} created")
        return store

    def update(self, store_id: int, store_data: StoreUpdate) -> Store:
        """
        Update an existing store.

        Only fields present in the request are changed. Address and phone
        are cleared when explicitly set to null.

        Args:
            store_id: ID of store to update
            store_data: Partial update data

        Returns:
            Updated store

        Raises:
            StoreNotFoundError: If the store doesn't exist
            ConflictError: If the new name is already taken
        """
        store = self.get_by_id(store_id)

        update_data = store_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(store, field, value)
        store.updated_at = func.now()

        try:
            commit_or_conflict(self.db, f'Store with name "{store_data.name}" already exists')
        except ConflictError:
            logger.warning(f"Rejected rename of store #{store_id} to '{store_data.name}'")
            raise

        self.db.refresh(store)
        logger.info(f"Store #{store_id} updated ({', '.join(update_data) or 'no fields'})")
        return store

    def delete(self, store_id: int) -> None:
        """
        Delete a store together with all of its products.

        Both deletes run inside one transaction: either the store and every
        product row disappear, or nothing does.

        Raises:
            StoreNotFoundError: If the store doesn't exist
        """
        self.get_by_id(store_id)

        with transaction(self.db):
            removed = self._delete_products(store_id)
            self._delete_store_row(store_id)

        logger.info(f"Store #{store_id} deleted along with {removed} product(s)")

    def _delete_products(self, store_id: int) -> int:
        return (
            self.db.query(Product)
            .filter(Product.store_id == store_id)
            .delete(synchronize_session=False)
        )

    def _delete_store_row(self, store_id: int) -> None:
        self.db.query(Store).filter(Store.id == store_id).delete(synchronize_session=False)
