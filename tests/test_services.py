"""Tests for the service layer used directly against a database session."""
from datetime import datetime
from decimal import Decimal

import pytest

from inventory_api.database import transaction
from inventory_api.models.product import Product
from inventory_api.models.store import Store
from inventory_api.schemas.product import ProductCreate, ProductFilters, ProductUpdate
from inventory_api.schemas.store import StoreCreate, StoreUpdate
from inventory_api.services.errors import ConflictError, ProductNotFoundError, StoreNotFoundError
from inventory_api.services.inventory_service import InventoryService
from inventory_api.services.product_service import ProductService
from inventory_api.services.store_service import StoreService


class FailingStoreService(StoreService):
    """Store service whose final delete statement blows up."""

    def _delete_store_row(self, store_id: int) -> None:
        raise RuntimeError("connection lost")


def _seed(db_session, product_count=3):
    store = StoreService(db_session).create(StoreCreate(name="Seeded"))
    products = ProductService(db_session)
    for i in range(product_count):
        products.create(
            store.id,
            ProductCreate(name=f"Item {i}", category="General", price=Decimal("1.25"), quantity=i)
        )
    return store.id


def test_delete_store_rolls_back_when_a_statement_fails(db_session):
    """Test a failure after deleting products leaves the store and its products in place."""
    store_id = _seed(db_session)

    with pytest.raises(RuntimeError):
        FailingStoreService(db_session).delete(store_id)

    assert db_session.query(Store).filter(Store.id == store_id).count() == 1
    assert db_session.query(Product).filter(Product.store_id == store_id).count() == 3


def test_delete_store_removes_store_and_products(db_session):
    """Test a successful delete leaves no rows referencing the store."""
    store_id = _seed(db_session)

    StoreService(db_session).delete(store_id)

    assert db_session.query(Store).count() == 0
    assert db_session.query(Product).filter(Product.store_id == store_id).count() == 0


def test_database_cascade_backstop(db_session):
    """Test deleting a store row directly still removes its products."""
    store_id = _seed(db_session)

    with transaction(db_session):
        db_session.query(Store).filter(Store.id == store_id).delete(synchronize_session=False)

    assert db_session.query(Product).count() == 0


def test_transaction_commits_on_success(db_session):
    """Test the transaction scope commits its work."""
    with transaction(db_session):
        db_session.add(Store(name="Committed"))

    db_session.rollback()
    assert db_session.query(Store).filter(Store.name == "Committed").count() == 1


def test_transaction_rolls_back_on_error(db_session):
    """Test the transaction scope discards its work and re-raises."""
    with pytest.raises(ValueError):
        with transaction(db_session):
            db_session.add(Store(name="Discarded"))
            db_session.flush()
            raise ValueError("abort")

    assert db_session.query(Store).filter(Store.name == "Discarded").count() == 0


def test_duplicate_store_name_raises_conflict(db_session):
    """Test unique violations surface as ConflictError and leave one row."""
    service = StoreService(db_session)
    service.create(StoreCreate(name="Twin"))

    with pytest.raises(ConflictError):
        service.create(StoreCreate(name="Twin"))

    assert len(service.get_all()) == 1


def test_missing_ids_raise_not_found(db_session):
    """Test each service raises the matching not-found error."""
    with pytest.raises(StoreNotFoundError):
        StoreService(db_session).get_by_id(42)
    with pytest.raises(StoreNotFoundError):
        ProductService(db_session).get_by_store(42, ProductFilters())
    with pytest.raises(StoreNotFoundError):
        InventoryService(db_session).get_store_stats(42)
    with pytest.raises(ProductNotFoundError):
        ProductService(db_session).update(42, ProductUpdate(name="x"))


def test_update_stock_refreshes_only_quantity(db_session):
    """Test stock updates leave the other columns as they were."""
    store_id = _seed(db_session, product_count=1)
    service = ProductService(db_session)
    product = service.get_by_store(store_id, ProductFilters())[0][0]
    before = (product.name, product.category, product.price, product.sku)

    updated = service.update_stock(product.id, 17)

    assert updated.quantity == 17
    assert (updated.name, updated.category, updated.price, updated.sku) == before


def test_store_stats_returns_decimal_totals(db_session):
    """Test statistics are computed as exact decimals."""
    store_id = _seed(db_session)

    stats = InventoryService(db_session).get_store_stats(store_id, low_stock_threshold=1)

    assert stats.total_products == 3
    assert stats.total_quantity == 3  # 0 + 1 + 2
    assert stats.total_inventory_value == Decimal("3.75")
    assert stats.out_of_stock_count == 1
    assert stats.low_stock_count == 1


OLD_TIMESTAMP = datetime(2000, 1, 1)


def _backdate(db_session, model, row_id):
    db_session.query(model).filter(model.id == row_id).update(
        {model.updated_at: OLD_TIMESTAMP}, synchronize_session=False
    )
    db_session.commit()


def test_product_update_refreshes_updated_at(db_session):
    """Test editing a product moves its last-modified time forward."""
    store_id = _seed(db_session, product_count=1)
    service = ProductService(db_session)
    product_id = service.get_by_store(store_id, ProductFilters())[0][0].id
    _backdate(db_session, Product, product_id)

    updated = service.update(product_id, ProductUpdate(description="Fresh"))

    assert updated.updated_at > OLD_TIMESTAMP
    assert updated.created_at > OLD_TIMESTAMP


def test_stock_update_refreshes_updated_at(db_session):
    """Test setting stock moves the product's last-modified time forward."""
    store_id = _seed(db_session, product_count=1)
    service = ProductService(db_session)
    product_id = service.get_by_store(store_id, ProductFilters())[0][0].id
    _backdate(db_session, Product, product_id)

    assert service.update_stock(product_id, 4).updated_at > OLD_TIMESTAMP


def test_empty_store_update_refreshes_updated_at(db_session):
    """Test an update with no fields still touches the store's last-modified time."""
    store_id = _seed(db_session, product_count=0)
    _backdate(db_session, Store, store_id)

    updated = StoreService(db_session).update(store_id, StoreUpdate())

    assert updated.updated_at > OLD_TIMESTAMP
    assert updated.name == "Seeded"
