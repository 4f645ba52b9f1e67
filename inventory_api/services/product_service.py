from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.sql import func
from typing import List, Tuple
import math
import logging

from inventory_api.models.product import Product
from inventory_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductFilters,
    SortBy,
    SortOrder,
)
from inventory_api.services.errors import ProductNotFoundError, ConflictError, commit_or_conflict
from inventory_api.services.store_service import StoreService

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "/"


def _contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching ``term`` literally anywhere in a value."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class ProductService:
    """
    Service class for Product operations.

    This service handles:
    - Creating products inside an existing store
    - Reading single products
    - Filtered, sorted and paginated listing of a store's catalog
    - Partial updates and stock adjustments
    - Deleting products
    - Mapping duplicate SKUs to ConflictError
    """

    SORT_COLUMNS = {
        SortBy.NAME: Product.name,
        SortBy.PRICE: Product.price,
        SortBy.QUANTITY: Product.quantity,
        SortBy.CREATED_AT: Product.created_at,
    }

    def __init__(self, db: Session):
        self.db = db
        self.stores = StoreService(db)

    def create(self, store_id: int, product_data: ProductCreate) -> Product:
        """
        Create a new product in a store.

        Args:
            store_id: Owning store
            product_data: Product creation data

        Returns:
            Created product instance

        Raises:
            StoreNotFoundError: If the store doesn't exist
            ConflictError: If the SKU is already used by another product
        """
        self.stores.get_by_id(store_id)

        product = Product(
            store_id=store_id,
            name=product_data.name,
            category=product_data.category,
            price=product_data.price,
            quantity=product_data.quantity,
            sku=product_data.sku,
            description=product_data.description
        )
        self.db.add(product)

        try:
            commit_or_conflict(self.db, f'Product with SKU "{product_data.sku}" already exists')
        except ConflictError:
            logger.warning(f"Rejected duplicate SKU '{product_data.sku}' in store #{store_id}")
            raise

        self.db.refresh(product)
        logger.info(f"Product #{product.id} created in store #{store_id}")
        return product

    def get_by_id(self, product_id: int) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = self.db.query(Product).filter(Product.id == product_id).first()

        if not product:
            raise ProductNotFoundError(product_id)

        return product

    def get_by_store(
        self,
        store_id: int,
        filters: ProductFilters
    ) -> Tuple[List[Product], int, int]:
        """
        Get a filtered, sorted page of a store's products.

        All supplied filters must match. Search looks for the term in the
        name or the description, ignoring case.

        Args:
            store_id: Store whose catalog is listed
            filters: Filtering, sorting and pagination options

        Returns:
            Tuple of (products list, total matching count, total pages)

        Raises:
            StoreNotFoundError: If the store doesn't exist
        """
        self.stores.get_by_id(store_id)

        query = self.db.query(Product).filter(Product.store_id == store_id)

        if filters.category:
            query = query.filter(Product.category == filters.category)
        if filters.min_price is not None:
            query = query.filter(Product.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Product.price <= filters.max_price)
        if filters.in_stock:
            query = query.filter(Product.quantity > 0)
        if filters.low_stock is not None:
            query = query.filter(Product.quantity <= filters.low_stock)
        if filters.search:
            pattern = _contains_pattern(filters.search)
            query = query.filter(
                or_(
                    Product.name.ilike(pattern, escape=LIKE_ESCAPE),
                    Product.description.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )

        # Get total count
        total = query.count()
        total_pages = math.ceil(total / filters.limit)

        # Id breaks ties so rows with equal sort keys keep a stable page order
        sort_column = self.SORT_COLUMNS[filters.sort_by]
        if filters.sort_order == SortOrder.ASC:
            ordering = (sort_column.asc(), Product.id.asc())
        else:
            ordering = (sort_column.desc(), Product.id.desc())

        # Apply pagination
        offset = (filters.page - 1) * filters.limit
        products = query.order_by(*ordering).offset(offset).limit(filters.limit).all()

        return products, total, total_pages

    def update(self, product_id: int, product_data: ProductUpdate) -> Product:
        """
        Update an existing product.

        Only fields present in the request are changed. SKU and description
        are cleared when explicitly set to null.

        Args:
            product_id: ID of product to update
            product_data: Partial update data

        Returns:
            Updated product

        Raises:
            ProductNotFoundError: If the product doesn't exist
            ConflictError: If the new SKU is already used by another product
        """
        product = self.get_by_id(product_id)

        update_data = product_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(product, field, value)
        product.updated_at = func.now()

        try:
            commit_or_conflict(self.db, f'Product with SKU "{product_data.sku}" already exists')
        except ConflictError:
            logger.warning(f"Rejected duplicate SKU '{product_data.sku}' for product #{product_id}")
            raise

        self.db.refresh(product)
        logger.info(f"Product #{product_id} updated ({', '.join(update_data) or 'no fields'})")
        return product

    def update_stock(self, product_id: int, quantity: int) -> Product:
        """
        Set the stock level of a product. No other field is touched.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = self.get_by_id(product_id)

        product.quantity = quantity
        product.updated_at = func.now()
        self.db.commit()
        self.db.refresh(product)

        logger.info(f"Product #{product_id} stock set to {quantity}")
        return product

    def delete(self, product_id: int) -> None:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = self.get_by_id(product_id)

        self.db.delete(product)
        self.db.commit()

        logger.info(f"Product #{product_id} deleted")
