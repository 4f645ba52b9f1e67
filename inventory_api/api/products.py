from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import Optional

from inventory_api.database import get_db
from inventory_api.services.product_service import ProductService
from inventory_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    StockUpdate,
    ProductResponse,
    ProductListResponse,
    ProductFilters,
    PaginationMeta,
    SortBy,
    SortOrder,
    MAX_PAGE,
    MAX_QUANTITY,
)

router = APIRouter(tags=["Products"])


@router.get(
    "/stores/{store_id}/products",
    response_model=ProductListResponse,
    summary="List a store's products",
    description="Get a filtered, sorted and paginated list of the products of one store."
)
def list_products(
    store_id: int,
    page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    category: Optional[str] = Query(None, description="Exact category match"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0, description="Minimum price"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", gt=0, description="Maximum price"),
    in_stock: Optional[bool] = Query(None, alias="inStock", description="Only products with quantity > 0"),
    low_stock: Optional[int] = Query(None, alias="lowStock", ge=0, le=MAX_QUANTITY, description="Only products with quantity <= this value"),
    search: Optional[str] = Query(None, description="Case-insensitive search in name or description"),
    sort_by: SortBy = Query(SortBy.CREATED_AT, alias="sortBy", description="Sort column"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder", description="Sort direction"),
    db: Session = Depends(get_db)
):
    """
    Get paginated list of a store's products.

    All supplied filters are combined. A page past the last one returns
    an empty `data` list.
    """
    filters = ProductFilters(
        page=page,
        limit=limit,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        low_stock=low_stock,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    service = ProductService(db)
    products, total, total_pages = service.get_by_store(store_id, filters)

    return ProductListResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        meta=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages
        )
    )


@router.post(
    "/stores/{store_id}/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product in a store. A duplicate SKU responds 409."
)
def create_product(
    store_id: int,
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **name**: Product name (required)
    - **category**: Category label (required)
    - **price**: Unit price, must be positive (required)
    - **quantity**: Initial stock, defaults to 0
    - **sku**: Unique stock keeping unit (optional)
    - **description**: Free text (optional)
    """
    service = ProductService(db)
    return service.create(store_id, product_data)


@router.get(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID"
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Get a product by ID."""
    service = ProductService(db)
    return service.get_by_id(product_id)


@router.put(
    "/products/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Update product details. Only provided fields will be updated."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a product.

    Partial updates are supported - only include fields you want to change.
    Send `null` for sku or description to clear it.
    """
    service = ProductService(db)
    return service.update(product_id, product_data)


@router.patch(
    "/products/{product_id}/stock",
    response_model=ProductResponse,
    summary="Set product stock",
    description="Set the quantity on hand. No other field is changed."
)
def update_stock(
    product_id: int,
    stock_data: StockUpdate,
    db: Session = Depends(get_db)
):
    """Set the stock level of a product."""
    service = ProductService(db)
    return service.update_stock(product_id, stock_data.quantity)


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a product"
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    service = ProductService(db)
    service.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
