from pydantic import Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional
import enum

from inventory_api.schemas.base import CamelModel, reject_null

# Upper bounds keep values inside the database integer columns
MAX_QUANTITY = 2_147_483_647
MAX_PAGE = 1_000_000


class ProductBase(CamelModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    category: str = Field(..., min_length=1, max_length=100, description="Category label")
    price: Decimal = Field(
        ..., gt=0, max_digits=10, decimal_places=2,
        description="Unit price (must be positive, at most two decimal places)"
    )
    quantity: int = Field(0, ge=0, le=MAX_QUANTITY, description="Units in stock (must be non-negative)")
    sku: Optional[str] = Field(None, max_length=50, description="Stock keeping unit (unique)")
    description: Optional[str] = Field(None, max_length=1000, description="Product description")


class ProductCreate(ProductBase):
    """Schema for creating a new product. Quantity defaults to 0."""
    pass


class ProductUpdate(CamelModel):
    """
    Schema for updating an existing product. All fields are optional.

    Omitted fields are left untouched. An explicit null clears sku or
    description; the remaining fields cannot be null.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Product name")
    category: Optional[str] = Field(None, min_length=1, max_length=100, description="Category label")
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2, description="Unit price")
    quantity: Optional[int] = Field(None, ge=0, le=MAX_QUANTITY, description="Units in stock")
    sku: Optional[str] = Field(None, max_length=50, description="Stock keeping unit, null to clear")
    description: Optional[str] = Field(None, max_length=1000, description="Description, null to clear")

    check_not_null = field_validator("name", "category", "price", "quantity")(reject_null)


class StockUpdate(CamelModel):
    """Schema for setting the stock level of a product."""
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, description="New stock level (must be non-negative)")


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    store_id: int
    created_at: datetime
    updated_at: datetime


class SortBy(str, enum.Enum):
    """Columns a product listing can be ordered by."""
    NAME = "name"
    PRICE = "price"
    QUANTITY = "quantity"
    CREATED_AT = "createdAt"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class ProductFilters(CamelModel):
    """Filtering, sorting and pagination options for listing a store's products."""
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(20, ge=1, le=100)
    category: Optional[str] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, gt=0)
    in_stock: Optional[bool] = None
    low_stock: Optional[int] = Field(None, ge=0, le=MAX_QUANTITY)
    search: Optional[str] = None
    sort_by: SortBy = SortBy.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ProductListResponse(CamelModel):
    """Schema for paginated product list response."""
    data: list[ProductResponse]
    meta: PaginationMeta
