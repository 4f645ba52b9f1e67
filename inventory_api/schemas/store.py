from pydantic import Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Optional

from inventory_api.schemas.base import CamelModel, reject_null


class StoreBase(CamelModel):
    """Base schema for Store with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Store name (unique)")
    address: Optional[str] = Field(None, max_length=500, description="Street address")
    phone: Optional[str] = Field(None, max_length=50, description="Contact phone number")


class StoreCreate(StoreBase):
    """Schema for creating a new store."""
    pass


class StoreUpdate(CamelModel):
    """
    Schema for updating an existing store. All fields are optional.

    Omitted fields are left untouched. An explicit null clears address or
    phone; name cannot be cleared.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Store name")
    address: Optional[str] = Field(None, max_length=500, description="Street address, null to clear")
    phone: Optional[str] = Field(None, max_length=50, description="Phone number, null to clear")

    check_not_null = field_validator("name")(reject_null)


class StoreResponse(StoreBase):
    """Schema for store response including all fields."""
    id: int
    created_at: datetime
    updated_at: datetime


class CategoryStats(CamelModel):
    """Aggregates for one category within a store."""
    category: str
    product_count: int
    total_quantity: int
    total_value: Decimal


class StoreStats(CamelModel):
    """Inventory statistics for a single store."""
    store_id: int
    store_name: str
    total_products: int
    total_quantity: int
    total_inventory_value: Decimal
    out_of_stock_count: int
    low_stock_count: int
    category_breakdown: list[CategoryStats]
