from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from inventory_api.database import get_db
from inventory_api.services.store_service import StoreService
from inventory_api.schemas.store import (
    StoreCreate,
    StoreUpdate,
    StoreResponse
)

router = APIRouter(prefix="/stores", tags=["Stores"])


@router.get(
    "",
    response_model=list[StoreResponse],
    summary="List all stores",
    description="Get every store in the order they were created. Not paginated."
)
def list_stores(db: Session = Depends(get_db)):
    """Get all stores."""
    service = StoreService(db)
    return service.get_all()


@router.get(
    "/{store_id}",
    response_model=StoreResponse,
    summary="Get store by ID"
)
def get_store(
    store_id: int,
    db: Session = Depends(get_db)
):
    """Get a store by ID. Responds 404 if it doesn't exist."""
    service = StoreService(db)
    return service.get_by_id(store_id)


@router.post(
    "",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new store",
    description="Create a store. Store names are unique; a duplicate name responds 409."
)
def create_store(
    store_data: StoreCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new store.

    - **name**: Store name, unique (required)
    - **address**: Street address (optional)
    - **phone**: Contact phone number (optional)
    """
    service = StoreService(db)
    return service.create(store_data)


@router.put(
    "/{store_id}",
    response_model=StoreResponse,
    summary="Update a store",
    description="Update store details. Only provided fields will be updated."
)
def update_store(
    store_id: int,
    store_data: StoreUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a store.

    Partial updates are supported - only include fields you want to change.
    Send `null` for address or phone to clear it.
    """
    service = StoreService(db)
    return service.update(store_id, store_data)


@router.delete(
    "/{store_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a store",
    description="Delete a store and all of its products in a single transaction."
)
def delete_store(
    store_id: int,
    db: Session = Depends(get_db)
):
    """Delete a store and its products."""
    service = StoreService(db)
    service.delete(store_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
