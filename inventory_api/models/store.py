from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from inventory_api.database import Base


class Store(Base):
    """
    Store model representing a shop that owns a catalog of products.

    Attributes:
        id: Unique identifier for the store
        name: Store name (globally unique)
        address: Optional street address
        phone: Optional contact phone number
        created_at: Timestamp when store was created
        updated_at: Timestamp when store was last updated
    """
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    address = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Store(id={self.id}, name='{self.name}')>"
