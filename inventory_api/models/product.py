from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.sql import func

from inventory_api.database import Base


class Product(Base):
    """
    Product model representing an item stocked by a single store.

    Attributes:
        id: Unique identifier for the product
        store_id: Owning store (rows are removed when the store is deleted)
        name: Product name
        category: Free-text category label
        price: Unit price as an exact decimal with two places (must be positive)
        quantity: Units on hand (must be non-negative, 0 means out of stock)
        sku: Optional stock keeping unit (globally unique)
        description: Optional long description
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(
        Integer,
        ForeignKey("stores.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    sku = Column(String(50), nullable=True, unique=True)
    description = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price > 0', name='check_price_positive'),
        CheckConstraint('quantity >= 0', name='check_quantity_non_negative'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, store_id={self.store_id}, name='{self.name}', quantity={self.quantity})>"
