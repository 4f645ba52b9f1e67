from sqlalchemy.exc import IntegrityError


class InventoryError(Exception):
    """Base class for domain errors surfaced to API clients."""
    status_code = 500


class NotFoundError(InventoryError):
    """Exception raised when a referenced resource doesn't exist."""
    status_code = 404


class StoreNotFoundError(NotFoundError):
    """Exception raised when the requested store doesn't exist."""

    def __init__(self, store_id: int):
        self.store_id = store_id
        super().__init__(f"Store with ID {store_id} not found")


class ProductNotFoundError(NotFoundError):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class ConflictError(InventoryError):
    """Exception raised when a write would violate a uniqueness constraint."""
    status_code = 409


# SQLSTATE unique_violation
PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """Tell unique-constraint failures apart from other integrity errors."""
    orig = error.orig
    if getattr(orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlstate", None) == PG_UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def commit_or_conflict(db, conflict_message: str) -> None:
    """
    Commit the session, translating unique-constraint failures into ConflictError.

    The session is rolled back on any failure. Errors other than unique
    violations propagate unchanged.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(conflict_message) from e
        raise
    except Exception:
        db.rollback()
        raise
