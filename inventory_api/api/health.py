from fastapi import APIRouter
from sqlalchemy import text

from inventory_api.database import engine

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database is reachable."
)
def readiness_check():
    """Report whether the database answers a trivial query."""
    checks = {"database": False}

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)

    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
