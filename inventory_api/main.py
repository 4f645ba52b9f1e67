from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

import uvicorn

from inventory_api.config import get_settings
from inventory_api.database import engine, Base
from inventory_api.api import stores, products, inventory, health
from inventory_api.api.errors import register_exception_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Inventory management backend for a set of stores and their product catalogs.

    - **Stores**: CRUD operations; deleting a store removes its products in one transaction
    - **Products**: CRUD, stock updates, and filtered, sorted, paginated listing per store
    - **Statistics**: per-store totals, stock alerts and category breakdown

    ## Errors

    Every failed request returns `{"success": false, "error": {"message": ..., "details": ...}}`.
    Validation failures respond 400 with per-field messages in `details`,
    missing stores or products respond 404, and duplicate store names or SKUs respond 409.
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(stores.router, prefix="/api/v1")
app.include_router(inventory.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/api/v1/health"
    }


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "inventory_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
