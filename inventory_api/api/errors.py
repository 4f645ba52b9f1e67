from collections import defaultdict
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inventory_api.services.errors import InventoryError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, details: Optional[dict] = None) -> JSONResponse:
    """Build the error envelope shared by every failed request."""
    error = {"message": message}
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error},
    )


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    details = defaultdict(list)
    for err in exc.errors():
        # First loc entry is the request part ("body", "query", "path")
        loc = [str(part) for part in err.get("loc", ())[1:]]
        field = ".".join(loc) or "body"
        details[field].append(err.get("msg", "Invalid value"))
    return dict(details)


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    return error_response(exc.status_code, str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _field_errors(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: invalid fields {sorted(details)}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain, validation and framework errors to HTTP responses."""
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
