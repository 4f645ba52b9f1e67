from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8080"
API_PREFIX = "/api/v1"

STATUS_MESSAGES = {
    400: "Invalid request. Please check your input.",
    401: "Unauthorized. Please log in again.",
    403: "Access denied.",
    404: "The requested item was not found.",
    409: "A conflict occurred. The item may already exist.",
    500: "Server error. Please try again later.",
}


class ApiError(Exception):
    """Raised when the inventory API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, List[str]]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or {}

    def field_errors(self) -> Dict[str, str]:
        """First validation message for each offending field."""
        return {
            field: (messages[0] if messages else "Invalid value")
            for field, messages in self.details.items()
        }

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except json.JSONDecodeError:
            body = None

        error = body.get("error") if isinstance(body, dict) else None
        message = None
        details = None
        if isinstance(error, dict):
            message = error.get("message")
            details = error.get("details")
        if not message and isinstance(body, dict):
            message = body.get("message")
        if not message:
            message = STATUS_MESSAGES.get(response.status_code, f"Request failed with status {response.status_code}")

        return cls(response.status_code, message, details)


class InventoryClient:
    """
    Synchronous client for the inventory API.

    Pass an existing ``httpx.Client`` (for example a FastAPI ``TestClient``)
    or let the client build one from ``base_url``. Only a client created here
    is closed by :meth:`close`.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
        prefix: str = API_PREFIX,
        retries: int = 2,
        backoff: float = 0.5,
    ) -> None:
        self._prefix = prefix.rstrip("/")
        self._retries = retries
        self._backoff = backoff

        if client is None:
            self._client = httpx.Client(base_url=base_url, timeout=timeout)
            self._owns_client = True
        else:
            self._client = client
            self._owns_client = False

        logger.debug("Inventory client initialised (base_url=%s, owns_client=%s)",
                     base_url, self._owns_client)

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "InventoryClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Stores

    def list_stores(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/stores")

    def get_store(self, store_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/stores/{store_id}")

    def get_store_stats(self, store_id: int, low_stock_threshold: Optional[int] = None) -> Dict[str, Any]:
        params = {}
        if low_stock_threshold is not None:
            params["lowStockThreshold"] = low_stock_threshold
        return self._request("GET", f"/stores/{store_id}/stats", params=params)

    def create_store(self, name: str, address: Optional[str] = None, phone: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name}
        if address is not None:
            payload["address"] = address
        if phone is not None:
            payload["phone"] = phone
        return self._request("POST", "/stores", json=payload)

    def update_store(self, store_id: int, **fields: Any) -> Dict[str, Any]:
        """Send a partial update; pass ``address=None`` to clear a field."""
        return self._request("PUT", f"/stores/{store_id}", json=fields)

    def delete_store(self, store_id: int) -> None:
        self._request("DELETE", f"/stores/{store_id}")

    # Products

    def list_products(self, store_id: int, **filters: Any) -> Dict[str, Any]:
        """
        List a store's products.

        Filters use the API's query names (``minPrice``, ``sortBy``...);
        ``None`` and empty-string values are dropped.
        """
        params = {}
        for key, value in filters.items():
            if value is None or value == "":
                continue
            params[key] = str(value).lower() if isinstance(value, bool) else value
        return self._request("GET", f"/stores/{store_id}/products", params=params)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/products/{product_id}")

    def create_product(self, store_id: int, **fields: Any) -> Dict[str, Any]:
        return self._request("POST", f"/stores/{store_id}/products", json=fields)

    def update_product(self, product_id: int, **fields: Any) -> Dict[str, Any]:
        """Send a partial update; pass ``sku=None`` to clear a field."""
        return self._request("PUT", f"/products/{product_id}", json=fields)

    def update_stock(self, product_id: int, quantity: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/products/{product_id}/stock", json={"quantity": quantity})

    def delete_product(self, product_id: int) -> None:
        self._request("DELETE", f"/products/{product_id}")

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._prefix}{path}"
        # Only idempotent reads are retried
        attempts = 1 + (self._retries if method == "GET" else 0)
        retrying = Retrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(multiplier=self._backoff, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=lambda retry_state: logger.warning(
                "%s %s failed (attempt %d/%d): %s", method, url,
                retry_state.attempt_number, attempts, retry_state.outcome.exception(),
            ),
            reraise=True,
        )

        try:
            response = retrying(self._client.request, method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.error("%s %s failed after %d attempt(s): %s", method, url, attempts, exc)
            raise

        if response.is_error:
            raise ApiError.from_response(response)
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()
