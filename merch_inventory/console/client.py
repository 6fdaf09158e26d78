# merch_inventory/console/client.py
import logging
import os
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:4000/api"


class ApiError(Exception):
    """Non-2xx answer from the inventory API, carrying the server's message."""

    def __init__(self, status_code: int, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class InventoryClient:
    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self.base_url = (base_url or os.getenv("INVENTORY_API_URL") or DEFAULT_API_URL).rstrip("/")
        self._owns_http = http is None
        self._http = http or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error("Inventory API unreachable (%s %s): %s", method, url, e)
            raise ApiError(0, f"API unreachable: {e}") from e

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            message = payload.get("error") or f"HTTP {response.status_code}"
            raise ApiError(response.status_code, message, payload)
        return response

    # ---- PRODUCTS ----
    def health(self) -> bool:
        return bool(self._request("GET", "/health").json().get("ok"))

    def list_products(self) -> List[dict]:
        return self._request("GET", "/products").json()

    def get_product(self, product_id: int) -> dict:
        return self._request("GET", f"/products/{product_id}").json()

    def find_product(self, sku: str) -> dict:
        return self._request("GET", f"/products/sku/{quote(sku, safe='')}").json()

    def create_product(self, name: str, sku: str, stock: Any = 0) -> dict:
        return self._request("POST", "/products", json={"name": name, "sku": sku, "stock": stock}).json()

    # ---- STOCK ----
    def consume(self, sku: str, qty: Any = 1, reason: Optional[str] = None, note: Optional[str] = None) -> dict:
        body = {"sku": sku, "qty": qty, "reason": reason, "note": note}
        return self._request("POST", "/consume", json=body).json()

    def restock(self, sku: str, qty: Any = 1, reason: Optional[str] = None, note: Optional[str] = None) -> dict:
        body = {"sku": sku, "qty": qty, "reason": reason, "note": note}
        return self._request("POST", "/restock", json=body).json()

    def list_movements(self) -> List[dict]:
        return self._request("GET", "/movements").json()

    # ---- LABELS ----
    def product_qr_svg(self, product_id: int) -> str:
        return self._request("GET", f"/products/{product_id}/qr.svg").text

    def labels_pdf(self) -> bytes:
        return self._request("GET", "/labels.pdf").content
