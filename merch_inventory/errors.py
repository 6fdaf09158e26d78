# merch_inventory/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> dict:
        return {"error": self.message}


class ValidationError(InventoryError):
    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404


class ConflictError(InventoryError):
    status_code = 409


class InsufficientStockError(InventoryError):
    status_code = 409

    def __init__(self, stock: int, message: str = "Insufficient stock"):
        super().__init__(message)
        self.stock = stock

    def payload(self) -> dict:
        return {"error": self.message, "stock": self.stock}


class StorageError(InventoryError):
    status_code = 500

    def __init__(self, message: str = "Storage error"):
        super().__init__(message)


class ConstraintViolation(Exception):
    """Raised by the store when a uniqueness constraint rejects a write."""

    def __init__(self, field: str):
        super().__init__(f"constraint violated: {field}")
        self.field = field


def setup_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(content=exc.payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
        else:
            message = "Invalid request"
        return JSONResponse(content={"error": message}, status_code=400)

    # Catch all unhandled exceptions without leaking internals
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(content={"error": "Internal server error"}, status_code=500)
