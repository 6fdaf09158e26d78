# merch_inventory/routes/stock.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from merch_inventory.errors import InsufficientStockError, ValidationError
from merch_inventory.storage import InventoryStore, get_store
import merch_inventory.schemas.movement as movement_schemas
import merch_inventory.schemas.product as product_schemas

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stock"])

DEFAULT_CONSUME_REASON = "delivery"
DEFAULT_RESTOCK_REASON = "restock"


def _require_sku(payload: movement_schemas.StockChange) -> str:
    if not payload.sku:
        raise ValidationError("sku is required")
    return payload.sku


# Decrement stock, typically from a scanned label
@router.post("/consume", response_model=product_schemas.ProductOut)
def consume(
    payload: movement_schemas.StockChange,
    store: InventoryStore = Depends(get_store),
):
    sku = _require_sku(payload)
    reason = payload.reason or DEFAULT_CONSUME_REASON

    try:
        product = store.adjust_stock(sku, -payload.qty, reason, payload.note)
    except InsufficientStockError as exc:
        logger.warning("Consume rejected sku=%s qty=%s stock=%s", sku, payload.qty, exc.stock)
        raise

    logger.info("Consumed sku=%s qty=%s reason=%s stock=%s", sku, payload.qty, reason, product.stock)
    return product


# Manual restock
@router.post("/restock", response_model=product_schemas.ProductOut)
def restock(
    payload: movement_schemas.StockChange,
    store: InventoryStore = Depends(get_store),
):
    sku = _require_sku(payload)
    reason = payload.reason or DEFAULT_RESTOCK_REASON

    product = store.adjust_stock(sku, payload.qty, reason, payload.note)
    logger.info("Restocked sku=%s qty=%s reason=%s stock=%s", sku, payload.qty, reason, product.stock)
    return product


@router.get("/movements", response_model=List[movement_schemas.MovementOut])
def list_movements(store: InventoryStore = Depends(get_store)):
    return store.list_movements()
