# merch_inventory/routes/products.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from merch_inventory.errors import ConflictError, ConstraintViolation, NotFoundError, ValidationError
from merch_inventory.storage import InventoryStore, get_store
import merch_inventory.schemas.product as product_schemas

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Products"])


# =========================
# LISTA PRODUKTÓW
# =========================
@router.get("/products", response_model=List[product_schemas.ProductOut])
def list_products(store: InventoryStore = Depends(get_store)):
    return store.list_products()


# =========================
# DODAWANIE PRODUKTU
# =========================
@router.post("/products", response_model=product_schemas.ProductOut, status_code=201)
def create_product(
    payload: product_schemas.ProductCreate,
    store: InventoryStore = Depends(get_store),
):
    if not payload.name or not payload.sku:
        raise ValidationError("name and sku are required")
    if payload.stock < 0:
        raise ValidationError("stock must be >= 0")
    if payload.stock > product_schemas.MAX_STOCK:
        raise ValidationError("stock is too large")

    try:
        product = store.create_product(payload.name, payload.sku, payload.stock)
    except ConstraintViolation as exc:
        logger.warning("Rejected product create, duplicate %s=%s", exc.field, payload.sku)
        raise ConflictError("SKU already exists") from exc

    logger.info("Created product id=%s sku=%s stock=%s", product.id, product.sku, product.stock)
    return product


# =========================
# POJEDYNCZY PRODUKT
# =========================
@router.get("/products/sku/{sku}", response_model=product_schemas.ProductOut)
def get_product_by_sku(sku: str, store: InventoryStore = Depends(get_store)):
    product = store.get_product_by_sku(sku.strip())
    if not product:
        raise NotFoundError("Product not found")
    return product


@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, store: InventoryStore = Depends(get_store)):
    product = store.get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return product
