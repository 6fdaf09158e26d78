# merch_inventory/routes/labels.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from merch_inventory.errors import NotFoundError
from merch_inventory.storage import InventoryStore, get_store
from merch_inventory.utils.labels import labels_pdf, qr_svg

router = APIRouter(tags=["Labels"])


def _prefix(request: Request) -> str:
    return request.app.state.settings.QR_PREFIX


@router.get("/products/{product_id}/qr.svg")
def product_qr(product_id: int, request: Request, store: InventoryStore = Depends(get_store)):
    product = store.get_product(product_id)
    if not product:
        raise NotFoundError("Product not found")
    return Response(content=qr_svg(product.sku, _prefix(request)), media_type="image/svg+xml")


@router.get("/labels.pdf")
def label_sheet(request: Request, store: InventoryStore = Depends(get_store)):
    pdf = labels_pdf(store.list_products(), _prefix(request))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'inline; filename="labels.pdf"'},
    )
