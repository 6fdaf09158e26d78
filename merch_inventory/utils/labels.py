# merch_inventory/utils/labels.py
"""QR labels for products.

Every label encodes ``<prefix><sku>`` (``SKU:TS-1`` by default) so a scanned
payload can be told apart from arbitrary QR codes. Rendering uses the QR widget
bundled with ReportLab: a standalone SVG per product and an A4 PDF sheet for
printing a whole catalogue of labels.
"""
from io import BytesIO
from typing import Iterable

from reportlab.graphics import renderPDF, renderSVG
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

DEFAULT_PREFIX = "SKU:"

# Label sheet grid
COLUMNS = 3
ROWS = 7
MARGIN_X = 10 * mm
MARGIN_Y = 12 * mm
QR_SIZE = 24 * mm


def qr_payload(sku: str, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}{sku}"


def qr_drawing(payload: str, size: float = QR_SIZE) -> Drawing:
    """Scale the QR widget into a square drawing of ``size`` points."""
    widget = QrCodeWidget(payload, barBorder=1)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def qr_svg(sku: str, prefix: str = DEFAULT_PREFIX, size: float = 64 * mm) -> str:
    return renderSVG.drawToString(qr_drawing(qr_payload(sku, prefix), size))


def _fit(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def labels_pdf(products: Iterable, prefix: str = DEFAULT_PREFIX) -> bytes:
    """Render a printable sheet with one QR label per product.

    ``products`` only needs ``name`` and ``sku`` attributes.
    """
    buffer = BytesIO()
    page_w, page_h = A4
    cell_w = (page_w - 2 * MARGIN_X) / COLUMNS
    cell_h = (page_h - 2 * MARGIN_Y) / ROWS

    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle("Product labels")

    slot = 0
    for product in products:
        if slot and slot % (COLUMNS * ROWS) == 0:
            c.showPage()
        col = slot % COLUMNS
        row = (slot // COLUMNS) % ROWS

        x = MARGIN_X + col * cell_w
        y = page_h - MARGIN_Y - (row + 1) * cell_h

        # Cut lines
        c.setLineWidth(0.3)
        c.rect(x, y, cell_w, cell_h)

        renderPDF.draw(qr_drawing(qr_payload(product.sku, prefix)), c, x + 3 * mm, y + (cell_h - QR_SIZE) / 2)

        text_x = x + QR_SIZE + 6 * mm
        c.setFont("Helvetica-Bold", 9)
        c.drawString(text_x, y + cell_h / 2 + 2 * mm, _fit(product.name, 22))
        c.setFont("Helvetica", 8)
        c.drawString(text_x, y + cell_h / 2 - 3 * mm, _fit(product.sku, 26))

        slot += 1

    if slot == 0:
        c.setFont("Helvetica", 10)
        c.drawString(MARGIN_X, page_h - MARGIN_Y - 10 * mm, "No products")

    c.showPage()
    c.save()
    return buffer.getvalue()
