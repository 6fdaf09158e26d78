"""QR image and label sheet rendering."""

from types import SimpleNamespace

from merch_inventory.utils.labels import labels_pdf, qr_payload, qr_svg


def test_qr_payload_is_prefixed():
    assert qr_payload("TS-1") == "SKU:TS-1"
    assert qr_payload("TS-1", prefix="") == "TS-1"


def test_qr_svg_renders_an_image():
    svg = qr_svg("TS-1")
    assert "<svg" in svg
    assert "</svg>" in svg


def test_labels_pdf_spans_pages():
    products = [SimpleNamespace(name=f"Very long product name number {i}", sku=f"SKU-{i:04d}") for i in range(30)]
    pdf = labels_pdf(products)
    assert pdf.startswith(b"%PDF")


def test_labels_pdf_with_no_products():
    assert labels_pdf([]).startswith(b"%PDF")


def test_product_qr_endpoint(client, tshirt):
    response = client.get(f"/api/products/{tshirt['id']}/qr.svg")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "<svg" in response.text


def test_product_qr_unknown_product(client):
    assert client.get("/api/products/42/qr.svg").status_code == 404


def test_label_sheet_endpoint(client, tshirt):
    response = client.get("/api/labels.pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")
