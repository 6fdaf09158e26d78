# merch_inventory/console/app.py
"""Operator console for the inventory API.

Usage:
    merch-inventory-console list
    merch-inventory-console create "T-Shirt" TS-1 --stock 10
    merch-inventory-console restock TS-1 --qty 5
    merch-inventory-console scan --qty 1 --reason sale   # one payload per stdin line
    merch-inventory-console qr TS-1 -o ts-1.svg
"""
import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

from merch_inventory.console.client import ApiError, InventoryClient
from merch_inventory.console.scanner import LineCodeReader, ScanEvent, ScanSession

logger = logging.getLogger(__name__)

SCAN_REASONS = ("delivery", "sale", "internal_use")


@dataclass
class ProductForm:
    name: str = ""
    sku: str = ""
    stock: Any = 0


class OperatorState:
    """Client-side view: product list, movement list and the creation form.

    Both lists are re-fetched in full on load and after every successful
    mutation. Failures are kept in ``notice`` with the server's message.
    """

    def __init__(self, client: InventoryClient):
        self.client = client
        self.products: List[dict] = []
        self.movements: List[dict] = []
        self.form = ProductForm()
        self.notice: Optional[str] = None
        self.last_scan: Optional[ScanEvent] = None

    @property
    def total_stock(self) -> int:
        return sum(p.get("stock") or 0 for p in self.products)

    def refresh(self) -> None:
        self.products = self.client.list_products()
        self.movements = self.client.list_movements()

    def submit_form(self) -> Optional[dict]:
        try:
            product = self.client.create_product(self.form.name, self.form.sku, self.form.stock)
        except ApiError as e:
            self.notice = e.message
            return None
        self.form = ProductForm()
        self.notice = None
        self.refresh()
        return product

    def restock(self, sku: str, qty: Any = 1, reason: Optional[str] = None, note: Optional[str] = None) -> Optional[dict]:
        try:
            product = self.client.restock(sku, qty, reason, note)
        except ApiError as e:
            self.notice = e.message
            return None
        self.notice = None
        self.refresh()
        return product

    def consume(self, sku: str, qty: Any = 1, reason: Optional[str] = None, note: Optional[str] = None) -> Optional[dict]:
        try:
            product = self.client.consume(sku, qty, reason, note)
        except ApiError as e:
            self.notice = e.message
            return None
        self.notice = None
        self.refresh()
        return product

    def consume_scan(self, session: ScanSession, event: ScanEvent, qty: Any = 1, reason: str = "delivery") -> Optional[dict]:
        """Submit a scanned code; answers for a stopped or restarted session are dropped."""
        self.last_scan = event
        try:
            product = self.client.consume(event.sku, qty, reason)
        except ApiError as e:
            if session.is_current(event):
                self.notice = e.message
            return None

        if not session.is_current(event):
            logger.debug("Discarding stale consume response for sku=%s", event.sku)
            return None

        self.notice = None
        self.refresh()
        return product


# =========================
# COMMAND LINE
# =========================
def _print_products(products: List[dict]) -> None:
    for p in products:
        print(f"{p['id']:>5}  {p['sku']:<20} {p['stock']:>6}  {p['name']}")


def _print_movements(movements: List[dict]) -> None:
    for m in movements:
        note = f"  ({m['note']})" if m.get("note") else ""
        print(f"{m['created_at']}  {m['sku']:<20} {m['delta']:>+6}  {m['reason']}{note}")


def _report(state: OperatorState, product: Optional[dict]) -> int:
    if product is None:
        print(f"Error: {state.notice}", file=sys.stderr)
        return 1
    print(f"{product['sku']}: stock {product['stock']}")
    return 0


def run_scan(state: OperatorState, session: ScanSession, qty: Any, reason: str) -> int:
    print("Scanning, one code per line (Ctrl-D to stop)...")
    try:
        with session:
            for event in session.events():
                product = state.consume_scan(session, event, qty, reason)
                if product is None:
                    if state.notice:
                        print(f"{event.sku}: {state.notice}", file=sys.stderr)
                else:
                    print(f"{product['sku']}: stock {product['stock']}")
    except KeyboardInterrupt:
        pass
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="merch-inventory-console", description="Merch inventory operator console")
    parser.add_argument("--api", default=None, help="API base URL (default: $INVENTORY_API_URL or http://localhost:4000/api)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List products")
    sub.add_parser("movements", help="Show recent movements")

    p = sub.add_parser("create", help="Create a product")
    p.add_argument("name")
    p.add_argument("sku")
    p.add_argument("--stock", default=0)

    for name, default_reason in (("restock", "restock"), ("consume", "delivery")):
        p = sub.add_parser(name, help=f"{name.capitalize()} a product by SKU")
        p.add_argument("sku")
        p.add_argument("--qty", default=1)
        p.add_argument("--reason", default=default_reason)
        p.add_argument("--note", default=None)

    p = sub.add_parser("scan", help="Consume stock for every scanned code read from stdin")
    p.add_argument("--qty", default=1)
    p.add_argument("--reason", default="delivery", choices=SCAN_REASONS)

    p = sub.add_parser("qr", help="Save a product's QR code as SVG")
    p.add_argument("sku")
    p.add_argument("-o", "--output", default=None)

    p = sub.add_parser("labels", help="Save the printable label sheet as PDF")
    p.add_argument("-o", "--output", default="labels.pdf")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING)

    with InventoryClient(args.api) as client:
        state = OperatorState(client)
        try:
            if args.command == "list":
                state.refresh()
                _print_products(state.products)
                print(f"Products: {len(state.products)}  Total stock: {state.total_stock}")
                return 0

            if args.command == "movements":
                state.refresh()
                _print_movements(state.movements)
                return 0

            if args.command == "create":
                state.form = ProductForm(name=args.name, sku=args.sku, stock=args.stock)
                return _report(state, state.submit_form())

            if args.command == "restock":
                return _report(state, state.restock(args.sku, args.qty, args.reason, args.note))

            if args.command == "consume":
                return _report(state, state.consume(args.sku, args.qty, args.reason, args.note))

            if args.command == "scan":
                return run_scan(state, ScanSession(LineCodeReader(sys.stdin)), args.qty, args.reason)

            if args.command == "qr":
                product = client.find_product(args.sku)
                output = args.output or f"{product['sku']}.svg"
                with open(output, "w", encoding="utf-8") as fh:
                    fh.write(client.product_qr_svg(product["id"]))
                print(f"Saved {output}")
                return 0

            if args.command == "labels":
                with open(args.output, "wb") as fh:
                    fh.write(client.labels_pdf())
                print(f"Saved {args.output}")
                return 0
        except ApiError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
