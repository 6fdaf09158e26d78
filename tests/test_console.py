"""Operator console against the in-process API."""

import io

import pytest

import merch_inventory.console.app as console_app
from merch_inventory.console.app import OperatorState, ProductForm, run_scan
from merch_inventory.console.client import ApiError, InventoryClient
from merch_inventory.console.scanner import LineCodeReader, ScanSession


class TestInventoryClient:
    def test_health_and_create(self, api):
        assert api.health() is True
        product = api.create_product("T-Shirt", "TS-1", 10)
        assert api.find_product("TS-1")["id"] == product["id"]
        assert api.get_product(product["id"])["stock"] == 10

    def test_errors_carry_server_message(self, api):
        api.create_product("T-Shirt", "TS-1", 1)

        with pytest.raises(ApiError) as excinfo:
            api.consume("TS-1", qty=5)
        assert excinfo.value.status_code == 409
        assert excinfo.value.message == "Insufficient stock"
        assert excinfo.value.payload["stock"] == 1

        with pytest.raises(ApiError) as excinfo:
            api.restock("NOPE")
        assert excinfo.value.status_code == 404

    def test_labels(self, api):
        product = api.create_product("T-Shirt", "TS-1", 1)
        assert "<svg" in api.product_qr_svg(product["id"])
        assert api.labels_pdf().startswith(b"%PDF")


class TestOperatorState:
    def test_submit_form_resets_and_refreshes(self, api):
        state = OperatorState(api)
        state.form = ProductForm(name="Mug", sku="MUG-1", stock="4")

        product = state.submit_form()

        assert product["stock"] == 4
        assert state.form == ProductForm()
        assert [p["sku"] for p in state.products] == ["MUG-1"]
        assert state.total_stock == 4
        assert state.notice is None

    def test_submit_form_failure_keeps_form(self, api):
        state = OperatorState(api)
        state.form = ProductForm(name="", sku="MUG-1")

        assert state.submit_form() is None
        assert state.notice == "name and sku are required"
        assert state.form.sku == "MUG-1"

    def test_restock_and_consume_refresh_lists(self, api):
        api.create_product("Mug", "MUG-1", 0)
        state = OperatorState(api)

        state.restock("MUG-1", 3)
        state.consume("MUG-1", 1, "sale")

        assert state.total_stock == 2
        assert [m["delta"] for m in state.movements] == [-1, 3]

    def test_consume_scan(self, api):
        api.create_product("T-Shirt", "TS-1", 2)
        state = OperatorState(api)
        session = ScanSession(LineCodeReader(io.StringIO("SKU:TS-1\nSKU:TS-1\nSKU:TS-1\n")))

        results = []
        with session:
            for event in session.events():
                results.append(state.consume_scan(session, event, qty=1, reason="sale"))
                if results[-1] is None:
                    break

        assert [r["stock"] if r else None for r in results] == [1, 0, None]
        assert state.notice == "Insufficient stock"
        assert state.last_scan.sku == "TS-1"
        assert state.movements[0]["reason"] == "sale"

    def test_stale_scan_response_is_discarded(self, api):
        api.create_product("T-Shirt", "TS-1", 5)
        state = OperatorState(api)
        session = ScanSession(LineCodeReader(io.StringIO("TS-1\n")))
        session.start()
        event = next(session.events())
        session.stop()

        assert state.consume_scan(session, event) is None
        # The server applied it; the local lists were not touched
        assert state.products == []
        assert api.find_product("TS-1")["stock"] == 4


class TestCommandLine:
    @pytest.fixture()
    def cli(self, monkeypatch, client):
        monkeypatch.setattr(
            console_app, "InventoryClient",
            lambda base_url=None: InventoryClient("http://testserver/api", http=client),
        )
        return console_app.main

    def test_create_list_and_consume(self, cli, capsys):
        assert cli(["create", "T-Shirt", "TS-1", "--stock", "10"]) == 0
        assert cli(["consume", "TS-1", "--qty", "3"]) == 0
        assert cli(["list"]) == 0

        out = capsys.readouterr().out
        assert "TS-1: stock 7" in out
        assert "Total stock: 7" in out

    def test_failure_exit_code(self, cli, capsys):
        assert cli(["restock", "NOPE"]) == 1
        assert "Product not found" in capsys.readouterr().err

    def test_scan_reads_stdin(self, cli, monkeypatch, capsys):
        cli(["create", "Mug", "MUG-1", "--stock", "1"])
        monkeypatch.setattr("sys.stdin", io.StringIO("SKU:MUG-1\nSKU:MUG-1\n"))

        assert cli(["scan", "--reason", "sale"]) == 0

        captured = capsys.readouterr()
        assert "MUG-1: stock 0" in captured.out
        assert "MUG-1: Insufficient stock" in captured.err

    def test_qr_writes_svg(self, cli, tmp_path):
        cli(["create", "Mug", "MUG-1"])
        target = tmp_path / "mug.svg"

        assert cli(["qr", "MUG-1", "-o", str(target)]) == 0
        assert "<svg" in target.read_text(encoding="utf-8")


def test_run_scan_handles_empty_input(api, capsys):
    state = OperatorState(api)
    assert run_scan(state, ScanSession(LineCodeReader(io.StringIO(""))), 1, "delivery") == 0
    assert "Scanning" in capsys.readouterr().out
