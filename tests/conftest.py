import pytest
from fastapi.testclient import TestClient

from merch_inventory.config import Settings
from merch_inventory.console.client import InventoryClient
from merch_inventory.main import create_app


@pytest.fixture()
def settings(tmp_path):
    return Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'inventory.db'}", FRONTEND_URL=None)


@pytest.fixture()
def app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def store(app):
    return app.state.store


@pytest.fixture()
def api(client):
    """Operator-side client talking to the app in-process."""
    return InventoryClient("http://testserver/api", http=client)


@pytest.fixture()
def tshirt(client):
    response = client.post("/api/products", json={"name": "T-Shirt", "sku": "TS-1", "stock": 10})
    assert response.status_code == 201
    return response.json()
