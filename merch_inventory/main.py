# merch_inventory/main.py
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from merch_inventory.config import Settings, get_settings
from merch_inventory.database import init_db, make_engine, make_session_factory
from merch_inventory.errors import setup_exception_handlers
from merch_inventory.storage import InventoryStore

# Import routerów
from merch_inventory.routes.products import router as products_router
from merch_inventory.routes.stock import router as stock_router
from merch_inventory.routes.labels import router as labels_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Inicjalizacja
    engine = make_engine(settings.DATABASE_URL)
    init_db(engine)

    app = FastAPI(title="Merch Inventory API", version="1.0.0")
    app.state.settings = settings
    app.state.engine = engine
    app.state.store = InventoryStore(make_session_factory(engine), movements_limit=settings.MOVEMENTS_LIMIT)

    # CORS Configuration
    origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    if settings.FRONTEND_URL:
        origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    # Rejestracja routerów
    app.include_router(products_router, prefix="/api")
    app.include_router(stock_router, prefix="/api")
    app.include_router(labels_router, prefix="/api")

    @app.get("/api/health", tags=["Health"])
    def health():
        return {"ok": True}

    return app


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Backend ready on http://localhost:%s", settings.PORT)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
