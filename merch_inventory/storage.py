# merch_inventory/storage.py
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from fastapi import Request
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from merch_inventory.errors import (
    ConstraintViolation,
    InsufficientStockError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from merch_inventory.models.movement import Movement
from merch_inventory.models.product import Product
from merch_inventory.schemas.product import MAX_STOCK

logger = logging.getLogger(__name__)


class InventoryStore:
    """Storage access for products and the movement ledger.

    Built once at startup around a session factory and handed to request
    handlers through :func:`get_store`. Each public method runs in its own
    session; stock changes and their ledger entry commit together or not at all.
    """

    def __init__(self, session_factory: sessionmaker, movements_limit: int = 200):
        self._session_factory = session_factory
        self.movements_limit = movements_limit

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Storage failure")
            raise StorageError() from exc
        finally:
            db.close()

    # ---- PRODUCTS ----
    def list_products(self) -> List[Product]:
        with self._session() as db:
            return (
                db.query(Product)
                .order_by(Product.created_at.desc(), Product.id.desc())
                .all()
            )

    def get_product(self, product_id: int) -> Optional[Product]:
        with self._session() as db:
            return db.query(Product).filter(Product.id == product_id).first()

    def get_product_by_sku(self, sku: str) -> Optional[Product]:
        with self._session() as db:
            return db.query(Product).filter(Product.sku == sku).first()

    @staticmethod
    def _sku_taken(db: Session, sku: str) -> bool:
        return db.query(Product.id).filter(Product.sku == sku).first() is not None

    def create_product(self, name: str, sku: str, stock: int = 0) -> Product:
        """Insert a product; raises ``ConstraintViolation("sku")`` on a duplicate code."""
        with self._session() as db:
            if self._sku_taken(db, sku):
                raise ConstraintViolation("sku")

            product = Product(name=name, sku=sku, stock=stock)
            db.add(product)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                # Lost a race with a concurrent insert of the same code
                if self._sku_taken(db, sku):
                    raise ConstraintViolation("sku") from exc
                logger.exception("Product insert rejected for sku=%s", sku)
                raise StorageError() from exc
            db.refresh(product)
            return product

    # ---- STOCK ----
    def adjust_stock(self, sku: str, delta: int, reason: str, note: Optional[str] = None) -> Product:
        """Apply ``delta`` to the product's stock and append the matching movement.

        The loaded row is checked first; the update itself is still guarded by
        ``stock + delta >= 0`` so concurrent consumers can never take stock
        below zero.
        """
        with self._session() as db:
            product = db.query(Product).filter(Product.sku == sku).first()
            if product is None:
                raise NotFoundError("Product not found")

            new_stock = product.stock + delta
            if new_stock < 0:
                raise InsufficientStockError(stock=product.stock)
            if new_stock > MAX_STOCK:
                raise ValidationError("quantity is too large")

            result = db.execute(
                update(Product)
                .where(Product.id == product.id, Product.stock + delta >= 0)
                .values(stock=Product.stock + delta)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                current = db.query(Product.stock).filter(Product.id == product.id).scalar()
                raise InsufficientStockError(stock=current)

            db.add(Movement(product_id=product.id, delta=delta, reason=reason, note=note))
            db.commit()
            db.refresh(product)
            return product

    # ---- MOVEMENTS ----
    def list_movements(self, limit: Optional[int] = None) -> List[dict]:
        if limit is None:
            limit = self.movements_limit
        with self._session() as db:
            rows = (
                db.query(Movement, Product.name, Product.sku)
                .join(Product, Product.id == Movement.product_id)
                .order_by(Movement.created_at.desc(), Movement.id.desc())
                .limit(limit)
                .all()
            )

            return [
                {
                    "id": m.id,
                    "product_id": m.product_id,
                    "delta": m.delta,
                    "reason": m.reason,
                    "note": m.note,
                    "created_at": m.created_at,
                    "name": name,
                    "sku": sku,
                }
                for m, name, sku in rows
            ]


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store
