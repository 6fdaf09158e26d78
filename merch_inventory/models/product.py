# merch_inventory/models/product.py
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from merch_inventory.database import Base

# Model Product
# A single merchandise item identified by its SKU (the code printed in its QR label).
# Stock is only changed through movements, and the database refuses negative values.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    sku = Column(String, unique=True, nullable=False, index=True)

    stock = Column(Integer, CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
                   nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    movements = relationship("Movement", back_populates="product")
