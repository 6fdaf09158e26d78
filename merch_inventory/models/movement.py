# merch_inventory/models/movement.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from merch_inventory.database import Base

class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    # Signed change: negative for consumption, positive for restock
    delta = Column(Integer, nullable=False)

    # Free-text category, e.g. "sale", "delivery", "adjustment"
    reason = Column(String, nullable=False)
    note = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    product = relationship("Product", back_populates="movements")
