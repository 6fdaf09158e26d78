# merch_inventory/schemas/movement.py
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Any, Optional

from merch_inventory.schemas.product import as_int, clean_text


# Body shared by /consume and /restock
class StockChange(BaseModel):
    sku: Optional[str] = None
    qty: Any = None
    reason: Optional[str] = None
    note: Optional[str] = None

    model_config = ConfigDict(validate_default=True)

    @field_validator("sku", mode="before")
    @classmethod
    def sku_as_text(cls, v):
        # Numeric codes arrive as JSON numbers from some scanners
        if isinstance(v, bool):
            return v
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("sku", "reason", "note")
    @classmethod
    def trim_text(cls, v):
        return clean_text(v)

    @field_validator("qty", mode="before")
    @classmethod
    def coerce_qty(cls, v):
        # Zero, negative, missing and non-numeric quantities all mean "one"
        return max(1, as_int(v, 1))


# Ledger entry annotated with the owning product
class MovementOut(BaseModel):
    id: int
    product_id: int
    delta: int
    reason: str
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    name: str
    sku: str

    model_config = ConfigDict(from_attributes=True)
