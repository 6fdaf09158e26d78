# merch_inventory/schemas/product.py
from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Any, Optional

# Largest value a 64-bit INTEGER column holds
MAX_STOCK = 2**63 - 1


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


def as_int(value: Any, fallback: int) -> int:
    """Coerce a loosely typed JSON value to int, or return ``fallback``.

    Accepts ints, integral floats (``3.0``) and numeric strings (``" 3 "``).
    Booleans, fractions, blanks and anything else fall back.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else fallback
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return fallback
        try:
            number = float(text)
        except ValueError:
            return fallback
        return int(number) if number.is_integer() else fallback
    return fallback


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim a string; empty means missing."""
    if value is None:
        return None
    value = value.strip()
    return value or None


# Schema for creating a new product
class ProductCreate(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    stock: Any = None

    model_config = ConfigDict(validate_default=True)

    @field_validator("name", "sku")
    @classmethod
    def trim_text(cls, v):
        return clean_text(v)

    @field_validator("stock", mode="before")
    @classmethod
    def coerce_stock(cls, v):
        return as_int(v, 0)


# Full product representation
class ProductOut(ORMBase):
    id: int
    name: str
    sku: str
    stock: int
    created_at: Optional[datetime] = None
