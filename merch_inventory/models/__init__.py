from merch_inventory.models.product import Product
from merch_inventory.models.movement import Movement

__all__ = ["Product", "Movement"]
