"""
Flour Mill SQLAlchemy Models
"""

# Import all models to ensure they are registered with SQLAlchemy
from .warehouse import Warehouse
from .purchase import Purchase, BagPurchase, FoodPurchase, FoodPurchaseItem
from .production import Production
from .inventory import Product, Inventory

__all__ = [
    "Warehouse",
    "Purchase",
    "BagPurchase",
    "FoodPurchase",
    "FoodPurchaseItem",
    "Production",
    "Product",
    "Inventory",
]
