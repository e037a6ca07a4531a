"""Every entity, imported so they are all registered on Base.metadata."""

from .users import User
from .product import Product
from .recipe import Recipe
from .recipe_ingredient import RecipeIngredient
from .refill import Refill
from .location import Location
from .warehouse import Warehouse, WarehouseProduct
from .file import StoredFile

__all__ = [
    "User",
    "Product",
    "Recipe",
    "RecipeIngredient",
    "Refill",
    "Location",
    "Warehouse",
    "WarehouseProduct",
    "StoredFile",
]
