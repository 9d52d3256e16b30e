"""
Database models for Dishbook.

Import all models here so metadata.create_all() sees every table.
"""

from dishbook.database import Base
from dishbook.models.product import Product
from dishbook.models.tag import Tag, dish_tags
from dishbook.models.dish import Dish
from dishbook.models.dish_ingredient import DishIngredient

__all__ = [
    "Base",
    "Product",
    "Tag",
    "dish_tags",
    "Dish",
    "DishIngredient",
    "create_all_tables",
]


def create_all_tables(engine):
    """Create every Dishbook table that does not exist yet."""
    Base.metadata.create_all(engine)
