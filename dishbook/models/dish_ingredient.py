from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Index
from sqlalchemy.orm import relationship

from dishbook.database import Base


class DishIngredient(Base):
    """Junction table linking dishes to products with quantity and unit."""
    __tablename__ = "dish_ingredients"

    id = Column(Integer, primary_key=True)
    dish_id = Column(Integer, ForeignKey('dishes.id', ondelete='CASCADE'), nullable=False)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'), nullable=False)
    quantity = Column(Numeric(10, 3))  # NULL when the recognized quantity was not numeric
    unit_code = Column(String(20))  # One of services.units.UNIT_CODES

    # Relationships
    dish = relationship("Dish", back_populates="dish_ingredients")
    product = relationship("Product", back_populates="dish_ingredients")

    __table_args__ = (
        Index('idx_dish_ingredients_dish_id', 'dish_id'),
        Index('idx_dish_ingredients_product_id', 'product_id'),
    )
