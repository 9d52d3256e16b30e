from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from dishbook.database import Base


class Product(Base):
    """Product vocabulary entry. Rows without an owner are global and visible to every user."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=True)  # NULL = global product
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    dish_ingredients = relationship("DishIngredient", back_populates="product")

    __table_args__ = (
        Index('idx_products_owner_id', 'owner_id'),
    )

    @property
    def is_global(self) -> bool:
        return self.owner_id is None
