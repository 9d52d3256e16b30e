from sqlalchemy import Boolean, Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from dishbook.database import Base
from dishbook.models.tag import dish_tags


class Dish(Base):
    """Recipe with its ingredient bindings and tags."""

    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    source_url = Column(String(1024))  # Page the recipe was recognized from
    image_url = Column(String(1024))  # Stored by the external image service
    favorite = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    dish_ingredients = relationship(
        "DishIngredient",
        back_populates="dish",
        cascade="all, delete-orphan",
        order_by="DishIngredient.id",
    )
    tags = relationship("Tag", secondary=dish_tags, back_populates="dishes")

    __table_args__ = (
        Index("idx_dishes_owner_id", "owner_id"),
        Index("idx_dishes_created_at", "created_at"),
    )
