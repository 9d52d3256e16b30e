from sqlalchemy import Column, Integer, String, ForeignKey, Table, Index
from sqlalchemy.orm import relationship

from dishbook.database import Base


dish_tags = Table(
    "dish_tags",
    Base.metadata,
    Column("dish_id", Integer, ForeignKey("dishes.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    """User-owned label attached to dishes."""
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String(64), nullable=False)
    name = Column(String(100), nullable=False)

    dishes = relationship("Dish", secondary=dish_tags, back_populates="tags")

    __table_args__ = (
        Index('idx_tags_owner_id', 'owner_id'),
    )
