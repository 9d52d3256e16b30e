"""Read access to the product catalog visible to a user."""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from dishbook.models.product import Product
from dishbook.services.match_schemas import ProductRef


def is_visible_to(product, owner_id: Optional[str]) -> bool:
    """Global products are visible to everyone, owned products only to their owner."""
    return product.owner_id is None or product.owner_id == owner_id


class CatalogService:
    """Service for catalog snapshots."""

    @staticmethod
    def get_catalog(db: Session, owner_id: Optional[str]) -> List[ProductRef]:
        """
        Snapshot of global products plus the user's own, in creation order.

        Creation order is what the matcher uses to break score ties, so no
        alphabetical sorting happens here.
        """
        query = db.query(Product)
        if owner_id is None:
            query = query.filter(Product.owner_id.is_(None))
        else:
            query = query.filter(
                or_(Product.owner_id.is_(None), Product.owner_id == owner_id)
            )
        rows = query.order_by(Product.created_at, Product.id).all()
        return [ProductRef.model_validate(row) for row in rows]

    @staticmethod
    def list_for_display(db: Session, owner_id: Optional[str]) -> List[ProductRef]:
        """Same snapshot sorted by name for pickers and management screens."""
        catalog = CatalogService.get_catalog(db, owner_id)
        return sorted(catalog, key=lambda p: p.name.lower())

    @staticmethod
    def create_product(db: Session, owner_id: Optional[str], name: str) -> Product:
        """Add a product; owner_id None creates a global product."""
        name = name.strip()
        if not name:
            raise ValueError("Product name cannot be empty")

        product = Product(owner_id=owner_id, name=name)
        db.add(product)
        db.flush()
        return product
