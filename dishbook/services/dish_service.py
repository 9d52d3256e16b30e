"""Business logic for dish persistence."""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from dishbook.models.dish import Dish
from dishbook.models.dish_ingredient import DishIngredient
from dishbook.models.product import Product
from dishbook.models.tag import Tag
from dishbook.services.catalog_service import CatalogService, is_visible_to
from dishbook.services.match_schemas import FinalizedIngredient

logger = logging.getLogger(__name__)


class DishService:
    """Service for dish-related operations."""

    @staticmethod
    def create_dish(
        db: Session,
        owner_id: str,
        name: str,
        ingredients: Sequence[FinalizedIngredient],
        tag_ids: Sequence[int] = (),
        source_url: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Dish:
        """
        Create a dish from reviewed ingredient bindings.

        Bindings without a product id create a new product owned by the user.
        Everything is committed in one transaction.

        Args:
            db: Database session
            owner_id: User ID
            name: Dish name
            ingredients: Finalized bindings from the review step
            tag_ids: IDs of the user's existing tags
            source_url: Page the recipe came from
            image_url: Stored dish image

        Returns:
            Created Dish object

        Raises:
            ValueError: Empty name, unknown product or unknown tag
        """
        name = name.strip()
        if not name:
            raise ValueError("Dish name cannot be empty")

        # Validate everything before the first insert
        existing = {}
        for binding in ingredients:
            if binding.product_id is not None:
                product = db.get(Product, binding.product_id)
                if product is None or not is_visible_to(product, owner_id):
                    raise ValueError(f"Unknown product {binding.product_id!r}")
                existing[binding.product_id] = product
            elif not (binding.new_product_name or "").strip():
                raise ValueError("New product name cannot be empty")

        tags = []
        if tag_ids:
            tags = (
                db.query(Tag)
                .filter(Tag.id.in_(list(tag_ids)), Tag.owner_id == owner_id)
                .all()
            )
            if len(tags) != len(set(tag_ids)):
                raise ValueError("Unknown tag in tag_ids")

        dish = Dish(
            owner_id=owner_id,
            name=name,
            source_url=source_url,
            image_url=image_url,
            tags=tags,
        )

        for binding in ingredients:
            if binding.product_id is not None:
                product = existing[binding.product_id]
            else:
                product = CatalogService.create_product(
                    db, owner_id, binding.new_product_name
                )
                logger.info("Created product %r for user %s", product.name, owner_id)

            dish.dish_ingredients.append(
                DishIngredient(
                    product=product,
                    quantity=binding.quantity,
                    unit_code=binding.unit_code,
                )
            )

        db.add(dish)
        db.commit()
        db.refresh(dish)
        return dish

    @staticmethod
    def resolve_tag_ids(db: Session, owner_id: str, tag_names: Sequence[str]) -> List[int]:
        """
        IDs of the user's existing tags matching the given names.

        Comparison ignores case and surrounding whitespace. Unknown names are
        skipped; tags are never created here.
        """
        tags = db.query(Tag).filter(Tag.owner_id == owner_id).all()
        by_name = {tag.name.strip().lower(): tag.id for tag in tags}

        tag_ids = []
        for tag_name in tag_names:
            tag_id = by_name.get(tag_name.strip().lower())
            if tag_id is not None and tag_id not in tag_ids:
                tag_ids.append(tag_id)
        return tag_ids

    @staticmethod
    def get_dish(db: Session, dish_id: int) -> Optional[Dish]:
        return db.query(Dish).filter(Dish.id == dish_id).first()

    @staticmethod
    def get_user_dishes(db: Session, owner_id: str, limit: int = 50) -> List[Dish]:
        """Dishes of a user, newest first."""
        return (
            db.query(Dish)
            .filter(Dish.owner_id == owner_id)
            .order_by(Dish.created_at.desc(), Dish.id.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def toggle_favorite(db: Session, dish_id: int, favorite: bool) -> Optional[Dish]:
        dish = DishService.get_dish(db, dish_id)
        if not dish:
            return None

        dish.favorite = favorite
        db.commit()
        db.refresh(dish)
        return dish

    @staticmethod
    def delete_dish(db: Session, dish_id: int) -> bool:
        """Delete a dish with its ingredient bindings. Products are kept."""
        dish = DishService.get_dish(db, dish_id)
        if not dish:
            return False

        db.delete(dish)
        db.commit()
        return True
