"""API endpoints for matching recognized ingredients and saving reviewed dishes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dishbook.database import get_db
from dishbook.services.catalog_service import CatalogService
from dishbook.services.dish_service import DishService
from dishbook.services.match_schemas import (
    CamelModel,
    MatchDecision,
    ProductRef,
    RecognizedIngredient,
)
from dishbook.services.product_matcher import ProductMatcher, build_matcher
from dishbook.services.reconciliation import finalize, match_status

router = APIRouter(prefix="/api", tags=["matching"])


class MatchProductsRequest(CamelModel):
    owner_id: Optional[str] = None
    ingredients: list[RecognizedIngredient]


class MatchProductsResponse(CamelModel):
    decisions: list[MatchDecision]
    statuses: list[str]


class CreateDishRequest(CamelModel):
    owner_id: str
    name: str
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    tags: list[str] = []
    decisions: list[MatchDecision]


class CreateDishResponse(CamelModel):
    dish_id: int
    ingredient_count: int
    created_product_ids: list[int]
    tag_ids: list[int]


def get_matcher() -> ProductMatcher:
    return build_matcher()


@router.get("/products", response_model=list[ProductRef])
async def list_products(owner_id: Optional[str] = None, db: Session = Depends(get_db)):
    """Products visible to the user, sorted by name for pickers."""
    return CatalogService.list_for_display(db, owner_id)


@router.post("/match-products", response_model=MatchProductsResponse)
async def match_products(
    body: MatchProductsRequest,
    db: Session = Depends(get_db),
    matcher: ProductMatcher = Depends(get_matcher),
):
    """
    Match recognized ingredients to the user's catalog.

    Returns one decision per ingredient in input order, with a display status each.
    """
    catalog = CatalogService.get_catalog(db, body.owner_id)
    decisions = await matcher.match_all(body.ingredients, catalog)
    return MatchProductsResponse(
        decisions=decisions,
        statuses=[match_status(decision) for decision in decisions],
    )


@router.post("/dishes/from-matches", response_model=CreateDishResponse, status_code=201)
async def create_dish_from_matches(body: CreateDishRequest, db: Session = Depends(get_db)):
    """
    Save a dish from reviewed match decisions.

    Recognized tags are attached only when the user already has them.
    """
    bindings = finalize(body.decisions)
    tag_ids = DishService.resolve_tag_ids(db, body.owner_id, body.tags)

    try:
        dish = DishService.create_dish(
            db=db,
            owner_id=body.owner_id,
            name=body.name,
            ingredients=bindings,
            tag_ids=tag_ids,
            source_url=body.source_url,
            image_url=body.image_url,
        )
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    created_product_ids = [
        dish_ingredient.product_id
        for binding, dish_ingredient in zip(bindings, dish.dish_ingredients)
        if binding.product_id is None
    ]

    return CreateDishResponse(
        dish_id=dish.id,
        ingredient_count=len(dish.dish_ingredients),
        created_product_ids=created_product_ids,
        tag_ids=tag_ids,
    )
