"""
Review of match decisions before a dish is saved.

The user may accept a decision as is, pick another product, edit the name
of the product to be created, or drop the ingredient. Every helper returns a
new decision (or list) and leaves its input untouched. None of them makes
matching decisions of its own.
"""

from typing import List, Optional, Sequence

from dishbook.services.match_schemas import (
    FinalizedIngredient,
    MatchAction,
    MatchDecision,
    ProductId,
    ProductRef,
)
from dishbook.services.units import DEFAULT_UNIT, normalize_unit, parse_quantity


def _find_product(
    decision: MatchDecision, product_id: ProductId, catalog: Sequence[ProductRef]
) -> Optional[ProductRef]:
    for product in decision.suggestions:
        if product.id == product_id:
            return product
    if decision.matched_product and decision.matched_product.id == product_id:
        return decision.matched_product
    for product in catalog:
        if product.id == product_id:
            return product
    return None


def select_product(
    decision: MatchDecision,
    product_id: ProductId,
    catalog: Sequence[ProductRef] = (),
) -> MatchDecision:
    """Bind the ingredient to an existing product from the suggestions or the full catalog."""
    product = _find_product(decision, product_id, catalog)
    if product is None:
        raise ValueError(f"Product {product_id!r} is not in the catalog")

    return decision.model_copy(
        update={
            "action": MatchAction.USE_EXISTING,
            "selected_product_id": product.id,
            "matched_product": product,
        }
    )


def clear_selection(decision: MatchDecision) -> MatchDecision:
    """Drop any chosen product; a new product will be created."""
    return decision.model_copy(
        update={
            "action": MatchAction.CREATE_NEW,
            "selected_product_id": None,
            "matched_product": None,
        }
    )


def edit_name(decision: MatchDecision, edited_name: str) -> MatchDecision:
    """
    Set the name of the product to create.

    Text that differs from the recognized name marks the decision as edited.
    Blank text restores the recognized name. Editing always releases a
    previously selected product.
    """
    trimmed = edited_name.strip()
    changed = bool(trimmed) and trimmed != decision.recognized_name

    return decision.model_copy(
        update={
            "action": MatchAction.EDIT if changed else MatchAction.CREATE_NEW,
            "edited_name": trimmed or decision.recognized_name,
            "selected_product_id": None,
        }
    )


def remove_decision(
    decisions: Sequence[MatchDecision], position: int
) -> List[MatchDecision]:
    """Drop one ingredient from the dish."""
    if not 0 <= position < len(decisions):
        raise IndexError(f"No decision at position {position}")
    return [d for i, d in enumerate(decisions) if i != position]


def match_status(decision: MatchDecision) -> str:
    """Display label derived only from action and selected product."""
    if decision.action == MatchAction.USE_EXISTING and decision.selected_product_id is not None:
        return "matched"
    if decision.action == MatchAction.CREATE_NEW:
        return "new"
    if decision.action == MatchAction.EDIT:
        return "edited"
    return "pending"


def finalize(decisions: Sequence[MatchDecision]) -> List[FinalizedIngredient]:
    """Turn reviewed decisions into ingredient bindings for persistence."""
    finalized = []
    for decision in decisions:
        quantity = parse_quantity(decision.recognized_quantity)
        unit_code = normalize_unit(decision.recognized_unit) or DEFAULT_UNIT

        if (
            decision.action == MatchAction.USE_EXISTING
            and decision.selected_product_id is not None
        ):
            finalized.append(
                FinalizedIngredient(
                    product_id=decision.selected_product_id,
                    quantity=quantity,
                    unit_code=unit_code,
                )
            )
        else:
            name = (decision.edited_name or decision.recognized_name).strip()
            finalized.append(
                FinalizedIngredient(
                    new_product_name=name,
                    quantity=quantity,
                    unit_code=unit_code,
                )
            )
    return finalized
