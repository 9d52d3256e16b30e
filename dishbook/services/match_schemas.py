"""
Pydantic models shared by the ingredient-to-product reconciliation pipeline.

Field names are snake_case in Python and camelCase on the wire, so the same
models serve the matching service, the verifier boundary and the HTTP API.
"""

from enum import Enum
from typing import NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


ProductId = Union[int, str]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Catalog ---


class ProductRef(CamelModel):
    """Immutable snapshot of a catalog product."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: ProductId
    owner_id: Optional[str] = None
    name: str


class ScoredProduct(NamedTuple):
    product: ProductRef
    score: float  # 0 = identical, 1 = unrelated


# --- Recognizer output ---


class RecognizedIngredient(CamelModel):
    name: str
    quantity: str = ""
    unit: str = ""


class RecognizedRecipe(CamelModel):
    name: str
    ingredients: list[RecognizedIngredient]
    tags: list[str] = []


# --- Matching decisions ---


class MatchAction(str, Enum):
    USE_EXISTING = "use_existing"
    CREATE_NEW = "create_new"
    EDIT = "edit"


class MatchDecision(CamelModel):
    recognized_name: str
    recognized_quantity: str = ""
    recognized_unit: str = ""
    matched_product: Optional[ProductRef] = None
    match_score: float = Field(ge=0, le=1)
    suggestions: list[ProductRef] = []
    action: MatchAction = MatchAction.CREATE_NEW
    selected_product_id: Optional[ProductId] = None
    edited_name: Optional[str] = None


# --- Verifier boundary ---


class VerificationCandidate(CamelModel):
    id: ProductId
    name: str


class VerificationRequest(CamelModel):
    recognized_name: str
    candidates: list[VerificationCandidate] = Field(default=[], max_length=3)
    match_score: float = Field(ge=0, le=1)


class VerificationResult(CamelModel):
    is_match: bool
    confidence: float = Field(ge=0, le=1)
    reason: str = ""
    matched_product: Optional[VerificationCandidate] = None


# --- Review output consumed by persistence ---


class FinalizedIngredient(CamelModel):
    """Ingredient binding after review: either an existing product id or a new product name."""

    product_id: Optional[ProductId] = None
    new_product_name: Optional[str] = None
    quantity: Optional[float] = None
    unit_code: str
