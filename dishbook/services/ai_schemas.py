"""
Pydantic models for validating structured JSON responses from Claude AI.

Each schema corresponds to one AI method's expected response format.
Used by _call_with_schema_retry() in ai_service.py for validation + retry.
"""

from pydantic import BaseModel, Field


# --- Product Match Verification (verify_product_match) ---


class ProductVerificationSchema(BaseModel):
    is_match: bool
    matched_index: int = -1  # Index into the candidate list, -1 when nothing matches
    confidence: float = Field(ge=0, le=1)
    reason: str = ""
