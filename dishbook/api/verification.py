"""API endpoint for semantic product-match verification."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dishbook.services.ai_service import ServiceUnavailableError, RateLimitError
from dishbook.services.match_schemas import VerificationRequest, VerificationResult
from dishbook.services.verification_service import (
    ProductVerificationService,
    product_verification_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["verification"])


def get_verification_service() -> ProductVerificationService:
    return product_verification_service


@router.post("/verify-product-match", response_model=VerificationResult)
async def verify_product_match(
    body: VerificationRequest,
    service: ProductVerificationService = Depends(get_verification_service),
):
    """
    Decide whether a recognized ingredient name matches one of up to three candidates.

    Scores below 0.2 or from 0.8 up are answered without calling the model.
    Failures answer 500 with a negative verdict so callers can degrade.
    """
    try:
        return await service.verify(
            body.recognized_name, body.candidates, body.match_score
        )
    except (ServiceUnavailableError, RateLimitError, ValueError) as e:
        logger.error("Error verifying product match for %r: %s", body.recognized_name, e)
        return JSONResponse(
            status_code=500,
            content={
                "isMatch": False,
                "confidence": 0,
                "reason": "Verification failed",
                "error": str(e),
            },
        )
