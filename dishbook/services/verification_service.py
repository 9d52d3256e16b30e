"""Server side of the product-match verifier boundary."""

import logging
from typing import Optional, Sequence

from dishbook.services.ai_service import ClaudeService
from dishbook.services.match_schemas import VerificationCandidate, VerificationResult

logger = logging.getLogger(__name__)

# Boundary fast paths. Independent of the matcher's own 0.2 / 0.6 bands.
CERTAIN_MATCH_BELOW = 0.2
CERTAIN_REJECT_FROM = 0.8


class ProductVerificationService:
    """Adjudicates ambiguous fuzzy matches, asking Claude only when the score is inconclusive."""

    def __init__(self, claude_service: Optional[ClaudeService] = None):
        self._claude_service = claude_service

    @property
    def claude_service(self) -> ClaudeService:
        # Built on first use
        if self._claude_service is None:
            self._claude_service = ClaudeService()
        return self._claude_service

    async def verify(
        self,
        recognized_name: str,
        candidates: Sequence[VerificationCandidate],
        match_score: float,
    ) -> VerificationResult:
        """
        Decide whether `recognized_name` refers to one of `candidates`.

        Raises:
            ServiceUnavailableError: AI service temporarily down
            RateLimitError: Too many requests
            ValueError: Invalid AI response or request error
        """
        if not candidates:
            return VerificationResult(
                is_match=False, confidence=0, reason="No candidates to verify"
            )

        if match_score < CERTAIN_MATCH_BELOW:
            logger.debug(
                "Fast-path match for %r (score %.2f)", recognized_name, match_score
            )
            return VerificationResult(
                is_match=True,
                confidence=1 - match_score,
                reason="Fuzzy match is very close",
            )

        if match_score >= CERTAIN_REJECT_FROM:
            logger.debug(
                "Fast-path reject for %r (score %.2f)", recognized_name, match_score
            )
            return VerificationResult(
                is_match=False, confidence=0, reason="Fuzzy match is too weak"
            )

        verdict = await self.claude_service.verify_product_match(
            recognized_name=recognized_name,
            candidate_names=[candidate.name for candidate in candidates],
            match_score=match_score,
        )

        index = verdict["matched_index"]
        matched = candidates[index] if 0 <= index < len(candidates) else None

        return VerificationResult(
            is_match=verdict["is_match"] and matched is not None,
            confidence=verdict["confidence"],
            reason=verdict["reason"] or "No reason given",
            matched_product=matched,
        )


product_verification_service = ProductVerificationService()
