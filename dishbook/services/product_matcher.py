"""
Ingredient-to-product reconciliation.

For each recognized ingredient the matcher normalizes the name, looks it up
in a fuzzy index over the catalog and applies score bands:

    [0, 0.2)    automatic match, no verifier call
    [0.2, 0.6)  ambiguous, escalated to the semantic verifier
    [0.6, 1]    rejected, a new product will be created

A verifier failure never aborts the batch: the affected ingredient falls back
to "create new" with the best fuzzy candidate shown as a suggestion.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from dishbook.config import settings
from dishbook.services.match_schemas import (
    MatchAction,
    MatchDecision,
    ProductRef,
    RecognizedIngredient,
    ScoredProduct,
    VerificationCandidate,
)
from dishbook.services.normalizer import normalize
from dishbook.services.similarity_index import SimilarityIndex
from dishbook.services.verifier_client import (
    LocalVerifierClient,
    VerificationError,
    Verifier,
)

logger = logging.getLogger(__name__)

AUTO_ACCEPT_BELOW = 0.2
REJECT_FROM = 0.6

VERIFIED_MATCH_ABOVE = 0.7
SUGGESTION_ABOVE = 0.5

VERIFIER_CANDIDATES = 3
MAX_SUGGESTIONS = 5


class ProductMatcher:
    """Matches recognized ingredients against a product catalog snapshot."""

    def __init__(
        self,
        verifier: Optional[Verifier] = None,
        index_factory: Callable[[Sequence[ProductRef]], SimilarityIndex] = SimilarityIndex,
        concurrent: bool = False,
    ):
        self.verifier = verifier
        self.index_factory = index_factory
        self.concurrent = concurrent

    async def match_all(
        self,
        ingredients: Sequence[RecognizedIngredient],
        catalog: Sequence[ProductRef],
    ) -> List[MatchDecision]:
        """Return exactly one decision per ingredient, in input order."""
        if not catalog:
            return [self._new_product_decision(ing) for ing in ingredients]

        index = self.index_factory(catalog)

        if self.concurrent:
            return list(
                await asyncio.gather(
                    *(self._match_one(ing, index) for ing in ingredients)
                )
            )

        decisions = []
        for ing in ingredients:
            decisions.append(await self._match_one(ing, index))
        return decisions

    def _new_product_decision(self, ing: RecognizedIngredient) -> MatchDecision:
        return MatchDecision(
            recognized_name=ing.name,
            recognized_quantity=ing.quantity,
            recognized_unit=ing.unit,
            matched_product=None,
            match_score=1,
            suggestions=[],
            action=MatchAction.CREATE_NEW,
        )

    async def _match_one(
        self, ing: RecognizedIngredient, index: SimilarityIndex
    ) -> MatchDecision:
        ranked = index.query(normalize(ing.name))
        best = ranked[0] if ranked else None
        match_score = best.score if best else 1.0

        action = MatchAction.CREATE_NEW
        matched_product = None

        if best and match_score < AUTO_ACCEPT_BELOW:
            action = MatchAction.USE_EXISTING
            matched_product = best.product
        elif best and match_score < REJECT_FROM:
            action, matched_product = await self._verify(ing, ranked, match_score)

        return MatchDecision(
            recognized_name=ing.name,
            recognized_quantity=ing.quantity,
            recognized_unit=ing.unit,
            matched_product=matched_product,
            match_score=match_score,
            suggestions=[scored.product for scored in ranked[:MAX_SUGGESTIONS]],
            action=action,
            selected_product_id=(
                matched_product.id if action == MatchAction.USE_EXISTING else None
            ),
        )

    async def _verify(
        self,
        ing: RecognizedIngredient,
        ranked: List[ScoredProduct],
        match_score: float,
    ) -> tuple[MatchAction, Optional[ProductRef]]:
        """Resolve an ambiguous score with the verifier. Failures degrade to a suggestion."""
        best = ranked[0].product
        top = [scored.product for scored in ranked[:VERIFIER_CANDIDATES]]

        if self.verifier is None:
            logger.warning(
                "No verifier configured, suggesting %r for %r", best.name, ing.name
            )
            return MatchAction.CREATE_NEW, best

        try:
            result = await self.verifier.verify(
                ing.name,
                [VerificationCandidate(id=p.id, name=p.name) for p in top],
                match_score,
            )
        except VerificationError as e:
            logger.warning(
                "Verification failed for %r, suggesting %r: %s", ing.name, best.name, e
            )
            return MatchAction.CREATE_NEW, best
        except Exception:
            logger.exception(
                "Unexpected verifier error for %r, suggesting %r", ing.name, best.name
            )
            return MatchAction.CREATE_NEW, best

        if not result.is_match or result.confidence <= SUGGESTION_ABOVE:
            return MatchAction.CREATE_NEW, None

        verified = best
        if result.matched_product is not None:
            by_id = {p.id: p for p in top}
            verified = by_id.get(result.matched_product.id)
            if verified is None:
                logger.warning(
                    "Verifier named unknown product %r for %r, using best fuzzy match",
                    result.matched_product.id,
                    ing.name,
                )
                verified = best

        if result.confidence > VERIFIED_MATCH_ABOVE:
            return MatchAction.USE_EXISTING, verified
        return MatchAction.CREATE_NEW, verified


def build_matcher(verifier: Optional[Verifier] = None) -> ProductMatcher:
    """Matcher wired with the in-process verifier and configured concurrency."""
    return ProductMatcher(
        verifier=verifier if verifier is not None else LocalVerifierClient(),
        concurrent=settings.match_concurrently,
    )
