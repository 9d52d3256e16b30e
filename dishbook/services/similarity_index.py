"""
Fuzzy name index over a product catalog.

Scores use an approximate-substring model. The query is located inside the
candidate name and the score grows with edit errors and with the distance of
the match from the start of the name. Multi-word names are weighted towards a
lower score. 0 means identical, 1 means unrelated.
"""

import math
import sys
from typing import List, Optional, Sequence

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

from dishbook.services.match_schemas import ProductRef, ScoredProduct
from dishbook.services.normalizer import normalize

# Raw scores at or above this are dropped from results
MATCH_THRESHOLD = 0.3
# Shortest run of identical characters that counts as a match
MIN_MATCH_CHAR_LENGTH = 3
# Characters of offset that cost a full point of score
MATCH_DISTANCE = 100


def _longest_equal_run(pattern: str, window: str) -> int:
    runs = [
        op.src_end - op.src_start
        for op in Levenshtein.opcodes(pattern, window)
        if op.tag == "equal"
    ]
    return max(runs, default=0)


def raw_match_score(pattern: str, text: str) -> Optional[float]:
    """
    Score how well `pattern` occurs inside `text`, before field-length weighting.

    Returns None when there is no usable match (no run of MIN_MATCH_CHAR_LENGTH
    identical characters).
    """
    if not pattern or not text:
        return None

    location = text.find(pattern)
    if location != -1:
        errors = 0
        window = pattern
    elif len(pattern) < len(text):
        alignment = fuzz.partial_ratio_alignment(pattern, text)
        if alignment is None:
            return None
        location = alignment.dest_start
        window = text[alignment.dest_start:alignment.dest_end]
        errors = Levenshtein.distance(pattern, window)
    else:
        location = 0
        window = text
        errors = Levenshtein.distance(pattern, text)

    if _longest_equal_run(pattern, window) < MIN_MATCH_CHAR_LENGTH:
        return None

    return min(errors / len(pattern) + location / MATCH_DISTANCE, 1.0)


def field_norm(text: str) -> float:
    """Length norm for a name: 1/sqrt(number of words), rounded to 3 places."""
    token_count = len(text.split())
    if token_count == 0:
        return 1.0
    return round(1 / math.sqrt(token_count), 3)


class SimilarityIndex:
    """Read-only index built once per matching run."""

    def __init__(self, products: Sequence[ProductRef]):
        self._entries = [
            (product, normalize(product.name)) for product in products
        ]

    def __len__(self) -> int:
        return len(self._entries)

    def query(self, normalized_name: str) -> List[ScoredProduct]:
        """
        Return candidates best-first (lowest score first).

        Candidates with equal scores keep catalog order.
        """
        results = []
        for product, candidate_name in self._entries:
            raw = raw_match_score(normalized_name, candidate_name)
            if raw is None or raw >= MATCH_THRESHOLD:
                continue

            # Exact hits still get a strictly positive score before weighting
            base = raw if raw > 0 else sys.float_info.epsilon
            score = min(max(base ** field_norm(candidate_name), 0.0), 1.0)
            results.append(ScoredProduct(product=product, score=score))

        results.sort(key=lambda scored: scored.score)
        return results
