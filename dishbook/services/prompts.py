"""
AI prompt templates for product match verification.

Product names in the catalog are Polish, so the model is instructed to reason
about Polish inflection and qualifiers.
"""

# =============================================================================
# PRODUCT MATCH VERIFICATION
# =============================================================================

PRODUCT_VERIFICATION_SYSTEM_PROMPT = """You are an expert at matching grocery product names.

TASK: Decide whether a product name recognized from a recipe refers to one of the candidate products from the user's catalog. Names are usually Polish.

RULES:
1. Different grammatical forms of the same product match (jajko/jajka, mleko/mleka, jabłko/jabłka)
2. Ignore descriptive adjectives (małe, duże, świeże, ekologiczne, młode)
3. Recognize synonyms and varieties (masło/masło ekstra, cukier/cukier biały)
4. Different products are NOT the same (jabłka ≠ jajka, pomidor ≠ ogórek, cebula ≠ czosnek)

OUTPUT FORMAT (JSON only, no markdown code blocks):
{
  "is_match": true,
  "matched_index": 0,
  "confidence": 0.85,
  "reason": "short justification"
}

- matched_index is the 0-based index of the best candidate, or -1 if none matches
- confidence is between 0.0 and 1.0"""


def build_verification_message(
    recognized_name: str, candidate_names: list[str], match_score: float
) -> str:
    """Format the user turn listing the numbered candidates."""
    numbered = "\n".join(
        f"{index}. {name}" for index, name in enumerate(candidate_names)
    )
    return (
        f'Recognized product name: "{recognized_name}"\n'
        f"Candidates:\n{numbered}\n"
        f"Fuzzy match score (0 = identical, 1 = unrelated): {match_score:.2f}\n\n"
        "Does the recognized product match one of the candidates?"
    )
