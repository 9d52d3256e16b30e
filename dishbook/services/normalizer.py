"""Product and ingredient name normalization for fuzzy matching."""

import re
import unicodedata

_PUNCTUATION = re.compile(r"[.,;:!?()]")
_WHITESPACE = re.compile(r"\s+")

# Irregular Polish food plurals seen in recognized recipes.
# Keys and values are diacritic-free so a second normalize() pass is a no-op.
PLURAL_FORMS: dict[str, str] = {
    "jajka": "jajko",
    "jablka": "jablko",
    "pomidory": "pomidor",
    "ogorki": "ogorek",
    "cebule": "cebula",
    "mleka": "mleko",
    "ziola": "ziele",
    "warzywa": "warzywo",
    "owoce": "owoc",
}


def strip_diacritics(text: str) -> str:
    """Decompose to base letters and drop combining marks (ł has no decomposition and is kept)."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def singularize(text: str, whole_words: bool = False) -> str:
    """
    Replace known plural forms with their singular.

    By default any occurrence is replaced, including inside longer words
    ("jajkami" -> "jajkomi"). Ingredient names are short, so the plural
    normally stands alone. whole_words=True only replaces standalone tokens.
    """
    for plural, singular in PLURAL_FORMS.items():
        if whole_words:
            text = re.sub(rf"\b{plural}\b", singular, text)
        elif plural in text:
            text = text.replace(plural, singular)
    return text


def normalize(name: str) -> str:
    """
    Canonicalize a product or ingredient name for comparison.

    Lower-cases, strips diacritics and the punctuation set `. , ; : ! ? ( )`,
    collapses whitespace and maps known plurals to singular.
    Total and idempotent: normalize(normalize(x)) == normalize(x).
    """
    normalized = strip_diacritics(name.lower())
    normalized = _PUNCTUATION.sub("", normalized)
    normalized = _WHITESPACE.sub(" ", normalized).strip()
    return singularize(normalized)
