"""Unit codes and free-text quantity parsing for dish ingredients."""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "szt"

UNIT_CODES = ("szt", "g", "kg", "ml", "l", "łyżka", "łyżeczka", "szklanka")

UNIT_ALIASES = {
    "sztuk": "szt",
    "sztuka": "szt",
    "sztuki": "szt",
    "gram": "g",
    "gramy": "g",
    "kilogram": "kg",
    "kilogramy": "kg",
    "mililitr": "ml",
    "mililitry": "ml",
    "litr": "l",
    "litry": "l",
}

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:[.,]\d+)?)")


def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Map a recognized unit to an allowed unit code, or None if it is not one."""
    if not unit or not unit.strip():
        return None

    key = unit.strip().lower()
    if key in UNIT_ALIASES:
        return UNIT_ALIASES[key]
    if key in UNIT_CODES:
        return key

    logger.warning("Unknown unit %r, leaving it unset", unit)
    return None


def parse_quantity(quantity: Optional[str]) -> Optional[float]:
    """Leading number of a free-text quantity ("1,5 szklanki" -> 1.5), else None."""
    if not quantity:
        return None
    match = _LEADING_NUMBER.match(quantity)
    if not match:
        return None
    return float(match.group(1).replace(",", "."))
