"""
premium_engine/normalization.py - Loose Text and Number Matching

Rate tables are typed by hand or pasted from spreadsheets, so cell values
arrive as "Nữ", "NAM", " nu ", 30, "30" or "Gói 2 ". These helpers compare
such cells against query values without caring about case, accents or
surrounding whitespace.

Author: Actuarial Pipeline Project
License: MIT
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple
import math
import unicodedata


# Accepted spellings per gender after remove_accents(); keyed by Gender name
GENDER_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "MALE": ("nam", "male", "m", "trai", "1"),
    "FEMALE": ("nu", "female", "f", "gai", "woman", "2"),
}


def remove_accents(text: str) -> str:
    """
    Strip Vietnamese diacritics and normalize case.

    "Nữ" -> "nu", "Đồng" -> "dong", "  NAM " -> "nam"
    """
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    stripped = stripped.replace("đ", "d").replace("Đ", "D")
    return stripped.lower().strip()


def matches_gender(cell: Any, gender_name: str) -> bool:
    """True if a rate-table gender cell denotes the given Gender name."""
    return remove_accents(str(cell)) in GENDER_SYNONYMS.get(gender_name, ())


def loose_match(cell: Any, query: Optional[str]) -> bool:
    """
    Substring match in either direction, ignoring accents and case.

    An empty query is contained in every cell, so it matches.
    """
    cell_text = remove_accents(str(cell))
    query_text = remove_accents(query or "")
    return query_text in cell_text or cell_text in query_text


def exact_match(cell: Any, query: Optional[str]) -> bool:
    """Equality ignoring accents and case."""
    return remove_accents(str(cell)) == remove_accents(query or "")


def is_blank(value: Any) -> bool:
    """True for values an imported row should treat as absent."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a cell to a float.

    Returns None for blanks, booleans and anything that does not parse,
    so callers can treat "no number" as a miss rather than as zero.
    Separators are not interpreted: "3,05" and "1,500" are not numbers.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if "," in text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def numbers_equal(cell: Any, query: Optional[float]) -> bool:
    """Numeric equality between a cell ("30" or 30) and a query value."""
    if query is None:
        return False
    number = to_number(cell)
    return number is not None and number == float(query)


def round_half_up(value: float) -> int:
    """Round a currency amount to whole units, halves rounding up."""
    try:
        return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return 0
