"""
premium_engine/rate_tables.py - Built-in Legacy Rate Tables

Rates for the products priced by hardcoded formulas rather than by a rate
table attached to the catalog entry. All rates are per 1,000 of sum assured.

EMBEDDED TABLES:
- Accident rider by occupation group (1-4)
- Cuộc Sống Bình An: age x gender
- Tương Lai Tươi Sáng: age x gender x payment term (8-18)
- Investment-linked main products: age x gender

Only some ages are published; lookups between published ages fall back to
the nearest one (see nearest_age).

Author: Actuarial Pipeline Project
License: MIT
"""

from typing import Dict, List, Optional, TypeVar
import logging

from .models import Gender

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# ACCIDENT RIDER (OCCUPATION GROUP)
# =============================================================================

ACCIDENT_RATES: Dict[int, float] = {
    1: 1.74,
    2: 2.18,
    3: 3.05,
    4: 3.92,
}


# =============================================================================
# CUOC SONG BINH AN (AGE, GENDER)
# =============================================================================

CSBA_RATES: Dict[Gender, Dict[int, float]] = {
    Gender.MALE: {
        15: 43.28, 20: 49.27, 25: 56.60, 30: 65.99, 35: 77.85,
        40: 92.66, 45: 111.17, 50: 135.41, 55: 209.66, 60: 480.77,
    },
    Gender.FEMALE: {
        15: 45.69, 20: 52.39, 25: 60.35, 30: 69.90, 35: 81.64,
        40: 96.01, 45: 113.21, 50: 133.72, 55: 203.83, 60: 467.55,
    },
    Gender.OTHER: {},
}


# =============================================================================
# TUONG LAI TUOI SANG (AGE, GENDER, TERM 8-18)
# =============================================================================

TLTS_RATES: Dict[Gender, Dict[int, Dict[int, float]]] = {
    Gender.MALE: {
        30: {
            8: 244.95, 9: 218.98, 10: 198.55, 11: 182.67, 12: 169.45,
            13: 158.11, 14: 148.41, 15: 139.52, 16: 132.48, 17: 126.02,
            18: 120.45,
        },
        35: {
            8: 246.15, 9: 220.23, 10: 199.80, 11: 183.92, 12: 170.75,
            13: 159.41, 14: 149.71, 15: 140.87, 16: 133.88, 17: 127.47,
            18: 121.95,
        },
    },
    Gender.FEMALE: {
        30: {
            8: 242.90, 9: 216.96, 10: 196.58, 11: 180.63, 12: 167.44,
            13: 156.08, 14: 146.36, 15: 137.49, 16: 130.43, 17: 123.95,
            18: 118.34,
        },
    },
    Gender.OTHER: {},
}


# =============================================================================
# INVESTMENT-LINKED MAIN PRODUCTS (AGE, GENDER)
# Illustrative target premium per 1,000 sum assured, quinquennial issue
# ages; replace with the filed rates when the product is loaded with a table
# =============================================================================

INVESTMENT_LINKED_RATES: Dict[Gender, Dict[int, float]] = {
    Gender.MALE: {
        0: 8.50, 5: 8.90, 10: 9.20, 15: 9.80, 20: 10.40, 25: 12.10,
        30: 13.85, 35: 16.30, 40: 19.75, 45: 24.60, 50: 31.40,
        55: 40.90, 60: 54.20, 65: 72.80,
    },
    Gender.FEMALE: {
        0: 8.20, 5: 8.55, 10: 8.85, 15: 9.35, 20: 9.90, 25: 11.40,
        30: 12.95, 35: 15.10, 40: 18.20, 45: 22.45, 50: 28.60,
        55: 37.10, 60: 49.30, 65: 66.40,
    },
    Gender.OTHER: {},
}


# =============================================================================
# LOOKUP HELPERS
# =============================================================================

def nearest_age(table: Dict[int, T], age: int) -> Optional[int]:
    """
    Pick the table age to price with.

    The exact age when published, else the closest published age. Ages are
    scanned in ascending order and a candidate only replaces the current
    best when strictly closer, so a tie resolves to the lower age.

    Returns:
        A key of `table`, or None for an empty table
    """
    if age in table:
        return age
    if not table:
        return None

    keys = sorted(table.keys())
    closest = keys[0]
    for key in keys[1:]:
        if abs(key - age) < abs(closest - age):
            closest = key
    logger.debug(f"Age {age} not published, using nearest age {closest}")
    return closest


def gender_table(tables: Dict[Gender, Dict[int, T]], gender: Gender) -> Dict[int, T]:
    """Female rates for FEMALE, male rates for anyone else."""
    return tables[Gender.FEMALE if gender == Gender.FEMALE else Gender.MALE]


# =============================================================================
# TABLE LIBRARY
# =============================================================================

class RateTableLibrary:
    """
    Named access to the built-in tables.

    Names follow "<product>_<gender>" for age-keyed tables, e.g.
    "csba_male", "tlts_female", "investment_linked_male"; "accident" is
    keyed by occupation group.
    """

    _tables: Dict[str, Dict[int, object]] = {
        "accident": ACCIDENT_RATES,
        "csba_male": CSBA_RATES[Gender.MALE],
        "csba_female": CSBA_RATES[Gender.FEMALE],
        "tlts_male": TLTS_RATES[Gender.MALE],
        "tlts_female": TLTS_RATES[Gender.FEMALE],
        "investment_linked_male": INVESTMENT_LINKED_RATES[Gender.MALE],
        "investment_linked_female": INVESTMENT_LINKED_RATES[Gender.FEMALE],
    }

    @classmethod
    def list_tables(cls) -> List[str]:
        """List all available table names."""
        return list(cls._tables.keys())

    @classmethod
    def get_table(cls, name: str) -> Optional[Dict[int, object]]:
        """Get raw table data by name."""
        return cls._tables.get(name.lower().replace(" ", "_").replace("-", "_"))

    @classmethod
    def published_ages(cls, name: str) -> List[int]:
        """Ages (or groups) with a published rate."""
        table = cls.get_table(name)
        if table is None:
            raise ValueError(f"Table not found: {name}")
        return sorted(table.keys())


if __name__ == "__main__":
    print("=" * 60)
    print("BUILT-IN RATE TABLES")
    print("=" * 60)

    for name in RateTableLibrary.list_tables():
        ages = RateTableLibrary.published_ages(name)
        print(f"  {name:<26} keys {ages[0]}..{ages[-1]} ({len(ages)} rows)")

    print("\nNearest-age fallback (CSBA male)")
    for age in [15, 22, 23, 27, 70]:
        print(f"  Age {age} -> {nearest_age(CSBA_RATES[Gender.MALE], age)}")
