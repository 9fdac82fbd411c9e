"""
premium_engine/legacy.py - Hardcoded Per-Product Calculators

Products whose catalog entry carries no rate table are priced here, by
calculation type:

    HEALTH_CARE                 health-care schedule by age/plan/package
    RATE_PER_1000_OCCUPATION    accident rider, rate by occupation group
    RATE_PER_1000_AGE_GENDER    age/gender table, nearest-age fallback;
                                investment-linked codes use their own table
    RATE_PER_1000_TERM          age/gender/term table, nearest-age fallback

Every calculator returns a FeeResult; nothing here raises on bad input.

Author: Actuarial Pipeline Project
License: MIT
"""

from typing import Callable, Dict, Optional
import logging

from .config import CalculatorSettings
from .health_care import quote_health_care
from .models import CalculatorParams, FeeResult, FeeStatus, Gender, ProductCalculationType
from .normalization import round_half_up
from .rate_tables import (
    ACCIDENT_RATES,
    CSBA_RATES,
    INVESTMENT_LINKED_RATES,
    TLTS_RATES,
    gender_table,
    nearest_age,
)

logger = logging.getLogger(__name__)


def _per_thousand(sum_assured: float, rate: float) -> int:
    return round_half_up(sum_assured / 1000 * rate)


# =============================================================================
# STANDALONE CALCULATORS
# =============================================================================

def quote_accident(sum_assured: float, occupation_group: Optional[int]) -> FeeResult:
    """Accident rider: (sum assured / 1000) x rate[occupation group]."""
    if not occupation_group:
        return FeeResult.missing("occupation group missing")

    rate = ACCIDENT_RATES.get(int(occupation_group))
    if rate is None:
        return FeeResult.missing(f"unknown occupation group {occupation_group}")

    return FeeResult.computed(_per_thousand(sum_assured, rate), source="legacy", rate=rate)


def quote_age_gender(sum_assured: float, age: int, gender: Gender,
                     tables: Dict[Gender, Dict[int, float]] = CSBA_RATES) -> FeeResult:
    """
    Age/gender premium per thousand with nearest-age fallback.

    Args:
        sum_assured: Sum assured
        age: Issue age
        gender: FEMALE uses the female table, anyone else the male one
        tables: Per-gender {age: rate} tables
    """
    table = gender_table(tables, gender)
    rate_age = nearest_age(table, age)
    if rate_age is None:
        return FeeResult.missing("empty age/gender table")

    rate = table[rate_age]
    result = FeeResult.computed(_per_thousand(sum_assured, rate), source="legacy", rate=rate)
    result.details["rate_age"] = rate_age
    return result


def quote_investment_linked(sum_assured: float, age: int, gender: Gender) -> FeeResult:
    """Investment-linked main products, priced like an age/gender product."""
    return quote_age_gender(sum_assured, age, gender, INVESTMENT_LINKED_RATES)


def quote_age_gender_term(sum_assured: float, age: int, gender: Gender,
                          term: Optional[int],
                          tables: Dict[Gender, Dict[int, Dict[int, float]]] = TLTS_RATES
                          ) -> FeeResult:
    """
    Age/gender/term premium per thousand.

    The age row falls back to the nearest published age; the term must
    then be published exactly within that row.
    """
    if not term:
        return FeeResult.missing("payment term missing")

    table = gender_table(tables, gender)
    rate_age = nearest_age(table, age)
    if rate_age is None:
        return FeeResult.missing("empty age/gender/term table")

    rate = table[rate_age].get(int(term))
    if not rate:
        return FeeResult.missing(f"no rate for term {term} at age {rate_age}")

    result = FeeResult.computed(_per_thousand(sum_assured, rate), source="legacy", rate=rate)
    result.details["rate_age"] = rate_age
    return result


# =============================================================================
# DISPATCH BY CALCULATION TYPE
# =============================================================================

class LegacyCalculator:
    """
    Routes a query to the hardcoded calculator for its calculation type.

    Types without a hardcoded calculator (UL_UNIT_LINK, WAIVER_CI, FIXED)
    and unknown tags resolve to UNSUPPORTED.
    """

    def __init__(self, settings: Optional[CalculatorSettings] = None):
        self.settings = settings or CalculatorSettings()
        self.investment_linked_codes = {
            code.upper() for code in self.settings.investment_linked_codes
        }
        self._dispatch: Dict[str, Callable[[CalculatorParams], FeeResult]] = {
            ProductCalculationType.HEALTH_CARE.value: self._health_care,
            ProductCalculationType.RATE_PER_1000_OCCUPATION.value: self._accident,
            ProductCalculationType.RATE_PER_1000_AGE_GENDER.value: self._age_gender,
            ProductCalculationType.RATE_PER_1000_TERM.value: self._age_gender_term,
        }

    def supports(self, calculation_type: Optional[str]) -> bool:
        return calculation_type in self._dispatch

    def quote(self, params: CalculatorParams) -> FeeResult:
        handler = self._dispatch.get(params.calculation_type or "")
        if handler is None:
            logger.warning(f"No legacy calculator for type {params.calculation_type!r}")
            return FeeResult.missing(
                f"unsupported calculation type {params.calculation_type!r}",
                status=FeeStatus.UNSUPPORTED,
            )
        return handler(params)

    def _health_care(self, params: CalculatorParams) -> FeeResult:
        return quote_health_care(
            params.age,
            params.gender,
            params.plan or self.settings.default_health_plan,
            params.package or self.settings.default_health_package,
        )

    def _accident(self, params: CalculatorParams) -> FeeResult:
        return quote_accident(params.sum_assured, params.occupation_group)

    def _age_gender(self, params: CalculatorParams) -> FeeResult:
        if (params.product_code or "").upper() in self.investment_linked_codes:
            return quote_investment_linked(params.sum_assured, params.age, params.gender)
        return quote_age_gender(params.sum_assured, params.age, params.gender)

    def _age_gender_term(self, params: CalculatorParams) -> FeeResult:
        return quote_age_gender_term(params.sum_assured, params.age, params.gender,
                                     params.term)
