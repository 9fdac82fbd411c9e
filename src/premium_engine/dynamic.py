"""
premium_engine/dynamic.py - Dynamic Rate-Table Resolver

Prices a product from the generic rate table attached to its catalog
entry. The product's CalculationConfig names which column holds each
lookup dimension and which column holds the result; the resolver scans the
rows in order and takes the first one that matches on every configured
dimension the row actually fills in.

Predicates (all must pass):
    age         numeric equality
    gender      accent/case-insensitive synonym match
    term        numeric equality
    occupation  numeric equality
    plan        accent/case-insensitive substring (or exact) match
    package     accent/case-insensitive substring (or exact) match

Formula:
    RATE_BASED  round(sum_assured / 1000 x rate)
    FIXED_FEE   value as-is

Author: Actuarial Pipeline Project
License: MIT
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from .config import CalculatorSettings, PlanMatchMode
from .models import (
    CalculationConfig,
    CalculatorParams,
    FeeResult,
    FeeStatus,
    FormulaType,
    Product,
)
from .normalization import (
    exact_match,
    is_blank,
    loose_match,
    matches_gender,
    numbers_equal,
    round_half_up,
    to_number,
)

logger = logging.getLogger(__name__)


class DynamicRateResolver:
    """
    Rate-table lookup driven by a product's calculation config.

    Attributes:
        plan_match_mode: LOOSE (substring either way) or EXACT label match
                         for the plan and package columns
    """

    SOURCE = "dynamic"

    def __init__(self, settings: Optional[CalculatorSettings] = None):
        settings = settings or CalculatorSettings()
        self.plan_match_mode = settings.plan_match_mode
        self._text_match: Callable[[Any, Optional[str]], bool] = (
            exact_match if self.plan_match_mode == PlanMatchMode.EXACT else loose_match
        )

    # -------------------------------------------------------------------------
    # Row matching
    # -------------------------------------------------------------------------

    def row_matches(self, row: Dict[str, Any], config: CalculationConfig,
                    params: CalculatorParams) -> bool:
        """True if every configured column present in the row matches."""
        keys = config.lookup_keys

        def cell(column: Optional[str]) -> Any:
            if not column:
                return None
            return row.get(column)

        value = cell(keys.age)
        if not is_blank(value) and not numbers_equal(value, params.age):
            return False

        value = cell(keys.gender)
        if not is_blank(value) and not matches_gender(value, params.gender.name):
            return False

        value = cell(keys.term)
        if not is_blank(value) and not numbers_equal(value, params.term):
            return False

        value = cell(keys.occupation)
        if not is_blank(value) and not numbers_equal(value, params.occupation_group):
            return False

        value = cell(keys.plan)
        if not is_blank(value) and not self._text_match(value, params.plan):
            return False

        value = cell(keys.package)
        if not is_blank(value) and not self._text_match(value, params.package):
            return False

        return True

    def find_row(self, rate_table: List[Dict[str, Any]], config: CalculationConfig,
                 params: CalculatorParams) -> Optional[Dict[str, Any]]:
        """First matching row in table order, or None."""
        for row in rate_table:
            if self.row_matches(row, config, params):
                return row
        return None

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    def quote(self, product: Product, params: CalculatorParams) -> FeeResult:
        """
        Price a query against the product's rate table.

        Returns:
            FeeResult; NO_RATE when nothing matches or the result cell is
            empty, INVALID_RATE when it is not a number, UNSUPPORTED for an
            unknown formula tag
        """
        if not product.rate_table or product.calculation_config is None:
            return FeeResult.missing("product has no rate table", source=self.SOURCE)

        config = product.calculation_config
        row = self.find_row(product.rate_table, config, params)
        if row is None:
            logger.debug(
                f"No rate row for {product.code or product.name}: "
                f"age={params.age} gender={params.gender.name} term={params.term} "
                f"occupation={params.occupation_group} plan={params.plan!r} "
                f"package={params.package!r}"
            )
            return FeeResult.missing("no matching rate row", source=self.SOURCE)

        raw = row.get(config.result_key)
        if is_blank(raw):
            return FeeResult.missing(
                f"result column {config.result_key!r} empty",
                source=self.SOURCE, matched_row=row,
            )

        rate = to_number(raw)
        if rate is None:
            logger.debug(f"Non-numeric rate {raw!r} in column {config.result_key!r}")
            return FeeResult.missing(
                f"non-numeric rate {raw!r}", source=self.SOURCE,
                status=FeeStatus.INVALID_RATE, matched_row=row,
            )

        if config.formula_type == FormulaType.RATE_BASED.value:
            amount = round_half_up(params.sum_assured / 1000 * rate)
        elif config.formula_type == FormulaType.FIXED_FEE.value:
            amount = int(rate) if rate.is_integer() else rate
        else:
            logger.warning(f"Unknown formula type {config.formula_type!r} "
                           f"on product {product.code or product.name}")
            return FeeResult.missing(
                f"unknown formula type {config.formula_type!r}",
                source=self.SOURCE, status=FeeStatus.UNSUPPORTED, matched_row=row,
            )

        return FeeResult.computed(amount, source=self.SOURCE, rate=rate, matched_row=row)

    def calculate(self, product: Product, params: CalculatorParams) -> float:
        """Fee amount, 0 when no rate applies."""
        return self.quote(product, params).amount
