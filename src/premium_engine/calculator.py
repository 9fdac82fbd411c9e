"""
premium_engine/calculator.py - Product Fee Dispatcher

Single entry point for pricing a product:

1. If the product carries a non-empty rate table AND a calculation config,
   the dynamic resolver prices it from that table (no legacy fallback).
2. Otherwise the calculation type selects a hardcoded legacy calculator.
3. Unknown types price at 0.

Two flavours of every call:
- quote_*      -> FeeResult (tells "computed 0" apart from "no rate")
- calculate_*  -> bare amount, 0 whenever no rate applies

Neither raises for bad or missing inputs.

Author: Actuarial Pipeline Project
License: MIT
"""

from typing import Any, Dict, List, Optional, Union
import logging

import numpy as np
import pandas as pd

from .config import CalculatorSettings, coerce_settings
from .dynamic import DynamicRateResolver
from .legacy import LegacyCalculator
from .models import CalculatorParams, FeeResult, FeeStatus, Product

logger = logging.getLogger(__name__)


class FeeCalculator:
    """
    Fee engine bound to one set of settings.

    Attributes:
        settings: CalculatorSettings in force
        dynamic: Rate-table resolver
        legacy: Hardcoded calculators
    """

    # Columns read by quote_dataframe (frame column -> CalculatorParams field)
    FRAME_COLUMNS = {
        "age": "age",
        "gender": "gender",
        "sum_assured": "sum_assured",
        "term": "term",
        "occupation_group": "occupation_group",
        "plan": "plan",
        "package": "package",
    }

    def __init__(self, settings: Optional[Union[CalculatorSettings, Dict[str, Any]]] = None):
        self.settings = coerce_settings(settings)
        self.dynamic = DynamicRateResolver(self.settings)
        self.legacy = LegacyCalculator(self.settings)
        logger.info(
            f"FeeCalculator initialized: plan matching={self.settings.plan_match_mode.value}, "
            f"{len(self.settings.investment_linked_codes)} investment-linked codes"
        )

    def quote(self, params: CalculatorParams) -> FeeResult:
        """Price one query with an explicit outcome."""
        product = params.product
        if product is not None and product.has_dynamic_table:
            return self.dynamic.quote(product, params)
        return self.legacy.quote(params)

    def calculate(self, params: CalculatorParams) -> float:
        """Price one query; 0 when no rate applies."""
        return self.quote(params).amount

    def quote_dataframe(self, frame: pd.DataFrame,
                        product: Optional[Product] = None,
                        calculation_type: Optional[str] = None) -> pd.DataFrame:
        """
        Price every row of a frame.

        Args:
            frame: One insured per row; needs 'age', 'gender' and
                   'sum_assured', optionally 'term', 'occupation_group',
                   'plan', 'package'
            product: Product priced for every row
            calculation_type: Overrides the product's calculation type

        Returns:
            Copy of the frame with 'fee' and 'fee_status' columns added
        """
        required = ["age", "gender", "sum_assured"]
        missing = [c for c in required if c not in frame.columns]
        if missing:
            raise ValueError(f"Frame missing required columns: {missing}")

        fees: List[float] = []
        statuses: List[str] = []

        for record in frame.to_dict("records"):
            kwargs: Dict[str, Any] = {}
            for column, name in self.FRAME_COLUMNS.items():
                value = record.get(column)
                if value is None or (isinstance(value, float) and np.isnan(value)):
                    continue
                kwargs[name] = value

            # Missing gender parses to OTHER, never to the MALE default
            kwargs.setdefault("gender", None)

            for name in ("age", "term", "occupation_group"):
                if name in kwargs:
                    kwargs[name] = int(kwargs[name])

            params = CalculatorParams(
                calculation_type=calculation_type,
                product=product,
                **kwargs,
            )
            result = self.quote(params)
            fees.append(result.amount)
            statuses.append(result.status.value)

        priced = frame.copy()
        priced["fee"] = fees
        priced["fee_status"] = statuses

        found = sum(1 for s in statuses if s == FeeStatus.COMPUTED.value)
        logger.info(f"Priced {len(priced)} rows: {found} with a rate, "
                    f"{len(priced) - found} without")
        return priced


# =============================================================================
# MODULE-LEVEL API
# =============================================================================

_default_calculator: Optional[FeeCalculator] = None


def _get_default() -> FeeCalculator:
    global _default_calculator
    if _default_calculator is None:
        _default_calculator = FeeCalculator()
    return _default_calculator


def quote_product_fee(params: CalculatorParams) -> FeeResult:
    """Price a query with the default settings, as a FeeResult."""
    return _get_default().quote(params)


def calculate_product_fee(params: CalculatorParams) -> float:
    """Price a query with the default settings; 0 when no rate applies."""
    return _get_default().calculate(params)


def create_calculator(
    settings: Optional[Union[CalculatorSettings, Dict[str, Any]]] = None
) -> FeeCalculator:
    """Factory for a calculator with custom settings (object or dict)."""
    return FeeCalculator(settings)
