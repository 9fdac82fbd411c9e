"""
premium_engine/projection.py - Unit-Linked Cash-Value Projection

Year-by-year illustration of an investment-linked policy account, used on
sales illustrations. This is an annual approximation for illustration
purposes, not a monthly policy-administration calculation.

Per policy year t:
    allocation  = premium_t x (1 - initial_charge_t)
    interest    = (AV_{t-1} + allocation) x i
    risk        = max(SA - (AV_{t-1} + allocation + interest), 0)
    COI         = risk / 1000 x coi_rate(age)
    AV_t        = max(AV_{t-1} + allocation + interest + bonus_t - COI - admin, 0)

Surrender value is nil for the first two policy years; death benefit is
max(SA, AV_t). The projection stops after the first year (from year 2)
in which the account is exhausted.

Author: Actuarial Pipeline Project
License: MIT
"""

from dataclasses import asdict, dataclass
from typing import List, Optional
import logging

import pandas as pd

from .config import CalculatorSettings
from .models import ProjectionConfig
from .normalization import round_half_up

logger = logging.getLogger(__name__)


# Cost of insurance per 1,000 at risk; first band whose age floor is exceeded
COI_BANDS = [
    (70, 0.030),
    (60, 0.015),
    (50, 0.008),
    (40, 0.003),
]
BASE_COI_RATE = 0.001

# Policy years in which surrender pays nothing
SURRENDER_LOCK_YEARS = 2


@dataclass
class YearProjection:
    """Projected values at the end of one policy year."""
    year: int
    age: int
    premium_paid: float
    accumulated_premium: float
    account_value: int
    surrender_value: int
    death_benefit: int


def coi_rate(age: int) -> float:
    """Cost-of-insurance rate per 1,000 at risk for an attained age."""
    for floor, rate in COI_BANDS:
        if age > floor:
            return rate
    return BASE_COI_RATE


def calculate_projection(
    current_age: int,
    annual_premium: float,
    sum_assured: float,
    payment_term: int,
    interest_rate: Optional[float] = None,
    config: Optional[ProjectionConfig] = None,
    settings: Optional[CalculatorSettings] = None,
) -> List[YearProjection]:
    """
    Project the policy account year by year.

    Args:
        current_age: Insured age at issue
        annual_premium: Main-product premium paid each year of the term
        sum_assured: Face amount
        payment_term: Years of premium payment
        interest_rate: Assumed crediting rate (default: config default)
        config: Product charges and bonuses (default: generic UL)
        settings: Projection horizon and admin fee

    Returns:
        One YearProjection per projected policy year
    """
    config = config or ProjectionConfig()
    settings = settings or CalculatorSettings()
    rate = config.default_interest_rate if interest_rate is None else interest_rate
    admin_fee = settings.admin_fee_monthly * 12

    years = min(settings.projection_years_cap, settings.projection_max_age - current_age)
    bonuses = {b.year: b for b in config.bonuses}

    projections: List[YearProjection] = []
    account_value = 0.0
    total_premium = 0.0

    for t in range(1, years + 1):
        age = current_age + t
        premium_in = annual_premium if t <= payment_term else 0.0
        total_premium += premium_in

        allocated = premium_in * (1 - config.initial_charges.get(t, 0.0))
        interest = (account_value + allocated) * rate

        at_risk = max(sum_assured - (account_value + allocated + interest), 0.0)
        coi = at_risk / 1000 * coi_rate(age)

        bonus = 0.0
        rule = bonuses.get(t)
        if rule is not None:
            if rule.type == "PREMIUM_BASED":
                bonus = annual_premium * rule.rate
            else:
                bonus = account_value * rule.rate

        account_value = max(account_value + allocated + interest + bonus - coi - admin_fee, 0.0)
        surrender_value = 0.0 if t <= SURRENDER_LOCK_YEARS else account_value

        projections.append(YearProjection(
            year=t,
            age=age,
            premium_paid=premium_in,
            accumulated_premium=total_premium,
            account_value=round_half_up(account_value),
            surrender_value=round_half_up(surrender_value),
            death_benefit=round_half_up(max(sum_assured, account_value)),
        ))

        if account_value <= 0 and t > 1:
            logger.info(f"Account exhausted in policy year {t} (age {age})")
            break

    return projections


def projection_to_dataframe(rows: List[YearProjection]) -> pd.DataFrame:
    """Projection rows as a DataFrame, one row per policy year."""
    return pd.DataFrame([asdict(r) for r in rows])


if __name__ == "__main__":
    print("=" * 60)
    print("UNIT-LINKED PROJECTION")
    print("=" * 60)

    rows = calculate_projection(30, 20_000_000, 1_000_000_000, 15, 0.05)
    for r in rows[:10]:
        print(f"  Year {r.year:2d} age {r.age}: AV={r.account_value:>14,} "
              f"SV={r.surrender_value:>14,} DB={r.death_benefit:>14,}")
