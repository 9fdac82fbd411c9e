"""
premium_engine/illustration.py - Contract and Illustration Pricing

An illustration (fee quote) bundles a main product and its riders for one
customer. The builder prices every line against the product catalog with
FeeCalculator, totals the fees, and for investment-linked main products
attaches a cash-value projection.

Author: Actuarial Pipeline Project
License: MIT
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
import logging

import pandas as pd

from .calculator import FeeCalculator
from .models import CalculatorParams, FeeStatus, Gender, Product, ProductCalculationType
from .projection import YearProjection, calculate_projection

logger = logging.getLogger(__name__)


DEFAULT_PAYMENT_TERM = 15


class IllustrationStatus(Enum):
    DRAFT = "DRAFT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CONVERTED = "CONVERTED"


@dataclass
class ContractProduct:
    """
    One priced line of a contract or illustration.

    attributes may carry 'plan', 'package', 'payment_term' and
    'occupation_group'; other keys are kept but not used for pricing.
    """
    product_id: str
    product_name: str
    insured_name: str = ""
    fee: float = 0.0
    sum_assured: float = 0.0
    attributes: Dict[str, Any] = field(default_factory=dict)
    fee_status: Optional[str] = None


@dataclass
class ProjectionSnapshot:
    interest_rate: float
    years: int
    data: List[YearProjection]


@dataclass
class Illustration:
    """A fee quote for one customer."""
    customer_id: str
    customer_name: str
    main_product: ContractProduct
    riders: List[ContractProduct] = field(default_factory=list)
    total_fee: float = 0.0
    reasoning: str = ""
    status: IllustrationStatus = IllustrationStatus.DRAFT
    created_at: datetime = field(default_factory=datetime.now)
    projection_snapshot: Optional[ProjectionSnapshot] = None

    @property
    def lines(self) -> List[ContractProduct]:
        return [self.main_product] + list(self.riders)

    @property
    def unpriced_lines(self) -> List[ContractProduct]:
        """Lines for which no rate was found."""
        return [line for line in self.lines
                if line.fee_status not in (None, FeeStatus.COMPUTED.value)]

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for i, line in enumerate(self.lines):
            row = asdict(line)
            row["role"] = "main" if i == 0 else "rider"
            rows.append(row)
        return pd.DataFrame(rows)


def calculate_total_fee(main_product: ContractProduct,
                        riders: Sequence[ContractProduct] = ()) -> float:
    """Main product fee plus every rider fee."""
    return (main_product.fee or 0) + sum(r.fee or 0 for r in riders)


class IllustrationBuilder:
    """
    Prices illustration lines against a product catalog.

    Attributes:
        calculator: FeeCalculator used for every line
        catalog: Products indexed by id and by name
    """

    def __init__(self, catalog: Sequence[Product],
                 calculator: Optional[FeeCalculator] = None):
        self.calculator = calculator or FeeCalculator()
        self._by_id = {p.id: p for p in catalog if p.id}
        self._by_name = {p.name: p for p in catalog if p.name}
        logger.info(f"IllustrationBuilder initialized with {len(catalog)} products")

    def find_product(self, line: ContractProduct) -> Optional[Product]:
        return self._by_id.get(line.product_id) or self._by_name.get(line.product_name)

    def price_line(self, line: ContractProduct, age: int, gender: Gender) -> ContractProduct:
        """Return a copy of the line with its fee and fee status filled in."""
        product = self.find_product(line)
        attrs = line.attributes or {}

        if product is None:
            logger.warning(f"Product not in catalog: {line.product_id or line.product_name}")
            return ContractProduct(**{**asdict(line), "fee": 0,
                                      "fee_status": FeeStatus.UNSUPPORTED.value})

        params = CalculatorParams(
            product=product,
            sum_assured=line.sum_assured,
            age=age,
            gender=gender,
            term=attrs.get("payment_term"),
            occupation_group=attrs.get("occupation_group"),
            plan=attrs.get("plan"),
            package=attrs.get("package"),
        )
        result = self.calculator.quote(params)

        priced = ContractProduct(**asdict(line))
        priced.product_id = product.id or line.product_id
        priced.product_name = product.name or line.product_name
        priced.fee = result.amount
        priced.fee_status = result.status.value
        return priced

    def is_unit_linked(self, product: Optional[Product]) -> bool:
        if product is None:
            return False
        if product.calculation_type == ProductCalculationType.UL_UNIT_LINK.value:
            return True
        if product.projection_config is not None:
            return True
        codes = {c.upper() for c in self.calculator.settings.investment_linked_codes}
        return product.code.upper() in codes

    def build(self, customer_name: str, age: int, gender: Any,
              main_product: ContractProduct,
              riders: Sequence[ContractProduct] = (),
              customer_id: str = "",
              interest_rate: Optional[float] = None,
              reasoning: str = "") -> Illustration:
        """
        Price a main product and riders into a draft illustration.

        Args:
            customer_name: Policy owner, also the default insured name
            age: Insured age
            gender: Insured gender (any form Gender.parse accepts)
            main_product: Main line (fee is recomputed)
            riders: Rider lines (fees are recomputed)
            customer_id: Customer document id
            interest_rate: Projection crediting rate for unit-linked mains
            reasoning: Advisor's note

        Returns:
            Illustration in DRAFT status
        """
        gender = Gender.parse(gender)

        main = self.price_line(main_product, age, gender)
        priced_riders = [self.price_line(r, age, gender) for r in riders]
        for line in [main] + priced_riders:
            if not line.insured_name:
                line.insured_name = customer_name

        illustration = Illustration(
            customer_id=customer_id,
            customer_name=customer_name,
            main_product=main,
            riders=priced_riders,
            total_fee=calculate_total_fee(main, priced_riders),
            reasoning=reasoning,
        )

        main_ref = self.find_product(main_product)
        if self.is_unit_linked(main_ref) and main.fee > 0:
            config = main_ref.projection_config
            rate = interest_rate
            if rate is None:
                rate = config.default_interest_rate if config else 0.05
            term = int(main.attributes.get("payment_term") or DEFAULT_PAYMENT_TERM)
            rows = calculate_projection(age, main.fee, main.sum_assured, term, rate,
                                        config, self.calculator.settings)
            illustration.projection_snapshot = ProjectionSnapshot(
                interest_rate=rate, years=len(rows), data=rows
            )

        if illustration.unpriced_lines:
            logger.warning(
                f"Illustration for {customer_name}: "
                f"{len(illustration.unpriced_lines)} line(s) without a rate"
            )
        return illustration
