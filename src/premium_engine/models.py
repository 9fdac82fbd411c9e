"""
premium_engine/models.py - Product Catalog and Calculator Data Model

Typed records exchanged between the product catalog and the fee engine:
- Catalog enums (gender, calculation type, formula type)
- Pydantic models for product documents and their calculation configuration
- CalculatorParams: one fee query
- FeeResult: explicit outcome of a fee query (computed vs no rate found)

Product documents arrive from the document store with camelCase keys
(rateTable, calculationConfig, lookupKeys, ...); both spellings validate.

Author: Actuarial Pipeline Project
License: MIT
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .normalization import GENDER_SYNONYMS, remove_accents

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================

class Gender(Enum):
    """Gender labels as stored on customer records."""
    MALE = "Nam"
    FEMALE = "Nữ"
    OTHER = "Khác"

    @classmethod
    def parse(cls, value: Any) -> "Gender":
        """
        Normalize a gender value from any source.

        Accepts enum members, the stored labels and the usual spreadsheet
        spellings ('M', 'male', 'nu', 'F', ...). Anything else is OTHER.
        """
        if isinstance(value, Gender):
            return value
        if value is None:
            return cls.OTHER

        key = remove_accents(str(value))
        for name, synonyms in GENDER_SYNONYMS.items():
            if key in synonyms:
                return cls[name]
        if key in ("khac", "other", "o", "u"):
            return cls.OTHER

        logger.debug(f"Unrecognized gender value {value!r}, using OTHER")
        return cls.OTHER


class ProductType(str, Enum):
    """Catalog product category."""
    MAIN = "Sản phẩm chính"
    RIDER = "Sản phẩm bổ trợ"
    OPERATION = "Nghiệp vụ bảo hiểm"


class ProductStatus(str, Enum):
    """Catalog sale status."""
    ACTIVE = "Đang bán"
    INACTIVE = "Ngưng bán"


class ProductCalculationType(str, Enum):
    """Calculation type tag used to pick a legacy calculator."""
    UL_UNIT_LINK = "UL_UNIT_LINK"
    HEALTH_CARE = "HEALTH_CARE"
    WAIVER_CI = "WAIVER_CI"
    FIXED = "FIXED"
    RATE_PER_1000_AGE_GENDER = "RATE_PER_1000_AGE_GENDER"
    RATE_PER_1000_TERM = "RATE_PER_1000_TERM"
    RATE_PER_1000_OCCUPATION = "RATE_PER_1000_OCCUPATION"


class FormulaType(str, Enum):
    """How a matched rate-table value becomes a fee."""
    RATE_BASED = "RATE_BASED"   # (sum assured / 1000) x rate
    FIXED_FEE = "FIXED_FEE"     # value is the fee


class FeeStatus(Enum):
    """Outcome of a fee query."""
    COMPUTED = "computed"
    NO_RATE = "no_rate"
    INVALID_RATE = "invalid_rate"
    UNSUPPORTED = "unsupported"


# =============================================================================
# PYDANTIC MODELS FOR PRODUCT DOCUMENTS
# =============================================================================

class LookupKeys(BaseModel):
    """Rate-table column names used to filter rows, per query dimension."""
    model_config = ConfigDict(extra="ignore")

    age: Optional[str] = None
    gender: Optional[str] = None
    term: Optional[str] = None
    occupation: Optional[str] = None
    plan: Optional[str] = None
    package: Optional[str] = None

    def configured(self) -> Dict[str, str]:
        """Dimension -> column for every key that is set."""
        return {k: v for k, v in self.model_dump().items() if v}


class CalculationConfig(BaseModel):
    """Column mapping and formula for a product's generic rate table."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Kept as a plain string: unknown tags must survive validation and
    # resolve to no fee rather than reject the product document.
    formula_type: str = Field(FormulaType.RATE_BASED.value, alias="formulaType")
    lookup_keys: LookupKeys = Field(default_factory=LookupKeys, alias="lookupKeys")
    result_key: str = Field(..., alias="resultKey")

    @field_validator("formula_type", mode="before")
    @classmethod
    def _formula_value(cls, value: Any) -> str:
        return value.value if isinstance(value, Enum) else str(value)


class BonusRule(BaseModel):
    """Loyalty bonus credited in a given policy year."""
    year: int
    rate: float
    type: str = "PREMIUM_BASED"   # or ACCOUNT_BASED


class ProjectionConfig(BaseModel):
    """Charges and bonuses for a unit-linked cash-value projection."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    default_interest_rate: float = Field(0.05, alias="defaultInterestRate")
    high_interest_rate: float = Field(0.065, alias="highInterestRate")
    initial_charges: Dict[int, float] = Field(
        default_factory=lambda: {1: 0.85, 2: 0.50, 3: 0.20, 4: 0.05},
        alias="initialCharges",
        description="Policy year -> share of premium deducted on allocation",
    )
    bonuses: List[BonusRule] = Field(
        default_factory=lambda: [
            BonusRule(year=5, rate=0.10),
            BonusRule(year=10, rate=0.50),
            BonusRule(year=20, rate=1.00),
        ]
    )


class Product(BaseModel):
    """A catalog product as stored in the document database."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    name: str = ""
    code: str = ""
    type: Union[ProductType, str] = ProductType.MAIN
    status: Union[ProductStatus, str] = ProductStatus.ACTIVE
    calculation_type: Optional[str] = Field(None, alias="calculationType")
    description: str = ""
    rate_table: Optional[List[Dict[str, Any]]] = Field(None, alias="rateTable")
    calculation_config: Optional[CalculationConfig] = Field(
        None, alias="calculationConfig"
    )
    projection_config: Optional[ProjectionConfig] = Field(
        None, alias="projectionConfig"
    )

    @field_validator("calculation_type", mode="before")
    @classmethod
    def _calculation_value(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        return value.value if isinstance(value, Enum) else str(value)

    @property
    def has_dynamic_table(self) -> bool:
        """True when the dynamic resolver applies to this product."""
        return bool(self.rate_table) and self.calculation_config is not None


# =============================================================================
# CALCULATOR RECORDS
# =============================================================================

@dataclass
class CalculatorParams:
    """One fee query: the product plus the insured's rating attributes."""
    calculation_type: Optional[str] = None
    sum_assured: float = 0.0
    age: int = 0
    gender: Union[Gender, str] = Gender.MALE
    product: Optional[Union[Product, Mapping[str, Any]]] = None
    product_code: Optional[str] = None
    term: Optional[int] = None
    occupation_group: Optional[int] = None
    plan: Optional[str] = None
    package: Optional[str] = None

    def __post_init__(self):
        self.gender = Gender.parse(self.gender)
        if isinstance(self.product, Mapping):
            self.product = Product.model_validate(self.product)
        if isinstance(self.calculation_type, Enum):
            self.calculation_type = self.calculation_type.value
        if self.product is not None:
            if not self.calculation_type:
                self.calculation_type = self.product.calculation_type
            if not self.product_code:
                self.product_code = self.product.code
        if isinstance(self.plan, Enum):
            self.plan = self.plan.value
        if isinstance(self.package, Enum):
            self.package = self.package.value


@dataclass
class FeeResult:
    """
    Outcome of a fee query.

    amount is 0 whenever status is not COMPUTED, so callers that only need
    the number can keep using it; callers that must tell "free" apart from
    "no rate" check `found`.
    """
    amount: float
    status: FeeStatus
    source: str = "legacy"
    rate: Optional[float] = None
    matched_row: Optional[Dict[str, Any]] = None
    reason: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.status == FeeStatus.COMPUTED

    @classmethod
    def computed(cls, amount: float, source: str, rate: Optional[float] = None,
                 matched_row: Optional[Dict[str, Any]] = None) -> "FeeResult":
        return cls(amount=amount, status=FeeStatus.COMPUTED, source=source,
                   rate=rate, matched_row=matched_row)

    @classmethod
    def missing(cls, reason: str, source: str = "legacy",
                status: FeeStatus = FeeStatus.NO_RATE,
                matched_row: Optional[Dict[str, Any]] = None) -> "FeeResult":
        return cls(amount=0, status=status, source=source,
                   matched_row=matched_row, reason=reason)
