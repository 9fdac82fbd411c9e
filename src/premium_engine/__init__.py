"""
Premium Engine

Fee calculation for insurance-sales back offices: prices catalog products
from a rate table attached to the product (dynamic mode) or from the
hardcoded per-product calculators (legacy mode), and builds customer fee
illustrations with unit-linked cash-value projections.

Version: 1.0.0

Author: Actuarial Pipeline Project
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Actuarial Pipeline Project"

from .models import (
    Gender,
    ProductType,
    ProductStatus,
    ProductCalculationType,
    FormulaType,
    FeeStatus,
    LookupKeys,
    CalculationConfig,
    ProjectionConfig,
    BonusRule,
    Product,
    CalculatorParams,
    FeeResult,
)

from .config import (
    CalculatorSettings,
    PlanMatchMode,
    load_settings,
)

from .calculator import (
    FeeCalculator,
    calculate_product_fee,
    quote_product_fee,
    create_calculator,
)

from .dynamic import DynamicRateResolver

from .legacy import (
    LegacyCalculator,
    quote_accident,
    quote_age_gender,
    quote_age_gender_term,
    quote_investment_linked,
)

from .health_care import (
    HealthCarePlan,
    HealthCarePackage,
    HEALTH_CARE_FEES,
    HEALTH_CARE_BENEFITS,
    calculate_health_care_fee,
    quote_health_care,
)

from .rate_tables import (
    RateTableLibrary,
    nearest_age,
)

from .projection import (
    YearProjection,
    calculate_projection,
    projection_to_dataframe,
)

from .illustration import (
    ContractProduct,
    Illustration,
    IllustrationBuilder,
    IllustrationStatus,
    calculate_total_fee,
)

from .ingestion import (
    RateTableColumnMatcher,
    RateTableImport,
    load_rate_table,
    apply_rate_table,
)

from .reporting import (
    IllustrationReportGenerator,
    generate_illustration_report,
)

__all__ = [
    # Data model
    "Gender",
    "ProductType",
    "ProductStatus",
    "ProductCalculationType",
    "FormulaType",
    "FeeStatus",
    "LookupKeys",
    "CalculationConfig",
    "ProjectionConfig",
    "BonusRule",
    "Product",
    "CalculatorParams",
    "FeeResult",

    # Settings
    "CalculatorSettings",
    "PlanMatchMode",
    "load_settings",

    # Dispatcher
    "FeeCalculator",
    "calculate_product_fee",
    "quote_product_fee",
    "create_calculator",

    # Resolvers
    "DynamicRateResolver",
    "LegacyCalculator",
    "quote_accident",
    "quote_age_gender",
    "quote_age_gender_term",
    "quote_investment_linked",

    # Health care
    "HealthCarePlan",
    "HealthCarePackage",
    "HEALTH_CARE_FEES",
    "HEALTH_CARE_BENEFITS",
    "calculate_health_care_fee",
    "quote_health_care",

    # Tables
    "RateTableLibrary",
    "nearest_age",

    # Projection
    "YearProjection",
    "calculate_projection",
    "projection_to_dataframe",

    # Illustrations
    "ContractProduct",
    "Illustration",
    "IllustrationBuilder",
    "IllustrationStatus",
    "calculate_total_fee",

    # Import / export
    "RateTableColumnMatcher",
    "RateTableImport",
    "load_rate_table",
    "apply_rate_table",
    "IllustrationReportGenerator",
    "generate_illustration_report",
]
