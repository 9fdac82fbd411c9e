"""
premium_engine/health_care.py - Hành Trang Vui Khỏe Health-Care Rider

Annual fees for the health-care card by insured age, plan and package
(brochure 12/2025). Fees are published per age band; the schedule below is
expanded to one entry per age so a lookup is a single dictionary access.

Sub-keys per age:
    co_ban, nang_cao, toan_dien_1, toan_dien_2, hoan_hao_1, hoan_hao_2
hoan_hao_2 differs by gender between ages 18 and 49 and is stored as a
per-gender mapping. co_ban is not sold below age 6.

Author: Actuarial Pipeline Project
License: MIT
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

from .models import FeeResult, FeeStatus, Gender
from .normalization import remove_accents

logger = logging.getLogger(__name__)


class HealthCarePlan(str, Enum):
    """Benefit level."""
    CO_BAN = "Cơ bản"
    NANG_CAO = "Nâng cao"
    TOAN_DIEN = "Toàn diện"
    HOAN_HAO = "Hoàn hảo"


class HealthCarePackage(str, Enum):
    """Package within a plan (Gói 2 adds outpatient/dental cover)."""
    STANDARD = "Chuẩn"
    GOI_1 = "Gói 1"
    GOI_2 = "Gói 2"


FeeEntry = Union[int, Dict[Gender, int]]


# =============================================================================
# AGE-BAND SCHEDULE
# (min_age, max_age, co_ban, nang_cao, toan_dien_1, toan_dien_2,
#  hoan_hao_1, hoan_hao_2 male, hoan_hao_2 female)
# =============================================================================

_AGE_BANDS: List[Tuple[int, int, Optional[int], int, int, int, int, int, int]] = [
    (0, 0, None, 4796000, 8386000, 15697000, 23071000, 40902000, 40902000),
    (1, 4, None, 4796000, 8386000, 11613000, 23071000, 31216000, 31216000),
    (5, 5, None, 1997000, 3425000, 5747000, 9551000, 15548000, 15548000),
    (6, 9, 1164000, 1997000, 3425000, 5747000, 9551000, 15548000, 15548000),
    (10, 14, 1038000, 1779000, 2862000, 4259000, 8356000, 12160000, 12160000),
    (15, 17, 1038000, 1782000, 2890000, 4207000, 8368000, 11984000, 11984000),
    (18, 19, 1038000, 1782000, 2890000, 4207000, 8368000, 11984000, 13210000),
    (20, 24, 1101000, 1972000, 3158000, 4475000, 9078000, 12694000, 13920000),
    (25, 29, 1379000, 2454000, 4204000, 5598000, 11867000, 15666000, 16892000),
    (30, 34, 1379000, 2518000, 4240000, 5755000, 11973000, 16058000, 17283000),
    (35, 39, 1482000, 2582000, 4276000, 5909000, 12078000, 16442000, 17668000),
    (40, 44, 1596000, 2705000, 4420000, 6131000, 12448000, 16998000, 18224000),
    (45, 49, 1781000, 3051000, 5035000, 6937000, 14095000, 19098000, 20323000),
    (50, 54, 2068000, 3594000, 5999000, 7941000, 16672000, 21771000, 21771000),
    (55, 59, 3161000, 5642000, 9635000, 11812000, 26406000, 32062000, 32062000),
    (60, 64, 4387000, 7953000, 13739000, 15966000, 37386000, 43159000, 43159000),
    (65, 69, 6102000, 11191000, 19493000, 21770000, 52772000, 58665000, 58665000),
]


def _build_fee_schedule() -> Dict[int, Dict[str, FeeEntry]]:
    """Expand the age bands into one fee entry per age."""
    schedule: Dict[int, Dict[str, FeeEntry]] = {}

    for (lo, hi, co_ban, nang_cao, td1, td2, hh1, hh2_male, hh2_female) in _AGE_BANDS:
        for age in range(lo, hi + 1):
            entry: Dict[str, FeeEntry] = {
                "nang_cao": nang_cao,
                "toan_dien_1": td1,
                "toan_dien_2": td2,
                "hoan_hao_1": hh1,
                "hoan_hao_2": {Gender.MALE: hh2_male, Gender.FEMALE: hh2_female},
            }
            if co_ban is not None:
                entry["co_ban"] = co_ban
            schedule[age] = entry

    return schedule


HEALTH_CARE_FEES: Dict[int, Dict[str, FeeEntry]] = _build_fee_schedule()


# Headline benefits per plan, for illustrations
HEALTH_CARE_BENEFITS: Dict[HealthCarePlan, Dict[str, str]] = {
    HealthCarePlan.CO_BAN: {
        "gioi_han_nam": "100 Triệu đồng",
        "pham_vi": "Việt Nam",
        "tien_giuong": "600.000 đ/ngày (Tối đa 80 ngày/năm)",
        "phau_thuat": "12.000.000 đ/lần nằm viện",
    },
    HealthCarePlan.NANG_CAO: {
        "gioi_han_nam": "200 Triệu đồng",
        "pham_vi": "Việt Nam",
        "tien_giuong": "1.250.000 đ/ngày (Tối đa 80 ngày/năm)",
        "phau_thuat": "25.000.000 đ/lần nằm viện",
    },
    HealthCarePlan.TOAN_DIEN: {
        "gioi_han_nam": "400 Triệu đồng",
        "pham_vi": "Việt Nam",
        "tien_giuong": "2.000.000 đ/ngày (Tối đa 80 ngày/năm)",
        "phau_thuat": "50.000.000 đ/lần nằm viện",
    },
    HealthCarePlan.HOAN_HAO: {
        "gioi_han_nam": "1 Tỷ đồng",
        "pham_vi": "Đông Nam Á",
        "tien_giuong": "6.000.000 đ/ngày (Tối đa 80 ngày/năm)",
        "phau_thuat": "100.000.000 đ/lần nằm viện",
    },
}


# =============================================================================
# LOOKUP
# =============================================================================

def parse_plan(value: Any) -> Optional[HealthCarePlan]:
    """Plan from an enum member or its label, accents optional."""
    if isinstance(value, HealthCarePlan):
        return value
    if value is None:
        return None
    key = remove_accents(str(value))
    for plan in HealthCarePlan:
        if remove_accents(plan.value) == key or plan.name.lower() == key:
            return plan
    return None


def parse_package(value: Any) -> Optional[HealthCarePackage]:
    """Package from an enum member or its label, accents optional."""
    if isinstance(value, HealthCarePackage):
        return value
    if value is None:
        return None
    key = remove_accents(str(value))
    for package in HealthCarePackage:
        if remove_accents(package.value) == key or package.name.lower() == key:
            return package
    return None


def fee_key(plan: HealthCarePlan, package: HealthCarePackage) -> str:
    """Schedule sub-key for a plan/package combination."""
    if plan == HealthCarePlan.CO_BAN:
        return "co_ban"
    if plan == HealthCarePlan.NANG_CAO:
        return "nang_cao"
    if plan == HealthCarePlan.TOAN_DIEN:
        return "toan_dien_2" if package == HealthCarePackage.GOI_2 else "toan_dien_1"
    return "hoan_hao_2" if package == HealthCarePackage.GOI_2 else "hoan_hao_1"


def quote_health_care(age: int, gender: Gender, plan: Any,
                      package: Any = HealthCarePackage.STANDARD) -> FeeResult:
    """
    Health-care fee with an explicit outcome.

    Args:
        age: Insured age (exact match against the schedule)
        gender: Insured gender (only matters where the fee splits by gender)
        plan: HealthCarePlan or its label
        package: HealthCarePackage or its label

    Returns:
        FeeResult; NO_RATE when the age or plan/package is not sold
    """
    fees = HEALTH_CARE_FEES.get(age)
    if fees is None:
        logger.debug(f"No health-care fee for age {age}")
        return FeeResult.missing(f"no health-care fee for age {age}")

    plan_value = parse_plan(plan)
    if plan_value is None:
        logger.debug(f"Unknown health-care plan {plan!r}")
        return FeeResult.missing(f"unknown health-care plan {plan!r}",
                                 status=FeeStatus.UNSUPPORTED)
    package_value = parse_package(package) or HealthCarePackage.STANDARD

    key = fee_key(plan_value, package_value)
    entry = fees.get(key)
    if entry is None:
        logger.debug(f"{plan_value.value} not offered at age {age}")
        return FeeResult.missing(f"{plan_value.value} not offered at age {age}")

    if isinstance(entry, dict):
        entry = entry[Gender.FEMALE if gender == Gender.FEMALE else Gender.MALE]

    return FeeResult.computed(entry, source="legacy", rate=entry)


def calculate_health_care_fee(age: int, gender: Gender, plan: Any,
                              package: Any = HealthCarePackage.STANDARD) -> int:
    """Health-care fee, 0 when not sold."""
    return quote_health_care(age, gender, plan, package).amount
