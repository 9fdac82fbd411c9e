"""
tests/test_health_care.py - Health-Care Fee Schedule Tests

Author: Actuarial Pipeline Project
License: MIT
"""

import logging

import pytest

from premium_engine.health_care import (
    HEALTH_CARE_BENEFITS,
    HEALTH_CARE_FEES,
    HealthCarePackage,
    HealthCarePlan,
    calculate_health_care_fee,
    fee_key,
    parse_package,
    parse_plan,
    quote_health_care,
)
from premium_engine.models import FeeStatus, Gender


class TestSchedule:
    """The per-age schedule reproduces the published bands."""

    def test_covers_ages_0_to_69(self):
        assert sorted(HEALTH_CARE_FEES) == list(range(70))

    def test_co_ban_not_offered_below_6(self):
        for age in range(6):
            assert "co_ban" not in HEALTH_CARE_FEES[age]
        assert HEALTH_CARE_FEES[6]["co_ban"] == 1164000

    @pytest.mark.parametrize("age,plan,package,expected", [
        (6, "Cơ bản", "Chuẩn", 1164000),
        (9, "Cơ bản", "Chuẩn", 1164000),
        (0, "Nâng cao", "Chuẩn", 4796000),
        (12, "Toàn diện", "Gói 1", 2862000),
        (12, "Toàn diện", "Gói 2", 4259000),
        (40, "Toàn diện", "Chuẩn", 4420000),
        (57, "Hoàn hảo", "Gói 1", 26406000),
        (69, "Nâng cao", "Chuẩn", 11191000),
    ])
    def test_band_values(self, age, plan, package, expected):
        assert calculate_health_care_fee(age, Gender.MALE, plan, package) == expected

    def test_band_boundaries(self):
        assert calculate_health_care_fee(24, Gender.MALE, "Nâng cao") == 1972000
        assert calculate_health_care_fee(25, Gender.MALE, "Nâng cao") == 2454000


class TestGenderSplit:
    """Hoàn hảo Gói 2 differs by gender between 18 and 49."""

    def test_female_fee(self):
        assert calculate_health_care_fee(30, Gender.FEMALE, "Hoàn hảo", "Gói 2") == 17283000

    def test_male_fee(self):
        assert calculate_health_care_fee(30, Gender.MALE, "Hoàn hảo", "Gói 2") == 16058000

    def test_other_uses_male_fee(self):
        assert calculate_health_care_fee(30, Gender.OTHER, "Hoàn hảo", "Gói 2") == 16058000

    def test_no_split_outside_band(self):
        male = calculate_health_care_fee(60, Gender.MALE, "Hoàn hảo", "Gói 2")
        female = calculate_health_care_fee(60, Gender.FEMALE, "Hoàn hảo", "Gói 2")
        assert male == female == 43159000


class TestMissingRates:

    def test_age_outside_schedule(self):
        result = quote_health_care(70, Gender.MALE, "Nâng cao")
        assert result.amount == 0
        assert result.status == FeeStatus.NO_RATE

    def test_co_ban_under_6(self):
        result = quote_health_care(3, Gender.MALE, HealthCarePlan.CO_BAN)
        assert result.amount == 0
        assert result.status == FeeStatus.NO_RATE

    def test_misses_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="premium_engine.health_care"):
            quote_health_care(70, Gender.MALE, "Nâng cao")
            quote_health_care(3, Gender.MALE, "Cơ bản")
        assert "No health-care fee for age 70" in caplog.text
        assert "Cơ bản not offered at age 3" in caplog.text

    def test_unknown_plan(self):
        result = quote_health_care(30, Gender.MALE, "Bạch kim")
        assert result.amount == 0
        assert result.status == FeeStatus.UNSUPPORTED


class TestParsing:

    def test_plan_labels(self):
        assert parse_plan("Cơ bản") == HealthCarePlan.CO_BAN
        assert parse_plan("co ban") == HealthCarePlan.CO_BAN
        assert parse_plan("HOAN HAO") == HealthCarePlan.HOAN_HAO
        assert parse_plan(HealthCarePlan.NANG_CAO) == HealthCarePlan.NANG_CAO
        assert parse_plan(None) is None

    def test_package_labels(self):
        assert parse_package("Gói 2") == HealthCarePackage.GOI_2
        assert parse_package("goi 1") == HealthCarePackage.GOI_1
        assert parse_package("chuan") == HealthCarePackage.STANDARD
        assert parse_package("Gói 9") is None

    def test_unknown_package_prices_as_standard(self):
        assert calculate_health_care_fee(40, Gender.MALE, "Toàn diện", "Gói 9") == 4420000

    def test_fee_keys(self):
        assert fee_key(HealthCarePlan.NANG_CAO, HealthCarePackage.GOI_2) == "nang_cao"
        assert fee_key(HealthCarePlan.TOAN_DIEN, HealthCarePackage.GOI_2) == "toan_dien_2"
        assert fee_key(HealthCarePlan.TOAN_DIEN, HealthCarePackage.GOI_1) == "toan_dien_1"
        assert fee_key(HealthCarePlan.HOAN_HAO, HealthCarePackage.STANDARD) == "hoan_hao_1"


def test_benefits_for_every_plan():
    assert set(HEALTH_CARE_BENEFITS) == set(HealthCarePlan)
    assert HEALTH_CARE_BENEFITS[HealthCarePlan.HOAN_HAO]["pham_vi"] == "Đông Nam Á"
