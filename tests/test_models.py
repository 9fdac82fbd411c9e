"""
tests/test_models.py - Data Model, Settings and Normalization Tests

Author: Actuarial Pipeline Project
License: MIT
"""

import json

import pytest
from pydantic import ValidationError

from premium_engine.config import (
    CalculatorSettings,
    PlanMatchMode,
    coerce_settings,
    load_settings,
)
from premium_engine.models import (
    CalculationConfig,
    CalculatorParams,
    FeeResult,
    FeeStatus,
    Gender,
    Product,
    ProductCalculationType,
)
from premium_engine.normalization import (
    exact_match,
    is_blank,
    loose_match,
    matches_gender,
    numbers_equal,
    remove_accents,
    round_half_up,
    to_number,
)


class TestNormalization:

    def test_remove_accents(self):
        assert remove_accents("Nữ") == "nu"
        assert remove_accents("Đồng") == "dong"
        assert remove_accents("  NAM ") == "nam"
        assert remove_accents("Hoàn hảo") == "hoan hao"

    def test_matches_gender(self):
        assert matches_gender("Nữ", "FEMALE")
        assert not matches_gender("Nữ", "MALE")
        assert matches_gender("M", "MALE")
        assert not matches_gender("Nam", "OTHER")

    def test_loose_match_either_direction(self):
        assert loose_match("Gói 1", "goi")
        assert loose_match("Nâng", "Nâng cao")
        assert loose_match("Gói 1", None)
        assert not loose_match("Gói 1", "Gói 2")

    def test_exact_match(self):
        assert exact_match("NÂNG CAO", "nang cao")
        assert not exact_match("Nâng cao plus", "Nâng cao")

    def test_to_number(self):
        assert to_number("30") == 30.0
        assert to_number(" 12.5 ") == 12.5
        assert to_number("abc") is None
        assert to_number(True) is None
        assert to_number(float("nan")) is None

    def test_separators_are_not_numbers(self):
        """Decimal commas and thousands separators are not reinterpreted."""
        assert to_number("3,05") is None
        assert to_number("1,500") is None
        assert to_number("1_000") is None
        assert not numbers_equal("3,0", 30)

    def test_numbers_equal(self):
        assert numbers_equal("30", 30)
        assert numbers_equal(30.0, 30)
        assert not numbers_equal(30, None)
        assert not numbers_equal("x", 30)

    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("  ")
        assert is_blank(float("nan"))
        assert not is_blank(0)

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(2.4) == 2
        assert round_half_up(float("nan")) == 0


class TestGender:

    @pytest.mark.parametrize("value,expected", [
        ("Nam", Gender.MALE),
        ("male", Gender.MALE),
        ("M", Gender.MALE),
        ("Nữ", Gender.FEMALE),
        ("nu", Gender.FEMALE),
        ("F", Gender.FEMALE),
        ("Khác", Gender.OTHER),
        ("???", Gender.OTHER),
        (None, Gender.OTHER),
        (Gender.FEMALE, Gender.FEMALE),
    ])
    def test_parse(self, value, expected):
        assert Gender.parse(value) == expected


class TestProduct:
    """Store documents use camelCase keys; both spellings validate."""

    def test_camel_case_document(self):
        product = Product.model_validate({
            "id": "p",
            "name": "Sản phẩm",
            "calculationType": "RATE_PER_1000_TERM",
            "rateTable": [{"age": 30, "rate": 1}],
            "calculationConfig": {"formulaType": "FIXED_FEE", "lookupKeys": {"age": "age"},
                                  "resultKey": "rate"},
        })
        assert product.calculation_type == "RATE_PER_1000_TERM"
        assert product.calculation_config.formula_type == "FIXED_FEE"
        assert product.calculation_config.lookup_keys.age == "age"
        assert product.has_dynamic_table

    def test_snake_case_and_enum(self):
        product = Product(calculation_type=ProductCalculationType.HEALTH_CARE)
        assert product.calculation_type == "HEALTH_CARE"
        assert not product.has_dynamic_table

    def test_unknown_formula_kept(self):
        config = CalculationConfig(formula_type="SOMETHING_ELSE", result_key="x")
        assert config.formula_type == "SOMETHING_ELSE"

    def test_result_key_required(self):
        with pytest.raises(ValidationError):
            CalculationConfig.model_validate({"formulaType": "RATE_BASED"})


class TestCalculatorParams:

    def test_gender_normalized(self):
        assert CalculatorParams(gender="nữ").gender == Gender.FEMALE

    def test_defaults_from_product(self):
        product = Product(code="P-DTVT", calculation_type="RATE_PER_1000_AGE_GENDER")
        params = CalculatorParams(product=product)
        assert params.product_code == "P-DTVT"
        assert params.calculation_type == "RATE_PER_1000_AGE_GENDER"

    def test_explicit_type_wins(self):
        product = Product(calculation_type="RATE_PER_1000_AGE_GENDER")
        params = CalculatorParams(product=product, calculation_type="HEALTH_CARE")
        assert params.calculation_type == "HEALTH_CARE"


class TestFeeResult:

    def test_missing_is_zero(self):
        result = FeeResult.missing("no row")
        assert result.amount == 0
        assert result.status == FeeStatus.NO_RATE
        assert not result.found

    def test_computed(self):
        result = FeeResult.computed(0, source="dynamic", rate=0.0)
        assert result.found


class TestSettings:

    def test_defaults(self):
        settings = CalculatorSettings()
        assert settings.investment_linked_codes == ["P-DTVT", "P-BVTD", "P-DTLH"]
        assert settings.plan_match_mode == PlanMatchMode.LOOSE
        assert settings.projection_years_cap == 50

    def test_load_settings(self, tmp_path):
        path = tmp_path / "calculator.json"
        path.write_text(json.dumps({"plan_match_mode": "exact", "admin_fee_monthly": 0}))
        settings = load_settings(path)
        assert settings.plan_match_mode == PlanMatchMode.EXACT
        assert settings.admin_fee_monthly == 0

    def test_load_settings_none(self):
        assert load_settings() == CalculatorSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.json")

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            CalculatorSettings(plan_match_mode="fuzzy")

    def test_coerce_settings(self):
        settings = CalculatorSettings()
        assert coerce_settings(settings) is settings
        assert coerce_settings({"projection_max_age": 90}).projection_max_age == 90
        assert coerce_settings(None) == CalculatorSettings()
