"""
tests/test_illustration.py - Illustration Builder Tests

Author: Actuarial Pipeline Project
License: MIT
"""

from premium_engine.illustration import (
    ContractProduct,
    IllustrationBuilder,
    IllustrationStatus,
    calculate_total_fee,
)
from premium_engine.models import FeeStatus, ProjectionConfig, Product


CATALOG = [
    Product(id="ul", name="PRU-Đầu Tư Vững Tiến", code="P-DTVT",
            type="Sản phẩm chính", calculation_type="RATE_PER_1000_AGE_GENDER"),
    Product(id="hc", name="PRU-Hành Trang Vui Khỏe", code="R-HTVK",
            type="Sản phẩm bổ trợ", calculation_type="HEALTH_CARE"),
    Product(id="acc", name="Bảo hiểm Tai nạn", code="R-TN",
            type="Sản phẩm bổ trợ", calculation_type="RATE_PER_1000_OCCUPATION"),
    Product(id="csba", name="Cuộc Sống Bình An", code="P-CSBA",
            calculation_type="RATE_PER_1000_AGE_GENDER"),
]


def main_line(product_id="ul", sum_assured=100_000_000, **attributes):
    return ContractProduct(product_id=product_id, product_name="", sum_assured=sum_assured,
                           attributes=attributes)


def riders():
    return [
        ContractProduct(product_id="hc", product_name="", attributes={"plan": "Cơ bản"}),
        ContractProduct(product_id="acc", product_name="", sum_assured=500_000_000,
                        attributes={"occupation_group": 2}),
    ]


class TestTotalFee:

    def test_main_plus_riders(self):
        main = ContractProduct("a", "A", fee=1_000_000)
        extra = [ContractProduct("b", "B", fee=250_000), ContractProduct("c", "C", fee=0)]
        assert calculate_total_fee(main, extra) == 1_250_000

    def test_main_only(self):
        assert calculate_total_fee(ContractProduct("a", "A", fee=5)) == 5


class TestIllustrationBuilder:

    def test_prices_every_line(self):
        builder = IllustrationBuilder(CATALOG)
        illustration = builder.build("Nguyễn Văn An", 30, "Nam", main_line(), riders())

        assert illustration.main_product.fee == 1385000
        assert [r.fee for r in illustration.riders] == [1379000, 1090000]
        assert illustration.total_fee == 1385000 + 1379000 + 1090000
        assert illustration.status == IllustrationStatus.DRAFT
        assert illustration.unpriced_lines == []

    def test_names_filled_from_catalog_and_customer(self):
        illustration = IllustrationBuilder(CATALOG).build("Trần Thị B", 30, "Nữ", main_line(), riders())

        assert illustration.main_product.product_name == "PRU-Đầu Tư Vững Tiến"
        assert all(line.insured_name == "Trần Thị B" for line in illustration.lines)

    def test_lookup_by_name(self):
        line = ContractProduct(product_id="", product_name="Cuộc Sống Bình An", sum_assured=1_000_000)
        illustration = IllustrationBuilder(CATALOG).build("C", 22, "Nam", line)
        assert illustration.main_product.fee == 49270
        assert illustration.main_product.product_id == "csba"

    def test_unknown_product_is_flagged(self):
        extra = riders() + [ContractProduct(product_id="nope", product_name="Không có")]
        illustration = IllustrationBuilder(CATALOG).build("D", 30, "Nam", main_line(), extra)

        assert len(illustration.unpriced_lines) == 1
        assert illustration.unpriced_lines[0].fee_status == FeeStatus.UNSUPPORTED.value
        assert illustration.total_fee == 1385000 + 1379000 + 1090000

    def test_missing_rate_is_flagged(self):
        """Health care at 70 has no fee; the line shows NO_RATE rather than a silent 0."""
        illustration = IllustrationBuilder(CATALOG).build("E", 70, "Nam", main_line(), riders()[:1])
        rider = illustration.riders[0]

        assert rider.fee == 0
        assert rider.fee_status == FeeStatus.NO_RATE.value

    def test_input_lines_not_mutated(self):
        line = main_line()
        IllustrationBuilder(CATALOG).build("F", 30, "Nam", line)
        assert line.fee == 0.0
        assert line.fee_status is None


class TestProjectionSnapshot:

    def test_unit_linked_main_gets_projection(self):
        illustration = IllustrationBuilder(CATALOG).build(
            "G", 30, "Nam", main_line(payment_term=10), riders(), interest_rate=0.065
        )
        snapshot = illustration.projection_snapshot

        assert snapshot is not None
        assert snapshot.interest_rate == 0.065
        assert snapshot.years == len(snapshot.data)
        assert snapshot.data[0].premium_paid == 1385000
        assert all(y.premium_paid == 0 for y in snapshot.data[10:])

    def test_default_rate_from_projection_config(self):
        catalog = CATALOG + [Product(
            id="ul2", name="UL", code="P-UL", calculation_type="RATE_PER_1000_AGE_GENDER",
            projection_config=ProjectionConfig(default_interest_rate=0.04),
        )]
        illustration = IllustrationBuilder(catalog).build("H", 30, "Nam", main_line("ul2"))
        assert illustration.projection_snapshot.interest_rate == 0.04

    def test_traditional_main_has_no_projection(self):
        line = main_line("csba", sum_assured=1_000_000)
        illustration = IllustrationBuilder(CATALOG).build("I", 30, "Nam", line)
        assert illustration.projection_snapshot is None


def test_to_dataframe():
    illustration = IllustrationBuilder(CATALOG).build("J", 30, "Nam", main_line(), riders())
    frame = illustration.to_dataframe()

    assert list(frame["role"]) == ["main", "rider", "rider"]
    assert frame["fee"].sum() == illustration.total_fee
