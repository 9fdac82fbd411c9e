"""
premium_engine/reporting.py - Illustration Excel Workbooks

Writes a priced illustration to a client-ready workbook:
1. Summary sheet: customer, one row per product line, fee status, total,
   and headline benefits for health-care lines
2. Projection sheet (unit-linked mains): year-by-year account values

Author: Actuarial Pipeline Project
License: MIT
"""

from pathlib import Path
from typing import Optional, Union
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .health_care import HEALTH_CARE_BENEFITS, parse_plan
from .illustration import Illustration
from .models import FeeStatus

logger = logging.getLogger(__name__)


class IllustrationReportGenerator:
    """
    Builds the illustration workbook.

    Lines without a rate are flagged in the status column rather than
    shown as free, so a missing rate is visible to the advisor.
    """

    SUMMARY_HEADERS = ["Vai trò", "Sản phẩm", "Người được BH", "Số tiền BH", "Phí", "Trạng thái"]
    PROJECTION_HEADERS = ["Năm HĐ", "Tuổi", "Phí đóng", "Phí lũy kế",
                          "Giá trị TK", "Giá trị hoàn lại", "Quyền lợi tử vong"]

    def __init__(self):
        self.workbook: Optional[Workbook] = None

        self.currency_format = '#,##0'
        self.percent_format = '0.00%'
        self.date_format = 'DD/MM/YYYY'

        self.title_font = Font(bold=True, size=14)
        self.header_font = Font(bold=True, size=11)
        self.header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        self.header_font_white = Font(bold=True, size=11, color="FFFFFF")
        self.warning_font = Font(color="C00000")

    def create_new_workbook(self) -> None:
        """Create a workbook with an empty Summary sheet."""
        self.workbook = Workbook()
        if 'Sheet' in self.workbook.sheetnames:
            del self.workbook['Sheet']
        self.workbook.create_sheet("Summary")

    def _header_row(self, sheet, row: int, headers) -> None:
        for col, header in enumerate(headers, start=1):
            cell = sheet.cell(row=row, column=col, value=header)
            cell.font = self.header_font_white
            cell.fill = self.header_fill
            cell.alignment = Alignment(horizontal='center')

    def populate_summary(self, illustration: Illustration) -> None:
        """Customer block, line items and total fee."""
        if self.workbook is None:
            self.create_new_workbook()
        sheet = self.workbook["Summary"]

        sheet['A1'] = "Bảng minh họa phí bảo hiểm"
        sheet['A1'].font = self.title_font

        sheet['A3'] = "Khách hàng:"
        sheet['B3'] = illustration.customer_name
        sheet['A4'] = "Ngày lập:"
        sheet['B4'] = illustration.created_at
        sheet['B4'].number_format = self.date_format
        sheet['A5'] = "Trạng thái:"
        sheet['B5'] = illustration.status.value

        self._header_row(sheet, 7, self.SUMMARY_HEADERS)

        row = 8
        for i, line in enumerate(illustration.lines):
            sheet.cell(row=row, column=1, value="Chính" if i == 0 else "Bổ trợ")
            sheet.cell(row=row, column=2, value=line.product_name)
            sheet.cell(row=row, column=3, value=line.insured_name)
            sheet.cell(row=row, column=4, value=line.sum_assured).number_format = self.currency_format
            sheet.cell(row=row, column=5, value=line.fee).number_format = self.currency_format
            status = sheet.cell(row=row, column=6, value=line.fee_status or "")
            if line.fee_status not in (None, FeeStatus.COMPUTED.value):
                status.font = self.warning_font
            row += 1

        row += 1
        sheet.cell(row=row, column=4, value="Tổng phí").font = self.header_font
        total = sheet.cell(row=row, column=5, value=illustration.total_fee)
        total.font = self.header_font
        total.number_format = self.currency_format

        row += 2
        if illustration.reasoning:
            sheet.cell(row=row, column=1, value="Ghi chú:")
            sheet.cell(row=row, column=2, value=illustration.reasoning)
            row += 2

        # Headline benefits for health-care lines
        for line in illustration.lines:
            plan = parse_plan((line.attributes or {}).get("plan"))
            if plan is None:
                continue
            benefits = HEALTH_CARE_BENEFITS[plan]
            sheet.cell(row=row, column=1, value="Quyền lợi:")
            sheet.cell(row=row, column=2, value=f"{line.product_name} - {plan.value}")
            sheet.cell(row=row, column=3, value=benefits["gioi_han_nam"])
            sheet.cell(row=row, column=4, value=benefits["pham_vi"])
            row += 1

        for col, width in enumerate([12, 36, 24, 18, 16, 14], start=1):
            sheet.column_dimensions[get_column_letter(col)].width = width

    def populate_projection(self, illustration: Illustration) -> None:
        """Projection sheet; nothing is written when there is no snapshot."""
        snapshot = illustration.projection_snapshot
        if snapshot is None:
            return
        if self.workbook is None:
            self.create_new_workbook()
        if "Projection" not in self.workbook.sheetnames:
            self.workbook.create_sheet("Projection")
        sheet = self.workbook["Projection"]

        sheet['A1'] = "Minh họa giá trị tài khoản"
        sheet['A1'].font = self.title_font
        sheet['A2'] = "Lãi suất minh họa:"
        sheet['B2'] = snapshot.interest_rate
        sheet['B2'].number_format = self.percent_format

        self._header_row(sheet, 4, self.PROJECTION_HEADERS)

        for row, year in enumerate(snapshot.data, start=5):
            values = [year.year, year.age, year.premium_paid, year.accumulated_premium,
                      year.account_value, year.surrender_value, year.death_benefit]
            for col, value in enumerate(values, start=1):
                cell = sheet.cell(row=row, column=col, value=value)
                if col > 2:
                    cell.number_format = self.currency_format

        for col in range(1, len(self.PROJECTION_HEADERS) + 1):
            sheet.column_dimensions[get_column_letter(col)].width = 18

    def populate_from_illustration(self, illustration: Illustration) -> None:
        self.populate_summary(illustration)
        self.populate_projection(illustration)

    def save(self, output_path: Union[str, Path]) -> Path:
        """
        Save the workbook to file.

        Args:
            output_path: Path to save the Excel file

        Returns:
            Path to saved file
        """
        output_path = Path(output_path)

        if self.workbook is None:
            raise ValueError("No workbook to save - call create_new_workbook() first")

        self.workbook.save(output_path)
        logger.info(f"Saved illustration report to: {output_path}")
        return output_path


def generate_illustration_report(illustration: Illustration,
                                 output_path: Union[str, Path]) -> Path:
    """Write an illustration workbook and return its path."""
    generator = IllustrationReportGenerator()
    generator.create_new_workbook()
    generator.populate_from_illustration(illustration)
    return generator.save(output_path)
