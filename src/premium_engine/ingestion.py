"""
premium_engine/ingestion.py - Rate-Table Import

Turns an insurer's rate sheet (Excel or CSV) into the generic rate table
stored on a product, with:
1. Fuzzy header matching (aliases, patterns, Levenshtein distance) for the
   Vietnamese/English column names found in real sheets
2. A suggested CalculationConfig built from the matched headers
3. SHA-256 hash of the source file for the audit trail

Empty cells are dropped from each row: a row without a value in a lookup
column does not filter on that dimension.

Author: Actuarial Pipeline Project
License: MIT
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import hashlib
import re
import logging

import pandas as pd

from .models import CalculationConfig, FormulaType, LookupKeys, Product
from .normalization import is_blank, remove_accents, to_number

logger = logging.getLogger(__name__)


# =============================================================================
# FUZZY COLUMN MATCHING
# =============================================================================

class RateTableColumnMatcher:
    """
    Matches rate-sheet headers to lookup dimensions.

    Handles variations like:
    - "Tuổi", "Tuoi tham gia", "Age" -> age
    - "Giới tính", "GT", "Sex" -> gender
    - "Tỷ lệ phí", "Rate" -> rate (per-thousand result)
    - "Phí", "Mức phí", "Premium" -> fee (fixed-fee result)
    """

    # Order matters for pattern matching: "thoi han dong phi" is a term
    # column even though it contains "phi".
    COLUMN_MAPPINGS = {
        'age': {
            'aliases': ['age', 'tuoi', 'dotuoi', 'tuoithamgia', 'issueage', 'tuoibh'],
            'patterns': [r'tuoi', r'^age', r'issueage'],
        },
        'gender': {
            'aliases': ['gender', 'sex', 'gioitinh', 'gt', 'phai'],
            'patterns': [r'gioi', r'gender', r'^sex'],
        },
        'term': {
            'aliases': ['term', 'thoihan', 'thoihandongphi', 'paymentterm', 'sonamdongphi'],
            'patterns': [r'thoihan', r'term', r'namdong'],
        },
        'occupation': {
            'aliases': ['occupation', 'nhomnghe', 'nghe', 'occupationgroup', 'nhomnghenghiep'],
            'patterns': [r'nghe', r'occup'],
        },
        'plan': {
            'aliases': ['plan', 'chuongtrinh', 'quyenloi', 'chuongtrinhbh'],
            'patterns': [r'chuongtrinh', r'plan'],
        },
        'package': {
            'aliases': ['package', 'goi', 'goibh', 'goiquyenloi'],
            'patterns': [r'^goi', r'package'],
        },
        'rate': {
            'aliases': ['rate', 'tyle', 'tile', 'tylephi', 'tilephi', 'ratio'],
            'patterns': [r'tyle', r'tile', r'rate'],
        },
        'fee': {
            'aliases': ['fee', 'phi', 'mucphi', 'premium', 'phibh', 'phinam'],
            'patterns': [r'phi', r'fee', r'premium'],
        },
    }

    LOOKUP_DIMENSIONS = ('age', 'gender', 'term', 'occupation', 'plan', 'package')

    @classmethod
    def levenshtein_distance(cls, s1: str, s2: str) -> int:
        """Calculate Levenshtein distance between two strings."""
        if len(s1) < len(s2):
            return cls.levenshtein_distance(s2, s1)

        if len(s2) == 0:
            return len(s1)

        previous_row = range(len(s2) + 1)
        for i, c1 in enumerate(s1):
            current_row = [i + 1]
            for j, c2 in enumerate(s2):
                insertions = previous_row[j + 1] + 1
                deletions = current_row[j] + 1
                substitutions = previous_row[j] + (c1 != c2)
                current_row.append(min(insertions, deletions, substitutions))
            previous_row = current_row

        return previous_row[-1]

    @classmethod
    def normalize_column_name(cls, name: Any) -> str:
        """Accent-free, lowercase, alphanumerics only."""
        return re.sub(r'[^a-z0-9]', '', remove_accents(str(name)))

    @classmethod
    def match_column(cls, column_name: Any, threshold: int = 2) -> Optional[str]:
        """
        Match a header to a dimension.

        Exact aliases win, then patterns, then the closest alias within
        `threshold` edits.
        """
        normalized = cls.normalize_column_name(column_name)
        if not normalized:
            return None

        for standard, config in cls.COLUMN_MAPPINGS.items():
            if normalized in config['aliases']:
                return standard

        for standard, config in cls.COLUMN_MAPPINGS.items():
            for pattern in config['patterns']:
                if re.search(pattern, normalized):
                    return standard

        best_match = None
        best_score = threshold + 1
        for standard, config in cls.COLUMN_MAPPINGS.items():
            for alias in config['aliases']:
                distance = cls.levenshtein_distance(normalized, alias)
                if distance < best_score:
                    best_score = distance
                    best_match = standard

        return best_match

    @classmethod
    def map_columns(cls, columns: List[Any]) -> Dict[str, str]:
        """
        Map headers to dimensions, first header wins per dimension.

        Returns:
            Dict mapping dimension -> original header
        """
        mapping: Dict[str, str] = {}
        for col in columns:
            standard = cls.match_column(col)
            if standard and standard not in mapping:
                mapping[standard] = str(col)
        return mapping

    @classmethod
    def suggest_config(cls, columns: List[Any]) -> Optional[CalculationConfig]:
        """
        Build a CalculationConfig from headers.

        A 'rate' column means per-thousand pricing; otherwise a 'fee'
        column means the cell is the fee. None if neither is found.
        """
        mapping = cls.map_columns(columns)

        if 'rate' in mapping:
            result_key, formula = mapping['rate'], FormulaType.RATE_BASED
        elif 'fee' in mapping:
            result_key, formula = mapping['fee'], FormulaType.FIXED_FEE
        else:
            return None

        keys = LookupKeys(**{d: mapping[d] for d in cls.LOOKUP_DIMENSIONS if d in mapping})
        return CalculationConfig(
            formula_type=formula.value,
            lookup_keys=keys,
            result_key=result_key,
        )


# =============================================================================
# IMPORT RESULT
# =============================================================================

@dataclass
class RateTableImport:
    """Rows read from a rate sheet plus the audit information."""
    rows: List[Dict[str, Any]]
    columns: List[str]
    input_hash: str
    input_filename: str
    total_records: int
    skipped_records: int
    suggested_config: Optional[CalculationConfig]
    processing_timestamp: datetime = field(default_factory=datetime.now)

    def get_summary(self) -> Dict[str, Any]:
        return {
            'input_file': self.input_filename,
            'input_hash': self.input_hash,
            'total_records': self.total_records,
            'imported_records': len(self.rows),
            'skipped_records': self.skipped_records,
            'columns': self.columns,
            'suggested_config': (self.suggested_config.model_dump(by_alias=True)
                                 if self.suggested_config else None),
            'processing_timestamp': self.processing_timestamp.isoformat(),
        }


def _hash_file(filepath: Path) -> str:
    """Calculate SHA-256 hash of file."""
    sha256 = hashlib.sha256()
    with open(filepath, 'rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            sha256.update(chunk)
    return sha256.hexdigest()


def _clean_cell(value: Any) -> Any:
    # Whole-number floats come from columns pandas widened because of blanks
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def rows_from_dataframe(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Row mappings with blank cells dropped; fully blank rows skipped."""
    rows = []
    for record in df.to_dict('records'):
        row = {str(k).strip(): _clean_cell(v) for k, v in record.items() if not is_blank(v)}
        if row:
            rows.append(row)
    return rows


def load_rate_table(filepath: Union[str, Path],
                    sheet_name: Optional[Union[str, int]] = None) -> RateTableImport:
    """
    Read a rate sheet.

    Args:
        filepath: Path to .xlsx/.xls or .csv
        sheet_name: Sheet for Excel files (default: first sheet)

    Returns:
        RateTableImport with rows, hash and a suggested config
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Rate table file not found: {filepath}")

    file_hash = _hash_file(filepath)
    logger.info(f"Loading rate table: {filepath.name} (SHA-256: {file_hash[:16]}...)")

    suffix = filepath.suffix.lower()
    if suffix in ('.xlsx', '.xls'):
        df = pd.read_excel(filepath, sheet_name=0 if sheet_name is None else sheet_name)
    elif suffix == '.csv':
        df = pd.read_csv(filepath)
    else:
        raise ValueError(f"Unsupported file format: {filepath.suffix}")

    total_records = len(df)
    rows = rows_from_dataframe(df)
    columns = [str(c).strip() for c in df.columns]
    config = RateTableColumnMatcher.suggest_config(columns)

    if config is None:
        logger.warning(f"No result column recognised in {filepath.name}: {columns}")
    else:
        non_numeric = sum(1 for r in rows if to_number(r.get(config.result_key)) is None)
        if non_numeric:
            logger.warning(f"{non_numeric} rows have no numeric value in "
                           f"{config.result_key!r}")

    logger.info(f"Imported {len(rows)} of {total_records} rows")

    return RateTableImport(
        rows=rows,
        columns=columns,
        input_hash=file_hash,
        input_filename=filepath.name,
        total_records=total_records,
        skipped_records=total_records - len(rows),
        suggested_config=config,
    )


def apply_rate_table(product: Product, imported: RateTableImport,
                     config: Optional[CalculationConfig] = None) -> Product:
    """
    Copy of the product with the imported table attached.

    Args:
        product: Catalog product
        imported: Result of load_rate_table
        config: Explicit config (default: the suggested one)
    """
    config = config or imported.suggested_config
    if config is None:
        raise ValueError(
            f"No calculation config for {imported.input_filename}; "
            f"pass one explicitly (columns: {imported.columns})"
        )
    missing = [c for c in [config.result_key, *config.lookup_keys.configured().values()]
               if c not in imported.columns]
    if missing:
        raise ValueError(f"Config refers to columns not in the sheet: {missing}")

    return product.model_copy(update={
        'rate_table': imported.rows,
        'calculation_config': config,
    })
