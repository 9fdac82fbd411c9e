"""
premium_engine/config.py - Calculator Settings

Tunable behaviour of the fee engine. Defaults reproduce the production
catalog; a JSON file or a plain dict can override any field.

    settings = load_settings("calculator.json")
    calc = create_calculator(settings)

Author: Actuarial Pipeline Project
License: MIT
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PlanMatchMode(str, Enum):
    """How plan/package cells are compared with the query."""
    LOOSE = "loose"   # substring either way
    EXACT = "exact"   # whole label


class CalculatorSettings(BaseModel):
    """Engine-wide settings."""

    # Age/gender products priced on the investment-linked table
    investment_linked_codes: List[str] = Field(
        default_factory=lambda: ["P-DTVT", "P-BVTD", "P-DTLH"]
    )
    default_health_plan: str = "Nâng cao"
    default_health_package: str = "Chuẩn"
    plan_match_mode: PlanMatchMode = PlanMatchMode.LOOSE

    # Projection horizon: at most this many years, and never past max age
    projection_years_cap: int = Field(50, ge=1)
    projection_max_age: int = Field(99, ge=1)
    admin_fee_monthly: float = Field(40000.0, ge=0)


def load_settings(path: Optional[Union[str, Path]] = None) -> CalculatorSettings:
    """
    Load settings from a JSON file.

    Args:
        path: JSON file path; None returns the defaults

    Returns:
        Validated CalculatorSettings
    """
    if path is None:
        return CalculatorSettings()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    settings = CalculatorSettings(**data)
    logger.info(f"Loaded calculator settings from {path.name}")
    return settings


def coerce_settings(
    settings: Optional[Union[CalculatorSettings, Dict[str, Any]]]
) -> CalculatorSettings:
    """Accept a settings object, a plain dict or None."""
    if settings is None:
        return CalculatorSettings()
    if isinstance(settings, CalculatorSettings):
        return settings
    return CalculatorSettings(**settings)
