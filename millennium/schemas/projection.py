"""Data contracts for wealth projection calculations."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_TARGET = 1_000_000.0


class RateBasis(str, Enum):
    ANNUAL = "ANNUAL"
    MONTHLY = "MONTHLY"


class PeriodUnit(str, Enum):
    MONTHS = "MONTHS"
    YEARS = "YEARS"


class CalculationMode(str, Enum):
    PROJECT = "PROJECT"
    SOLVE_TIME_TO_TARGET = "SOLVE_TIME_TO_TARGET"
    SOLVE_CONTRIBUTION_FOR_TARGET = "SOLVE_CONTRIBUTION_FOR_TARGET"

    @classmethod
    def _missing_(cls, value: object) -> Optional["CalculationMode"]:
        # names used by the first version of the frontend
        legacy = {
            "TIME_TO_MILLION": cls.SOLVE_TIME_TO_TARGET,
            "CONTRIBUTION_FOR_MILLION": cls.SOLVE_CONTRIBUTION_FOR_TARGET,
        }
        if isinstance(value, str):
            return legacy.get(value.strip().upper())
        return None


def coerce_number(value: Any) -> float:
    """Forgiving numeric coercion for user-editable fields.

    Anything that is not a finite number after parsing becomes 0.0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        text = value.strip()
        if text.count(",") == 1 and "." not in text:
            text = text.replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def normalize_choice(value: Any) -> Any:
    """Trim and upper-case enum names typed by hand; other values pass through."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Horizon(_CamelModel):
    """A duration expressed as a count of months or years."""

    count: float = Field(26.0, description="Number of periods.")
    unit: PeriodUnit = Field(PeriodUnit.YEARS, description="Unit of `count`.")

    @field_validator("count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("unit", mode="before")
    @classmethod
    def _coerce_unit(cls, value: Any) -> Any:
        return normalize_choice(value)


class ProjectionInput(_CamelModel):
    """Inputs required to compute a projection."""

    initial_capital: float = Field(1000.0, description="Balance at month 0.")
    monthly_contribution: float = Field(
        1000.0,
        description="Contribution added at the end of each month.",
    )
    nominal_rate: float = Field(
        8.0,
        description="Rate as a percentage (8 means 8%), see `rate_basis`.",
    )
    rate_basis: RateBasis = RateBasis.ANNUAL
    horizon: Horizon = Field(default_factory=Horizon)
    mode: CalculationMode = CalculationMode.SOLVE_TIME_TO_TARGET
    target: float = Field(DEFAULT_TARGET, description="Goal balance for the solve modes.")

    @field_validator(
        "initial_capital",
        "monthly_contribution",
        "nominal_rate",
        "target",
        mode="before",
    )
    @classmethod
    def _coerce_numbers(cls, value: Any) -> float:
        return coerce_number(value)

    @field_validator("rate_basis", mode="before")
    @classmethod
    def _coerce_rate_basis(cls, value: Any) -> Any:
        return normalize_choice(value)

    @field_validator("mode", mode="before")
    @classmethod
    def _coerce_mode(cls, value: Any) -> Any:
        value = normalize_choice(value)
        if isinstance(value, str):
            return CalculationMode(value)
        return value

    @field_validator("horizon", mode="before")
    @classmethod
    def _coerce_horizon(cls, value: Any) -> Any:
        # a bare number is read as a count of years
        if value is None or isinstance(value, (int, float, str)):
            return {"count": value, "unit": PeriodUnit.YEARS}
        return value


class MonthRecord(_CamelModel):
    """Single point of the monthly time series."""

    month: int = Field(..., ge=0)
    total: float
    contributed: float
    interest: float
    interest_this_month: float


class YearRecord(_CamelModel):
    """One row of the annual breakdown."""

    year: int = Field(..., ge=1)
    months: int = Field(..., ge=1, le=12)
    annual_contribution: float
    annual_interest: float
    total_contributed: float
    total_interest: float
    total_accumulated: float


class ProjectionResult(_CamelModel):
    """Complete projection returned by the engine."""

    mode: CalculationMode
    monthly_rate: float
    months: int = Field(..., ge=0)
    final_total: float
    total_invested: float
    total_interest: float
    history: List[MonthRecord]
    yearly_breakdown: List[YearRecord]
    target_reached_in_months: int
    target_reached: bool
    monthly_contribution: float
    required_monthly_contribution: Optional[float] = None
    power_factor: float
    multiplier: float
