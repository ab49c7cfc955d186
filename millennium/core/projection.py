from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from millennium.schemas.projection import (
    CalculationMode,
    MonthRecord,
    PeriodUnit,
    ProjectionInput,
    ProjectionResult,
    RateBasis,
    YearRecord,
)

logger = logging.getLogger(__name__)

# Ceiling used when solving for the time needed to reach the target (100 years).
MAX_SIMULATION_MONTHS = 1200
# Longest horizon accepted for the other modes; larger requests are capped.
MAX_HORIZON_MONTHS = 12000
TARGET_NOT_REACHED = -1
# Relative slack when checking that a solved contribution lands on the target.
SOLVED_TARGET_REL_TOL = 1e-9


def _power(base: float, exponent: float) -> float:
    """base ** exponent, saturating to infinity instead of raising OverflowError."""
    try:
        return base**exponent
    except OverflowError:
        if base < 0 and float(exponent).is_integer() and int(exponent) % 2 == 1:
            return -math.inf
        return math.inf


# -----------------------------
# Normalizers
# -----------------------------


def monthly_rate(nominal_rate: float, basis: RateBasis) -> float:
    """
    Effective monthly compounding rate for a percentage rate.

      - MONTHLY: r = nominal / 100
      - ANNUAL:  r = (1 + nominal / 100) ** (1 / 12) - 1   (equivalent monthly
        rate, NOT nominal / 100 / 12)

    Losses beyond 100% are clamped to r = -1 (everything lost in one month).
    """
    if nominal_rate == 0:
        return 0.0

    if basis == RateBasis.MONTHLY:
        rate = nominal_rate / 100.0
    else:
        growth = 1.0 + nominal_rate / 100.0
        if growth <= 0:
            return -1.0
        rate = _power(growth, 1.0 / 12.0) - 1.0

    return max(rate, -1.0)


def horizon_months(count: float, unit: PeriodUnit) -> int:
    """Whole number of months covered by a horizon (partial months round up)."""
    months = count * 12 if unit == PeriodUnit.YEARS else count
    if not months > 0:
        return 0
    if months >= MAX_HORIZON_MONTHS:
        return MAX_HORIZON_MONTHS
    return int(math.ceil(months))


# -----------------------------
# Contribution solver
# -----------------------------


def required_contribution(
    initial_capital: float,
    rate: float,
    months: int,
    target: float,
) -> float:
    """
    Constant end-of-month contribution that brings the balance to `target`
    after `months` months (future value of an ordinary annuity).

      need = target - initial * (1 + r) ** N
      c    = need / (((1 + r) ** N - 1) / r)     (c = need / N when r == 0)

    Returns 0 when the initial capital alone already reaches the target, and
    when there is no month left to contribute in.
    """
    if months <= 0:
        return 0.0

    growth = _power(1.0 + rate, months)
    future_initial = initial_capital * growth if initial_capital else 0.0
    need = target - future_initial
    if not need > 0:
        return 0.0

    if rate == 0:
        contribution = need / months
    else:
        factor = (growth - 1.0) / rate
        if factor == 0 or math.isnan(factor):
            return 0.0
        contribution = need / factor

    return max(contribution, 0.0)


# -----------------------------
# Month-by-month simulation
# -----------------------------


def simulate_months(
    initial_capital: float,
    contribution: float,
    rate: float,
    bound: int,
    target: float,
    stop_at_target: bool = False,
) -> Tuple[List[MonthRecord], int]:
    """
    Simulate the balance month by month, from month 0 up to `bound`.

    Order of operations (per month):
      1) Interest accrues on the balance carried from the previous month.
      2) The contribution is added at the END of the month (no interest this month).
      3) Record the month.
      4) Remember the first month the balance reaches `target`; with
         `stop_at_target` the simulation ends right there.

    Returns (history, target_month) where target_month is TARGET_NOT_REACHED
    when the balance never got to the target.
    """
    total = float(initial_capital)
    contributed = float(initial_capital)

    history: List[MonthRecord] = [
        MonthRecord(
            month=0,
            total=total,
            contributed=contributed,
            interest=0.0,
            interest_this_month=0.0,
        )
    ]

    target_month = 0 if total >= target else TARGET_NOT_REACHED
    if stop_at_target and target_month == 0:
        return history, target_month

    for month in range(1, bound + 1):
        # 1) interest on the carried balance
        interest_this_month = total * rate
        total += interest_this_month

        # 2) end-of-month contribution
        total += contribution
        contributed += contribution

        # 3) record
        history.append(
            MonthRecord(
                month=month,
                total=total,
                contributed=contributed,
                interest=total - contributed,
                interest_this_month=interest_this_month,
            )
        )

        # 4) target check
        if target_month == TARGET_NOT_REACHED and total >= target:
            target_month = month
            if stop_at_target:
                break

    return history, target_month


# -----------------------------
# Yearly aggregation
# -----------------------------


def aggregate_years(history: List[MonthRecord], contribution: float) -> List[YearRecord]:
    """
    Annual breakdown taken from year boundaries of the monthly history.

    One record per 12 simulated months, plus a shorter record for a trailing
    partial year. Only months actually present in `history` are used, so an
    early-terminated simulation aggregates correctly.
    """
    if not history:
        return []

    last_month = history[-1].month
    boundaries = list(range(12, last_month + 1, 12))
    if last_month % 12:
        boundaries.append(last_month)

    by_month = {record.month: record for record in history}

    years: List[YearRecord] = []
    previous = history[0]
    for year, boundary in enumerate(boundaries, start=1):
        current = by_month[boundary]
        span = current.month - previous.month
        years.append(
            YearRecord(
                year=year,
                months=span,
                annual_contribution=contribution * span,
                annual_interest=current.interest - previous.interest,
                total_contributed=current.contributed,
                total_interest=current.interest,
                total_accumulated=current.total,
            )
        )
        previous = current

    return years


# -----------------------------
# Entry point
# -----------------------------


def power_factor(total_interest: float, total_invested: float) -> float:
    """Interest as a percentage of the principal contributed (0 without principal)."""
    if total_invested > 0:
        return total_interest / total_invested * 100.0
    return 0.0


def compute_projection(inputs: ProjectionInput) -> ProjectionResult:
    """
    Run a full projection for one request.

      - PROJECT: simulate the given contribution over the horizon.
      - SOLVE_TIME_TO_TARGET: simulate the given contribution up to
        MAX_SIMULATION_MONTHS, stopping at the month the target is reached.
      - SOLVE_CONTRIBUTION_FOR_TARGET: solve the contribution for the horizon,
        then simulate it over the horizon.
    """
    rate = monthly_rate(inputs.nominal_rate, inputs.rate_basis)
    months = horizon_months(inputs.horizon.count, inputs.horizon.unit)

    contribution = inputs.monthly_contribution
    required: Optional[float] = None

    if inputs.mode == CalculationMode.PROJECT:
        bound, stop_at_target = months, False
    elif inputs.mode == CalculationMode.SOLVE_TIME_TO_TARGET:
        bound, stop_at_target = MAX_SIMULATION_MONTHS, True
    elif inputs.mode == CalculationMode.SOLVE_CONTRIBUTION_FOR_TARGET:
        required = required_contribution(inputs.initial_capital, rate, months, inputs.target)
        contribution = required
        bound, stop_at_target = months, False
    else:
        raise ValueError(f"unsupported calculation mode: {inputs.mode!r}")

    logger.debug(
        "projection mode=%s rate=%.10f bound=%d contribution=%s",
        inputs.mode.value,
        rate,
        bound,
        contribution,
    )

    history, target_month = simulate_months(
        initial_capital=inputs.initial_capital,
        contribution=contribution,
        rate=rate,
        bound=bound,
        target=inputs.target,
        stop_at_target=stop_at_target,
    )
    last = history[-1]
    if (
        required
        and target_month == TARGET_NOT_REACHED
        and math.isclose(last.total, inputs.target, rel_tol=SOLVED_TARGET_REL_TOL)
    ):
        # the solved contribution lands on the target up to float rounding
        target_month = last.month
    factor = power_factor(last.interest, last.contributed)

    return ProjectionResult(
        mode=inputs.mode,
        monthly_rate=rate,
        months=last.month,
        final_total=last.total,
        total_invested=last.contributed,
        total_interest=last.interest,
        history=history,
        yearly_breakdown=aggregate_years(history, contribution),
        target_reached_in_months=target_month,
        target_reached=target_month != TARGET_NOT_REACHED,
        monthly_contribution=contribution,
        required_monthly_contribution=required,
        power_factor=factor,
        multiplier=factor / 100.0 + 1.0,
    )


__all__ = [
    "MAX_HORIZON_MONTHS",
    "MAX_SIMULATION_MONTHS",
    "TARGET_NOT_REACHED",
    "SOLVED_TARGET_REL_TOL",
    "monthly_rate",
    "horizon_months",
    "required_contribution",
    "simulate_months",
    "aggregate_years",
    "power_factor",
    "compute_projection",
]
