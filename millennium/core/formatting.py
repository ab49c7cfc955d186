"""Display helpers shared by the advisory prompt."""

from __future__ import annotations

import math

from millennium.core.projection import TARGET_NOT_REACHED


def format_currency(value: float) -> str:
    """Format an amount as Brazilian reais, e.g. ``R$ 1.234,56``."""
    if not math.isfinite(value):
        return "R$ --"
    sign = "-" if value < 0 else ""
    # 1,234.56 -> 1.234,56
    digits = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {digits}"


def format_duration(months: int) -> str:
    """Human readable years/months for a target-reached month."""
    if months == TARGET_NOT_REACHED or months < 0:
        return "meta não atingida"

    years, rest = divmod(months, 12)
    year_label = "ano" if years == 1 else "anos"
    month_label = "mês" if rest == 1 else "meses"
    return f"{years} {year_label} e {rest} {month_label}"
