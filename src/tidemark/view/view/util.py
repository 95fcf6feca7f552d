# SPDX-License-Identifier: MIT

from decimal import Decimal
from typing import Optional


def format_hours(hours: Decimal) -> str:
    return f"{hours:,.2f}"


def format_money(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def format_percent(value: Optional[Decimal]) -> str:
    if value is None:
        return "-"
    return f"{value:.1f}%"


def load_style(load: Decimal) -> str:
    """Color for a capacity load percentage."""
    if load > 100:
        return "red"
    if load >= 80:
        return "yellow"
    return "green"
