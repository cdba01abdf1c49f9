"""
Currency text rendering shared by computed cells, subtotals and grand totals.

Every call site goes through these helpers so an inline ``row_total`` cell and
the bucket subtotal beneath it always agree on placeholder and rounding rules.
"""

from __future__ import annotations

PLACEHOLDER = "—"


def format_amount(value: float) -> str:
    """Thousands separators and exactly two decimals, e.g. 1234.5 -> "1,234.50"."""
    return f"{value:,.2f}"


def format_primary(amount: float, symbol: str) -> str:
    """Render a primary-currency amount; zero or negative amounts render the placeholder."""
    if amount <= 0:
        return PLACEHOLDER
    return f"{symbol}{format_amount(amount)}"


def format_secondary(amount: float, fx_rate: float, symbol: str) -> str:
    """
    Convert a primary-currency amount at ``fx_rate`` and render it.

    ``fx_rate`` is primary units per one secondary unit, so conversion divides.
    A non-positive rate or amount renders the placeholder.
    """
    if fx_rate <= 0 or amount <= 0:
        return PLACEHOLDER
    return f"{symbol}{format_amount(amount / fx_rate)}"


def format_quantity(value: float) -> str:
    """Plain quantity with thousands separators and up to three decimals ("36", "1,250.5")."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")
