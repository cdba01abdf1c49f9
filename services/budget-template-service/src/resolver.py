from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from budget_document import Bucket, BucketColumn, BucketRow, TemplateMeta
from column_roles import ColumnRoles
from currency_format import format_primary, format_quantity, format_secondary
from numeric import parse_number


@dataclass(frozen=True, slots=True)
class ComputationContext:
    """Document-level inputs every computed cell may read."""

    multiplier: float = 0.0
    fx_rate: float = 0.0
    primary_symbol: str = ""
    secondary_symbol: str = ""

    @classmethod
    def from_meta(cls, meta: TemplateMeta) -> "ComputationContext":
        return cls(
            multiplier=parse_number(meta.multiplier_value),
            fx_rate=parse_number(meta.fx_rate),
            primary_symbol=meta.primary_symbol,
            secondary_symbol=meta.secondary_symbol,
        )


def _value(row: BucketRow, key: Optional[str]) -> float:
    return parse_number(row.get(key)) if key else 0.0


def _scaled_total(row: BucketRow, roles: ColumnRoles, context: ComputationContext) -> Optional[float]:
    """(quantity x multiplier, or bare quantity when no multiplier) x price."""
    if not roles.quantity_key or not roles.price_key:
        return None
    quantity = _value(row, roles.quantity_key)
    if context.multiplier > 0:
        quantity *= context.multiplier
    return quantity * _value(row, roles.price_key)


def _convertible_amount(
    column: BucketColumn,
    row: BucketRow,
    roles: ColumnRoles,
    context: ComputationContext,
) -> Optional[float]:
    """Primary-currency amount a secondary-currency column converts, if any."""
    if context.fx_rate <= 0:
        return None
    if column.compute == "usd_equiv":
        amount = _scaled_total(row, roles, context)
    elif column.compute == "usd_approved":
        amount = _value(row, roles.approved_key) if roles.approved_key else None
    else:
        return None
    if amount is None or amount <= 0:
        return None
    return amount


def resolve_amount(
    column: BucketColumn,
    row: BucketRow,
    roles: ColumnRoles,
    context: ComputationContext,
) -> Optional[float]:
    """
    Numeric value behind a computed cell, or None when it resolves empty.

    ``qty_total`` and ``row_total`` are in primary units; ``usd_equiv`` and
    ``usd_approved`` are already converted to the secondary currency.
    A ``row_total`` may be zero or negative; display decides how to show that.
    """
    if column.type != "computed" or not column.compute:
        return None

    if column.compute == "qty_total":
        if not roles.quantity_key or context.multiplier <= 0:
            return None
        quantity = _value(row, roles.quantity_key)
        if quantity <= 0:
            return None
        return quantity * context.multiplier

    if column.compute == "row_total":
        return _scaled_total(row, roles, context)

    amount = _convertible_amount(column, row, roles, context)
    return amount / context.fx_rate if amount is not None else None


def resolve_cell(
    column: BucketColumn,
    row: BucketRow,
    roles: ColumnRoles,
    context: ComputationContext,
) -> str:
    """Display text for a computed cell; empty string when nothing resolves."""
    if column.type != "computed" or not column.compute:
        return ""

    if column.compute == "qty_total":
        quantity = resolve_amount(column, row, roles, context)
        return format_quantity(quantity) if quantity is not None else ""

    if column.compute == "row_total":
        total = _scaled_total(row, roles, context)
        return format_primary(total, context.primary_symbol) if total is not None else ""

    amount = _convertible_amount(column, row, roles, context)
    if amount is None:
        return ""
    return format_secondary(amount, context.fx_rate, context.secondary_symbol)


def render_cell(bucket: Bucket, column: BucketColumn, row: BucketRow, context: ComputationContext) -> str:
    """Text shown for any cell: stored text for entered columns, derived text for computed ones."""
    if column.type == "computed":
        return resolve_cell(column, row, bucket.roles, context)
    return row.get(column.key) or ""
