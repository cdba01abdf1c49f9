from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from budget_document import Bucket, BudgetDocument
from column_roles import bind_column_roles, is_input_column
from currency_format import format_primary, format_secondary
from numeric import parse_number
from resolver import ComputationContext, resolve_amount


@dataclass(frozen=True, slots=True)
class Totals:
    """A primary-currency amount with both formatted renderings."""

    amount: float
    primary: str
    secondary: str


def subtotal_column_key(bucket: Bucket) -> Optional[str]:
    """
    Column whose values make up the bucket subtotal.

    A pinned ``approved_key`` wins over ``total_key``; without either, the last
    entered currency column in column order is used.
    """
    if bucket.approved_key:
        return bucket.approved_key
    if bucket.total_key:
        return bucket.total_key
    for column in reversed(bucket.columns):
        if is_input_column(column, "currency"):
            return column.key
    return None


def bucket_subtotal(bucket: Bucket, context: Optional[ComputationContext] = None) -> float:
    """
    Sum of the subtotal column over every row; unparsable cells add 0.

    Computed cells are never stored, so a subtotal pinned to a ``row_total``
    column sums the resolved row totals instead. That needs the document
    context; without one the stored (empty) values are summed as usual.
    """
    key = subtotal_column_key(bucket)
    if key is None:
        return 0.0

    column = bucket.column(key)
    if context is not None and column is not None and column.type == "computed" and column.compute == "row_total":
        roles = bind_column_roles(bucket.columns)
        return float(sum(resolve_amount(column, row, roles, context) or 0.0 for row in bucket.rows))
    return float(sum(parse_number(row.get(key)) for row in bucket.rows))


def grand_total(buckets: Iterable[Bucket], context: Optional[ComputationContext] = None) -> float:
    return float(sum(bucket_subtotal(bucket, context) for bucket in buckets))


def document_grand_total(document: BudgetDocument) -> float:
    return grand_total(document.buckets, ComputationContext.from_meta(document.meta))


def format_totals(amount: float, context: ComputationContext) -> Totals:
    return Totals(
        amount=amount,
        primary=format_primary(amount, context.primary_symbol),
        secondary=format_secondary(amount, context.fx_rate, context.secondary_symbol),
    )
