"""
Sibling-column role resolution for computed columns.

A computed column never names its inputs. Instead every bucket carries a
``ColumnRoles`` binding that says which column supplies the quantity, the unit
price and the approved amount. Columns may claim a role explicitly; otherwise
the binding falls back to positional rules over the column order:

* quantity: first ``number`` column with no compute kind
* price: first ``currency`` column with no compute kind
* approved amount: first ``currency`` column (no compute kind) whose key
  contains "approv" (case-insensitive), else the last such currency column

The binding is recomputed whenever the schema changes, so resolution reads it
in constant time.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from budget_document import BucketColumn

APPROVED_KEY_MARKER = "approv"


@dataclass(frozen=True, slots=True)
class ColumnRoles:
    quantity_key: Optional[str] = None
    price_key: Optional[str] = None
    approved_key: Optional[str] = None


def is_input_column(column: "BucketColumn", column_type: str) -> bool:
    """An entered (non-computed) column of the given type."""
    return column.type == column_type and not column.compute


def _candidate(column: "BucketColumn", column_type: str) -> bool:
    # Columns tagged role="none" opt out of positional matching.
    return is_input_column(column, column_type) and column.role != "none"


def _explicit(columns: Sequence["BucketColumn"], role: str) -> Optional[str]:
    for column in columns:
        if column.role == role and column.type != "computed":
            return column.key
    return None


def find_quantity_key(columns: Sequence["BucketColumn"]) -> Optional[str]:
    for column in columns:
        if _candidate(column, "number"):
            return column.key
    return None


def find_price_key(columns: Sequence["BucketColumn"]) -> Optional[str]:
    for column in columns:
        if _candidate(column, "currency"):
            return column.key
    return None


def find_approved_key(columns: Sequence["BucketColumn"]) -> Optional[str]:
    for column in columns:
        if _candidate(column, "currency") and APPROVED_KEY_MARKER in column.key.lower():
            return column.key
    for column in reversed(columns):
        if _candidate(column, "currency"):
            return column.key
    return None


def bind_column_roles(columns: Sequence["BucketColumn"]) -> ColumnRoles:
    """Resolve the role binding for a bucket's current column list."""
    return ColumnRoles(
        quantity_key=_explicit(columns, "quantity") or find_quantity_key(columns),
        price_key=_explicit(columns, "price") or find_price_key(columns),
        approved_key=_explicit(columns, "approved_amount") or find_approved_key(columns),
    )
