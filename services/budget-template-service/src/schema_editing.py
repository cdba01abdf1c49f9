"""
Operator edit operations on buckets, columns and rows.

These mirror what the template editor lets an operator do. Nothing here blocks
an inconsistent schema (a computed column without a compute kind, a subtotal key
pointing at a text column); such states resolve to empty values downstream.
Every operation that touches a bucket's columns rebinds its column roles.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional
from uuid import uuid4

from budget_document import (
    NUMERIC_COLUMN_TYPES,
    Align,
    Bucket,
    BucketColumn,
    BucketRow,
    BudgetDocument,
    ColumnRole,
    ColumnType,
    ComputeKind,
    new_id,
)
from errors import UnknownBucketError, UnknownColumnError, UnknownRowError
from numeric import CellValue, classify_cell

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_WIDTH = "15%"


def _require_bucket(document: BudgetDocument, bucket_id: str) -> Bucket:
    bucket = document.bucket(bucket_id)
    if bucket is None:
        raise UnknownBucketError(bucket_id)
    return bucket


def _require_column(bucket: Bucket, key: str) -> BucketColumn:
    column = bucket.column(key)
    if column is None:
        raise UnknownColumnError(key)
    return column


def _require_row(bucket: Bucket, row_id: str) -> BucketRow:
    row = bucket.row(row_id)
    if row is None:
        raise UnknownRowError(row_id)
    return row


def _clamp_index(index: int, length: int) -> int:
    return max(0, min(index, length))


def fresh_column_key(bucket: Bucket) -> str:
    existing = {column.key for column in bucket.columns}
    while True:
        candidate = f"col_{uuid4().hex[:7]}"
        if candidate not in existing:
            return candidate


def fresh_row_id(bucket: Bucket) -> str:
    existing = {row.id for row in bucket.rows}
    while True:
        candidate = new_id()
        if candidate not in existing:
            return candidate


# --- buckets -----------------------------------------------------------------


def add_bucket(
    document: BudgetDocument,
    name: str,
    *,
    subtitle: str = "",
    columns: Optional[list[BucketColumn]] = None,
    index: Optional[int] = None,
) -> Bucket:
    existing = {bucket.id for bucket in document.buckets}
    bucket_id = new_id()
    while bucket_id in existing:
        bucket_id = new_id()

    bucket = Bucket(id=bucket_id, name=name, subtitle=subtitle, columns=list(columns or []))
    if index is None:
        document.buckets.append(bucket)
    else:
        document.buckets.insert(_clamp_index(index, len(document.buckets)), bucket)
    logger.debug({"event": "bucket_added", "bucket_id": bucket.id, "column_count": len(bucket.columns)})
    return bucket


def remove_bucket(document: BudgetDocument, bucket_id: str) -> Bucket:
    bucket = _require_bucket(document, bucket_id)
    document.buckets.remove(bucket)
    return bucket


def move_bucket(document: BudgetDocument, bucket_id: str, new_index: int) -> None:
    bucket = _require_bucket(document, bucket_id)
    document.buckets.remove(bucket)
    document.buckets.insert(_clamp_index(new_index, len(document.buckets)), bucket)


def rename_bucket(document: BudgetDocument, bucket_id: str, name: str, subtitle: Optional[str] = None) -> Bucket:
    bucket = _require_bucket(document, bucket_id)
    bucket.name = name
    if subtitle is not None:
        bucket.subtitle = subtitle
    return bucket


def set_subtotal_keys(
    bucket: Bucket,
    *,
    total_key: Optional[str] = None,
    approved_key: Optional[str] = None,
) -> None:
    """Pin (or with None, unpin) the columns the aggregator sums for this bucket."""
    bucket.total_key = total_key or None
    bucket.approved_key = approved_key or None


# --- columns -----------------------------------------------------------------


def add_column(
    bucket: Bucket,
    label: str,
    column_type: ColumnType = "text",
    *,
    width: str = DEFAULT_COLUMN_WIDTH,
    align: Optional[Align] = None,
    compute: Optional[ComputeKind] = None,
    role: Optional[ColumnRole] = None,
    index: Optional[int] = None,
) -> BucketColumn:
    """Append (or insert) a column with a fresh key unique within the bucket."""
    if align is None and column_type in NUMERIC_COLUMN_TYPES | {"computed"}:
        align = "right"
    column = BucketColumn(
        key=fresh_column_key(bucket),
        label=label,
        type=column_type,
        width=width,
        align=align,
        compute=compute if column_type == "computed" else None,
        role=role,
    )
    if index is None:
        bucket.columns.append(column)
    else:
        bucket.columns.insert(_clamp_index(index, len(bucket.columns)), column)
    bucket.rebind_roles()
    return column


def remove_column(bucket: Bucket, key: str) -> BucketColumn:
    """
    Drop a column, its stored row values and any subtotal pin on it.

    Computed columns that depended on it silently re-resolve against whatever
    columns remain.
    """
    column = _require_column(bucket, key)
    bucket.columns.remove(column)
    for row in bucket.rows:
        row.values.pop(key, None)
    if bucket.total_key == key:
        bucket.total_key = None
    if bucket.approved_key == key:
        bucket.approved_key = None
    roles = bucket.rebind_roles()
    logger.debug(
        {
            "event": "column_removed",
            "bucket_id": bucket.id,
            "column_key": key,
            "quantity_key": roles.quantity_key,
            "price_key": roles.price_key,
            "approved_key": roles.approved_key,
        }
    )
    return column


def move_column(bucket: Bucket, key: str, new_index: int) -> None:
    column = _require_column(bucket, key)
    bucket.columns.remove(column)
    bucket.columns.insert(_clamp_index(new_index, len(bucket.columns)), column)
    bucket.rebind_roles()


def rename_column(bucket: Bucket, key: str, label: str) -> BucketColumn:
    column = _require_column(bucket, key)
    column.label = label
    return column


def set_column_width(bucket: Bucket, key: str, width: str, align: Optional[Align] = None) -> BucketColumn:
    column = _require_column(bucket, key)
    column.width = width
    if align is not None:
        column.align = align
    return column


def set_column_type(bucket: Bucket, key: str, column_type: ColumnType) -> BucketColumn:
    """
    Change a column's type.

    Turning a column into ``computed`` discards its stored row values since
    computed values are never stored; leaving ``computed`` clears the compute kind.
    """
    column = _require_column(bucket, key)
    column.type = column_type
    if column_type == "computed":
        for row in bucket.rows:
            row.values.pop(key, None)
    else:
        column.compute = None
    bucket.rebind_roles()
    return column


def set_column_compute(bucket: Bucket, key: str, compute: Optional[ComputeKind]) -> BucketColumn:
    column = _require_column(bucket, key)
    column.compute = compute
    bucket.rebind_roles()
    return column


def set_column_role(bucket: Bucket, key: str, role: Optional[ColumnRole]) -> BucketColumn:
    column = _require_column(bucket, key)
    column.role = role
    bucket.rebind_roles()
    return column


# --- rows --------------------------------------------------------------------


def add_row(
    bucket: Bucket,
    values: Optional[Mapping[str, object]] = None,
    *,
    index: Optional[int] = None,
) -> BucketRow:
    row = BucketRow(id=fresh_row_id(bucket))
    if index is None:
        bucket.rows.append(row)
    else:
        bucket.rows.insert(_clamp_index(index, len(bucket.rows)), row)
    for key, value in (values or {}).items():
        set_cell(bucket, row.id, key, value)
    return row


def remove_row(bucket: Bucket, row_id: str) -> BucketRow:
    row = _require_row(bucket, row_id)
    bucket.rows.remove(row)
    return row


def move_row(bucket: Bucket, row_id: str, new_index: int) -> None:
    row = _require_row(bucket, row_id)
    bucket.rows.remove(row)
    bucket.rows.insert(_clamp_index(new_index, len(bucket.rows)), row)


def duplicate_row(bucket: Bucket, row_id: str) -> BucketRow:
    """Copy a row's stored values into a new row placed right after it."""
    source = _require_row(bucket, row_id)
    copy = BucketRow(id=fresh_row_id(bucket), values=dict(source.values))
    bucket.rows.insert(bucket.rows.index(source) + 1, copy)
    return copy


def set_cell(bucket: Bucket, row_id: str, key: str, value: object) -> CellValue:
    """
    Store an operator-entered value and return how it was classified.

    Numbers are stored as their plain text form. Blank or None clears the cell.
    Writes to computed columns are ignored (their value is always derived) and
    come back as an unset cell. Non-numeric text in a number or currency column
    is kept as typed and will read as 0.
    """
    row = _require_row(bucket, row_id)
    column = _require_column(bucket, key)
    if column.type == "computed":
        logger.debug({"event": "computed_cell_write_ignored", "bucket_id": bucket.id, "column_key": key})
        return CellValue(kind="unset")

    cell = classify_cell(value, numeric_column=column.is_numeric)
    if not cell.is_set:
        row.values.pop(key, None)
        return cell

    if column.is_numeric and cell.kind == "text":
        logger.info(
            {
                "event": "non_numeric_cell_value",
                "bucket_id": bucket.id,
                "column_key": key,
                "column_type": column.type,
            }
        )
    row.values[key] = cell.text
    return cell


def read_cell(bucket: Bucket, row_id: str, key: str) -> CellValue:
    row = _require_row(bucket, row_id)
    column = _require_column(bucket, key)
    return classify_cell(row.get(key), numeric_column=column.is_numeric)
