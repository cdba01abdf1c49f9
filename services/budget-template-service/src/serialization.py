"""
Wire-format conversion for budget documents.

The wire shape is the camelCase JSON persisted by the template gateway. Values
pass through untouched: row cells stay text and numeric-looking meta fields
stay strings. Only structural problems raise ``DocumentFormatError``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from budget_document import (
    ALIGNMENTS,
    COLUMN_ROLES,
    COLUMN_TYPES,
    COMPUTE_KINDS,
    Bucket,
    BucketColumn,
    BucketRow,
    BudgetDocument,
    Guardrail,
    MetaField,
    TemplateMeta,
)
from errors import DocumentFormatError
from numeric import number_to_text

# (wire key, attribute) pairs for the plain string fields of TemplateMeta.
_META_TEXT_FIELDS = (
    ("orgName", "org_name"),
    ("templateTitle", "template_title"),
    ("templateSubtitle", "template_subtitle"),
    ("tagline", "tagline"),
    ("primaryCurrency", "primary_currency"),
    ("primarySymbol", "primary_symbol"),
    ("secondaryCurrency", "secondary_currency"),
    ("secondarySymbol", "secondary_symbol"),
    ("fxRate", "fx_rate"),
    ("multiplierLabel", "multiplier_label"),
    ("multiplierValue", "multiplier_value"),
    ("preparedBy", "prepared_by"),
    ("preparedDate", "prepared_date"),
    ("approvedBy", "approved_by"),
    ("approvedDate", "approved_date"),
    ("footerNote", "footer_note"),
)

_GUARDRAIL_FIELDS = ("bucket", "purpose", "cap", "notes")


# --- to wire -----------------------------------------------------------------


def meta_to_wire(meta: TemplateMeta) -> Dict[str, Any]:
    payload: Dict[str, Any] = {wire: getattr(meta, attr) for wire, attr in _META_TEXT_FIELDS}
    payload["metaFields"] = [{"label": item.label, "value": item.value} for item in meta.meta_fields]
    payload["showGuardrails"] = meta.show_guardrails
    payload["guardrails"] = [
        {name: getattr(guardrail, name) for name in _GUARDRAIL_FIELDS} for guardrail in meta.guardrails
    ]
    return payload


def column_to_wire(column: BucketColumn) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "key": column.key,
        "label": column.label,
        "type": column.type,
        "width": column.width,
        "align": column.align,
        "compute": column.compute,
    }
    if column.role is not None:
        payload["role"] = column.role
    return payload


def row_to_wire(row: BucketRow) -> Dict[str, str]:
    payload = {"id": row.id}
    payload.update({key: value for key, value in row.values.items() if key != "id"})
    return payload


def bucket_to_wire(bucket: Bucket) -> Dict[str, Any]:
    return {
        "id": bucket.id,
        "name": bucket.name,
        "subtitle": bucket.subtitle,
        "totalKey": bucket.total_key,
        "approvedKey": bucket.approved_key,
        "columns": [column_to_wire(column) for column in bucket.columns],
        "rows": [row_to_wire(row) for row in bucket.rows],
    }


def document_to_wire(document: BudgetDocument) -> Dict[str, Any]:
    return {
        "meta": meta_to_wire(document.meta),
        "buckets": [bucket_to_wire(bucket) for bucket in document.buckets],
    }


def dumps_document(document: BudgetDocument, *, indent: Optional[int] = None) -> str:
    return json.dumps(document_to_wire(document), ensure_ascii=False, indent=indent)


# --- from wire ---------------------------------------------------------------


def _expect_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DocumentFormatError(f"{where} must be an object")
    return value


def _expect_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DocumentFormatError(f"{where} must be an array")
    return value


def _text(payload: Mapping[str, Any], key: str, where: str, default: str = "") -> str:
    value = payload.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise DocumentFormatError(f"{where}.{key} must be a string")
    return value


def _optional_text(payload: Mapping[str, Any], key: str, where: str) -> Optional[str]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DocumentFormatError(f"{where}.{key} must be a string or null")
    return value


def _flag(payload: Mapping[str, Any], key: str, where: str) -> bool:
    value = payload.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DocumentFormatError(f"{where}.{key} must be a boolean")
    return value


def _choice(payload: Mapping[str, Any], key: str, allowed: tuple[str, ...], where: str) -> Optional[str]:
    value = _optional_text(payload, key, where)
    if value is not None and value not in allowed:
        raise DocumentFormatError(f"{where}.{key} must be one of {', '.join(allowed)} (received '{value}')")
    return value


def meta_from_wire(payload: Any) -> TemplateMeta:
    data = _expect_mapping(payload, "meta")
    meta = TemplateMeta()
    for wire, attr in _META_TEXT_FIELDS:
        if wire in data:
            setattr(meta, attr, _text(data, wire, "meta"))

    meta.meta_fields = [
        MetaField(
            label=_text(_expect_mapping(item, f"meta.metaFields[{index}]"), "label", "meta.metaFields"),
            value=_text(item, "value", "meta.metaFields"),
        )
        for index, item in enumerate(_expect_list(data.get("metaFields"), "meta.metaFields"))
    ]
    meta.show_guardrails = _flag(data, "showGuardrails", "meta")
    meta.guardrails = [
        Guardrail(
            **{
                name: _text(_expect_mapping(item, f"meta.guardrails[{index}]"), name, "meta.guardrails")
                for name in _GUARDRAIL_FIELDS
            }
        )
        for index, item in enumerate(_expect_list(data.get("guardrails"), "meta.guardrails"))
    ]
    return meta


def column_from_wire(payload: Any, where: str) -> BucketColumn:
    data = _expect_mapping(payload, where)
    key = _text(data, "key", where)
    if not key:
        raise DocumentFormatError(f"{where}.key is required")
    column_type = _choice(data, "type", COLUMN_TYPES, where) or "text"
    return BucketColumn(
        key=key,
        label=_text(data, "label", where),
        type=column_type,  # type: ignore[arg-type]
        width=_text(data, "width", where),
        align=_choice(data, "align", ALIGNMENTS, where),  # type: ignore[arg-type]
        compute=_choice(data, "compute", COMPUTE_KINDS, where),  # type: ignore[arg-type]
        role=_choice(data, "role", COLUMN_ROLES, where),  # type: ignore[arg-type]
    )


def row_from_wire(payload: Any, where: str) -> BucketRow:
    data = _expect_mapping(payload, where)
    row_id = data.get("id")
    if not isinstance(row_id, str) or not row_id:
        raise DocumentFormatError(f"{where}.id is required")
    values: Dict[str, str] = {}
    for key, value in data.items():
        if key == "id" or value is None:
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            # Bare JSON numbers are kept as their plain text form.
            values[key] = number_to_text(value)
        elif isinstance(value, str):
            values[key] = value
        else:
            raise DocumentFormatError(f"{where}.{key} must be a string")
    return BucketRow(id=row_id, values=values)


def bucket_from_wire(payload: Any, where: str) -> Bucket:
    data = _expect_mapping(payload, where)
    bucket_id = _text(data, "id", where)
    if not bucket_id:
        raise DocumentFormatError(f"{where}.id is required")
    columns = [
        column_from_wire(item, f"{where}.columns[{index}]")
        for index, item in enumerate(_expect_list(data.get("columns"), f"{where}.columns"))
    ]
    rows = [
        row_from_wire(item, f"{where}.rows[{index}]")
        for index, item in enumerate(_expect_list(data.get("rows"), f"{where}.rows"))
    ]
    return Bucket(
        id=bucket_id,
        name=_text(data, "name", where),
        subtitle=_text(data, "subtitle", where),
        total_key=_optional_text(data, "totalKey", where),
        approved_key=_optional_text(data, "approvedKey", where),
        columns=columns,
        rows=rows,
    )


def document_from_wire(payload: Any) -> BudgetDocument:
    data = _expect_mapping(payload, "document")
    buckets = [
        bucket_from_wire(item, f"buckets[{index}]")
        for index, item in enumerate(_expect_list(data.get("buckets"), "buckets"))
    ]
    return BudgetDocument(meta=meta_from_wire(data.get("meta", {})), buckets=buckets)


def loads_document(raw: str | bytes) -> BudgetDocument:
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise DocumentFormatError(f"Document is not valid JSON: {exc}") from exc
    return document_from_wire(payload)
