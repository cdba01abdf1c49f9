"""
Log-safe descriptions of budget documents.

Template payloads carry operator-entered names, notes and amounts, so logs
record a fingerprint and a few structural counts instead of the content.
"""

import hashlib
import json
from collections.abc import Mapping
from typing import Any


def hash_payload(value: Any) -> str:
    """
    Return a stable SHA-256 hash for the provided payload without leaking contents.

    Strings are encoded as UTF-8, bytes are used as-is, and arbitrary objects are
    serialized via JSON (falling back to repr()) before hashing.
    """

    if value is None:
        normalized = b"null"
    elif isinstance(value, bytes):
        normalized = value
    elif isinstance(value, str):
        normalized = value.encode("utf-8")
    else:
        try:
            normalized = json.dumps(value, sort_keys=True, default=str).encode("utf-8")
        except TypeError:
            normalized = repr(value).encode("utf-8")

    return hashlib.sha256(normalized).hexdigest()


def describe_document(payload: Any) -> dict[str, Any]:
    """
    Structural summary of a wire-format document for structured log records.

    Never raises: malformed payloads still get a fingerprint with zero counts.
    """

    buckets = payload.get("buckets") if isinstance(payload, Mapping) else None
    if not isinstance(buckets, list):
        buckets = []

    column_count = 0
    row_count = 0
    for bucket in buckets:
        if not isinstance(bucket, Mapping):
            continue
        columns = bucket.get("columns")
        rows = bucket.get("rows")
        column_count += len(columns) if isinstance(columns, list) else 0
        row_count += len(rows) if isinstance(rows, list) else 0

    return {
        "document_sha256": hash_payload(payload),
        "bucket_count": len(buckets),
        "column_count": column_count,
        "row_count": row_count,
    }
