"""
Shared observability helpers (telemetry, log-safe payload descriptions).

Services import from this package so request correlation, JSON logging and
tracing are wired the same way everywhere.
"""

from .privacy import describe_document, hash_payload
from .telemetry import (
    CORRELATION_ID_HEADER,
    RequestContextToken,
    bind_request_context,
    current_request_id,
    ensure_request_id,
    install_request_context,
    reset_request_context,
    setup_telemetry,
)

__all__ = [
    "describe_document",
    "hash_payload",
    "CORRELATION_ID_HEADER",
    "RequestContextToken",
    "bind_request_context",
    "current_request_id",
    "ensure_request_id",
    "install_request_context",
    "reset_request_context",
    "setup_telemetry",
]
