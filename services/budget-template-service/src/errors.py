"""Exception types raised by the budget template engine and its gateway client."""

from __future__ import annotations


class BudgetEngineError(Exception):
    """Base class for every error the engine raises on purpose."""


class DocumentFormatError(BudgetEngineError, ValueError):
    """Raised when a wire payload does not have the budget document shape."""


class UnknownBucketError(BudgetEngineError, KeyError):
    """Raised by edit operations that reference a bucket id that does not exist."""


class UnknownColumnError(BudgetEngineError, KeyError):
    """Raised by edit operations that reference a column key that does not exist."""


class UnknownRowError(BudgetEngineError, KeyError):
    """Raised by edit operations that reference a row id that does not exist."""


class PersistenceError(BudgetEngineError):
    """
    A template persistence call failed.

    Carries the human readable message reported by the gateway (or the transport
    error text) and the HTTP status when one was received. Callers decide whether
    to re-invoke; nothing is retried automatically.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TemplateNotFoundError(PersistenceError):
    """The gateway has no template stored under the requested id."""
