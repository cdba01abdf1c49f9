"""Persistence primitives for the template service."""

from persistence.database import (
    DB_URL_ENV_VAR,
    DEFAULT_DB_FILENAME,
    DEFAULT_DB_PATH,
    SessionLocal,
    build_engine,
    get_database_url,
    get_engine,
    get_session,
    init_db,
)
from persistence.models import Base, BudgetTemplate
from persistence.repository import BudgetTemplateRepository

__all__ = [
    "Base",
    "BudgetTemplate",
    "BudgetTemplateRepository",
    "DB_URL_ENV_VAR",
    "DEFAULT_DB_FILENAME",
    "DEFAULT_DB_PATH",
    "SessionLocal",
    "build_engine",
    "get_database_url",
    "get_engine",
    "get_session",
    "init_db",
]
