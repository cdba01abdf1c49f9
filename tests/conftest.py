"""Pytest configuration for root-level integration tests.

Adds the template service src directory and the shared services root to
sys.path, and points the template database at a throwaway SQLite file before
any persistence module is imported.
"""

import os
import sys
import tempfile
from pathlib import Path

SERVICES_ROOT = Path(__file__).resolve().parents[1] / "services"

SERVICE_PATHS = [
    SERVICES_ROOT / "budget-template-service" / "src",
    SERVICES_ROOT,
]

for path in SERVICE_PATHS:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

if "TEMPLATES_DB_URL" not in os.environ:
    _db_dir = Path(tempfile.mkdtemp(prefix="budget-templates-it-"))
    os.environ["TEMPLATES_DB_URL"] = f"sqlite:///{_db_dir / 'templates.db'}"
