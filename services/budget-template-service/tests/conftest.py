"""Pytest configuration for budget-template-service tests.

Ensures the service's own src directory (and the shared services root) take
precedence in sys.path, and points the template database at a throwaway
SQLite file before any persistence module is imported.
"""

import os
import sys
import tempfile
from pathlib import Path

SERVICE_SRC = Path(__file__).resolve().parents[1] / "src"
SERVICES_ROOT = Path(__file__).resolve().parents[2]

for path in (SERVICES_ROOT, SERVICE_SRC):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

if "TEMPLATES_DB_URL" not in os.environ:
    _db_dir = Path(tempfile.mkdtemp(prefix="budget-templates-"))
    os.environ["TEMPLATES_DB_URL"] = f"sqlite:///{_db_dir / 'templates.db'}"
