"""Budget template data access helpers."""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from persistence.models import BudgetTemplate, utcnow


class BudgetTemplateRepository:
    """Thin repository that encapsulates persistence operations."""

    def __init__(self, db: Session):
        self._db = db

    def create_template(
        self,
        name: str,
        data: dict[str, Any],
        *,
        description: str = "",
        template_id: str | None = None,
    ) -> BudgetTemplate:
        record = BudgetTemplate(
            id=template_id or str(uuid4()),
            name=name,
            description=description or "",
            data=data,
        )
        self._db.add(record)
        self._db.commit()
        self._db.refresh(record)
        return record

    def get_template(self, template_id: str) -> BudgetTemplate | None:
        return self._db.get(BudgetTemplate, template_id)

    def list_templates(self) -> list[BudgetTemplate]:
        """All templates, most recently updated first."""
        statement = select(BudgetTemplate).order_by(BudgetTemplate.updated_at.desc(), BudgetTemplate.id)
        return list(self._db.scalars(statement))

    def update_template(
        self,
        template: BudgetTemplate,
        *,
        name: str | None = None,
        description: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> BudgetTemplate:
        """Apply whichever fields were provided; the last write simply wins."""
        if name is not None:
            template.name = name
        if description is not None:
            template.description = description
        if data is not None:
            template.data = data
        # Touch the row even when nothing changed so it sorts first in the list.
        template.updated_at = utcnow()
        self._db.add(template)
        self._db.commit()
        self._db.refresh(template)
        return template

    def delete_template(self, template: BudgetTemplate) -> None:
        self._db.delete(template)
        self._db.commit()
