from __future__ import annotations

import logging
from typing import Optional

from budget_document import BudgetDocument
from defaults import default_document
from document_view import DocumentView, build_text_summary, evaluate_document
from serialization import document_from_wire, document_to_wire
from template_gateway import TemplateGateway, TemplateSummary

logger = logging.getLogger(__name__)


class BudgetEditingSession:
    """
    One operator's in-memory document plus the template it was saved as.

    Schema and row edits go straight to ``document`` through the functions in
    ``schema_editing``; this class only owns the persistence round trips.
    Saves send a snapshot taken when ``save`` is called, so edits made while a
    save is in flight stay local until the next save. No locking or version
    check is done: whichever save the gateway sees last wins.
    """

    def __init__(
        self,
        gateway: TemplateGateway,
        document: Optional[BudgetDocument] = None,
        *,
        template_id: Optional[str] = None,
        name: str = "",
        description: str = "",
    ) -> None:
        self._gateway = gateway
        self.document = document if document is not None else default_document()
        self.template_id = template_id
        self.name = name
        self.description = description

    @property
    def is_saved(self) -> bool:
        return self.template_id is not None

    def view(self) -> DocumentView:
        return evaluate_document(self.document)

    def text_summary(self) -> str:
        return build_text_summary(self.document)

    def reset(self) -> None:
        """Replace the document with fresh defaults and detach from any saved template."""
        self.document = default_document()
        self.template_id = None
        self.name = ""
        self.description = ""

    async def save(self, name: Optional[str] = None, description: Optional[str] = None) -> str:
        """
        Create the template on first save, update it afterwards.

        Raises PersistenceError on failure; nothing is retried and the session
        keeps its previous identity.
        """
        if self.template_id is None:
            return await self._create(name, description)

        new_name = self.name if name is None else name
        new_description = self.description if description is None else description
        await self._gateway.update(self.template_id, new_name, new_description, self._snapshot())
        self.name = new_name
        self.description = new_description
        logger.info({"event": "template_updated", "template_id": self.template_id})
        return self.template_id

    async def save_as(self, name: str, description: str = "") -> str:
        """Always create a new template, leaving any previously loaded one untouched."""
        return await self._create(name, description)

    async def _create(self, name: Optional[str], description: Optional[str]) -> str:
        new_name = self.name if name is None else name
        new_description = self.description if description is None else description
        template_id = await self._gateway.create(new_name, new_description, self._snapshot())
        self.template_id = template_id
        self.name = new_name
        self.description = new_description
        logger.info({"event": "template_created", "template_id": template_id})
        return template_id

    def _snapshot(self) -> BudgetDocument:
        return document_from_wire(document_to_wire(self.document))

    async def load(self, template_id: str) -> BudgetDocument:
        record = await self._gateway.get(template_id)
        self.document = record.document
        self.template_id = record.id
        self.name = record.name
        self.description = record.description
        return self.document

    async def list_templates(self) -> list[TemplateSummary]:
        return await self._gateway.list()

    async def delete(self, template_id: Optional[str] = None) -> None:
        """Delete a stored template; deleting the current one detaches the session from it."""
        target = template_id or self.template_id
        if target is None:
            return
        await self._gateway.delete(target)
        if target == self.template_id:
            self.template_id = None
