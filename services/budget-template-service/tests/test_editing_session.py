from typing import Dict, Optional

import pytest

from budget_document import BudgetDocument
from editing_session import BudgetEditingSession
from errors import PersistenceError, TemplateNotFoundError
from schema_editing import set_cell
from serialization import document_from_wire, document_to_wire
from template_gateway import TemplateRecord, TemplateSummary


class FakeGateway:
    """In-memory stand-in for the template gateway that records every call."""

    def __init__(self) -> None:
        self.templates: Dict[str, TemplateRecord] = {}
        self.calls: list[str] = []
        self.fail_next: Optional[PersistenceError] = None
        self._counter = 0

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    async def create(self, name: str, description: str, document: BudgetDocument) -> str:
        self.calls.append("create")
        self._maybe_fail()
        self._counter += 1
        template_id = f"tpl-{self._counter}"
        self.templates[template_id] = TemplateRecord(template_id, name, description, _copy(document))
        return template_id

    async def update(self, template_id, name=None, description=None, document=None) -> bool:
        self.calls.append("update")
        self._maybe_fail()
        record = self.templates.get(template_id)
        if record is None:
            raise TemplateNotFoundError("Template not found.", status_code=404)
        if name is not None:
            record.name = name
        if description is not None:
            record.description = description
        if document is not None:
            record.document = _copy(document)
        return True

    async def get(self, template_id: str) -> TemplateRecord:
        self.calls.append("get")
        record = self.templates.get(template_id)
        if record is None:
            raise TemplateNotFoundError("Template not found.", status_code=404)
        return TemplateRecord(record.id, record.name, record.description, _copy(record.document))

    async def list(self) -> list[TemplateSummary]:
        self.calls.append("list")
        return [TemplateSummary(id=r.id, name=r.name, description=r.description) for r in self.templates.values()]

    async def delete(self, template_id: str) -> bool:
        self.calls.append("delete")
        if self.templates.pop(template_id, None) is None:
            raise TemplateNotFoundError("Template not found.", status_code=404)
        return True


def _copy(document: BudgetDocument) -> BudgetDocument:
    return document_from_wire(document_to_wire(document))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


def test_new_session_starts_from_defaults(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)

    assert not session.is_saved
    assert len(session.document.buckets) == 3
    assert session.text_summary().splitlines()[-1] == "GRAND TOTAL: — (—)"


@pytest.mark.anyio
async def test_first_save_creates_then_updates(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)

    first_id = await session.save("Cycle 4", "April")
    session.document.meta.fx_rate = "1600"
    second_id = await session.save()

    assert first_id == second_id == "tpl-1"
    assert gateway.calls == ["create", "update"]
    stored = gateway.templates["tpl-1"]
    assert stored.name == "Cycle 4"
    assert stored.description == "April"
    assert stored.document.meta.fx_rate == "1600"


@pytest.mark.anyio
async def test_save_sends_snapshot_not_live_document(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    await session.save("Cycle")

    logistics = session.document.buckets[2]
    set_cell(logistics, logistics.rows[0].id, "amount", "15000")

    stored = gateway.templates["tpl-1"].document
    assert stored.buckets[2].rows[0].values["amount"] == ""


@pytest.mark.anyio
async def test_save_as_creates_a_new_template(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    await session.save("Original")

    copy_id = await session.save_as("Copy", "forked")

    assert copy_id == "tpl-2"
    assert session.template_id == "tpl-2"
    assert set(gateway.templates) == {"tpl-1", "tpl-2"}
    assert gateway.templates["tpl-1"].name == "Original"


@pytest.mark.anyio
async def test_failed_create_leaves_session_unsaved(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    gateway.fail_next = PersistenceError("Template gateway is unavailable: boom")

    with pytest.raises(PersistenceError):
        await session.save("Cycle")

    assert not session.is_saved
    assert await session.save() == "tpl-1"


@pytest.mark.anyio
async def test_failed_save_as_keeps_the_loaded_template(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    await session.save("Cycle 1", "first")
    gateway.fail_next = PersistenceError("Template gateway is unavailable: boom")

    with pytest.raises(PersistenceError):
        await session.save_as("Cycle 2", "second")

    assert session.template_id == "tpl-1"
    assert session.name == "Cycle 1"
    assert session.description == "first"

    assert await session.save() == "tpl-1"
    assert gateway.calls == ["create", "create", "update"]
    assert list(gateway.templates) == ["tpl-1"]


@pytest.mark.anyio
async def test_failed_update_keeps_previous_name(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    await session.save("Cycle 1")
    gateway.fail_next = PersistenceError("Failed to update template.", status_code=500)

    with pytest.raises(PersistenceError):
        await session.save("Renamed")

    assert session.name == "Cycle 1"
    assert gateway.templates["tpl-1"].name == "Cycle 1"


@pytest.mark.anyio
async def test_load_replaces_document_and_identity(gateway: FakeGateway) -> None:
    author = BudgetEditingSession(gateway)
    author.document.meta.template_title = "Stored title"
    template_id = await author.save("Stored", "desc")

    reader = BudgetEditingSession(gateway)
    document = await reader.load(template_id)

    assert document.meta.template_title == "Stored title"
    assert reader.template_id == template_id
    assert reader.name == "Stored"
    assert reader.description == "desc"


@pytest.mark.anyio
async def test_load_missing_template_keeps_current_document(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    before = session.document

    with pytest.raises(TemplateNotFoundError):
        await session.load("missing")

    assert session.document is before
    assert not session.is_saved


@pytest.mark.anyio
async def test_list_and_delete(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    await session.save("One")
    await session.save_as("Two")

    summaries = await session.list_templates()
    assert [summary.name for summary in summaries] == ["One", "Two"]

    await session.delete("tpl-1")
    assert session.template_id == "tpl-2"

    await session.delete()
    assert not session.is_saved
    assert gateway.templates == {}


@pytest.mark.anyio
async def test_delete_without_template_is_a_no_op(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)

    await session.delete()

    assert gateway.calls == []


def test_reset_detaches_and_restores_defaults(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway, template_id="tpl-9", name="Old")
    session.document.buckets.clear()

    session.reset()

    assert not session.is_saved
    assert session.name == ""
    assert len(session.document.buckets) == 3


def test_view_reflects_current_document(gateway: FakeGateway) -> None:
    session = BudgetEditingSession(gateway)
    session.document.meta.fx_rate = "1500"
    logistics = session.document.buckets[2]
    set_cell(logistics, logistics.rows[0].id, "amount", "15000")

    view = session.view()

    assert view.grand_total.primary == "₦15,000.00"
    assert view.grand_total.secondary == "$10.00"
