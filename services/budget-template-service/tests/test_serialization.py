import json

import pytest

from budget_document import Bucket, BucketColumn, BucketRow, BudgetDocument, Guardrail, MetaField, TemplateMeta
from defaults import default_document
from errors import DocumentFormatError
from serialization import (
    column_to_wire,
    document_from_wire,
    document_to_wire,
    dumps_document,
    loads_document,
)


def make_document() -> BudgetDocument:
    return BudgetDocument(
        meta=TemplateMeta(
            org_name="Hope Outreach",
            template_title="Cycle 4",
            fx_rate="1600",
            multiplier_label="homes",
            multiplier_value="12",
            meta_fields=[MetaField(label="Location", value="Lagos")],
            show_guardrails=True,
            guardrails=[Guardrail(bucket="A", purpose="Packs", cap="₦50,000", notes="")],
        ),
        buckets=[
            Bucket(
                id="b1",
                name="Core Packs",
                total_key="total",
                columns=[
                    BucketColumn(key="item", label="Item", width="30%"),
                    BucketColumn(key="qty", label="Qty", type="number", align="right", role="quantity"),
                    BucketColumn(key="unitCost", label="Unit Cost", type="currency", align="right"),
                    BucketColumn(key="total", label="Total", type="computed", compute="row_total"),
                ],
                rows=[
                    BucketRow(id="r1", values={"item": "Rice (kg)", "qty": "3", "unitCost": "25"}),
                    BucketRow(id="r2", values={"item": "Beans", "qty": "abc"}),
                ],
            )
        ],
    )


def test_document_round_trips_through_wire_form():
    document = make_document()

    restored = document_from_wire(document_to_wire(document))

    assert restored == document
    assert restored.buckets[0].roles == document.buckets[0].roles


def test_default_document_round_trips_through_json_text():
    document = default_document()

    assert loads_document(dumps_document(document)) == document


def test_wire_form_uses_camel_case_keys():
    wire = document_to_wire(make_document())

    assert wire["meta"]["fxRate"] == "1600"
    assert wire["meta"]["multiplierValue"] == "12"
    assert wire["meta"]["showGuardrails"] is True
    bucket = wire["buckets"][0]
    assert bucket["totalKey"] == "total"
    assert bucket["approvedKey"] is None
    assert bucket["rows"][0] == {"id": "r1", "item": "Rice (kg)", "qty": "3", "unitCost": "25"}


def test_role_is_only_emitted_when_set():
    assert "role" not in column_to_wire(BucketColumn(key="item", label="Item"))
    assert column_to_wire(BucketColumn(key="qty", label="Qty", type="number", role="quantity"))["role"] == "quantity"


def test_non_numeric_text_survives_unchanged():
    restored = document_from_wire(document_to_wire(make_document()))

    assert restored.buckets[0].rows[1].values["qty"] == "abc"


def test_dumps_keeps_currency_symbols_unescaped():
    text = dumps_document(make_document())

    assert "₦" in text
    assert json.loads(text)["meta"]["primarySymbol"] == "₦"


def test_missing_optional_fields_take_defaults():
    document = document_from_wire(
        {
            "meta": {"templateTitle": "Bare"},
            "buckets": [{"id": "b1", "name": "Only", "columns": [{"key": "amount", "type": "currency"}]}],
        }
    )

    assert document.meta.template_title == "Bare"
    assert document.meta.primary_symbol == "₦"
    bucket = document.buckets[0]
    assert bucket.rows == []
    assert bucket.columns[0].label == ""
    assert bucket.roles.approved_key == "amount"


def test_empty_strings_for_optional_keys_become_none():
    document = document_from_wire(
        {
            "meta": {},
            "buckets": [
                {
                    "id": "b1",
                    "name": "B",
                    "totalKey": "",
                    "approvedKey": "",
                    "columns": [{"key": "x", "label": "X", "type": "text", "align": "", "compute": ""}],
                }
            ],
        }
    )

    bucket = document.buckets[0]
    assert bucket.total_key is None
    assert bucket.approved_key is None
    assert bucket.columns[0].align is None
    assert bucket.columns[0].compute is None


def test_bare_numbers_in_rows_are_stored_as_text():
    document = document_from_wire(
        {
            "buckets": [
                {
                    "id": "b1",
                    "name": "B",
                    "columns": [{"key": "amount", "type": "currency"}],
                    "rows": [{"id": "r1", "amount": 1500}, {"id": "r2", "amount": 12.5, "note": None}],
                }
            ]
        }
    )

    rows = document.buckets[0].rows
    assert rows[0].values == {"amount": "1500"}
    assert rows[1].values == {"amount": "12.5"}


@pytest.mark.parametrize(
    "payload, message",
    [
        ([], "document must be an object"),
        ({"buckets": {}}, "buckets must be an array"),
        ({"buckets": [{"name": "No id"}]}, "buckets[0].id is required"),
        ({"buckets": [{"id": "b1", "columns": [{"label": "x"}]}]}, "buckets[0].columns[0].key is required"),
        ({"buckets": [{"id": "b1", "columns": [{"key": "x", "type": "date"}]}]}, "must be one of"),
        ({"buckets": [{"id": "b1", "rows": [{"amount": "1"}]}]}, "buckets[0].rows[0].id is required"),
        ({"buckets": [{"id": "b1", "rows": [{"id": "r1", "amount": ["1"]}]}]}, "must be a string"),
        ({"meta": "nope"}, "meta must be an object"),
        ({"meta": {"showGuardrails": "false"}}, "meta.showGuardrails must be a boolean"),
    ],
)
def test_structural_problems_raise_document_format_error(payload, message):
    with pytest.raises(DocumentFormatError) as exc_info:
        document_from_wire(payload)

    assert message in str(exc_info.value)


def test_loads_rejects_invalid_json():
    with pytest.raises(DocumentFormatError):
        loads_document("{not json")


def test_missing_show_guardrails_reads_false():
    assert document_from_wire({"meta": {"showGuardrails": None}}).meta.show_guardrails is False
    assert document_from_wire({"meta": {}}).meta.show_guardrails is False
