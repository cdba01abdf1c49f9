"""Starter document used for new templates and for "reset to defaults"."""

from __future__ import annotations

from budget_document import (
    Bucket,
    BucketColumn,
    BucketRow,
    BudgetDocument,
    Guardrail,
    MetaField,
    TemplateMeta,
    new_id,
)

CORE_PACK_ITEMS = (
    "Rice (kg)",
    "Garri (kg)",
    "Beans (kg)",
    "Pasta/Noodles (unit)",
    "Cooking Oil (ml)",
    "Seasoning + Salt (set)",
    "Bath Soap (unit)",
    "Detergent (sachet/pack)",
    "Tissue (roll/pack)",
    "Sanitary Pads (pack)",
    "Packaging Bags/Labels",
)

CASEWORK_NEEDS = (
    ("School Fees / Tuition", "Invoice / Call school / receipt"),
    ("School Supplies / Uniform", "Photo / school list / receipt"),
    ("Transport Support (time-bound)", "Agreement / follow-up plan"),
    ("Rent-at-risk Buffer", "Landlord/agent confirmation"),
    ("Micro-income Restart (in-kind)", "Plan + item list + receipt"),
)

LOGISTICS_LINES = (
    ("Transport (delivery + distribution)", "Fuel, vehicle hire, driver"),
    ("Packaging (bags, labels, markers)", "Polythene bags, stickers, markers"),
    ("Volunteer logistics (water, small support)", "Water, snacks for volunteers"),
    ("Contingency / Price Volatility Buffer", "Recommended 15–25% of (A+B)"),
)


def default_meta() -> TemplateMeta:
    return TemplateMeta(
        template_title="Outreach Budget",
        template_subtitle="Cycle Budget Template",
        meta_fields=[
            MetaField(label="Cycle Name / Code"),
            MetaField(label="Prepared By"),
            MetaField(label="Start Week"),
            MetaField(label="Location"),
        ],
        primary_currency="NGN",
        primary_symbol="₦",
        secondary_currency="USD",
        secondary_symbol="$",
        multiplier_label="homes",
        show_guardrails=True,
        guardrails=[
            Guardrail(bucket="A. Core Packs", purpose="Standard food + hygiene pack per home"),
            Guardrail(bucket="B. Casework Fund", purpose="Verified one-off needs, evidence required"),
            Guardrail(bucket="C. Buffer + Logistics", purpose="Delivery, packaging and price volatility"),
        ],
    )


def core_packs_bucket() -> Bucket:
    return Bucket(
        id=new_id(),
        name="Bucket A — Core Packs",
        total_key="total",
        subtitle="Quantities are per home; totals scale by the number of homes.",
        columns=[
            BucketColumn(key="item", label="Item", type="text", width="26%"),
            BucketColumn(key="qtyPerHome", label="Qty / Home", type="number", width="12%", align="right"),
            BucketColumn(key="totalQty", label="Total Qty", type="computed", width="12%", align="right", compute="qty_total"),
            BucketColumn(key="unitCost", label="Unit Cost", type="currency", width="16%", align="right"),
            BucketColumn(key="total", label="Total", type="computed", width="18%", align="right", compute="row_total"),
            BucketColumn(key="usdEquiv", label="USD Equiv.", type="computed", width="16%", align="right", compute="usd_equiv"),
        ],
        rows=[BucketRow(id=new_id(), values={"item": item, "qtyPerHome": "", "unitCost": ""}) for item in CORE_PACK_ITEMS],
    )


def casework_bucket() -> Bucket:
    rows = [
        BucketRow(
            id=new_id(),
            values={
                "homeId": f"VH-{index:03d}",
                "needType": need,
                "evidence": evidence,
                "cap": "",
                "approved": "",
                "notes": "",
            },
        )
        for index, (need, evidence) in enumerate(CASEWORK_NEEDS, start=1)
    ]
    return Bucket(
        id=new_id(),
        name="Bucket B — Casework Fund",
        subtitle="Approve only with evidence on file.",
        approved_key="approved",
        columns=[
            BucketColumn(key="homeId", label="Home ID", type="text", width="10%"),
            BucketColumn(key="needType", label="Need Type", type="text", width="20%"),
            BucketColumn(key="evidence", label="Evidence", type="text", width="20%"),
            BucketColumn(key="cap", label="Cap", type="currency", width="12%", align="right"),
            BucketColumn(key="approved", label="Approved", type="currency", width="12%", align="right"),
            BucketColumn(key="usdApproved", label="USD Equiv.", type="computed", width="12%", align="right", compute="usd_approved"),
            BucketColumn(key="notes", label="Notes", type="text", width="14%"),
        ],
        rows=rows,
    )


def logistics_bucket() -> Bucket:
    return Bucket(
        id=new_id(),
        name="Bucket C — Buffer + Logistics",
        total_key="amount",
        columns=[
            BucketColumn(key="lineItem", label="Line Item", type="text", width="30%"),
            BucketColumn(key="description", label="Description", type="text", width="34%"),
            BucketColumn(key="amount", label="Amount", type="currency", width="18%", align="right"),
            BucketColumn(key="usdAmount", label="USD Equiv.", type="computed", width="18%", align="right", compute="usd_approved"),
        ],
        rows=[
            BucketRow(id=new_id(), values={"lineItem": line, "description": description, "amount": ""})
            for line, description in LOGISTICS_LINES
        ],
    )


def default_document() -> BudgetDocument:
    """Fresh starter document; ids are regenerated on every call."""
    return BudgetDocument(
        meta=default_meta(),
        buckets=[core_packs_bucket(), casework_bucket(), logistics_bucket()],
    )
