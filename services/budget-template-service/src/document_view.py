from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from aggregation import Totals, bucket_subtotal, format_totals, grand_total, subtotal_column_key
from budget_document import Bucket, BudgetDocument
from resolver import ComputationContext, render_cell


@dataclass
class RowView:
    id: str
    cells: Dict[str, str]


@dataclass
class BucketView:
    id: str
    name: str
    subtitle: str
    column_keys: List[str]
    subtotal_key: Optional[str]
    rows: List[RowView] = field(default_factory=list)
    subtotal: Optional[Totals] = None


@dataclass
class DocumentView:
    """Everything an external renderer needs: rendered cells plus formatted totals."""

    primary_currency: str
    secondary_currency: str
    multiplier_label: str
    multiplier: float
    fx_rate: float
    buckets: List[BucketView]
    grand_total: Totals

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def evaluate_bucket(bucket: Bucket, context: ComputationContext) -> BucketView:
    # Columns may have been edited in place since the last schema operation.
    bucket.rebind_roles()
    rows = [
        RowView(
            id=row.id,
            cells={column.key: render_cell(bucket, column, row, context) for column in bucket.columns},
        )
        for row in bucket.rows
    ]
    return BucketView(
        id=bucket.id,
        name=bucket.name,
        subtitle=bucket.subtitle,
        column_keys=[column.key for column in bucket.columns],
        subtotal_key=subtotal_column_key(bucket),
        rows=rows,
        subtotal=format_totals(bucket_subtotal(bucket, context), context),
    )


def evaluate_document(document: BudgetDocument) -> DocumentView:
    """Resolve every computed cell and total against the document's current state."""
    context = ComputationContext.from_meta(document.meta)
    buckets = [evaluate_bucket(bucket, context) for bucket in document.buckets]
    grand = grand_total(document.buckets, context)
    return DocumentView(
        primary_currency=document.meta.primary_currency,
        secondary_currency=document.meta.secondary_currency,
        multiplier_label=document.meta.multiplier_label,
        multiplier=context.multiplier,
        fx_rate=context.fx_rate,
        buckets=buckets,
        grand_total=format_totals(grand, context),
    )


def build_text_summary(document: BudgetDocument) -> str:
    """
    Plain-text totals block suitable for pasting into a message.

    One line per bucket followed by the grand total, each as
    ``<name>: <primary> (<secondary>)``.
    """
    view = evaluate_document(document)
    lines = []
    title = document.meta.template_title.strip()
    if title:
        lines.append(title)
    for bucket in view.buckets:
        totals = bucket.subtotal
        if totals is None:
            continue
        lines.append(f"{bucket.name}: {totals.primary} ({totals.secondary})")
    lines.append(f"GRAND TOTAL: {view.grand_total.primary} ({view.grand_total.secondary})")
    return "\n".join(lines)
