from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional
from uuid import uuid4

from column_roles import ColumnRoles, bind_column_roles

ColumnType = Literal["text", "number", "currency", "computed"]
ComputeKind = Literal["qty_total", "row_total", "usd_equiv", "usd_approved"]
ColumnRole = Literal["quantity", "price", "approved_amount", "none"]
Align = Literal["left", "right", "center"]

COLUMN_TYPES: tuple[str, ...] = ("text", "number", "currency", "computed")
COMPUTE_KINDS: tuple[str, ...] = ("qty_total", "row_total", "usd_equiv", "usd_approved")
COLUMN_ROLES: tuple[str, ...] = ("quantity", "price", "approved_amount", "none")
ALIGNMENTS: tuple[str, ...] = ("left", "right", "center")
NUMERIC_COLUMN_TYPES = frozenset({"number", "currency"})


def new_id() -> str:
    """Short random identifier used for buckets and rows."""
    return uuid4().hex[:8]


@dataclass
class MetaField:
    label: str = ""
    value: str = ""


@dataclass
class Guardrail:
    """Descriptive guardrail row; never computed."""

    bucket: str = ""
    purpose: str = ""
    cap: str = ""
    notes: str = ""


@dataclass
class TemplateMeta:
    """
    Document-level settings for a budget template.

    Numeric-looking fields (fx_rate, multiplier_value) are kept as the text the
    operator typed and parsed on demand by the computation context.
    """

    org_name: str = ""
    template_title: str = ""
    template_subtitle: str = ""
    tagline: str = ""
    meta_fields: list[MetaField] = field(default_factory=list)

    primary_currency: str = "NGN"
    primary_symbol: str = "₦"
    secondary_currency: str = "USD"
    secondary_symbol: str = "$"
    # Primary units per 1 secondary unit.
    fx_rate: str = ""

    multiplier_label: str = ""
    multiplier_value: str = ""

    show_guardrails: bool = False
    guardrails: list[Guardrail] = field(default_factory=list)

    prepared_by: str = ""
    prepared_date: str = ""
    approved_by: str = ""
    approved_date: str = ""

    footer_note: str = ""


@dataclass
class BucketColumn:
    key: str
    label: str
    type: ColumnType = "text"
    width: str = ""
    align: Optional[Align] = None
    compute: Optional[ComputeKind] = None
    role: Optional[ColumnRole] = None

    @property
    def is_computed(self) -> bool:
        return self.type == "computed"

    @property
    def is_numeric(self) -> bool:
        return self.type in NUMERIC_COLUMN_TYPES


@dataclass
class BucketRow:
    """One data row; ``values`` maps column key to the raw text entered."""

    id: str
    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(key, default)


@dataclass
class Bucket:
    """
    One section of a budget document.

    ``roles`` caches the sibling-column binding. Operations in ``schema_editing``
    rebind it, and so does evaluation; code that mutates ``columns`` directly and
    resolves cells itself must call ``rebind_roles`` first.
    """

    id: str
    name: str
    subtitle: str = ""
    total_key: Optional[str] = None
    approved_key: Optional[str] = None
    columns: list[BucketColumn] = field(default_factory=list)
    rows: list[BucketRow] = field(default_factory=list)
    roles: ColumnRoles = field(default_factory=ColumnRoles, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.rebind_roles()

    def rebind_roles(self) -> ColumnRoles:
        """Recompute the sibling-role binding from the current column list."""
        self.roles = bind_column_roles(self.columns)
        return self.roles

    def column(self, key: str) -> Optional[BucketColumn]:
        for column in self.columns:
            if column.key == key:
                return column
        return None

    def row(self, row_id: str) -> Optional[BucketRow]:
        for row in self.rows:
            if row.id == row_id:
                return row
        return None


@dataclass
class BudgetDocument:
    meta: TemplateMeta = field(default_factory=TemplateMeta)
    buckets: list[Bucket] = field(default_factory=list)

    def bucket(self, bucket_id: str) -> Optional[Bucket]:
        for bucket in self.buckets:
            if bucket.id == bucket_id:
                return bucket
        return None
