from budget_document import Bucket, BucketColumn
from column_roles import ColumnRoles, bind_column_roles


def col(key: str, column_type: str = "text", compute: str | None = None, role: str | None = None) -> BucketColumn:
    return BucketColumn(key=key, label=key.title(), type=column_type, compute=compute, role=role)


def test_positional_roles_pick_first_number_and_currency():
    columns = [
        col("item"),
        col("qty", "number"),
        col("extraQty", "number"),
        col("unitCost", "currency"),
        col("fee", "currency"),
        col("total", "computed", "row_total"),
    ]

    roles = bind_column_roles(columns)

    assert roles == ColumnRoles(quantity_key="qty", price_key="unitCost", approved_key="fee")


def test_approved_role_prefers_key_containing_approv_case_insensitive():
    columns = [
        col("cap", "currency"),
        col("ApprovedAmt", "currency"),
        col("paid", "currency"),
    ]

    assert bind_column_roles(columns).approved_key == "ApprovedAmt"


def test_approved_role_falls_back_to_last_currency_column():
    columns = [col("cap", "currency"), col("paid", "currency"), col("usd", "computed", "usd_approved")]

    assert bind_column_roles(columns).approved_key == "paid"


def test_columns_with_compute_are_never_inputs():
    # A number column carrying a compute kind is skipped even if not typed computed.
    columns = [col("derived", "number", compute="qty_total"), col("qty", "number")]

    assert bind_column_roles(columns).quantity_key == "qty"


def test_explicit_roles_override_position():
    columns = [
        col("qty", "number"),
        col("homes", "number", role="quantity"),
        col("cap", "currency"),
        col("price", "currency", role="price"),
        col("approvedCap", "currency"),
        col("final", "currency", role="approved_amount"),
    ]

    roles = bind_column_roles(columns)

    assert roles.quantity_key == "homes"
    assert roles.price_key == "price"
    assert roles.approved_key == "final"


def test_role_none_opts_out_of_positional_matching():
    columns = [col("cap", "currency", role="none"), col("unitCost", "currency")]

    roles = bind_column_roles(columns)

    assert roles.price_key == "unitCost"
    assert roles.approved_key == "unitCost"


def test_missing_columns_leave_roles_empty():
    assert bind_column_roles([col("item"), col("notes")]) == ColumnRoles()


def test_bucket_binds_roles_on_construction():
    bucket = Bucket(id="b1", name="Core", columns=[col("qty", "number"), col("unitCost", "currency")])

    assert bucket.roles.quantity_key == "qty"
    assert bucket.roles.price_key == "unitCost"
