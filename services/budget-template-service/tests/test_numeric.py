import pytest

from numeric import CellValue, classify_cell, is_numeric_text, number_to_text, parse_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("250", 250.0),
        ("250.75", 250.75),
        ("  -3.5 ", -3.5),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("12 kg", 12.0),
        ("1,200", 1.0),
        ("", 0.0),
        ("abc", 0.0),
        ("₦250", 0.0),
        (None, 0.0),
        (7, 7.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
    ],
)
def test_parse_number_coerces_free_text(raw, expected):
    assert parse_number(raw) == pytest.approx(expected)


def test_parse_number_never_raises_on_odd_types():
    assert parse_number(object()) == 0.0
    assert parse_number(True) == 0.0
    assert parse_number(["1"]) == 0.0


def test_is_numeric_text_requires_whole_string():
    assert is_numeric_text(" 42.0 ")
    assert not is_numeric_text("42 homes")
    assert not is_numeric_text("")


def test_number_to_text_drops_trailing_zero():
    assert number_to_text(250.0) == "250"
    assert number_to_text(0.25) == "0.25"
    assert number_to_text(3) == "3"


def test_classify_cell_variants():
    assert classify_cell(None, numeric_column=True) == CellValue(kind="unset")
    assert classify_cell("   ", numeric_column=True).kind == "unset"

    number = classify_cell("12.5", numeric_column=True)
    assert number.kind == "number"
    assert number.text == "12.5"
    assert number.number == pytest.approx(12.5)

    from_float = classify_cell(250.0, numeric_column=True)
    assert from_float.kind == "number"
    assert from_float.text == "250"


def test_classify_cell_keeps_text_in_numeric_column_but_reads_prefix():
    cell = classify_cell("12 bags", numeric_column=True)

    assert cell.kind == "text"
    assert cell.text == "12 bags"
    assert cell.number == pytest.approx(12.0)


def test_classify_cell_text_column_never_reports_number():
    assert classify_cell("42", numeric_column=False).kind == "text"
