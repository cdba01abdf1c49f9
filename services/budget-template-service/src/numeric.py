from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Literal

# Leading numeric prefix, e.g. "250", "-3.5", ".75", "1e3", "12kg" -> 12.
_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_STRICT_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$")

CellKind = Literal["text", "number", "unset"]


def parse_number(value: object) -> float:
    """
    Coerce operator-entered text into a float, defaulting to 0.

    Only the leading numeric prefix is read, so "12 kg" parses to 12 while
    "1,200" parses to 1. Empty, missing, non-numeric and non-finite input all
    yield 0.0; this function never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    if not isinstance(value, str):
        return 0.0

    match = _NUMERIC_PREFIX.match(value)
    if not match:
        return 0.0
    try:
        number = float(match.group(0))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def is_numeric_text(value: str) -> bool:
    """True when the whole string (ignoring surrounding spaces) is a number."""
    return bool(_STRICT_NUMBER.match(value))


def number_to_text(value: float) -> str:
    """Render a number as storable text without trailing zeros ("250.0" -> "250")."""
    if not math.isfinite(value):
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True, slots=True)
class CellValue:
    """
    Classified view of one stored cell.

    Rows store raw text for wire compatibility; this variant is what edit and
    read paths reason about. ``number`` is always populated (0.0 for text and
    unset cells) so numeric consumers keep the parse-to-zero fallback.
    """

    kind: CellKind
    text: str = ""
    number: float = 0.0

    @property
    def is_set(self) -> bool:
        return self.kind != "unset"


def classify_cell(raw: object, *, numeric_column: bool) -> CellValue:
    """Classify a raw stored value for a column of the given numeric-ness."""
    if raw is None:
        return CellValue(kind="unset")
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        number = parse_number(raw)
        return CellValue(kind="number", text=number_to_text(number), number=number)

    text = str(raw)
    if text.strip() == "":
        return CellValue(kind="unset", text=text)
    if numeric_column and is_numeric_text(text):
        return CellValue(kind="number", text=text, number=parse_number(text))
    return CellValue(kind="text", text=text, number=parse_number(text))
