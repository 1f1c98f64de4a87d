"""
Editable Numeric Values
=======================
A numeric field typed by the user is either a number or the text that failed to
parse. Keeping the raw text lets the UI show what was typed and mark it, instead
of the value silently turning into zero or NaN.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, Union

from dimensionchain.model.errors import InvalidNumericInput

# Plain decimal / scientific notation. Excludes nan, inf and underscores.
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def format_number(value: float) -> str:
    """Shortest readable text for a number (120.2 -> '120.2', 0.0 -> '0')."""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass(frozen=True)
class Valid:
    value: float

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def display(self) -> str:
        return format_number(self.value)

    def resolve(self, field: str = "value") -> float:
        return self.value


@dataclass(frozen=True)
class Invalid:
    raw_text: str

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def display(self) -> str:
        return self.raw_text

    def resolve(self, field: str = "value") -> float:
        raise InvalidNumericInput(field, self.raw_text)


NumericValue = Union[Valid, Invalid]


def finite_float(value: object) -> Optional[float]:
    """The value as a finite float, or None for non-numbers, NaN, infinities and huge integers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_numeric(text: str) -> NumericValue:
    """
    Parse user text into a NumericValue.

    Surrounding whitespace is ignored and a single comma is accepted as the
    decimal separator ("0,1"). Empty text and non-finite spellings are Invalid.
    """
    cleaned = text.strip()
    if cleaned.count(",") == 1 and "." not in cleaned:
        cleaned = cleaned.replace(",", ".")

    if not _NUMBER_RE.match(cleaned):
        return Invalid(text)

    value = float(cleaned)
    # Overflowing exponents ("1e999") parse to inf
    if not math.isfinite(value):
        return Invalid(text)
    return Valid(value)


def to_numeric(value: object) -> NumericValue:
    """Coerce a number or a text into a NumericValue."""
    if isinstance(value, (Valid, Invalid)):
        return value
    if isinstance(value, bool):
        return Invalid(str(value))
    if isinstance(value, (int, float)):
        number = finite_float(value)
        if number is None:
            return Invalid(str(value))
        return Valid(number)
    if isinstance(value, str):
        return parse_numeric(value)
    return Invalid(str(value))
