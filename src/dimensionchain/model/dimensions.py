"""
Dimension Entries
=================
A dimension ("cote") of the chain together with the position of its callout on
the diagram. Holding the anchor on the entry itself means a dimension can never
exist without its callout, nor a callout without its dimension.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from dimensionchain.config import ANCHOR_ORIGIN_X, ANCHOR_ORIGIN_Y, ANCHOR_STEP_X, LENGTH_UNIT
from dimensionchain.model.numeric import NumericValue, Valid, format_number


@dataclass
class Anchor:
    """Position of a callout in diagram space (unbounded)."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"x": _number_to_json(self.x), "y": _number_to_json(self.y)}


def next_anchor(previous: Optional[Anchor]) -> Anchor:
    """Default anchor for a new callout: one step to the right of the previous one."""
    if previous is None:
        return Anchor(ANCHOR_ORIGIN_X, ANCHOR_ORIGIN_Y)
    return Anchor(previous.x + ANCHOR_STEP_X, previous.y)


@dataclass
class DimensionEntry:
    """
    One linear dimension of the chain.

    Tolerances are offsets from the nominal value: the dimension may vary within
    [nominal + tol_min, nominal + tol_max].
    """
    id: str
    nominal: NumericValue = field(default_factory=lambda: Valid(0.0))
    tol_min: NumericValue = field(default_factory=lambda: Valid(0.0))
    tol_max: NumericValue = field(default_factory=lambda: Valid(0.0))
    anchor: Anchor = field(default_factory=lambda: next_anchor(None))

    @property
    def is_valid(self) -> bool:
        """True when every numeric field holds a number."""
        return self.nominal.is_valid and self.tol_min.is_valid and self.tol_max.is_valid

    @property
    def invalid_fields(self) -> list[str]:
        return [name for name in ("nominal", "tol_min", "tol_max") if not getattr(self, name).is_valid]

    @property
    def is_inverted(self) -> bool:
        """Lower tolerance above the upper one. Allowed, but worth flagging."""
        if not (self.tol_min.is_valid and self.tol_max.is_valid):
            return False
        return self.tol_min.value > self.tol_max.value

    def resolved(self) -> tuple[float, float, float]:
        """(nominal, tol_min, tol_max) as numbers. Raises InvalidNumericInput."""
        return (
            self.nominal.resolve("nominal"),
            self.tol_min.resolve("tol_min"),
            self.tol_max.resolve("tol_max"),
        )

    @property
    def label(self) -> str:
        """Callout text, e.g. 'L1: 120.2 mm'."""
        return f"{self.id}: {self.nominal.display} {LENGTH_UNIT}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the project file's 'cotes' item layout."""
        return {
            "id": self.id,
            "valeur": _field_to_json(self.nominal),
            "tolMin": _field_to_json(self.tol_min),
            "tolMax": _field_to_json(self.tol_max),
        }


def _number_to_json(value: float) -> Any:
    # JSON has no NaN or Infinity: write them as text, read back as invalid
    if math.isfinite(value):
        return value
    return format_number(value)


def _field_to_json(value: NumericValue) -> Any:
    # Invalid fields keep their text so a reload shows the same marker
    if value.is_valid:
        return _number_to_json(value.value)
    return value.raw_text
