"""
Stack-Up Calculator
===================
Worst-case (arithmetic) tolerance stack-up of a chain of dimensions.

The functional clearance ("jeu fonctionnel") is the interval reached when every
dimension sits at its lower, respectively upper, limit:

    clearance_min = sum(nominal) + sum(tol_min)
    clearance_max = sum(nominal) + sum(tol_max)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TYPE_CHECKING

import numpy as np

from dimensionchain.config import DISPLAY_DECIMALS, LENGTH_UNIT

if TYPE_CHECKING:
    from dimensionchain.model.dimensions import DimensionEntry


@dataclass(frozen=True)
class AggregateResult:
    nominal_sum: float = 0.0
    tol_min_sum: float = 0.0
    tol_max_sum: float = 0.0

    @property
    def clearance_min(self) -> float:
        return self.nominal_sum + self.tol_min_sum

    @property
    def clearance_max(self) -> float:
        return self.nominal_sum + self.tol_max_sum

    @property
    def clearance(self) -> tuple[float, float]:
        return self.clearance_min, self.clearance_max

    def totals_row(self, decimals: int = DISPLAY_DECIMALS) -> tuple[str, str, str]:
        """Sums formatted for the 'Total' row of the dimension table."""
        return (
            f"{self.nominal_sum:.{decimals}f}",
            f"{self.tol_min_sum:.{decimals}f}",
            f"{self.tol_max_sum:.{decimals}f}",
        )

    def describe(self, decimals: int = DISPLAY_DECIMALS) -> str:
        return (
            f"Jeu fonctionnel : {self.clearance_min:.{decimals}f} {LENGTH_UNIT} "
            f"à {self.clearance_max:.{decimals}f} {LENGTH_UNIT}"
        )


def compute_stackup(entries: Sequence[DimensionEntry]) -> AggregateResult:
    """
    Sum nominal values and tolerances of all entries independently.

    An empty chain gives all-zero sums. Non-finite values propagate into the
    result. Raises InvalidNumericInput if an entry still holds unparsed text.
    """
    # One row per dimension: (nominal, tol_min, tol_max)
    table = np.array([entry.resolved() for entry in entries], dtype=np.float64).reshape(-1, 3)
    nominal_sum, tol_min_sum, tol_max_sum = table.sum(axis=0)
    return AggregateResult(
        nominal_sum=float(nominal_sum),
        tol_min_sum=float(tol_min_sum),
        tol_max_sum=float(tol_max_sum),
    )
