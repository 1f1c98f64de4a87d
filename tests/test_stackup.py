"""
Tests for the worst-case stack-up calculation.
"""
import math

import pytest

from dimensionchain.model.dimensions import DimensionEntry
from dimensionchain.model.errors import InvalidNumericInput
from dimensionchain.model.numeric import Invalid, Valid
from dimensionchain.model.stackup import AggregateResult, compute_stackup


def _entry(nominal: float, tol_min: float, tol_max: float, name: str = "L") -> DimensionEntry:
    return DimensionEntry(name, Valid(nominal), Valid(tol_min), Valid(tol_max))


class TestComputeStackup:

    def test_empty_chain_is_all_zero(self):
        result = compute_stackup([])
        assert result == AggregateResult(0.0, 0.0, 0.0)
        assert result.clearance == (0.0, 0.0)

    def test_reference_chain(self, example_state):
        result = compute_stackup(example_state.entries)
        assert result.nominal_sum == pytest.approx(160.2)
        assert result.tol_min_sum == pytest.approx(-0.3)
        assert result.tol_max_sum == pytest.approx(0.4)
        assert result.clearance_min == pytest.approx(159.9)
        assert result.clearance_max == pytest.approx(160.6)

    def test_clearance_is_nominal_plus_tolerance_sum(self):
        result = compute_stackup([_entry(10.1, -0.02, 0.05), _entry(-3.3, -0.1, 0.0), _entry(0.7, 0.01, 0.03)])
        assert result.clearance_min == result.nominal_sum + result.tol_min_sum
        assert result.clearance_max == result.nominal_sum + result.tol_max_sum

    def test_sums_are_independent(self):
        entries = [_entry(float(i), -0.01 * i, 0.02 * i) for i in range(25)]
        result = compute_stackup(entries)
        assert result.nominal_sum == pytest.approx(math.fsum(range(25)))
        assert result.tol_min_sum == pytest.approx(math.fsum(-0.01 * i for i in range(25)))
        assert result.tol_max_sum == pytest.approx(math.fsum(0.02 * i for i in range(25)))

    def test_zero_entry_changes_nothing(self, example_state):
        before = compute_stackup(example_state.entries)
        after = compute_stackup(example_state.entries + [_entry(0.0, 0.0, 0.0)])
        assert after == before

    def test_inverted_tolerances_are_not_reordered(self):
        result = compute_stackup([_entry(5.0, 0.2, -0.2)])
        assert result.clearance_min == pytest.approx(5.2)
        assert result.clearance_max == pytest.approx(4.8)
        assert result.clearance_min > result.clearance_max

    def test_non_finite_values_propagate(self):
        result = compute_stackup([_entry(1.0, 0.0, 0.0), _entry(math.inf, 0.0, math.nan)])
        assert math.isinf(result.nominal_sum)
        assert math.isnan(result.tol_max_sum)
        assert result.tol_min_sum == 0.0

    def test_invalid_field_raises(self):
        entry = DimensionEntry("L1", Valid(1.0), Valid(0.0), Invalid("abc"))
        with pytest.raises(InvalidNumericInput) as exc_info:
            compute_stackup([entry])
        assert exc_info.value.field == "tol_max"


class TestAggregateFormatting:

    def test_describe_matches_two_decimal_display(self, example_state):
        result = compute_stackup(example_state.entries)
        assert result.describe() == "Jeu fonctionnel : 159.90 mm à 160.60 mm"

    def test_totals_row(self, example_state):
        result = compute_stackup(example_state.entries)
        assert result.totals_row() == ("160.20", "-0.30", "0.40")
        assert result.totals_row(decimals=3) == ("160.200", "-0.300", "0.400")
