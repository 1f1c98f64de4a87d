"""
Tests for ProjectState: entry management and callout layout.
"""
import logging

import pytest

from dimensionchain.config import ANCHOR_ORIGIN_X, ANCHOR_ORIGIN_Y, ANCHOR_STEP_X
from dimensionchain.model.dimensions import Anchor
from dimensionchain.model.errors import IndexOutOfRange, InvalidNumericInput
from dimensionchain.model.numeric import Invalid, Valid
from dimensionchain.model.state import ProjectState


class TestAddEntry:

    def test_add_to_reference_chain(self, example_state):
        before = example_state.aggregate

        entry = example_state.add_entry()

        assert entry.id == "L3"
        assert (entry.nominal, entry.tol_min, entry.tol_max) == (Valid(0.0), Valid(0.0), Valid(0.0))
        assert example_state.anchors[2] == Anchor(350.0, 100.0)
        assert example_state.aggregate == before

    def test_first_entry_uses_origin(self, empty_state):
        entry = empty_state.add_entry()
        assert entry.id == "L1"
        assert entry.anchor == Anchor(ANCHOR_ORIGIN_X, ANCHOR_ORIGIN_Y)

    def test_offset_follows_moved_anchor(self, example_state):
        example_state.move_anchor(1, 500.0, 42.0)
        entry = example_state.add_entry()
        assert entry.anchor == Anchor(500.0 + ANCHOR_STEP_X, 42.0)

    def test_id_derived_from_count(self, example_state):
        example_state.delete_entry(0)
        assert example_state.add_entry().id == "L2"


class TestUpdateField:

    def test_numeric_text(self, example_state):
        example_state.update_field(0, "nominal", "121.5")
        assert example_state.entries[0].nominal == Valid(121.5)
        assert example_state.aggregate.nominal_sum == pytest.approx(161.5)

    def test_number_and_aliases(self, example_state):
        example_state.update_field(1, "tolMax", 0.5)
        example_state.update_field(1, "tolMin", "-0,4")
        example_state.update_field(1, "valeur", 41)
        entry = example_state.entries[1]
        assert (entry.nominal, entry.tol_min, entry.tol_max) == (Valid(41.0), Valid(-0.4), Valid(0.5))

    def test_rename(self, example_state):
        example_state.update_field(0, "id", "Alésage")
        assert example_state.entries[0].id == "Alésage"
        assert example_state.entries[0].label == "Alésage: 120.2 mm"

    def test_unparseable_value_is_signalled_and_marked(self, example_state):
        with pytest.raises(InvalidNumericInput) as exc_info:
            example_state.update_field(1, "tolMax", "abc")

        assert exc_info.value.field == "tol_max"
        assert exc_info.value.raw_text == "abc"
        entry = example_state.entries[1]
        assert entry.tol_max == Invalid("abc")
        assert entry.invalid_fields == ["tol_max"]
        assert not example_state.is_valid
        assert example_state.aggregate is None

    def test_fixing_invalid_value_restores_aggregate(self, example_state):
        with pytest.raises(InvalidNumericInput):
            example_state.update_field(1, "tolMax", "abc")
        example_state.update_field(1, "tolMax", "0.3")
        assert example_state.aggregate.clearance_max == pytest.approx(160.6)

    def test_non_finite_rejected(self, example_state):
        with pytest.raises(InvalidNumericInput):
            example_state.update_field(0, "nominal", "inf")
        with pytest.raises(InvalidNumericInput):
            example_state.update_field(0, "nominal", float("nan"))

    def test_inverted_tolerance_allowed_with_warning(self, example_state, caplog):
        with caplog.at_level(logging.WARNING, logger="dimensionchain"):
            example_state.update_field(0, "tol_min", "0.5")

        assert example_state.entries[0].is_inverted
        assert example_state.aggregate.clearance_min > example_state.aggregate.clearance_max
        assert "above tol_max" in caplog.text

    def test_unknown_field(self, example_state):
        with pytest.raises(ValueError, match="Unknown field"):
            example_state.update_field(0, "color", "red")

    @pytest.mark.parametrize("index", [2, 10, -1])
    def test_index_out_of_range(self, example_state, index):
        with pytest.raises(IndexOutOfRange):
            example_state.update_field(index, "nominal", "1")
        assert example_state.entries[1].nominal == Valid(40.0)


class TestDeleteEntry:

    def test_removes_entry_and_anchor_in_order(self, example_state):
        example_state.add_entry()
        example_state.move_anchor(2, 1.0, 2.0)

        removed = example_state.delete_entry(1)

        assert removed.id == "L2"
        assert [e.id for e in example_state.entries] == ["L1", "L3"]
        assert example_state.anchors == [Anchor(50.0, 100.0), Anchor(1.0, 2.0)]

    def test_delete_all(self, example_state):
        example_state.delete_entry(1)
        example_state.delete_entry(0)
        assert example_state.entries == []
        assert example_state.anchors == []
        assert example_state.aggregate.clearance == (0.0, 0.0)

    def test_out_of_range(self, empty_state):
        with pytest.raises(IndexOutOfRange) as exc_info:
            empty_state.delete_entry(0)
        assert exc_info.value.length == 0

    def test_lengths_stay_paired(self, empty_state):
        operations = ["add", "add", "add", "del0", "add", "del2", "del0", "add", "del1", "del0"]
        for op in operations:
            if op == "add":
                empty_state.add_entry()
            else:
                empty_state.delete_entry(int(op[-1]))
            assert len(empty_state.anchors) == len(empty_state.entries)
        assert empty_state.entries == []


class TestMoveAnchor:

    def test_move(self, example_state):
        example_state.move_anchor(0, -1000.5, 99999)
        assert example_state.anchors[0] == Anchor(-1000.5, 99999.0)
        assert example_state.anchors[1] == Anchor(200.0, 100.0)

    def test_move_does_not_touch_aggregate(self, example_state):
        before = example_state.aggregate
        example_state.move_anchor(1, 0, 0)
        assert example_state.aggregate == before

    def test_out_of_range(self, example_state):
        with pytest.raises(IndexOutOfRange):
            example_state.move_anchor(5, 0.0, 0.0)


class TestLifecycle:

    def test_background_image(self, example_state):
        example_state.set_background_image("data:image/png;base64,AAAA")
        assert example_state.background_image == "data:image/png;base64,AAAA"
        example_state.set_background_image(None)
        assert example_state.background_image is None

    def test_reset(self, example_state):
        example_state.filepath = "/tmp/project.json"
        example_state.set_background_image("img.png")
        example_state.reset()
        assert example_state == ProjectState()
