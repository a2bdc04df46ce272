"""Unit tests for list ordering primitives."""

import uuid
from types import SimpleNamespace

import pytest

from lesson_activities.composition.ordering import (
    Direction,
    clamp_index,
    is_contiguous,
    move_to_index,
    order_changes,
    swap_adjacent,
)


def _rows(*orders):
    return [SimpleNamespace(id=uuid.uuid4(), order=o) for o in orders]


class TestMoveToIndex:
    """Tests for move_to_index."""

    def test_move_last_to_front(self):
        """Moving C to index 0 yields C, A, B."""
        assert move_to_index(["A", "B", "C"], 2, 0) == ["C", "A", "B"]

    def test_move_to_same_index(self):
        """Moving an item onto its own index changes nothing."""
        assert move_to_index(["A", "B", "C"], 1, 1) == ["A", "B", "C"]

    def test_target_is_clamped(self):
        """Targets past either end land on the end."""
        assert move_to_index(["A", "B", "C"], 0, 99) == ["B", "C", "A"]
        assert move_to_index(["A", "B", "C"], 2, -5) == ["C", "A", "B"]

    def test_input_not_mutated(self):
        items = ["A", "B"]
        move_to_index(items, 0, 1)
        assert items == ["A", "B"]

    def test_bad_source_index(self):
        with pytest.raises(IndexError):
            move_to_index(["A"], 3, 0)


class TestSwapAdjacent:
    """Tests for swap_adjacent."""

    def test_move_up(self):
        """Vocabulary [x, y, z] with z moved up becomes [x, z, y]."""
        assert swap_adjacent(["x", "y", "z"], 2, Direction.UP) == ["x", "z", "y"]

    def test_move_down(self):
        assert swap_adjacent(["x", "y", "z"], 0, Direction.DOWN) == ["y", "x", "z"]

    def test_first_up_is_noop(self):
        assert swap_adjacent(["x", "y"], 0, Direction.UP) == ["x", "y"]

    def test_last_down_is_noop(self):
        assert swap_adjacent(["x", "y"], 1, Direction.DOWN) == ["x", "y"]

    def test_missing_index_is_noop(self):
        assert swap_adjacent(["x", "y"], 5, Direction.UP) == ["x", "y"]

    def test_accepts_string_direction(self):
        assert swap_adjacent(["x", "y"], 1, "up") == ["y", "x"]


class TestOrderChanges:
    """Tests for order_changes and is_contiguous."""

    def test_only_misplaced_rows(self):
        rows = _rows(0, 2, 5)
        changes = order_changes(rows)
        assert changes == [
            {"id": rows[1].id, "order": 1},
            {"id": rows[2].id, "order": 2},
        ]

    def test_idempotent(self):
        """Applying the changes leaves nothing to change."""
        rows = _rows(3, 7, 9)
        for change in order_changes(rows):
            next(r for r in rows if r.id == change["id"]).order = change["order"]
        assert order_changes(rows) == []

    def test_custom_field(self):
        rows = [SimpleNamespace(id=uuid.uuid4(), vocab_order=4)]
        assert order_changes(rows, field="vocab_order") == [{"id": rows[0].id, "vocab_order": 0}]

    def test_contiguous(self):
        assert is_contiguous([2, 0, 1])
        assert is_contiguous([])
        assert not is_contiguous([0, 2])
        assert not is_contiguous([0, 0, 1])

    def test_clamp_empty(self):
        assert clamp_index(4, 0) == 0
