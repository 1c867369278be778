"""Tests for the move vocabulary and the position store.

Validates request construction and validation, enum coercion, and
relative/absolute position bookkeeping.
"""

from __future__ import annotations

import dataclasses

import pytest

from toolpath.gcode.errors import (
    EmptyMoveError,
    InvalidAxisError,
    InvalidChoiceError,
    InvalidValueError,
)
from toolpath.gcode.moves import (
    Corner,
    Direction,
    MotionMode,
    MoveRequest,
    Orientation,
    coerce_choice,
    normalize_axis,
)
from toolpath.gcode.position import PositionStore


# ---------------------------------------------------------------------------
# MoveRequest
# ---------------------------------------------------------------------------


class TestMoveRequest:
    def test_keeps_caller_order(self) -> None:
        req = MoveRequest.of(y=2, x=1, A=3)
        assert req.axes == (("y", 2.0), ("x", 1.0), ("a", 3.0))
        assert len(req) == 3

    def test_mapping_and_keywords(self) -> None:
        req = MoveRequest.of({"X": 1}, z=2)
        assert req.as_dict() == {"x": 1.0, "z": 2.0}

    def test_empty(self) -> None:
        with pytest.raises(EmptyMoveError):
            MoveRequest.of()
        with pytest.raises(EmptyMoveError):
            MoveRequest(axes=())

    def test_duplicate_after_case_folding(self) -> None:
        with pytest.raises(InvalidAxisError, match="more than once"):
            MoveRequest.of({"x": 1, "X": 2})

    @pytest.mark.parametrize("value", ["10", None, float("inf"), False])
    def test_bad_values(self, value: object) -> None:
        with pytest.raises(InvalidValueError):
            MoveRequest.of(x=value)

    def test_frozen(self) -> None:
        req = MoveRequest.of(x=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            req.axes = ()  # type: ignore[misc]


class TestNormalizeAxis:
    @pytest.mark.parametrize("name,expected", [("X", "x"), ("e", "e"), ("A", "a")])
    def test_valid(self, name: str, expected: str) -> None:
        assert normalize_axis(name) == expected

    @pytest.mark.parametrize("name", ["", "xy", "1", "G", "m", "N", "_"])
    def test_invalid(self, name: str) -> None:
        with pytest.raises(InvalidAxisError):
            normalize_axis(name)

    def test_invalid_axis_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            normalize_axis("xy")


class TestCoerceChoice:
    def test_members_pass_through(self) -> None:
        assert coerce_choice(Corner, Corner.UR, "start") is Corner.UR

    def test_strings_case_insensitive(self) -> None:
        assert coerce_choice(Direction, "ccw", "direction") is Direction.CCW
        assert coerce_choice(Orientation, "Y", "orientation") is Orientation.Y
        assert coerce_choice(MotionMode, "RELATIVE", "mode") is MotionMode.RELATIVE

    def test_unknown(self) -> None:
        with pytest.raises(InvalidChoiceError, match="orientation must be one of"):
            coerce_choice(Orientation, "z", "orientation")
        with pytest.raises(InvalidChoiceError):
            coerce_choice(Corner, 3, "start")


# ---------------------------------------------------------------------------
# PositionStore
# ---------------------------------------------------------------------------


class TestPositionStore:
    def test_starts_empty(self) -> None:
        store = PositionStore()
        assert len(store) == 0
        assert not store.known("x")

    def test_relative_creates_and_increments(self) -> None:
        store = PositionStore()
        store.update(MoveRequest.of(x=2), MotionMode.RELATIVE)
        store.update(MoveRequest.of(x=3, y=-1), MotionMode.RELATIVE)
        assert store.snapshot() == {"x": 5.0, "y": -1.0}

    def test_absolute_replaces(self) -> None:
        store = PositionStore({"x": 7})
        store.update(MoveRequest.of(x=2), MotionMode.ABSOLUTE)
        assert store.get("X") == 2.0

    def test_set_ignores_mode(self) -> None:
        store = PositionStore({"x": 7})
        store.set({"X": 1, "b": 4})
        assert store.snapshot() == {"x": 1.0, "b": 4.0}
        assert store.known("B")

    def test_get_default(self) -> None:
        assert PositionStore().get("z", 0.0) == 0.0

    def test_snapshot_is_copy(self) -> None:
        store = PositionStore({"x": 1})
        snap = store.snapshot()
        snap["x"] = 5
        assert store.get("x") == 1.0
