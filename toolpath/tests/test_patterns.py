"""Tests for compound motion planners.

Validates the rectangle lookup table entry by entry, and the meander
pass-count / spacing normalisation rules without any engine involved.
"""

from __future__ import annotations

import pytest

from toolpath.gcode.errors import InvalidChoiceError, InvalidValueError
from toolpath.gcode.moves import Corner, Direction, MoveRequest
from toolpath.gcode.patterns import RECT_LEGS, plan_meander, rect_moves


def _net(moves: list[MoveRequest] | tuple[MoveRequest, ...]) -> dict[str, float]:
    total: dict[str, float] = {"x": 0.0, "y": 0.0}
    for move in moves:
        for axis, value in move:
            total[axis] += value
    return total


def _jogs(plan) -> list[float]:
    return [
        value
        for move in plan.moves
        for axis, value in move
        if axis == plan.minor_axis
    ]


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------

FIRST_LEG = {
    ("CW", "LL"): ("y", 4.0),
    ("CW", "UL"): ("x", 3.0),
    ("CW", "UR"): ("y", -4.0),
    ("CW", "LR"): ("x", -3.0),
    ("CCW", "LL"): ("x", 3.0),
    ("CCW", "UL"): ("y", -4.0),
    ("CCW", "UR"): ("x", -3.0),
    ("CCW", "LR"): ("y", 4.0),
}


class TestRectMoves:
    def test_table_covers_every_combination(self) -> None:
        assert set(RECT_LEGS) == {
            (d, c) for d in Direction for c in Corner
        }

    @pytest.mark.parametrize("direction,start", sorted(FIRST_LEG))
    def test_closed_and_first_leg(self, direction: str, start: str) -> None:
        moves = rect_moves(3, 4, direction, start)
        assert len(moves) == 4
        assert _net(moves) == {"x": 0.0, "y": 0.0}
        assert moves[0].axes == (FIRST_LEG[(direction, start)],)

    @pytest.mark.parametrize("direction,start", sorted(FIRST_LEG))
    def test_alternates_axes(self, direction: str, start: str) -> None:
        axes = [m.axes[0][0] for m in rect_moves(3, 4, direction, start)]
        assert axes[0] != axes[1]
        assert axes[0] == axes[2] and axes[1] == axes[3]

    def test_ccw_lower_left_sequence(self) -> None:
        moves = rect_moves(10, 10, Direction.CCW, Corner.LL)
        assert [m.as_dict() for m in moves] == [
            {"x": 10.0}, {"y": 10.0}, {"x": -10.0}, {"y": -10.0},
        ]

    def test_choices_case_insensitive(self) -> None:
        assert rect_moves(1, 2, "cw", "ul") == rect_moves(1, 2, "CW", "UL")

    def test_invalid_choices(self) -> None:
        with pytest.raises(InvalidChoiceError):
            rect_moves(1, 1, "CWW")
        with pytest.raises(InvalidChoiceError):
            rect_moves(1, 1, start="center")


# ---------------------------------------------------------------------------
# Meander
# ---------------------------------------------------------------------------


class TestPlanMeander:
    def test_uneven_spacing(self) -> None:
        plan = plan_meander(10, 10, 3)
        assert plan.passes == 4
        assert plan.spacing == pytest.approx(2.5)
        assert plan.adjusted is True
        assert plan.requested_spacing == 3.0

    def test_even_spacing(self) -> None:
        plan = plan_meander(10, 10, 2)
        assert plan.passes == 5
        assert plan.adjusted is False

    def test_orientation_swaps_axes(self) -> None:
        plan = plan_meander(3, 5, 1, orientation="y")
        assert (plan.major_axis, plan.minor_axis) == ("y", "x")
        assert (plan.major, plan.minor) == (5.0, 3.0)
        assert plan.passes == 3

    @pytest.mark.parametrize(
        "start,expected",
        [("LL", (4.0, 2.0)), ("UL", (4.0, -2.0)),
         ("UR", (-4.0, -2.0)), ("LR", (-4.0, 2.0))],
    )
    def test_corner_reflection(
        self, start: str, expected: tuple[float, float],
    ) -> None:
        plan = plan_meander(4, 2, 1, start=start)
        assert (plan.major, plan.minor) == expected

    def test_negative_minor_pass_count(self) -> None:
        # |floor(-9 / 3)| = 3, |floor(-10 / 3)| = 4
        assert plan_meander(1, 9, 3, start="UL").passes == 3
        assert plan_meander(1, 10, 3, start="UL").passes == 4

    def test_float_noise_does_not_add_a_pass(self) -> None:
        plan = plan_meander(1, 1.1, 0.1)
        assert plan.passes == 11
        assert plan.adjusted is False

    def test_precision_puts_remainder_on_last_jog(self) -> None:
        plan = plan_meander(10, 10, 4, precision=6)
        assert _jogs(plan) == [3.333333, 3.333333, 3.333334]
        # Unrounded spacing is still reported.
        assert plan.spacing == pytest.approx(10 / 3)

    def test_precision_remainder_negative_minor(self) -> None:
        plan = plan_meander(1, 10, 4, start="UL", precision=2)
        assert _jogs(plan) == [-3.33, -3.33, -3.34]

    @pytest.mark.parametrize(
        "width,height,spacing,start,orientation",
        [
            (10, 10, 3, "LL", "x"),
            (10, 5, 2, "UR", "x"),
            (7, 3, 0.4, "UL", "y"),
            (3, 5, 1, "LR", "y"),
            (2.5, 12.7, 0.35, "LL", "x"),
        ],
    )
    def test_jogs_sum_to_minor(
        self, width, height, spacing, start, orientation,
    ) -> None:
        plan = plan_meander(width, height, spacing, start, orientation)
        jogs = _jogs(plan)
        assert len(jogs) == plan.passes
        assert sum(jogs) == pytest.approx(plan.minor)
        assert all(abs(j) <= spacing + 1e-9 for j in jogs)

    def test_sweeps_alternate(self) -> None:
        plan = plan_meander(6, 4, 1)
        sweeps = [
            value for move in plan.moves for axis, value in move
            if axis == "x"
        ]
        assert sweeps == [6.0, -6.0, 6.0, -6.0, 6.0]

    @pytest.mark.parametrize("tail,extra", [(False, 1), (True, 0)])
    def test_tail(self, tail: bool, extra: int) -> None:
        plan = plan_meander(6, 4, 1, tail=tail)
        assert len(plan.moves) == 2 * plan.passes + extra
        last_axis = plan.moves[-1].axes[0][0]
        assert last_axis == ("y" if tail else "x")

    @pytest.mark.parametrize("spacing", [0, -1])
    def test_spacing_must_be_positive(self, spacing: float) -> None:
        with pytest.raises(InvalidValueError, match="spacing"):
            plan_meander(10, 10, spacing)

    def test_zero_minor_dimension(self) -> None:
        with pytest.raises(InvalidValueError, match="non-zero y"):
            plan_meander(10, 0, 1)

    def test_tiny_minor_gets_one_pass(self) -> None:
        plan = plan_meander(10, 1e-12, 1)
        assert plan.passes == 1
        assert plan.adjusted is True
