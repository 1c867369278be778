"""Compound motion planners.

Each function returns the primitive moves a compound motion is made of,
without touching any engine state.  All moves are relative deltas; the
engine decides which mode to run them in.

Corners use an origin in the lower left: ``LL`` is the lower-left corner,
``UR`` the upper-right one, and so on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from toolpath.gcode.errors import InvalidValueError
from toolpath.gcode.moves import (
    Corner,
    Direction,
    MoveRequest,
    Orientation,
    check_number,
    coerce_choice,
)

# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------

# (axis, sign) legs for every winding/start combination.  Each row is a
# rotation or reflection of the clockwise lower-left trace.
RECT_LEGS: dict[tuple[Direction, Corner], tuple[tuple[str, int], ...]] = {
    (Direction.CW, Corner.LL): (("y", 1), ("x", 1), ("y", -1), ("x", -1)),
    (Direction.CW, Corner.UL): (("x", 1), ("y", -1), ("x", -1), ("y", 1)),
    (Direction.CW, Corner.UR): (("y", -1), ("x", -1), ("y", 1), ("x", 1)),
    (Direction.CW, Corner.LR): (("x", -1), ("y", 1), ("x", 1), ("y", -1)),
    (Direction.CCW, Corner.LL): (("x", 1), ("y", 1), ("x", -1), ("y", -1)),
    (Direction.CCW, Corner.UL): (("y", -1), ("x", 1), ("y", 1), ("x", -1)),
    (Direction.CCW, Corner.UR): (("x", -1), ("y", -1), ("x", 1), ("y", 1)),
    (Direction.CCW, Corner.LR): (("y", 1), ("x", -1), ("y", -1), ("x", 1)),
}


def rect_moves(
    width: float,
    height: float,
    direction: Direction | str = Direction.CW,
    start: Corner | str = Corner.LL,
) -> list[MoveRequest]:
    """Four relative moves tracing a ``width`` x ``height`` rectangle.

    The tool ends where it started.

    Parameters
    ----------
    width : float
        Size in the x dimension.
    height : float
        Size in the y dimension.
    direction : Direction | str
        ``"CW"`` or ``"CCW"``.
    start : Corner | str
        ``"LL"``, ``"UL"``, ``"UR"`` or ``"LR"``.

    Raises
    ------
    InvalidChoiceError
        For an unknown *direction* or *start*.
    """
    direction = coerce_choice(Direction, direction, "direction")
    start = coerce_choice(Corner, start, "start")
    size = {
        "x": check_number(width, "width"),
        "y": check_number(height, "height"),
    }
    return [
        MoveRequest.of({axis: sign * size[axis]})
        for axis, sign in RECT_LEGS[(direction, start)]
    ]


# ---------------------------------------------------------------------------
# Meander
# ---------------------------------------------------------------------------

# Reflection applied to (width, height) so the sweep can always start from
# an implicit lower-left origin.
_CORNER_SIGNS: dict[Corner, tuple[int, int]] = {
    Corner.LL: (1, 1),
    Corner.UL: (1, -1),
    Corner.UR: (-1, -1),
    Corner.LR: (-1, 1),
}

# Decimals kept in minor/spacing before rounding to a pass count.
_RATIO_DECIMALS = 9


@dataclass(frozen=True, slots=True)
class MeanderPlan:
    """Result of :func:`plan_meander`.

    Attributes
    ----------
    moves : tuple[MoveRequest, ...]
        Relative moves, sweep and jog alternating.
    passes : int
        Number of sweep/jog pairs.
    requested_spacing : float
        Spacing asked for by the caller.
    spacing : float
        Signed jog length actually used (``minor / passes``).
    major_axis, minor_axis : str
        Sweep axis and jog axis.
    major, minor : float
        Sign-adjusted sweep length and total jog distance.
    adjusted : bool
        ``True`` when ``|spacing|`` differs from ``requested_spacing``.
    """

    moves: tuple[MoveRequest, ...]
    passes: int
    requested_spacing: float
    spacing: float
    major_axis: str
    minor_axis: str
    major: float
    minor: float
    adjusted: bool


def _pass_count(minor: float, spacing: float) -> int:
    # Rounding the ratio first departs from a plain ceil/floor on purpose:
    # 1.1 / 0.1 is 11.000000000000002 and would otherwise give 12 passes.
    ratio = round(minor / spacing, _RATIO_DECIMALS)
    # Ceil for a positive minor dimension, |floor| for a negative one.
    if minor > 0:
        passes = math.ceil(ratio)
    else:
        passes = abs(math.floor(ratio))
    # A minor dimension far below the spacing still gets one jog.
    return max(passes, 1)


def plan_meander(
    width: float,
    height: float,
    spacing: float,
    start: Corner | str = Corner.LL,
    orientation: Orientation | str = Orientation.X,
    tail: bool = False,
    tolerance: float = 1e-9,
    precision: int | None = None,
) -> MeanderPlan:
    """Plan a square-wave infill of a ``width`` x ``height`` rectangle.

    If the minor dimension is not a multiple of *spacing*, the spacing is
    tweaked so the jogs add up to the minor dimension exactly.

    Parameters
    ----------
    width, height : float
        Rectangle size in x and y.
    spacing : float
        Requested distance between parallel sweeps, > 0.
    start : Corner | str
        Corner the meander starts from.
    orientation : Orientation | str
        ``"x"`` sweeps along x and jogs in y; ``"y"`` the reverse.
    tail : bool
        When ``False`` a closing sweep follows the last jog.
    tolerance : float
        Relative tolerance used to decide whether spacing was adjusted.
    precision : int | None
        Decimals the jogs will be printed with.  When given, every jog but
        the last is rounded to it and the last jog takes the remainder, so
        the printed jogs sum to the minor dimension.

    Returns
    -------
    MeanderPlan

    Raises
    ------
    InvalidValueError
        If *spacing* is not positive or the minor dimension is zero.
    InvalidChoiceError
        For an unknown *start* or *orientation*.
    """
    start = coerce_choice(Corner, start, "start")
    orientation = coerce_choice(Orientation, orientation, "orientation")
    width = check_number(width, "width")
    height = check_number(height, "height")
    spacing = check_number(spacing, "spacing")
    if spacing <= 0:
        raise InvalidValueError(f"spacing must be positive, got {spacing}")

    sx, sy = _CORNER_SIGNS[start]
    x, y = sx * width, sy * height

    # Major axis is the parallel lines, minor axis is the jog.
    if orientation is Orientation.X:
        major, major_axis, minor, minor_axis = x, "x", y, "y"
    else:
        major, major_axis, minor, minor_axis = y, "y", x, "x"

    if minor == 0:
        raise InvalidValueError(
            f"meander needs a non-zero {minor_axis} dimension"
        )

    passes = _pass_count(minor, spacing)
    actual_spacing = minor / passes
    adjusted = not math.isclose(
        abs(actual_spacing), spacing, rel_tol=tolerance, abs_tol=0.0,
    )

    jogs = [actual_spacing] * passes
    if precision is not None:
        step = round(actual_spacing, precision)
        jogs = [step] * (passes - 1)
        jogs.append(round(minor - step * (passes - 1), precision))

    moves: list[MoveRequest] = []
    sign = 1
    for jog in jogs:
        moves.append(MoveRequest.of({major_axis: sign * major}))
        moves.append(MoveRequest.of({minor_axis: jog}))
        sign = -sign
    if not tail:
        moves.append(MoveRequest.of({major_axis: sign * major}))

    return MeanderPlan(
        moves=tuple(moves),
        passes=passes,
        requested_spacing=spacing,
        spacing=actual_spacing,
        major_axis=major_axis,
        minor_axis=minor_axis,
        major=major,
        minor=minor,
        adjusted=adjusted,
    )
