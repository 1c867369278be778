"""Motion engine -- move requests to G-code lines.

The engine owns the current tool position and the distance mode, and is
the only thing that mutates them.  Every public motion turns into one or
more primitive moves; each primitive move first updates the position
store under the active mode, then is formatted by the dialect and handed
to the emitter.

Distance modes:
    The command set has a single linear-motion opcode whose meaning is
    governed by the active mode (``G90`` absolute / ``G91`` relative).
    Absolute moves issued while in relative mode are therefore wrapped in
    a temporary switch to absolute mode and back.

Failure model:
    Errors propagate immediately.  The position update happens before the
    line is emitted, so an :class:`~toolpath.gcode.errors.EmitterError`
    leaves the store ahead of the output.  Compound motions are not rolled
    back; the already emitted prefix stays in the stream.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from toolpath.gcode.dialect import Dialect
from toolpath.gcode.emitter import Emitter
from toolpath.gcode.errors import InvalidValueError
from toolpath.gcode.moves import (
    Corner,
    Direction,
    MotionMode,
    MoveRequest,
    Orientation,
    PrimitiveMove,
    check_number,
    coerce_choice,
)
from toolpath.gcode.patterns import MeanderPlan, plan_meander, rect_moves
from toolpath.gcode.position import PositionStore

logger = logging.getLogger(__name__)


class MotionEngine:
    """Track tool position and emit mode-correct motion commands.

    Parameters
    ----------
    emitter : Emitter
        Destination for finished command lines.
    dialect : Dialect | None
        Opcode vocabulary; ``None`` uses the Marlin-style defaults.
    mode : MotionMode | str
        Distance mode assumed at session start.  Setting it here does not
        emit anything.
    position : Mapping[str, float] | None
        Seed coordinates for the position store.
    meander_tolerance : float
        Relative tolerance for reporting adjusted meander spacing.

    Notes
    -----
    An engine instance is single-threaded state.  Do not share one across
    concurrent callers without external locking.
    """

    def __init__(
        self,
        emitter: Emitter,
        dialect: Dialect | None = None,
        mode: MotionMode | str = MotionMode.ABSOLUTE,
        position: Mapping[str, float] | None = None,
        meander_tolerance: float = 1e-9,
    ) -> None:
        self._emitter = emitter
        self._dialect = dialect or Dialect()
        self._mode = coerce_choice(MotionMode, mode, "mode")
        self._position = PositionStore(position)
        self._meander_tolerance = meander_tolerance
        self.current_feedrate: float | None = None
        self.last_move: PrimitiveMove | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> MotionMode:
        return self._mode

    @property
    def is_absolute(self) -> bool:
        return self._mode is MotionMode.ABSOLUTE

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def position(self) -> PositionStore:
        return self._position

    def read_position(self) -> dict[str, float]:
        """Return a copy of the current absolute coordinates."""
        return self._position.snapshot()

    def write_position(self, coords: Mapping[str, float]) -> None:
        """Seed coordinates without moving or emitting anything."""
        self._position.set(coords)

    # ------------------------------------------------------------------
    # Low level
    # ------------------------------------------------------------------

    def write(self, line: str) -> None:
        """Hand one finished line to the emitter."""
        logger.debug("emit: %s", line)
        self._emitter.emit(line)

    def comment(self, text: str) -> None:
        self.write(self._dialect.comment_line(text))

    def set_mode(self, mode: MotionMode | str) -> None:
        """Switch distance mode.

        Always emits the mode opcode, even when *mode* is already active.
        """
        mode = coerce_choice(MotionMode, mode, "mode")
        self.write(self._dialect.mode_line(mode is MotionMode.ABSOLUTE))
        self._mode = mode

    def absolute(self) -> None:
        """Enter absolute movement mode.

        Most methods handle the mode automatically; call this only when
        issuing raw moves.
        """
        self.set_mode(MotionMode.ABSOLUTE)

    def relative(self) -> None:
        """Enter relative movement mode."""
        self.set_mode(MotionMode.RELATIVE)

    def set_home(self, **axes: float) -> None:
        """Declare the current position to be *axes* without moving.

        Examples
        --------
        >>> engine.set_home(x=0, y=0)
        """
        request = self._dialect.quantize(MoveRequest.of(axes))
        self._position.set(request.as_dict())
        self.write(self._dialect.set_position_line(request))

    def feedrate(self, rate: float) -> None:
        """Set the feed rate (tool head speed)."""
        rate = check_number(rate, "feed rate")
        if rate <= 0:
            raise InvalidValueError(f"feed rate must be positive, got {rate}")
        self.write(self._dialect.feedrate_line(rate))
        self.current_feedrate = rate

    def dwell(self, seconds: float) -> None:
        """Pause program execution for *seconds*."""
        seconds = check_number(seconds, "dwell time")
        if seconds < 0:
            raise InvalidValueError(
                f"dwell time must not be negative, got {seconds}"
            )
        self.write(self._dialect.dwell_line(seconds))

    # ------------------------------------------------------------------
    # Motion
    # ------------------------------------------------------------------

    def move_request(self, request: MoveRequest) -> None:
        """Emit one primitive move in the current mode.

        Values are rounded to the dialect precision first, so the store
        tracks exactly what the output commands.
        """
        request = self._dialect.quantize(request)
        self._position.update(request, self._mode)
        self.last_move = PrimitiveMove(request=request, mode=self._mode)
        self.write(self._dialect.move_line(request))

    def move(self, **axes: float) -> None:
        """Move the tool head, interpreted in the current mode.

        Examples
        --------
        >>> # 10 mm in x and y (relative mode)
        >>> engine.move(x=10, y=10)
        >>> # A axis up 20 mm
        >>> engine.move(A=20)
        """
        self.move_request(MoveRequest.of(axes))

    def abs_move(self, **axes: float) -> None:
        """Same as :meth:`move`, but values are always absolute targets.

        In relative mode this emits ``G90``, the move, then ``G91``.
        """
        request = MoveRequest.of(axes)
        if self.is_absolute:
            self.move_request(request)
            return
        self.absolute()
        self.move_request(request)
        self.relative()

    def home(self) -> None:
        """Move the tool head to X=0, Y=0."""
        self.abs_move(x=0, y=0)

    def rect(
        self,
        width: float,
        height: float,
        direction: Direction | str = Direction.CW,
        start: Corner | str = Corner.LL,
    ) -> None:
        """Trace a rectangle with the given width and height.

        Runs in the current mode; the caller should be in relative mode
        for the trace to close on itself.

        Examples
        --------
        >>> # 10x10 clockwise square from the lower left corner
        >>> engine.rect(10, 10)
        >>> # 1x5 counterclockwise, starting in the upper right corner
        >>> engine.rect(1, 5, direction="CCW", start="UR")
        """
        moves = rect_moves(width, height, direction, start)
        if self.is_absolute:
            logger.warning(
                "rect() called in absolute mode; the trace will not be a "
                "closed rectangle"
            )
        for request in moves:
            self.move_request(request)

    def meander(
        self,
        width: float,
        height: float,
        spacing: float,
        start: Corner | str = Corner.LL,
        orientation: Orientation | str = Orientation.X,
        tail: bool = False,
    ) -> MeanderPlan:
        """Infill a rectangle with a square-wave meander.

        If the jog dimension is not a multiple of *spacing*, the spacing is
        tweaked so the dimensions work out; the change is logged and
        written to the output as a comment.  Leaves the engine in relative
        mode.

        Examples
        --------
        >>> # 10x10 square, 1 mm spacing, from the lower left
        >>> engine.meander(10, 10, 1)
        >>> # 3x5 with parallel lines through y
        >>> engine.meander(3, 5, spacing=1, orientation="y")
        >>> # 10x5, spacing 2, from the upper right
        >>> engine.meander(10, 5, 2, start="UR")
        """
        plan = plan_meander(
            width,
            height,
            spacing,
            start=start,
            orientation=orientation,
            tail=tail,
            tolerance=self._meander_tolerance,
            precision=self._dialect.precision,
        )
        if plan.adjusted:
            msg = (
                f"meander spacing updated from "
                f"{self._dialect.number(plan.requested_spacing)} to "
                f"{self._dialect.number(plan.spacing)}"
            )
            logger.warning(msg)
            self.comment(msg)
        if self.is_absolute:
            self.relative()
        for request in plan.moves:
            self.move_request(request)
        return plan
