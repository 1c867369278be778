"""
G-code generation module.

Tracks tool position across absolute/relative distance modes and turns
move requests, rectangles and meander infills into G-code lines.

``toolpath.gcode.session`` (output files, header/footer) depends on the
config loader and is imported from its own module.
"""

from toolpath.gcode.dialect import Dialect, format_number
from toolpath.gcode.emitter import Emitter, ListEmitter, StreamEmitter
from toolpath.gcode.engine import MotionEngine
from toolpath.gcode.errors import (
    EmitterError,
    EmptyMoveError,
    GCodeError,
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
    PrimitiveMove,
)
from toolpath.gcode.patterns import MeanderPlan, plan_meander, rect_moves
from toolpath.gcode.position import PositionStore

__all__ = [
    "Corner",
    "Dialect",
    "Direction",
    "Emitter",
    "EmitterError",
    "EmptyMoveError",
    "GCodeError",
    "InvalidAxisError",
    "InvalidChoiceError",
    "InvalidValueError",
    "ListEmitter",
    "MeanderPlan",
    "MotionEngine",
    "MotionMode",
    "MoveRequest",
    "Orientation",
    "PositionStore",
    "PrimitiveMove",
    "StreamEmitter",
    "format_number",
    "plan_meander",
    "rect_moves",
]
