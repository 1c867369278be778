"""Command vocabulary and argument formatting for a target controller.

The engine never writes opcode literals itself; it asks the active
:class:`Dialect` to format every line.  The defaults produce Marlin-style
output::

    G1 X10 Y10
    G91
    G92 X0 Y0
    G4 P1.5
    F1200
    ; a comment
"""

from __future__ import annotations

from dataclasses import dataclass

from toolpath.gcode.moves import MoveRequest


def format_number(value: float, precision: int = 6) -> str:
    """Format *value* with at most *precision* decimals, no trailing zeros.

    ``10.0 -> "10"``, ``2.5 -> "2.5"``, ``-0.0 -> "0"``.
    """
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


@dataclass(frozen=True, slots=True)
class Dialect:
    """Opcode words and numeric formatting for one controller flavour.

    Parameters
    ----------
    name : str
        Informational flavour name (``"marlin"``).
    linear_move : str
        Linear motion opcode.
    absolute_mode, relative_mode : str
        Distance-mode opcodes.
    set_position : str
        Opcode that redefines the current position without moving.
    dwell, dwell_word : str
        Pause opcode and the word carrying its duration.
    feedrate_word : str
        Word that sets the feed rate.
    comment_prefix : str
        Text placed in front of comment lines.
    precision : int
        Maximum decimals printed for any number.
    """

    name: str = "marlin"
    linear_move: str = "G1"
    absolute_mode: str = "G90"
    relative_mode: str = "G91"
    set_position: str = "G92"
    dwell: str = "G4"
    dwell_word: str = "P"
    feedrate_word: str = "F"
    comment_prefix: str = "; "
    precision: int = 6

    def number(self, value: float) -> str:
        return format_number(value, self.precision)

    def quantize(self, request: MoveRequest) -> MoveRequest:
        """Round every value to what :meth:`format_args` will print."""
        return MoveRequest(
            axes=tuple(
                (axis, round(value, self.precision) + 0.0)
                for axis, value in request
            )
        )

    def format_args(self, request: MoveRequest) -> str:
        """Render ``AXIS<value>`` words separated by single spaces."""
        return " ".join(
            f"{axis.upper()}{self.number(value)}" for axis, value in request
        )

    def move_line(self, request: MoveRequest) -> str:
        return f"{self.linear_move} {self.format_args(request)}"

    def set_position_line(self, request: MoveRequest) -> str:
        return f"{self.set_position} {self.format_args(request)}"

    def mode_line(self, absolute: bool) -> str:
        return self.absolute_mode if absolute else self.relative_mode

    def dwell_line(self, seconds: float) -> str:
        return f"{self.dwell} {self.dwell_word}{self.number(seconds)}"

    def feedrate_line(self, rate: float) -> str:
        return f"{self.feedrate_word}{self.number(rate)}"

    def comment_line(self, text: str) -> str:
        return f"{self.comment_prefix}{text}"
