"""Exceptions raised while generating G-code.

Every error is raised synchronously to the immediate caller; nothing is
retried or recovered inside the engine.  Compound motions that fail
mid-way leave the already emitted prefix in the output stream.
"""


class GCodeError(Exception):
    """Base class for all toolpath generation errors."""

    pass


class EmptyMoveError(GCodeError):
    """Raised when a move is requested without any axis."""

    pass


class InvalidAxisError(GCodeError, ValueError):
    """Raised when an axis name is not a single, non-reserved letter."""

    pass


class InvalidValueError(GCodeError, ValueError):
    """Raised for non-numeric, non-finite or out-of-range arguments."""

    pass


class InvalidChoiceError(GCodeError, ValueError):
    """Raised when a direction, corner, orientation or mode is unknown."""

    pass


class EmitterError(GCodeError):
    """Raised when the output sink refuses a line.

    The position store has already been updated for the failing move, so
    after this error the tracked position and the emitted stream disagree.
    """

    pass
