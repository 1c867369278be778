"""Move vocabulary -- the contract between the engine and the emitter.

A *move request* is an ordered mapping from axis name to a number.  The
engine interprets the numbers as deltas (relative mode) or as targets
(absolute mode); the request itself carries no mode.  A *primitive move*
pairs a request with the mode that was active when it was emitted.

Axis names
----------
A single ASCII letter, case-insensitive.  Names are stored lower case and
emitted upper case.  ``G``, ``M`` and ``N`` are reserved for opcodes and
line numbers.

All enumerations accept their string spelling case-insensitively, so
``rect(..., direction="ccw")`` and ``rect(..., direction=Direction.CCW)``
are equivalent.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import TypeVar

from toolpath.gcode.errors import (
    EmptyMoveError,
    InvalidAxisError,
    InvalidChoiceError,
    InvalidValueError,
)

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MotionMode(Enum):
    """Distance mode governing how move values are interpreted."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"


class Direction(Enum):
    """Winding direction of a traced rectangle."""

    CW = "CW"
    CCW = "CCW"


class Corner(Enum):
    """Start corner -- L/U = lower/upper, L/R = left/right.

    Assumes an origin in the lower left.
    """

    LL = "LL"
    UL = "UL"
    UR = "UR"
    LR = "LR"


class Orientation(Enum):
    """Axis the long meander sweeps run along."""

    X = "x"
    Y = "y"


_E = TypeVar("_E", bound=Enum)


def coerce_choice(enum_cls: type[_E], value: _E | str, name: str) -> _E:
    """Convert *value* to a member of *enum_cls*.

    Strings are matched case-insensitively against member values.

    Raises
    ------
    InvalidChoiceError
        If *value* is not a member and matches no member value.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if member.value.lower() == value.strip().lower():
                return member
    allowed = ", ".join(repr(m.value) for m in enum_cls)
    raise InvalidChoiceError(f"{name} must be one of {allowed}, got {value!r}")


# ---------------------------------------------------------------------------
# Axis / value validation
# ---------------------------------------------------------------------------

_AXIS_RE = re.compile(r"^[A-Za-z]$")
_RESERVED_AXES = frozenset({"g", "m", "n"})


def normalize_axis(axis: str) -> str:
    """Return the canonical (lower case) form of *axis*.

    Raises
    ------
    InvalidAxisError
        If *axis* is not a single letter or is a reserved word.
    """
    if not isinstance(axis, str) or not _AXIS_RE.match(axis):
        raise InvalidAxisError(
            f"Axis must be a single letter, got {axis!r}"
        )
    key = axis.lower()
    if key in _RESERVED_AXES:
        raise InvalidAxisError(f"'{axis}' is a reserved word, not an axis")
    return key


def check_number(value: object, name: str) -> float:
    """Return *value* as ``float`` after rejecting bools, NaN and inf."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidValueError(
            f"{name} must be a real number, got {value!r}"
        )
    result = float(value)
    if not math.isfinite(result):
        raise InvalidValueError(f"{name} must be finite, got {value!r}")
    return result


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MoveRequest:
    """Ordered, validated axis -> value mapping.

    Parameters
    ----------
    axes : tuple[tuple[str, float], ...]
        ``(axis, value)`` pairs in caller order.  Build instances with
        :meth:`of` so that names and values are validated.
    """

    axes: tuple[tuple[str, float], ...]

    def __post_init__(self) -> None:
        if not self.axes:
            raise EmptyMoveError("Move request needs at least one axis")

    @classmethod
    def of(
        cls, mapping: Mapping[str, float] | None = None, **axes: float,
    ) -> MoveRequest:
        """Validate and build a request from a mapping and/or keywords.

        Examples
        --------
        >>> MoveRequest.of(x=10, y=10)
        >>> MoveRequest.of({"A": 20})
        """
        items = list((mapping or {}).items()) + list(axes.items())
        if not items:
            raise EmptyMoveError("Move request needs at least one axis")
        pairs: list[tuple[str, float]] = []
        seen: set[str] = set()
        for axis, value in items:
            key = normalize_axis(axis)
            if key in seen:
                raise InvalidAxisError(f"Axis '{key}' given more than once")
            seen.add(key)
            pairs.append((key, check_number(value, f"Axis {key}")))
        return cls(axes=tuple(pairs))

    def __iter__(self) -> Iterator[tuple[str, float]]:
        return iter(self.axes)

    def __len__(self) -> int:
        return len(self.axes)

    def as_dict(self) -> dict[str, float]:
        return dict(self.axes)


@dataclass(frozen=True, slots=True)
class PrimitiveMove:
    """One emitted motion command and the mode it was emitted under."""

    request: MoveRequest
    mode: MotionMode
