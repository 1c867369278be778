"""Position store -- current absolute coordinate of every known axis.

Axes come into existence on first reference; there is no "unset" state.
The store does not know the caller's intent: in absolute mode it is given
the target that the primitive move commands, in relative mode the delta.
"""

from __future__ import annotations

from collections.abc import Mapping

from toolpath.gcode.moves import MotionMode, MoveRequest, check_number, normalize_axis


class PositionStore:
    """Mapping from axis name to absolute coordinate.

    Owned by a single :class:`~toolpath.gcode.engine.MotionEngine`.
    """

    def __init__(self, initial: Mapping[str, float] | None = None) -> None:
        self._coords: dict[str, float] = {}
        if initial:
            self.set(initial)

    def update(self, request: MoveRequest, mode: MotionMode) -> None:
        """Apply one primitive move.

        Relative mode increments the stored coordinate (a new axis starts
        at zero); absolute mode replaces it.
        """
        for axis, value in request:
            if mode is MotionMode.RELATIVE:
                self._coords[axis] = self._coords.get(axis, 0.0) + value
            else:
                self._coords[axis] = value

    def set(self, coords: Mapping[str, float]) -> None:
        """Overwrite coordinates without regard to the motion mode."""
        for axis, value in coords.items():
            key = normalize_axis(axis)
            self._coords[key] = check_number(value, f"Axis {key}")

    def known(self, axis: str) -> bool:
        return normalize_axis(axis) in self._coords

    def get(self, axis: str, default: float | None = None) -> float | None:
        return self._coords.get(normalize_axis(axis), default)

    def snapshot(self) -> dict[str, float]:
        """Return a copy of all coordinates."""
        return dict(self._coords)

    def __len__(self) -> int:
        return len(self._coords)

    def __repr__(self) -> str:
        return f"PositionStore({self._coords!r})"
