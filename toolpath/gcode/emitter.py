"""Command emitters -- where finished G-code lines go.

An emitter receives one already formatted line per call and writes it,
with a trailing newline, in call order.  No buffering is observable to the
caller: each ``emit`` corresponds to exactly one line of final output.
"""

from __future__ import annotations

from typing import Protocol, TextIO, runtime_checkable

from toolpath.gcode.errors import EmitterError


@runtime_checkable
class Emitter(Protocol):
    """Anything that accepts finished command lines."""

    def emit(self, line: str) -> None:
        ...


class StreamEmitter:
    """Write lines to a text stream, optionally echoing to a console.

    Parameters
    ----------
    stream : TextIO
        Output destination (open file, ``sys.stdout``, ``StringIO``).
    echo : TextIO | None
        Secondary stream that receives a copy of every line.
    """

    def __init__(self, stream: TextIO, echo: TextIO | None = None) -> None:
        self._stream = stream
        self._echo = echo

    @property
    def stream(self) -> TextIO:
        return self._stream

    def write_raw(self, text: str) -> None:
        """Copy *text* verbatim (header / footer content)."""
        try:
            self._stream.write(text)
        except (OSError, ValueError) as exc:
            raise EmitterError(f"Failed to write to output: {exc}") from exc

    def emit(self, line: str) -> None:
        try:
            self._stream.write(line + "\n")
            if self._echo is not None:
                self._echo.write(line + "\n")
        except (OSError, ValueError) as exc:
            # ValueError: write to a closed file
            raise EmitterError(f"Failed to emit {line!r}: {exc}") from exc


class ListEmitter:
    """Collect lines in memory -- handy for previews and tests."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)

    def getvalue(self) -> str:
        """Return the collected program, one line per command."""
        return "".join(f"{line}\n" for line in self.lines)

    def clear(self) -> None:
        self.lines.clear()
