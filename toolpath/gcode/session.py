"""Output session -- opens the destination and frames the program.

Usage::

    from toolpath.gcode.session import GCodeSession

    with GCodeSession("out/part.gcode", header="header.gcode") as g:
        g.engine.relative()
        g.engine.meander(10, 10, 1)
    # footer written, file closed
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from toolpath.configs.loader import ToolpathConfig, default_config
from toolpath.gcode.emitter import StreamEmitter
from toolpath.gcode.engine import MotionEngine
from toolpath.gcode.errors import EmitterError
from toolpath.utils.fs import ensure_dir

logger = logging.getLogger(__name__)


class GCodeSession:
    """Bind a :class:`MotionEngine` to an output destination.

    Parameters
    ----------
    output : str | Path | TextIO | None
        File path to create, an open text stream, or ``None`` for stdout.
    header : str | Path | None
        File copied verbatim to the output when the session opens.
    footer : str | Path | None
        File appended to the output by :meth:`teardown`.
    echo : bool | TextIO
        ``True`` mirrors every command to stdout; a stream mirrors to it.
    config : ToolpathConfig | None
        Dialect and defaults.  ``None`` uses the built-in configuration.
        Explicit *header* / *footer* arguments win over the config.
    """

    def __init__(
        self,
        output: str | Path | TextIO | None = None,
        header: str | Path | None = None,
        footer: str | Path | None = None,
        echo: bool | TextIO = False,
        config: ToolpathConfig | None = None,
    ) -> None:
        self.config = config or default_config()
        sess = self.config.session
        header = header if header is not None else sess.header
        self._footer = Path(footer) if footer is not None else (
            Path(sess.footer) if sess.footer else None
        )

        self._owns_stream = False
        if output is None:
            stream: TextIO = sys.stdout
        elif isinstance(output, (str, Path)):
            path = Path(output)
            ensure_dir(path.parent)
            stream = open(path, "w", encoding="utf-8")
            self._owns_stream = True
            logger.info("Writing G-code to %s", path)
        else:
            stream = output

        if echo is True:
            echo_stream: TextIO | None = sys.stdout
        elif echo is False:
            echo_stream = None
        else:
            echo_stream = echo
        if echo_stream is None and sess.echo:
            echo_stream = sys.stdout
        # Mirroring to the output itself would print every line twice.
        if echo_stream is stream:
            echo_stream = None

        self._emitter = StreamEmitter(stream, echo=echo_stream)
        self._closed = False
        if header:
            try:
                self._emitter.write_raw(
                    Path(header).read_text(encoding="utf-8")
                )
            except (OSError, EmitterError):
                if self._owns_stream:
                    stream.close()
                raise

        self.engine = MotionEngine(
            self._emitter,
            dialect=self.config.dialect,
            mode=sess.initial_mode,
            meander_tolerance=self.config.meander.spacing_tolerance,
        )

    @property
    def stream(self) -> TextIO:
        return self._emitter.stream

    def teardown(self) -> None:
        """Write the footer and close the output if this session opened it.

        Must be called once after all commands; safe to call again.
        """
        if self._closed:
            return
        self._closed = True
        try:
            if self._footer is not None:
                self._emitter.write_raw(
                    self._footer.read_text(encoding="utf-8")
                )
        finally:
            if self._owns_stream:
                self.stream.close()
                logger.info("Closed G-code output")
            else:
                self.stream.flush()

    def __enter__(self) -> GCodeSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()
