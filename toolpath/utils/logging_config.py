"""Logging configuration for command-line entrypoints.

Library modules only call ``logging.getLogger(__name__)``; this module is
for programs that drive the engine (``toolpath.scripts.*``):
    - Console (stderr) and optional file handler
    - JSON output mode for ingestion
    - Contextual fields (pattern, output file, ...)
    - Warning capture (Python warnings -> logging)

Public API:
    setup_logging(level="INFO", log_file=None, context={"app": "run_pattern"})
    push_context(pattern="meander")
    pop_context(keys=["pattern"])

Format examples:
    Human: 2026-10-18T13:45:12.345Z | WARNING  | pattern=meander | meander spacing updated from 3 to 2.5
    JSON: {"t":"2026-10-18T13:45:12.345Z","lvl":"WARNING","pattern":"meander","msg":"..."}

Stdout is left alone on purpose: it may be carrying the G-code stream.
Idempotent: repeated setup_logging() calls don't duplicate handlers.
"""

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# Context variable for contextual fields
_context_var = contextvars.ContextVar('logging_context', default={})

# Handlers installed by setup_logging (removed on reconfiguration)
_installed: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Render a record with the active context fields.

    ``as_json=True`` gives one JSON object per line; otherwise fields are
    joined with `` | `` after the timestamp and level.
    """

    def __init__(self, as_json: bool = False):
        super().__init__()
        self.as_json = as_json

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        stamp = f"{ts:%Y-%m-%dT%H:%M:%S}.{ts.microsecond // 1000:03d}Z"
        context = _context_var.get({})
        fields = {'t': stamp, 'lvl': record.levelname, **context}
        fields['msg'] = record.getMessage()
        if record.exc_info:
            fields['exc'] = self.formatException(record.exc_info)

        if self.as_json:
            fields['logger'] = record.name
            return json.dumps(fields, default=str)

        ctx = ' '.join(f"{k}={v}" for k, v in context.items())
        head = [stamp, f"{record.levelname:<8}"] + ([ctx] if ctx else [])
        line = ' | '.join(head + [fields['msg']])
        if 'exc' in fields:
            line += '\n' + fields['exc']
        return line


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json_format: bool = False,
    to_stderr: bool = True,
    capture_warnings: bool = True,
    context: Optional[Dict[str, Any]] = None,
) -> List[logging.Handler]:
    """Configure the root logger (idempotent).

    Parameters
    ----------
    level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".  DEBUG logs
        every emitted G-code line.
    log_file : str, optional
        Log file path; None for no file logging
    json_format : bool
        Use JSON lines in the file handler
    to_stderr : bool
        Log to stderr
    capture_warnings : bool
        Route Python warnings to logging
    context : dict, optional
        Initial contextual fields (e.g., {"app": "run_pattern"})

    Returns
    -------
    list[logging.Handler]
        Handlers installed on the root logger.
    """
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    root.setLevel(getattr(logging, level.upper()))

    if to_stderr:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ContextFormatter())
        _installed.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(ContextFormatter(as_json=json_format))
        _installed.append(file_handler)

    for handler in _installed:
        root.addHandler(handler)

    if context:
        push_context(**context)

    if capture_warnings:
        logging.captureWarnings(True)

    return list(_installed)


def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records.

    Examples
    --------
    >>> push_context(pattern="rect")
    >>> logger.info("Started")  # → "... | pattern=rect | Started"
    """
    current = _context_var.get({})
    _context_var.set({**current, **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
        return
    current = dict(_context_var.get({}))
    for key in keys:
        current.pop(key, None)
    _context_var.set(current)


def get_context() -> Dict[str, Any]:
    return dict(_context_var.get({}))
