"""Configuration loader for toolpath generation.

Loads and validates ``toolpath.yaml`` into typed, frozen dataclasses.  The
controller dialect (opcode words, number precision) and session defaults
come from the config -- nothing in the engine hardcodes an opcode.

Usage::

    from toolpath.configs.loader import load_config
    cfg = load_config()                        # default path
    cfg = load_config("/custom/toolpath.yaml") # explicit path
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from toolpath.gcode.dialect import Dialect
from toolpath.gcode.errors import InvalidChoiceError
from toolpath.gcode.moves import MotionMode, coerce_choice
from toolpath.utils.fs import load_yaml

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SessionConfig:
    """Output session defaults."""

    initial_mode: MotionMode = MotionMode.ABSOLUTE
    echo: bool = False
    header: str | None = None
    footer: str | None = None


@dataclass(frozen=True)
class MeanderConfig:
    """Meander infill settings."""

    spacing_tolerance: float = 1e-9


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings applied by command-line entrypoints."""

    level: str = "INFO"
    file: str | None = None
    json: bool = False


@dataclass(frozen=True)
class ToolpathConfig:
    """Complete configuration loaded from ``toolpath.yaml``."""

    dialect: Dialect = field(default_factory=Dialect)
    session: SessionConfig = field(default_factory=SessionConfig)
    meander: MeanderConfig = field(default_factory=MeanderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a mapping section, treating a missing/null one as empty."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _parse_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{name}' must be true or false, got {value!r}")
    return value


def _parse_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{name}' must be an integer, got {value!r}")
    return value


def _parse_dialect(data: dict[str, Any]) -> Dialect:
    """Parse the ``dialect`` section."""
    base = Dialect()
    return Dialect(
        name=str(data.get("name", base.name)),
        linear_move=str(data.get("linear_move", base.linear_move)),
        absolute_mode=str(data.get("absolute_mode", base.absolute_mode)),
        relative_mode=str(data.get("relative_mode", base.relative_mode)),
        set_position=str(data.get("set_position", base.set_position)),
        dwell=str(data.get("dwell", base.dwell)),
        dwell_word=str(data.get("dwell_word", base.dwell_word)),
        feedrate_word=str(data.get("feedrate_word", base.feedrate_word)),
        comment_prefix=str(data.get("comment_prefix", base.comment_prefix)),
        precision=_parse_int(
            "dialect.precision", data.get("precision", base.precision),
        ),
    )


def _parse_session(data: dict[str, Any]) -> SessionConfig:
    """Parse the ``session`` section."""
    try:
        mode = coerce_choice(
            MotionMode, data.get("initial_mode", "absolute"), "initial_mode",
        )
    except InvalidChoiceError as exc:
        raise ConfigError(str(exc)) from exc
    return SessionConfig(
        initial_mode=mode,
        echo=_parse_bool("session.echo", data.get("echo", False)),
        header=_opt_str(data.get("header")),
        footer=_opt_str(data.get("footer")),
    )


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    """Parse the ``logging`` section."""
    return LoggingConfig(
        level=str(data.get("level", "INFO")).upper(),
        file=_opt_str(data.get("file")),
        json=_parse_bool("logging.json", data.get("json", False)),
    )


def _validate_config(cfg: ToolpathConfig) -> None:
    """Validate cross-field consistency.

    Raises
    ------
    ConfigError
        On any invalid combination.
    """
    d = cfg.dialect
    for name in (
        "linear_move", "absolute_mode", "relative_mode", "set_position",
        "dwell", "feedrate_word",
    ):
        if not getattr(d, name).strip():
            raise ConfigError(f"dialect.{name} must not be empty")
    if d.absolute_mode == d.relative_mode:
        raise ConfigError(
            f"dialect.absolute_mode and dialect.relative_mode are both "
            f"'{d.absolute_mode}'"
        )
    if not 0 <= d.precision <= 12:
        raise ConfigError(
            f"dialect.precision must be in [0, 12], got {d.precision}"
        )

    if cfg.meander.spacing_tolerance < 0:
        raise ConfigError(
            f"meander.spacing_tolerance must be >= 0, "
            f"got {cfg.meander.spacing_tolerance}"
        )

    if cfg.logging.level not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {_LOG_LEVELS}, "
            f"got '{cfg.logging.level}'"
        )

    for name in ("header", "footer"):
        path = getattr(cfg.session, name)
        if path is not None and not Path(path).is_file():
            logger.warning("session.%s file does not exist: %s", name, path)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(path: str | Path | None = None) -> ToolpathConfig:
    """Load and validate toolpath configuration from YAML.

    Parameters
    ----------
    path : str | Path | None
        Path to ``toolpath.yaml``.  ``None`` loads the default shipped
        alongside this module.

    Returns
    -------
    ToolpathConfig
        Fully validated, frozen configuration object.

    Raises
    ------
    ConfigError
        If any field fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        path = Path(__file__).parent / "toolpath.yaml"
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    logger.info("Loading configuration from %s", path)

    data: dict[str, Any] | None = load_yaml(path)
    if data is None:
        raise ConfigError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    try:
        config = ToolpathConfig(
            dialect=_parse_dialect(_section(data, "dialect")),
            session=_parse_session(_section(data, "session")),
            meander=MeanderConfig(
                spacing_tolerance=float(
                    _section(data, "meander").get("spacing_tolerance", 1e-9)
                ),
            ),
            logging=_parse_logging(_section(data, "logging")),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration value: {exc}"
        ) from exc

    _validate_config(config)
    logger.info("Configuration loaded successfully")
    return config


@functools.lru_cache(maxsize=1)
def default_config() -> ToolpathConfig:
    """Return the shipped configuration (loaded once)."""
    return load_config()
