"""Tests for the configuration loader.

Validates that the shipped toolpath.yaml loads, that partial files fall
back to defaults, and that invalid values raise ``ConfigError``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from toolpath.configs.loader import (
    ConfigError,
    ToolpathConfig,
    default_config,
    load_config,
)
from toolpath.gcode.dialect import Dialect
from toolpath.gcode.moves import MotionMode


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def write_cfg(tmp_path: Path):
    """Write YAML text to a temp file and return its path."""

    def _write(text: str) -> Path:
        path = tmp_path / "toolpath.yaml"
        path.write_text(text)
        return path

    return _write


# ---------------------------------------------------------------------------
# Shipped configuration
# ---------------------------------------------------------------------------


class TestDefaultConfig:
    def test_loads(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, ToolpathConfig)
        assert cfg.session.initial_mode is MotionMode.ABSOLUTE

    def test_matches_builtin_dialect(self) -> None:
        assert load_config().dialect == Dialect()

    def test_default_config_cached(self) -> None:
        assert default_config() is default_config()


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


class TestCustomConfig:
    def test_partial_file_uses_defaults(self, write_cfg) -> None:
        cfg = load_config(write_cfg("dialect:\n  linear_move: G01\n"))
        assert cfg.dialect.linear_move == "G01"
        assert cfg.dialect.relative_mode == "G91"
        assert cfg.meander.spacing_tolerance == 1e-9
        assert cfg.logging.level == "INFO"

    def test_session_section(self, write_cfg, tmp_path: Path) -> None:
        footer = tmp_path / "footer.gcode"
        footer.write_text("M2\n")
        cfg = load_config(write_cfg(
            "session:\n"
            "  initial_mode: Relative\n"
            "  echo: true\n"
            f"  footer: {footer}\n"
        ))
        assert cfg.session.initial_mode is MotionMode.RELATIVE
        assert cfg.session.echo is True
        assert cfg.session.footer == str(footer)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_empty_file(self, write_cfg) -> None:
        with pytest.raises(ConfigError, match="Empty"):
            load_config(write_cfg(""))

    @pytest.mark.parametrize(
        "text,match",
        [
            ("- 1\n- 2\n", "root must be a mapping"),
            ("dialect: [G1]\n", "must be a mapping"),
            ("dialect:\n  precision: many\n", "dialect.precision"),
            ("dialect:\n  precision: 2.7\n", "must be an integer"),
            ("dialect:\n  precision: true\n", "must be an integer"),
            ("dialect:\n  precision: 20\n", "precision"),
            ("dialect:\n  linear_move: ''\n", "linear_move"),
            ("dialect:\n  relative_mode: G90\n", "both"),
            ("session:\n  initial_mode: sideways\n", "initial_mode"),
            ("session:\n  echo: maybe\n", "session.echo"),
            ("meander:\n  spacing_tolerance: -1\n", "spacing_tolerance"),
            ("logging:\n  level: LOUD\n", "logging.level"),
        ],
    )
    def test_invalid(self, write_cfg, text: str, match: str) -> None:
        with pytest.raises(ConfigError, match=match):
            load_config(write_cfg(text))
