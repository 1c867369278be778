"""
Toolpath Generation Package.

Emits G-code for linear moves, rectangle traces and meander infills while
tracking the tool position across absolute and relative distance modes.

Subpackages:
    gcode: Motion engine, move vocabulary, dialects, emitters, sessions
    configs: Configuration loading and validation
    utils: Logging setup and filesystem helpers
    scripts: Command-line entrypoints
"""

__all__ = ["gcode", "configs", "utils", "scripts"]
