"""Logging setup and filesystem helpers."""
