"""Shared utilities (merge, I/O, logging)."""
from __future__ import annotations

from .merge import deep_merge, merge_arrays
from .io import read_text, write_text, read_yaml, write_yaml
from .stdlib_logging import configure_stdlib_logging

__all__ = [
    "deep_merge",
    "merge_arrays",
    "read_text",
    "write_text",
    "read_yaml",
    "write_yaml",
    "configure_stdlib_logging",
]
