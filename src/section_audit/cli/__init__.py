"""
section-audit CLI package.

Commands live in ``cli/commands/`` and are discovered automatically; each
module provides SUMMARY, ``register_args(parser)`` and ``main(args)``.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter, format_summary, format_violation
from ._args import (
    add_json_flag,
    add_repo_root_flag,
    add_config_flag,
    add_force_flag,
    add_verbose_flag,
    add_standard_flags,
)
from ._utils import get_repo_root, load_config, setup_logging

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_violation",
    "format_summary",
    # Argument helpers
    "add_json_flag",
    "add_repo_root_flag",
    "add_config_flag",
    "add_force_flag",
    "add_verbose_flag",
    "add_standard_flags",
    # Utilities
    "get_repo_root",
    "load_config",
    "setup_logging",
]
