"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for project root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project root (default: current directory)",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config flag pointing at an explicit config file."""
    parser.add_argument(
        "--config",
        type=str,
        help="Config file to use instead of <repo-root>/.section_audit.yaml",
    )


def add_force_flag(parser: argparse.ArgumentParser, help_text: str | None = None) -> None:
    """Add --force flag."""
    parser.add_argument(
        "--force",
        action="store_true",
        help=help_text or "Force operation even if checks fail",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that most commands use.

    Adds: --json, --repo-root, --config, --verbose
    """
    add_json_flag(parser)
    add_repo_root_flag(parser)
    add_config_flag(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_config_flag",
    "add_force_flag",
    "add_verbose_flag",
    "add_standard_flags",
]
