"""
section-audit init command.

SUMMARY: Write a starting .section_audit.yaml with the default configuration
"""

from __future__ import annotations

import argparse

from section_audit.cli import OutputFormatter, add_force_flag, add_json_flag, add_repo_root_flag, get_repo_root
from section_audit.core.config import PROJECT_CONFIG_NAMES, write_default_config

SUMMARY = "Write a starting .section_audit.yaml with the default configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_force_flag(parser, help_text="Overwrite an existing config file")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        target = get_repo_root(args) / PROJECT_CONFIG_NAMES[0]
        write_default_config(target, overwrite=bool(args.force))
    except FileExistsError as e:
        formatter.error(e, f"{e} (use --force to overwrite)", error_code="exists")
        return 1
    except OSError as e:
        formatter.error(e, error_code="io_error")
        return 1

    formatter.success({"path": str(target)}, f"Created {target}")
    return 0
