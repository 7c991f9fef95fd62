"""Shared CLI helpers."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

from section_audit.core.config import ConfigManager
from section_audit.core.utils.stdlib_logging import configure_stdlib_logging


def get_repo_root(args: argparse.Namespace) -> Path:
    """Return ``--repo-root`` or the current directory."""
    explicit = getattr(args, "repo_root", None)
    if explicit:
        root = Path(explicit).expanduser()
        if not root.is_dir():
            raise NotADirectoryError(f"Repository root is not a directory: {root}")
        return root
    return Path(".")


def load_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load merged config for the project selected by ``args``."""
    config_path = getattr(args, "config", None)
    manager = ConfigManager(
        get_repo_root(args),
        config_path=Path(config_path) if config_path else None,
    )
    return manager.load_config()


def setup_logging(args: argparse.Namespace) -> None:
    verbosity = int(getattr(args, "verbose", 0) or 0)
    level = "DEBUG" if verbosity > 1 else "INFO" if verbosity == 1 else "WARNING"
    configure_stdlib_logging(level=level)
    logging.getLogger(__name__).debug("Logging configured at %s", level)


__all__ = ["get_repo_root", "load_config", "setup_logging"]
