from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

_CONFIGURED_TARGET: str | None = None
_INSTALLED_HANDLER: logging.Handler | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Configure stdlib logging for the CLI.

    Writes to ``log_path`` when given, otherwise to stderr (stdout stays
    clean for ``--json`` output). Idempotent per-process: reconfiguring the
    same target only updates the level.
    """
    global _CONFIGURED_TARGET, _INSTALLED_HANDLER

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _INSTALLED_HANDLER is not None:
        _INSTALLED_HANDLER.setLevel(_level_from_name(level))
        return

    if _INSTALLED_HANDLER is not None:
        root.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    _INSTALLED_HANDLER = handler
    _CONFIGURED_TARGET = target


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: remove the handler installed by ``configure_stdlib_logging``."""
    global _CONFIGURED_TARGET, _INSTALLED_HANDLER
    if _INSTALLED_HANDLER is not None:
        logging.getLogger().removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    _CONFIGURED_TARGET = None
    _INSTALLED_HANDLER = None


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
