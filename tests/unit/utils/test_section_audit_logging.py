from __future__ import annotations

import logging
from pathlib import Path

from section_audit.core.utils.stdlib_logging import configure_stdlib_logging


def test_configure_is_idempotent_for_same_target() -> None:
    before = len(logging.getLogger().handlers)

    configure_stdlib_logging(level="INFO")
    configure_stdlib_logging(level="DEBUG")

    root = logging.getLogger()
    assert len(root.handlers) == before + 1
    assert root.level == logging.DEBUG


def test_log_file_target(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "audit.log"

    configure_stdlib_logging(level="INFO", log_path=log_path)
    logging.getLogger("section_audit.test").info("hello from test")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_path.read_text(encoding="utf-8")
    assert "INFO section_audit.test: hello from test" in text


def test_unknown_level_falls_back_to_warning() -> None:
    configure_stdlib_logging(level="chatty")
    assert logging.getLogger().level == logging.WARNING
