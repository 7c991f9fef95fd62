"""CLI output: JSON or text results, violation and summary rendering."""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from section_audit.core.violation import Violation


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output success result (``message`` in text mode, ``data`` in JSON mode)."""
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(
        self,
        error: Exception | str,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr."""
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            context = getattr(error, "context", None)
            if context:
                output["context"] = context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        """Output plain text (ignored in JSON mode)."""
        if not self.json_mode:
            print(message)


def format_violation(v: Violation) -> str:
    """Render a violation as a header line followed by its indented message.

    Example::

        [WARNING] lib/demo_web/live/page_live.ex:12 (live_view_sections)
           LiveView missing labeled sections
           Missing sections: ["RENDERING"]
    """
    location = f"{v.file}:{v.line}" if v.line else v.file
    body = "\n".join(f"   {line.strip()}" for line in v.message.splitlines())
    return f"[{v.severity.value.upper()}] {location} ({v.rule})\n{body}"


def format_summary(summary: Dict[str, int]) -> str:
    if not summary["total"]:
        return "No violations found."
    return (
        f"\nFound {summary['total']} violation(s): "
        f"{summary['errors']} error(s), {summary['warnings']} warning(s)"
    )


__all__ = [
    "OutputFormatter",
    "format_violation",
    "format_summary",
]
