"""
Violation records shared by every analyzer.

A violation is created by an analyzer and consumed by reporters; it is
immutable once created. The missing-sections message shape is parsed by
downstream tooling, so ``missing_sections_message`` and
``parse_missing_sections`` must stay in sync.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class Severity(str, Enum):
    """Violation severity levels."""

    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, value: Any, default: Optional["Severity"] = None) -> "Severity":
        """Coerce a config value (``"error"``, ``Severity.ERROR``) into a Severity."""
        if isinstance(value, Severity):
            return value
        if value is None:
            return default or cls.WARNING
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unknown violation level: {value!r}") from exc


@dataclass(frozen=True)
class Violation:
    """A single finding produced by an analyzer.

    Attributes:
        message: Human title, optionally followed by an indented details line
        file: Path of the file the violation was found in
        line: 1-based line number, when the finding has a location
        severity: Warning or error
        rule: Identifier of the analyzer that produced it
    """

    message: str
    file: str
    line: Optional[int] = None
    severity: Severity = Severity.WARNING
    rule: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    @property
    def title(self) -> str:
        return self.message.split("\n", 1)[0]

    @property
    def details(self) -> str:
        _, _, rest = self.message.partition("\n")
        return rest.strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "severity": self.severity.value,
            "rule": self.rule,
        }


MISSING_SECTIONS_TITLE = "LiveView missing labeled sections"

_MISSING_SECTIONS_RE = re.compile(r"Missing sections: (\[[^\]\n]*\])")


def missing_sections_message(section_names: Iterable[str]) -> str:
    """Render the aggregated missing-sections message.

    Example:
        >>> print(missing_sections_message(["EVENT HANDLERS", "RENDERING"]))
        LiveView missing labeled sections
           Missing sections: ["EVENT HANDLERS", "RENDERING"]
    """
    listed = ", ".join(json.dumps(name) for name in section_names)
    return f"{MISSING_SECTIONS_TITLE}\n   Missing sections: [{listed}]"


def parse_missing_sections(message: str) -> List[str]:
    """Extract the section names from a missing-sections message.

    Returns an empty list when the message does not carry the list.
    """
    match = _MISSING_SECTIONS_RE.search(message)
    if not match:
        return []
    try:
        names = json.loads(match.group(1))
    except json.JSONDecodeError:
        return []
    return [str(n) for n in names if isinstance(n, str)]


def has_errors(violations: Iterable[Violation]) -> bool:
    """Return True if any violation is error-level."""
    return any(v.is_error for v in violations)


def violation_summary(violations: Iterable[Violation]) -> Dict[str, int]:
    """Count errors and warnings.

    Example:
        >>> violation_summary([Violation("m", "a.ex", severity=Severity.ERROR)])
        {'errors': 1, 'warnings': 0, 'total': 1}
    """
    items = list(violations)
    errors = sum(1 for v in items if v.is_error)
    warnings = len(items) - errors
    return {"errors": errors, "warnings": warnings, "total": errors + warnings}


__all__ = [
    "Severity",
    "Violation",
    "MISSING_SECTIONS_TITLE",
    "missing_sections_message",
    "parse_missing_sections",
    "has_errors",
    "violation_summary",
]
