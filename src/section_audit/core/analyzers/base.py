"""
Analyzer contract.

Every analyzer exposes ``check(file_path, content, config)`` and returns a
list of Violations. Analyzers never read files themselves; the runner hands
them the content.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping

from ..violation import Severity, Violation


class Analyzer(ABC):
    """Base class for audit rules."""

    #: Identifier used in configuration (``rules.<name>``) and in violations.
    name: str = ""
    description: str = ""

    @abstractmethod
    def check(self, file_path: str, content: str, config: Mapping[str, Any]) -> List[Violation]:
        """Return the violations found in ``content``."""

    def severity(self, config: Mapping[str, Any]) -> Severity:
        return Severity.parse(config.get("violation_level"))

    def violation(
        self,
        message: str,
        file_path: str,
        config: Mapping[str, Any],
        *,
        line: int | None = None,
    ) -> Violation:
        return Violation(
            message=message,
            file=file_path,
            line=line,
            severity=self.severity(config),
            rule=self.name,
        )


__all__ = ["Analyzer"]
