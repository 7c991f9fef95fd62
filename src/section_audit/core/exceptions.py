from __future__ import annotations

from typing import Any, Dict, Mapping


class SectionAuditError(Exception):
    """Base exception for section-audit."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(SectionAuditError, ValueError):
    """Raised when configuration cannot be loaded or fails schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SectionAuditError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class PlanInvariantError(SectionAuditError, RuntimeError):
    """Raised when an insertion plan references a line outside the source text.

    This never happens for plans built by the planner; it signals a logic
    defect in whatever produced the plan.
    """

    def __init__(
        self,
        message: str,
        *,
        line_index: int | None = None,
        line_count: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if line_index is not None:
            ctx["line_index"] = line_index
        if line_count is not None:
            ctx["line_count"] = line_count
        SectionAuditError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


__all__ = [
    "SectionAuditError",
    "ConfigError",
    "PlanInvariantError",
]
