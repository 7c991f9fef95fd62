"""
Analyzer registry.

Analyzers are registered by name; ``enabled_analyzers`` applies the
``rules.<name>.enabled`` flags and the CLI ``--only`` filter.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .base import Analyzer
from .live_view import LiveViewSectionsAnalyzer

ANALYZERS: Dict[str, Analyzer] = {
    analyzer.name: analyzer
    for analyzer in (LiveViewSectionsAnalyzer(),)
}


def get_analyzer(name: str) -> Analyzer:
    try:
        return ANALYZERS[name]
    except KeyError:
        known = ", ".join(sorted(ANALYZERS))
        raise KeyError(f"Unknown rule: {name!r} (known rules: {known})") from None


def enabled_analyzers(
    config: Mapping[str, Any],
    only: Optional[Iterable[str]] = None,
) -> List[Analyzer]:
    """Return analyzers enabled in ``config``, optionally restricted to ``only``."""
    rules_cfg = config.get("rules") or {}
    selected = [get_analyzer(n) for n in only] if only else list(ANALYZERS.values())
    return [
        a for a in selected
        if (rules_cfg.get(a.name) or {}).get("enabled", True) is not False
    ]


__all__ = [
    "Analyzer",
    "LiveViewSectionsAnalyzer",
    "ANALYZERS",
    "get_analyzer",
    "enabled_analyzers",
]
