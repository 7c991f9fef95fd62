"""
LiveView structure analyzer.

Checks LiveView and LiveComponent modules for:
- required section labels (only for categories the module actually declares)
- use of external templates instead of embedded HEEx
- LiveComponent structure (HEEx, update callback, documented props)

Config (``rules.live_view_sections``):
    required: [LIFECYCLE CALLBACKS, EVENT HANDLERS, RENDERING]
    violation_level: warning | error
    check_external_templates: true
    check_component_structure: true
"""
from __future__ import annotations

import re
from pathlib import PurePath
from typing import Any, List, Mapping, Optional, Pattern, Sequence, Tuple

from ..sections.classifier import Classification, classify_source, is_candidate
from ..sections.patterns import WEB_ENTRY_FILE_RE, categories_for_section
from ..sections.resolver import missing_sections
from ..violation import Violation, missing_sections_message
from .base import Analyzer

EXTERNAL_TEMPLATES_TITLE = "LiveView uses external templates"
EXTERNAL_TEMPLATES_DETAILS = (
    "LiveView components should use embedded HEEx templates instead of external template files"
)
COMPONENT_STRUCTURE_TITLE = "LiveView component structure issue"

_EXTERNAL_TEMPLATE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"Phoenix\.View\.render"),
    re.compile(r"Phoenix\.Template\.render"),
    re.compile(r"render_template\("),
    # render(assigns, "template.html")
    re.compile(r"render\s*\([^,]*,\s*[\"'][^\"']+\.html[\"']"),
    # render(assigns, :template)
    re.compile(r"render\s*\([^,]*,\s*:[a-z_]+\)"),
)

_COMPONENT_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"use\s+Phoenix\.LiveComponent\b"),
    re.compile(r"use\s+[\w.]+\.LiveComponent\b"),
    re.compile(r"use\s+[\w.]+,\s*:live_component\b"),
    re.compile(r"defmodule\s+\S*Component\b"),
    re.compile(r"@impl\s+true\s+def\s+update\("),
)

_FUNCTIONAL_RENDER_RE = re.compile(
    r"def\s+render\s*\(\s*assigns\s*\)\s*(?:do\s*|,\s*do:\s*)~[HLF]", re.IGNORECASE
)
_UPDATE_CALLBACK_RE = re.compile(r"@impl\s+true\s+def\s+update\(")
_HEEX_RE = re.compile(r"~[HLF]\"", re.IGNORECASE)
_MODULEDOC_RE = re.compile(r"@moduledoc\s*\"\"\"\n(.*?)\"\"\"", re.DOTALL)
_PROPS_HEADING_RE = re.compile(r"^\s*## Props", re.MULTILINE)
_PROP_TUPLE_RE = re.compile(r"@(?:moduledoc|doc).*\{:prop, ")


def is_web_entry_file(file_path: str) -> bool:
    """``lib/my_app_web.ex`` only defines ``use`` macros and is never audited."""
    return bool(WEB_ENTRY_FILE_RE.match(PurePath(file_path).name))


def is_component(content: str) -> bool:
    return any(p.search(content) for p in _COMPONENT_PATTERNS)


def uses_external_templates(content: str) -> bool:
    return any(p.search(content) for p in _EXTERNAL_TEMPLATE_PATTERNS)


def has_documented_props(content: str) -> bool:
    if _PROP_TUPLE_RE.search(content):
        return True
    doc = _MODULEDOC_RE.search(content)
    return bool(doc and _PROPS_HEADING_RE.search(doc.group(1)))


def component_issues(content: str) -> List[str]:
    """Return structure problems of a LiveComponent (empty for non-components)."""
    if not is_component(content):
        return []

    issues: List[str] = []
    if not _HEEX_RE.search(content):
        issues.append("Component doesn't use embedded HEEx templates")
    is_functional = bool(_FUNCTIONAL_RENDER_RE.search(content))
    if not is_functional and not _UPDATE_CALLBACK_RE.search(content):
        issues.append("Stateful component missing @impl true def update callback")
    if not has_documented_props(content):
        issues.append("Component props are not documented with @moduledoc or @doc")
    return issues


def _first_missing_line(classification: Classification, names: Sequence[str]) -> Optional[int]:
    lines = []
    for name in names:
        decl = classification.first_declaration(*categories_for_section(name))
        if decl is not None:
            lines.append(decl.line_index + 1)
    return min(lines) if lines else None


class LiveViewSectionsAnalyzer(Analyzer):
    """Section labels and structure conventions for LiveView modules."""

    name = "live_view_sections"
    description = (
        "Checks that LiveView modules have proper section labels and follow "
        "component structure conventions"
    )

    def check(self, file_path: str, content: str, config: Mapping[str, Any]) -> List[Violation]:
        if is_web_entry_file(file_path) or not is_candidate(content, file_path):
            return []

        violations: List[Violation] = []
        required = list(config.get("required") or [])
        if required:
            violations.extend(self.check_section_labels(file_path, content, required, config))
        if config.get("check_external_templates", True) is not False:
            if uses_external_templates(content):
                violations.append(
                    self.violation(
                        f"{EXTERNAL_TEMPLATES_TITLE}\n   {EXTERNAL_TEMPLATES_DETAILS}",
                        file_path,
                        config,
                    )
                )
        if config.get("check_component_structure", True) is not False:
            for issue in component_issues(content):
                violations.append(
                    self.violation(f"{COMPONENT_STRUCTURE_TITLE}\n   {issue}", file_path, config)
                )
        return violations

    def check_section_labels(
        self,
        file_path: str,
        content: str,
        required: Sequence[str],
        config: Mapping[str, Any],
    ) -> List[Violation]:
        """One aggregated violation naming every applicable, missing section."""
        classification = classify_source(content, file_path)
        missing = missing_sections(classification, required)
        if not missing:
            return []
        return [
            self.violation(
                missing_sections_message(missing),
                file_path,
                config,
                line=_first_missing_line(classification, missing),
            )
        ]


__all__ = [
    "LiveViewSectionsAnalyzer",
    "EXTERNAL_TEMPLATES_TITLE",
    "COMPONENT_STRUCTURE_TITLE",
    "is_web_entry_file",
    "is_component",
    "uses_external_templates",
    "has_documented_props",
    "component_issues",
]
