"""
Pattern registry for section classification.

Pure data plus tiny lookups:
- FunctionCategory: the functional role of a declaration
- CATEGORY_RULES: ordered (category, rules) table; first match wins
- SECTION_LABEL_RE: the comment-line grammar for section labels
- SECTION_CATEGORIES: canonical section name <-> category table
- Candidate heuristics for lifecycle-style (LiveView) modules

Priority is the tuple order of CATEGORY_RULES, never dict or set iteration
order.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Pattern, Tuple


class FunctionCategory(str, Enum):
    """Functional role of a declared function."""

    LIFECYCLE = "lifecycle"
    EVENT_HANDLER = "event_handler"
    INFO_HANDLER = "info_handler"
    RENDERING = "rendering"
    OTHER = "other"


@dataclass(frozen=True)
class DetectionRule:
    """A single category detection rule.

    A rule matches either by declaration name (``names``) or by the raw
    parameter list (``params``). Name rules are listed before signature
    rules inside a category.
    """

    id: str
    names: FrozenSet[str] = field(default_factory=frozenset)
    params: Optional[Pattern[str]] = None

    def matches(self, name: str, params: Optional[str]) -> bool:
        if name in self.names:
            return True
        if self.params is not None and params is not None:
            return bool(self.params.fullmatch(params))
        return False


CATEGORY_RULES: Tuple[Tuple[FunctionCategory, Tuple[DetectionRule, ...]], ...] = (
    (
        FunctionCategory.LIFECYCLE,
        (
            DetectionRule(
                id="lifecycle-callbacks",
                names=frozenset({
                    "mount",
                    "update",
                    "init",
                    "terminate",
                    "on_mount",
                    "handle_params",
                    "handle_continue",
                }),
            ),
        ),
    ),
    (
        FunctionCategory.EVENT_HANDLER,
        (DetectionRule(id="event-handlers", names=frozenset({"handle_event"})),),
    ),
    (
        FunctionCategory.INFO_HANDLER,
        (
            DetectionRule(
                id="info-handlers",
                names=frozenset({"handle_info", "handle_call", "handle_cast"}),
            ),
        ),
    ),
    (
        FunctionCategory.RENDERING,
        (
            DetectionRule(
                id="render-functions",
                names=frozenset({"render", "page_title", "component"}),
            ),
            # Function components: `def button(assigns) do`
            DetectionRule(
                id="function-components",
                params=re.compile(r"\s*assigns\s*"),
            ),
        ),
    ),
)

# def/defp declarations. `defmodule`, `defmacro`, `defstruct` do not match
# because the keyword must be followed by whitespace.
DECLARATION_RE = re.compile(
    r"^(?P<indent>[ \t]*)(?P<kind>defp?)[ \t]+"
    r"(?P<name>[a-z_][a-zA-Z0-9_]*[?!]?)"
    r"(?:[ \t]*\((?P<params>[^)]*)\)?)?"
)

LABEL_FILLER = "-=*~#"

# `# LIFECYCLE CALLBACKS`, `  # ---------- RENDERING ----------`
# The whole line must be the label; prose mentioning a name never matches.
SECTION_LABEL_RE = re.compile(
    r"^[ \t]*#[ \t]*"
    r"(?:[-=*~#]+[ \t]*)?"
    r"(?P<phrase>[A-Z][A-Z \t]*[A-Z])"
    r"(?:[ \t]*[-=*~#]+)?"
    r"[ \t]*\r?$"
)

# Each section labels one or more categories; the first is its primary one.
# handle_info/handle_call/handle_cast live under EVENT HANDLERS.
SECTION_CATEGORIES: Tuple[Tuple[str, Tuple[FunctionCategory, ...]], ...] = (
    ("LIFECYCLE CALLBACKS", (FunctionCategory.LIFECYCLE,)),
    ("EVENT HANDLERS", (FunctionCategory.EVENT_HANDLER, FunctionCategory.INFO_HANDLER)),
    ("RENDERING", (FunctionCategory.RENDERING,)),
)

_CATEGORIES_BY_SECTION: Dict[str, Tuple[FunctionCategory, ...]] = dict(SECTION_CATEGORIES)
_SECTION_BY_CATEGORY: Dict[FunctionCategory, str] = {
    c: s for s, cats in SECTION_CATEGORIES for c in cats
}

# Elixir heredoc delimiters (@moduledoc, @doc, ~H sigils). Nothing between
# an opening and a closing delimiter is code.
HEREDOC_DELIMITERS: Tuple[str, ...] = ('"""', "'''")

SOURCE_EXTENSIONS: FrozenSet[str] = frozenset({".ex", ".exs"})

LIFECYCLE_MODULE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"use\s+Phoenix\.LiveView\b"),
    re.compile(r"use\s+[\w.]+\.LiveView\b"),
    re.compile(r"use\s+[\w.]+\.LiveComponent\b"),
    re.compile(r"use\s+[\w.]+,\s*:live_(?:view|component)\b"),
    re.compile(r"\bdef\s+mount\("),
    re.compile(r"\bdef\s+render\("),
    re.compile(r"\bdef\s+handle_event\("),
)

# `my_app_web.ex` only defines the `use MyAppWeb, :live_view` macros.
WEB_ENTRY_FILE_RE = re.compile(r"^[a-z_]+_web\.ex$")


def canonical_section_name(text: str) -> str:
    """Normalise a label or configured name to its canonical form.

    Strips decorative filler and surrounding whitespace, collapses inner
    whitespace and upper-cases.

    Example:
        >>> canonical_section_name("  ---- event   handlers ---")
        'EVENT HANDLERS'
    """
    stripped = text.strip().strip(LABEL_FILLER + " \t")
    return " ".join(stripped.split()).upper()


def categories_for_section(name: str) -> Tuple[FunctionCategory, ...]:
    """Return every category a section name labels (empty when unknown)."""
    return _CATEGORIES_BY_SECTION.get(canonical_section_name(name), ())


def category_for_section(name: str) -> FunctionCategory:
    """Return the primary category a section name labels (OTHER when unknown)."""
    categories = categories_for_section(name)
    return categories[0] if categories else FunctionCategory.OTHER


def section_for_category(category: FunctionCategory) -> Optional[str]:
    """Return the section that labels ``category`` (None for OTHER)."""
    return _SECTION_BY_CATEGORY.get(category)


__all__ = [
    "FunctionCategory",
    "DetectionRule",
    "CATEGORY_RULES",
    "DECLARATION_RE",
    "LABEL_FILLER",
    "SECTION_LABEL_RE",
    "SECTION_CATEGORIES",
    "HEREDOC_DELIMITERS",
    "SOURCE_EXTENSIONS",
    "LIFECYCLE_MODULE_PATTERNS",
    "WEB_ENTRY_FILE_RE",
    "canonical_section_name",
    "categories_for_section",
    "category_for_section",
    "section_for_category",
]
