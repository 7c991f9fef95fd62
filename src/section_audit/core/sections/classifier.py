"""
Section classifier.

Single linear pass over source lines that:
- tags each def/defp line with its FunctionCategory (first matching rule wins)
- records every comment line matching the section label grammar
- skips heredoc bodies (@moduledoc, @doc, ~H) so documentation examples
  are never mistaken for code or labels

A line is either a declaration or a label, never both.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import List, Optional, Sequence, Set, Tuple

from .patterns import (
    CATEGORY_RULES,
    DECLARATION_RE,
    HEREDOC_DELIMITERS,
    LIFECYCLE_MODULE_PATTERNS,
    SECTION_LABEL_RE,
    SOURCE_EXTENSIONS,
    FunctionCategory,
    canonical_section_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Declaration:
    """A def/defp line and the category it was classified as."""

    line_index: int
    name: str
    category: FunctionCategory
    indentation: str


@dataclass(frozen=True)
class SectionOccurrence:
    """An existing section label line."""

    line_index: int
    raw_label_text: str
    canonical_name: str


@dataclass(frozen=True)
class Classification:
    """Result of scanning one file."""

    declarations: Tuple[Declaration, ...] = ()
    sections: Tuple[SectionOccurrence, ...] = ()

    @property
    def categories(self) -> Set[FunctionCategory]:
        """Categories observed in the file (OTHER is never reported)."""
        return {d.category for d in self.declarations if d.category is not FunctionCategory.OTHER}

    @property
    def section_names(self) -> List[str]:
        """Canonical names of existing labels, in file order, without duplicates."""
        seen: List[str] = []
        for occ in self.sections:
            if occ.canonical_name not in seen:
                seen.append(occ.canonical_name)
        return seen

    def first_declaration(self, *categories: FunctionCategory) -> Optional[Declaration]:
        """Return the earliest declaration of any of ``categories``."""
        for decl in self.declarations:
            if decl.category in categories:
                return decl
        return None

    @property
    def is_empty(self) -> bool:
        return not self.declarations and not self.sections


EMPTY_CLASSIFICATION = Classification()


def split_lines(content: str) -> Tuple[str, ...]:
    """Split file content into lines.

    Splits on ``\\n`` only so that ``join_lines(split_lines(c)) == c`` holds,
    including a trailing newline (kept as a final empty line).
    """
    return tuple(content.split("\n"))


def join_lines(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def _categorize(name: str, params: Optional[str]) -> FunctionCategory:
    for category, rules in CATEGORY_RULES:
        for rule in rules:
            if rule.matches(name, params):
                return category
    return FunctionCategory.OTHER


def classify_line(line: str) -> Optional[FunctionCategory]:
    """Classify a single line.

    Returns None when the line is not a def/defp declaration, otherwise the
    category of the first matching rule (OTHER when nothing matches).
    """
    match = DECLARATION_RE.match(line)
    if not match:
        return None
    return _categorize(match.group("name"), match.group("params"))


def match_section_label(line: str) -> Optional[str]:
    """Return the canonical section name if ``line`` is a section label."""
    match = SECTION_LABEL_RE.match(line)
    if not match:
        return None
    return canonical_section_name(match.group("phrase"))


def heredoc_after(line: str, open_delimiter: Optional[str] = None) -> Optional[str]:
    """Return the heredoc delimiter still open at the end of ``line``.

    ``open_delimiter`` is the delimiter open at the start of the line (None
    when the line starts in code). Comment lines never open a heredoc.
    """
    if open_delimiter is None and line.lstrip().startswith("#"):
        return None
    pos = 0
    while True:
        if open_delimiter is not None:
            end = line.find(open_delimiter, pos)
            if end < 0:
                return open_delimiter
            pos = end + len(open_delimiter)
            open_delimiter = None
            continue
        hits = [(line.find(d, pos), d) for d in HEREDOC_DELIMITERS if line.find(d, pos) >= 0]
        if not hits:
            return None
        start, open_delimiter = min(hits)
        pos = start + len(open_delimiter)


def scan_lines(lines: Sequence[str]) -> Classification:
    """Classify every declaration and label line in ``lines``.

    Lines inside a heredoc are skipped. The line that opens one is still
    classified, so `def render(assigns), do: ~H` followed by a heredoc opener
    counts as a declaration.
    """
    declarations: List[Declaration] = []
    sections: List[SectionOccurrence] = []

    open_delimiter: Optional[str] = None
    for idx, line in enumerate(lines):
        in_heredoc = open_delimiter is not None
        open_delimiter = heredoc_after(line, open_delimiter)
        if in_heredoc:
            continue

        match = DECLARATION_RE.match(line)
        if match:
            declarations.append(
                Declaration(
                    line_index=idx,
                    name=match.group("name"),
                    category=_categorize(match.group("name"), match.group("params")),
                    indentation=match.group("indent"),
                )
            )
            continue

        name = match_section_label(line)
        if name is not None:
            sections.append(
                SectionOccurrence(line_index=idx, raw_label_text=line.rstrip(), canonical_name=name)
            )

    return Classification(declarations=tuple(declarations), sections=tuple(sections))


def is_source_file(file_path: str | PurePath) -> bool:
    return PurePath(file_path).suffix in SOURCE_EXTENSIONS


def looks_like_lifecycle_module(content: str) -> bool:
    """Heuristic: does ``content`` look like a LiveView / LiveComponent module?"""
    return any(p.search(content) for p in LIFECYCLE_MODULE_PATTERNS)


def is_candidate(content: str, file_path: str | PurePath | None = None) -> bool:
    """Return True when the file should be classified at all."""
    if file_path is not None and not is_source_file(file_path):
        return False
    return looks_like_lifecycle_module(content)


def classify_source(content: str, file_path: str | PurePath | None = None) -> Classification:
    """Classify a whole file, no-op for non-candidates.

    Non-candidate files (wrong extension or not lifecycle-style) yield an
    empty Classification rather than an error.
    """
    if not is_candidate(content, file_path):
        logger.debug("Skipping non-candidate file: %s", file_path or "<content>")
        return EMPTY_CLASSIFICATION
    return scan_lines(split_lines(content))


__all__ = [
    "Declaration",
    "SectionOccurrence",
    "Classification",
    "EMPTY_CLASSIFICATION",
    "split_lines",
    "join_lines",
    "classify_line",
    "match_section_label",
    "heredoc_after",
    "scan_lines",
    "is_source_file",
    "looks_like_lifecycle_module",
    "is_candidate",
    "classify_source",
]
