"""
Fixer entry point: insert missing section labels into file content.

``fix_sections`` never performs I/O and never raises for ordinary input.
Outcomes are reported as a FixResult:

- FIXED:          ``text`` is the new file content
- PREVIEW:        ``text`` is a diff-style preview (or a "no changes" note)
- NOTHING_TO_FIX: every requested, applicable section already exists

Force mode recreates labels in place: existing labels for the requested
sections are removed and re-inserted directly above the first declaration
of their category, so a file never ends up with two labels for one
section.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .applier import apply_insertions_descending, render_preview
from .classifier import SectionOccurrence, join_lines, scan_lines, split_lines
from .patterns import canonical_section_name
from .planner import InsertionPlan, LabelTemplate, plan_insertions
from .resolver import applicable_sections

logger = logging.getLogger(__name__)

NOTHING_TO_FIX_MESSAGE = "All required sections already exist. Use --force to recreate them."
NO_CHANGES_PREVIEW_MESSAGE = "No changes needed - all required sections already exist."


class FixStatus(str, Enum):
    FIXED = "fixed"
    PREVIEW = "preview"
    NOTHING_TO_FIX = "nothing_to_fix"


@dataclass(frozen=True)
class FixResult:
    """Outcome of a fix request."""

    status: FixStatus
    text: Optional[str] = None
    message: str = ""
    plans: Tuple[InsertionPlan, ...] = ()
    removed: Tuple[SectionOccurrence, ...] = ()

    @property
    def ok(self) -> bool:
        return self.status is not FixStatus.NOTHING_TO_FIX

    @property
    def added_sections(self) -> List[str]:
        return [p.section_name for p in self.plans]


def _dedupe(names: Iterable[str]) -> List[str]:
    out: List[str] = []
    for raw in names:
        name = canonical_section_name(raw)
        if name and name not in out:
            out.append(name)
    return out


def label_drop_indices(
    lines: Sequence[str],
    occurrences: Sequence[SectionOccurrence],
) -> Set[int]:
    """Return the indices removed along with the given label lines.

    A blank line directly after a removed label is dropped too when the
    label was already preceded by a blank line, so removing
    ``blank / label / blank`` leaves a single blank line.
    """
    drop: Set[int] = set()
    for occ in occurrences:
        idx = occ.line_index
        drop.add(idx)
        prev_blank = idx == 0 or not lines[idx - 1].strip()
        nxt = idx + 1
        if prev_blank and nxt < len(lines) and not lines[nxt].strip():
            drop.add(nxt)
    return drop


def strip_section_labels(
    lines: Sequence[str],
    occurrences: Sequence[SectionOccurrence],
) -> List[str]:
    """Return ``lines`` without the given labels (see ``label_drop_indices``)."""
    drop = label_drop_indices(lines, occurrences)
    return [line for i, line in enumerate(lines) if i not in drop]


def fix_sections(
    content: str,
    section_names: Iterable[str],
    *,
    force: bool = False,
    preview: bool = False,
    file_path: Optional[str] = None,
    template: Optional[LabelTemplate] = None,
) -> FixResult:
    """Insert the missing ``section_names`` labels into ``content``.

    Args:
        content: File content
        section_names: Sections the file should carry
        force: Recreate requested labels even when they already exist
        preview: Return a preview instead of the fixed content
        file_path: Only used to annotate the preview
        template: Label rendering (default dashed label)

    Returns:
        FixResult; see module docstring for the variants.
    """
    original = split_lines(content)
    scanned = scan_lines(original)
    requested = _dedupe(section_names)

    removed: Tuple[SectionOccurrence, ...] = ()
    source_numbers: Optional[List[int]] = None
    if force:
        targets = applicable_sections(scanned.categories, requested)
        removed = tuple(o for o in scanned.sections if o.canonical_name in targets)
        base: Sequence[str] = original
        if removed:
            drop = label_drop_indices(original, removed)
            base = [line for i, line in enumerate(original) if i not in drop]
            # on-disk 1-based number of every kept line, for the preview
            source_numbers = [i + 1 for i in range(len(original)) if i not in drop]
        plans = plan_insertions(base, targets, template=template)
    else:
        present = set(scanned.section_names)
        targets = [name for name in requested if name not in present]
        base = original
        plans = plan_insertions(base, targets, template=template, classification=scanned)

    if not plans:
        logger.debug("Nothing to fix for %s", file_path or "<content>")
        if preview:
            return FixResult(
                status=FixStatus.PREVIEW,
                text=NO_CHANGES_PREVIEW_MESSAGE,
                message=NO_CHANGES_PREVIEW_MESSAGE,
            )
        return FixResult(status=FixStatus.NOTHING_TO_FIX, message=NOTHING_TO_FIX_MESSAGE)

    added = ", ".join(p.section_name for p in plans)
    if preview:
        return FixResult(
            status=FixStatus.PREVIEW,
            text=render_preview(
                base,
                plans,
                file_path=file_path,
                removed=removed,
                source_numbers=source_numbers,
            ),
            message=f"Would add sections: {added}",
            plans=tuple(plans),
            removed=removed,
        )

    fixed = apply_insertions_descending(base, plans)
    logger.info("Added sections to %s: %s", file_path or "<content>", added)
    return FixResult(
        status=FixStatus.FIXED,
        text=join_lines(fixed),
        message=f"Added sections: {added}",
        plans=tuple(plans),
        removed=removed,
    )


__all__ = [
    "NOTHING_TO_FIX_MESSAGE",
    "NO_CHANGES_PREVIEW_MESSAGE",
    "FixStatus",
    "FixResult",
    "label_drop_indices",
    "strip_section_labels",
    "fix_sections",
]
