"""
Patch application and preview rendering.

Both modes consume the same plan list, so a preview always shows exactly
where ``apply_insertions_descending`` would put each label.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from ..exceptions import PlanInvariantError
from .classifier import SectionOccurrence
from .planner import InsertionPlan

PREVIEW_HEADER = "Preview changes:"
PREVIEW_CONTEXT_LINES = 3


def _sorted(plans: Sequence[InsertionPlan]) -> List[InsertionPlan]:
    return sorted(plans, key=lambda p: (p.line_index, p.order))


def _check_bounds(lines: Sequence[str], plans: Sequence[InsertionPlan]) -> None:
    count = len(lines)
    for plan in plans:
        if not 0 <= plan.line_index <= count:
            raise PlanInvariantError(
                f"Insertion plan for {plan.section_name!r} targets line index "
                f"{plan.line_index}, outside 0..{count}",
                line_index=plan.line_index,
                line_count=count,
            )


def apply_insertions_descending(
    lines: Sequence[str],
    plans: Sequence[InsertionPlan],
) -> List[str]:
    """Insert every planned label into a copy of ``lines``.

    Plans are applied from the highest ``line_index`` to the lowest. A
    splice at index ``i`` only shifts lines at ``i`` and above, so every
    plan still waiting to be applied (all at indices <= ``i``) keeps
    pointing at the line it was planned against. Plans sharing an index
    end up in request order.

    Raises:
        PlanInvariantError: If a plan index lies outside ``0..len(lines)``.
    """
    _check_bounds(lines, plans)
    result = list(lines)
    for plan in reversed(_sorted(plans)):
        result[plan.line_index:plan.line_index] = [plan.rendered_label_line]
    return result


def inserted_line_numbers(plans: Sequence[InsertionPlan]) -> List[int]:
    """1-based line numbers the labels will have after insertion, in plan order."""
    return [plan.line_index + offset + 1 for offset, plan in enumerate(_sorted(plans))]


def _numbered(
    lines: Sequence[str],
    start: int,
    stop: int,
    source_numbers: Optional[Sequence[int]],
) -> List[str]:
    out: List[str] = []
    for idx in range(start, stop):
        number = source_numbers[idx] if source_numbers is not None else idx + 1
        text = lines[idx].rstrip("\r")
        out.append(f"  {number}: {text}")
    return out


def _insertion_block(
    lines: Sequence[str],
    plan: InsertionPlan,
    new_line_number: int,
    file_path: Optional[str],
    context: int,
    source_numbers: Optional[Sequence[int]],
) -> List[str]:
    idx = plan.line_index
    out = [f"\n## Insert {plan.section_name} at line {new_line_number}:"]
    out.extend(_numbered(lines, max(0, idx - context), idx, source_numbers))
    label = plan.rendered_label_line.rstrip("\r")
    out.append(f"+ {new_line_number}: {label}")
    if file_path:
        out.append(f"  {file_path}:{new_line_number}")
    out.extend(_numbered(lines, idx, min(len(lines), idx + context), source_numbers))
    return out


def render_preview(
    lines: Sequence[str],
    plans: Sequence[InsertionPlan],
    *,
    file_path: Optional[str] = None,
    context: int = PREVIEW_CONTEXT_LINES,
    removed: Sequence[SectionOccurrence] = (),
    source_numbers: Optional[Sequence[int]] = None,
) -> str:
    """Render a line-numbered, diff-style preview of ``plans``.

    Context lines come from ``lines`` (the text the plans were computed
    against) with their original 1-based numbers; each added label is shown
    with the line number it will have once all insertions are applied.
    ``removed`` labels (force mode) are listed first with their numbers in
    the file as it was read. When ``lines`` is that file with the removed
    labels already taken out, ``source_numbers[i]`` gives the on-disk
    1-based number of ``lines[i]`` so context lines match the file too.

    Example output::

        Preview changes:

        ## Insert RENDERING at line 9:
          6:   end
          7:
          8:   @impl true
        + 9:   # ---------- RENDERING ----------
          9:   def render(assigns) do
    """
    _check_bounds(lines, plans)
    parts: List[str] = [PREVIEW_HEADER]
    if file_path:
        parts.append(f"File: {file_path}")

    for occ in sorted(removed, key=lambda o: o.line_index):
        parts.append(f"\n## Remove {occ.canonical_name} at line {occ.line_index + 1}:")
        parts.append(f"- {occ.line_index + 1}: {occ.raw_label_text}")

    ordered = _sorted(plans)
    for plan, new_line_number in zip(ordered, inserted_line_numbers(ordered)):
        parts.extend(
            _insertion_block(lines, plan, new_line_number, file_path, context, source_numbers)
        )

    return "\n".join(parts)


__all__ = [
    "PREVIEW_HEADER",
    "PREVIEW_CONTEXT_LINES",
    "apply_insertions_descending",
    "inserted_line_numbers",
    "render_preview",
]
