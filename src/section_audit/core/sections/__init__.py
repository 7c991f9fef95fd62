"""
Section labeling pipeline.

Classifier -> Requirement Resolver -> Insertion Planner -> Patch Applier:

1. patterns.py / classifier.py:
   - Categorise def/defp declarations (lifecycle, events, info, rendering),
     skipping heredoc bodies
   - Find existing `# SECTION NAME` labels
2. resolver.py:
   - Decide which required sections apply to a file and which are missing
3. planner.py:
   - Locate the first declaration of each category, render the label line
4. applier.py / fixer.py:
   - Splice labels in bottom-up, or render a diff-style preview
"""
from __future__ import annotations

from .patterns import (
    FunctionCategory,
    DetectionRule,
    CATEGORY_RULES,
    SECTION_CATEGORIES,
    canonical_section_name,
    categories_for_section,
    category_for_section,
    section_for_category,
)
from .classifier import (
    Classification,
    Declaration,
    SectionOccurrence,
    classify_line,
    classify_source,
    heredoc_after,
    is_candidate,
    match_section_label,
    scan_lines,
    split_lines,
    join_lines,
)
from .resolver import applicable_sections, missing_sections
from .planner import InsertionPlan, LabelTemplate, plan_insertions
from .applier import apply_insertions_descending, render_preview
from .fixer import FixResult, FixStatus, fix_sections

__all__ = [
    # Patterns
    "FunctionCategory",
    "DetectionRule",
    "CATEGORY_RULES",
    "SECTION_CATEGORIES",
    "canonical_section_name",
    "categories_for_section",
    "category_for_section",
    "section_for_category",
    # Classifier
    "Classification",
    "Declaration",
    "SectionOccurrence",
    "classify_line",
    "classify_source",
    "heredoc_after",
    "is_candidate",
    "match_section_label",
    "scan_lines",
    "split_lines",
    "join_lines",
    # Resolver
    "applicable_sections",
    "missing_sections",
    # Planner
    "InsertionPlan",
    "LabelTemplate",
    "plan_insertions",
    # Applier
    "apply_insertions_descending",
    "render_preview",
    # Fixer
    "FixResult",
    "FixStatus",
    "fix_sections",
]
