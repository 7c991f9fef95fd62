"""
Requirement resolution: which configured sections does a file actually need?

A required section is only demanded when the file declares at least one
function of its category. Both functions are pure.
"""
from __future__ import annotations

from typing import Iterable, List

from .classifier import Classification
from .patterns import FunctionCategory, canonical_section_name, categories_for_section


def applicable_sections(
    observed_categories: Iterable[FunctionCategory],
    required_names: Iterable[str],
) -> List[str]:
    """Return the required section names whose category is present.

    Names are canonicalised, de-duplicated and kept in configured order.
    A section applies when any category it labels is observed; unknown
    names label nothing and are never applicable.

    Example:
        >>> applicable_sections({FunctionCategory.RENDERING}, ["EVENT HANDLERS", "rendering"])
        ['RENDERING']
    """
    observed = set(observed_categories)
    result: List[str] = []
    for raw in required_names:
        name = canonical_section_name(raw)
        if not observed.intersection(categories_for_section(name)):
            continue
        if name not in result:
            result.append(name)
    return result


def missing_sections(
    classification: Classification,
    required_names: Iterable[str],
    *,
    force: bool = False,
) -> List[str]:
    """Return the applicable sections that should be (re)inserted.

    Without ``force`` this is applicable minus already-present labels; an
    empty list means there is nothing to do. With ``force`` the full
    applicable set is returned regardless of existing labels.
    """
    applicable = applicable_sections(classification.categories, required_names)
    if force:
        return applicable
    present = set(classification.section_names)
    return [name for name in applicable if name not in present]


__all__ = [
    "applicable_sections",
    "missing_sections",
]
