"""
Insertion planning.

For each section to add, find the first declaration of its category and
plan a label line directly above it, indented like that declaration.
Label lines are rendered from a Jinja2 template so projects can change the
decoration without touching code.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ..exceptions import ConfigError
from .classifier import Classification, match_section_label, scan_lines
from .patterns import canonical_section_name, categories_for_section

logger = logging.getLogger(__name__)

DEFAULT_LABEL_TEMPLATE = (
    "{{ indent }}{{ marker }}"
    "{% if prefix %} {{ prefix }}{% endif %}"
    " {{ name }}"
    "{% if suffix %} {{ suffix }}{% endif %}"
)

_INDENT_RE = re.compile(r"^[ \t]*")

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=False)


@lru_cache(maxsize=16)
def _compile(template: str) -> Template:
    return _env.from_string(template)


@dataclass(frozen=True)
class LabelTemplate:
    """How a section label line is rendered.

    Attributes:
        template: Jinja2 template; receives indent, marker, prefix, name, suffix
        marker: Comment marker of the host language
        prefix: Decoration before the name
        suffix: Decoration after the name
    """

    template: str = DEFAULT_LABEL_TEMPLATE
    marker: str = "#"
    prefix: str = "----------"
    suffix: str = "----------"

    @classmethod
    def from_config(cls, cfg: Optional[Mapping[str, Any]]) -> "LabelTemplate":
        """Build from the ``label_template`` config block (missing keys keep defaults)."""
        if not cfg:
            return cls()
        defaults = cls()
        return cls(
            template=str(cfg.get("template") or defaults.template),
            marker=str(cfg.get("marker", defaults.marker)),
            prefix=str(cfg.get("prefix", defaults.prefix) or ""),
            suffix=str(cfg.get("suffix", defaults.suffix) or ""),
        )

    def render(self, name: str, indentation: str = "") -> str:
        """Render the label line for ``name``.

        Raises:
            ConfigError: If the template is invalid or produces a line that
                would not be recognised as the same section label again.
        """
        try:
            line = _compile(self.template).render(
                indent=indentation,
                marker=self.marker,
                prefix=self.prefix,
                name=name,
                suffix=self.suffix,
            )
        except TemplateError as exc:
            raise ConfigError(
                f"Invalid label template: {exc}", context={"template": self.template}
            ) from exc

        line = line.rstrip()
        if "\n" in line or match_section_label(line) != name:
            raise ConfigError(
                f"Label template renders {line!r}, which is not a valid label for {name!r}",
                context={"template": self.template, "section": name},
            )
        return line


DEFAULT_TEMPLATE = LabelTemplate()


@dataclass(frozen=True)
class InsertionPlan:
    """One label to insert.

    ``line_index`` is the 0-based index of the first declaration of the
    section's category; the label goes immediately before that line.
    ``order`` is the position of the section in the request and breaks ties
    between plans with the same ``line_index``.
    """

    line_index: int
    section_name: str
    indentation: str
    rendered_label_line: str
    order: int = 0


def leading_whitespace(line: str) -> str:
    match = _INDENT_RE.match(line)
    return match.group(0) if match else ""


def plan_insertions(
    lines: Sequence[str],
    section_names: Iterable[str],
    *,
    template: Optional[LabelTemplate] = None,
    classification: Optional[Classification] = None,
) -> List[InsertionPlan]:
    """Plan label insertions for ``section_names``.

    Sections with no declaration of any category they label are dropped:
    a label is never inserted for a category the file does not contain.
    In CRLF files the label line keeps the carriage return of its target.

    Args:
        lines: Source lines
        section_names: Sections to insert, in request order
        template: Label rendering (default: dashed ``# ---------- NAME ----------``)
        classification: Pre-computed ``scan_lines(lines)``

    Returns:
        Plans sorted by (line_index, request order)
    """
    tmpl = template or DEFAULT_TEMPLATE
    scanned = classification if classification is not None else scan_lines(lines)

    plans: List[InsertionPlan] = []
    seen: set[str] = set()
    for order, raw in enumerate(section_names):
        name = canonical_section_name(raw)
        if name in seen:
            continue
        seen.add(name)

        decl = scanned.first_declaration(*categories_for_section(name))
        if decl is None:
            logger.debug("No declaration labelled by %s found; not inserting it", name)
            continue

        target = lines[decl.line_index]
        indentation = leading_whitespace(target)
        label = tmpl.render(name, indentation)
        if target.endswith("\r"):
            # CRLF file: keep the line ending of the surrounding code
            label += "\r"
        plans.append(
            InsertionPlan(
                line_index=decl.line_index,
                section_name=name,
                indentation=indentation,
                rendered_label_line=label,
                order=order,
            )
        )

    plans.sort(key=lambda p: (p.line_index, p.order))
    return plans


__all__ = [
    "DEFAULT_LABEL_TEMPLATE",
    "DEFAULT_TEMPLATE",
    "LabelTemplate",
    "InsertionPlan",
    "leading_whitespace",
    "plan_insertions",
]
