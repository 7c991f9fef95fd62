"""
section-audit audit command.

SUMMARY: Check LiveView modules for section labels, optionally fixing them
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from section_audit.cli import (
    OutputFormatter,
    add_force_flag,
    format_summary,
    format_violation,
    add_standard_flags,
    get_repo_root,
    load_config,
    setup_logging,
)
from section_audit.core.analyzers import ANALYZERS
from section_audit.core.exceptions import SectionAuditError
from section_audit.core.runner import FileFixReport, discover_files, fix_files, run
from section_audit.core.sections.fixer import FixStatus
from section_audit.core.violation import Violation, has_errors, violation_summary

SUMMARY = "Check LiveView modules for section labels, optionally fixing them"

SOURCE_GLOBS = ["**/*.ex", "**/*.exs"]

logger = logging.getLogger(__name__)


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to audit (default: configured scan_paths)",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Insert missing section labels",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the labels --fix would insert without writing files",
    )
    add_force_flag(parser, help_text="Recreate section labels even if they already exist")
    parser.add_argument(
        "--only",
        type=str,
        help="Comma-separated rules to run (e.g. live_view_sections)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when any error-level violation is found",
    )
    add_standard_flags(parser)


def parse_only(value: Optional[str]) -> Optional[List[str]]:
    """Split ``--only`` into rule names; unknown names raise ValueError."""
    if not value:
        return None
    names = [n.strip() for n in value.split(",") if n.strip()]
    unknown = [n for n in names if n not in ANALYZERS]
    if unknown:
        raise ValueError(
            f"Unknown rule(s): {', '.join(unknown)} (known rules: {', '.join(sorted(ANALYZERS))})"
        )
    return names


def resolve_files(paths: Sequence[str], config: Mapping[str, Any], root: Path) -> List[Path]:
    """Expand CLI paths; with none given, fall back to configured scan_paths."""
    if not paths:
        return discover_files(config, root)

    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            dir_cfg = {"scan_paths": SOURCE_GLOBS, "excluded_paths": config.get("excluded_paths") or []}
            candidates = discover_files(dir_cfg, path)
        else:
            candidates = [path]
        for candidate in candidates:
            if candidate not in files:
                files.append(candidate)
    return files


def format_fix_report(report: FileFixReport) -> str:
    if report.result.status is FixStatus.PREVIEW:
        return report.result.text or ""
    return f"✓ {report.path}: {report.result.message}"


def _text_output(
    formatter: OutputFormatter,
    violations: Iterable[Violation],
    reports: Sequence[FileFixReport],
) -> None:
    for report in reports:
        formatter.text(format_fix_report(report))
    items = list(violations)
    for v in items:
        formatter.text(format_violation(v))
    formatter.text(format_summary(violation_summary(items)))


def _json_payload(violations: Sequence[Violation], reports: Sequence[FileFixReport]) -> Dict[str, Any]:
    return {
        "violations": [v.to_dict() for v in violations],
        "summary": violation_summary(violations),
        "fixes": [
            {
                "file": str(r.path),
                "status": r.result.status.value,
                "sections": r.result.added_sections,
                "written": r.written,
                "preview": r.result.text if r.result.status is FixStatus.PREVIEW else None,
            }
            for r in reports
        ],
    }


def main(args: argparse.Namespace) -> int:
    """Run the audit, applying or previewing fixes first when requested."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    setup_logging(args)

    try:
        only = parse_only(args.only)
        config = load_config(args)
        files = resolve_files(args.paths, config, get_repo_root(args))
        logger.info("Auditing %d file(s)", len(files))

        reports: List[FileFixReport] = []
        if args.fix or args.preview:
            reports = fix_files(config, files, force=args.force, preview=args.preview)
        violations = run(config, files, only=only)
    except SectionAuditError as e:
        formatter.error(e, error_code=e.__class__.__name__)
        return 1
    except (ValueError, OSError) as e:
        formatter.error(e, error_code="error")
        return 1

    if formatter.json_mode:
        formatter.json_output(_json_payload(violations, reports))
    else:
        _text_output(formatter, violations, reports)

    if args.strict and has_errors(violations):
        return 1
    return 0
