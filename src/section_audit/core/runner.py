"""
Audit runner.

Finds the files to audit, runs the enabled analyzers over them and drives
``--fix``. This is the only place that reads or writes project files; the
analyzers and the section pipeline work on strings.

Files are independent, so they are processed on a thread pool. Results
are always returned in input file order.
"""
from __future__ import annotations

import concurrent.futures
import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, TypeVar

from .analyzers import Analyzer, enabled_analyzers
from .analyzers.live_view import LiveViewSectionsAnalyzer, is_web_entry_file
from .config import ConfigManager
from .sections.classifier import classify_source
from .sections.fixer import FixResult, FixStatus, fix_sections
from .sections.planner import LabelTemplate
from .sections.resolver import missing_sections
from .utils.io import read_text, write_text
from .violation import Violation

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_excluded(rel_path: str, excluded_paths: Iterable[str]) -> bool:
    """Return True if ``rel_path`` (POSIX, relative to the root) matches an exclude glob."""
    return any(fnmatch.fnmatchcase(rel_path, pattern) for pattern in excluded_paths)


def discover_files(config: Mapping[str, Any], root: Path) -> List[Path]:
    """Expand ``scan_paths`` under ``root`` and drop ``excluded_paths``.

    Returns ``root``-joined paths, sorted and de-duplicated.
    """
    root = Path(root)
    excluded = list(config.get("excluded_paths") or [])
    found: set[str] = set()
    for pattern in config.get("scan_paths") or []:
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            rel = path.relative_to(root).as_posix()
            if is_excluded(rel, excluded):
                continue
            found.add(rel)
    return [root / rel for rel in sorted(found)]


def _map_files(fn: Callable[[Path], T], files: Sequence[Path], max_workers: Optional[int]) -> List[T]:
    if len(files) <= 1:
        return [fn(f) for f in files]
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(fn, files))


def _read(path: Path) -> Optional[str]:
    try:
        return read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Skipping unreadable file %s: %s", path, exc)
        return None


def check_file(analyzers: Sequence[Analyzer], path: Path, config: Mapping[str, Any]) -> List[Violation]:
    """Run ``analyzers`` against one file. Unreadable files yield no violations."""
    content = _read(path)
    if content is None:
        return []
    violations: List[Violation] = []
    for analyzer in analyzers:
        rule_cfg = ConfigManager.get_rule(config, analyzer.name)
        violations.extend(analyzer.check(str(path), content, rule_cfg))
    return violations


def run(
    config: Mapping[str, Any],
    files: Sequence[Path],
    *,
    only: Optional[Iterable[str]] = None,
    max_workers: Optional[int] = None,
) -> List[Violation]:
    """Run the enabled analyzers over ``files`` and collect violations."""
    analyzers = enabled_analyzers(config, only)
    if not analyzers:
        logger.info("No analyzers enabled")
        return []
    workers = max_workers or config.get("max_workers") or None
    logger.debug("Checking %d file(s) with %s", len(files), ", ".join(a.name for a in analyzers))
    per_file = _map_files(lambda p: check_file(analyzers, p, config), list(files), workers)
    return [v for violations in per_file for v in violations]


@dataclass(frozen=True)
class FileFixReport:
    """Fix outcome for one file. ``written`` is True when the file was rewritten."""

    path: Path
    result: FixResult
    written: bool = False

    @property
    def changed(self) -> bool:
        return self.result.status is FixStatus.FIXED


def fix_file(
    path: Path,
    rule_cfg: Mapping[str, Any],
    *,
    force: bool = False,
    preview: bool = False,
) -> Optional[FileFixReport]:
    """Insert missing section labels into one file.

    Returns None for files the LiveView analyzer would not audit (or that
    cannot be read) and for files with nothing to add.
    """
    if is_web_entry_file(str(path)):
        return None
    content = _read(path)
    if content is None:
        return None

    classification = classify_source(content, path)
    sections = missing_sections(classification, rule_cfg.get("required") or [], force=force)
    if not sections:
        return None

    result = fix_sections(
        content,
        sections,
        force=force,
        preview=preview,
        file_path=str(path),
        template=LabelTemplate.from_config(rule_cfg.get("label_template")),
    )
    written = False
    if result.status is FixStatus.FIXED and result.text is not None and result.text != content:
        write_text(path, result.text)
        written = True
    return FileFixReport(path=path, result=result, written=written)


def fix_files(
    config: Mapping[str, Any],
    files: Sequence[Path],
    *,
    force: bool = False,
    preview: bool = False,
    max_workers: Optional[int] = None,
) -> List[FileFixReport]:
    """Fix (or preview) missing section labels across ``files``."""
    rule_cfg = ConfigManager.get_rule(config, LiveViewSectionsAnalyzer.name)
    if rule_cfg.get("enabled", True) is False:
        logger.info("%s is disabled; nothing to fix", LiveViewSectionsAnalyzer.name)
        return []
    workers = max_workers or config.get("max_workers") or None
    reports = _map_files(
        lambda p: fix_file(p, rule_cfg, force=force, preview=preview),
        list(files),
        workers,
    )
    return [r for r in reports if r is not None]


__all__ = [
    "is_excluded",
    "discover_files",
    "check_file",
    "run",
    "FileFixReport",
    "fix_file",
    "fix_files",
]
