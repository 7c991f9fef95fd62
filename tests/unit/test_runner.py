"""Tests for file discovery, the audit run and --fix over a project tree."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from section_audit.core.analyzers import enabled_analyzers
from section_audit.core.config import ConfigManager
from section_audit.core.runner import check_file, discover_files, fix_file, fix_files, is_excluded, run
from section_audit.core.sections.fixer import FixStatus
from section_audit.core.violation import parse_missing_sections


@pytest.fixture
def config(live_project: Path) -> dict:
    return ConfigManager(live_project).load_config()


def _rel(paths, root: Path) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


def test_is_excluded() -> None:
    assert is_excluded("deps/phoenix/lib/a.ex", ["deps/**"])
    assert not is_excluded("lib/deps/a.ex", ["deps/**"])


def test_discover_files_uses_scan_and_exclude_globs(live_project: Path, config: dict) -> None:
    files = discover_files(config, live_project)

    assert _rel(files, live_project) == [
        "lib/demo_web.ex",
        "lib/demo_web/live/counter_live.ex",
        "lib/demo_web/live/labeled_live.ex",
        "lib/demo_web/live/render_only_live.ex",
    ]


def test_excluded_paths_apply_inside_scan_paths(live_project: Path, config: dict) -> None:
    config["scan_paths"] = ["**/*.ex"]

    rels = _rel(discover_files(config, live_project), live_project)

    assert "deps/phoenix/lib/vendored_live.ex" not in rels
    assert "lib/demo_web/live/counter_live.ex" in rels


def test_run_reports_violations_in_file_order(live_project: Path, config: dict) -> None:
    files = discover_files(config, live_project)

    violations = run(config, files, max_workers=2)

    assert [Path(v.file).name for v in violations] == ["counter_live.ex", "render_only_live.ex"]
    assert parse_missing_sections(violations[1].message) == ["RENDERING"]


def test_run_with_rule_disabled(live_project: Path, config: dict) -> None:
    config["rules"]["live_view_sections"]["enabled"] = False

    assert run(config, discover_files(config, live_project)) == []


def test_unreadable_file_is_skipped_with_warning(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    bad = tmp_path / "broken_live.ex"
    bad.write_bytes(b"\xff\xfe use Phoenix.LiveView")
    cfg = ConfigManager(tmp_path).load_config()

    with caplog.at_level(logging.WARNING, logger="section_audit.core.runner"):
        assert check_file(enabled_analyzers(cfg), bad, cfg) == []

    assert "Skipping unreadable file" in caplog.text


class TestFixFiles:
    def test_fix_writes_missing_labels(self, live_project: Path, config: dict) -> None:
        files = discover_files(config, live_project)
        labeled = live_project / "lib/demo_web/live/labeled_live.ex"
        labeled_before = labeled.read_text(encoding="utf-8")

        reports = fix_files(config, files)

        assert [r.path.name for r in reports] == ["counter_live.ex", "render_only_live.ex"]
        assert all(r.written and r.changed for r in reports)
        assert reports[0].result.added_sections == [
            "LIFECYCLE CALLBACKS",
            "EVENT HANDLERS",
            "RENDERING",
        ]
        assert labeled.read_text(encoding="utf-8") == labeled_before
        assert run(config, files) == []

    def test_second_fix_is_a_no_op(self, live_project: Path, config: dict) -> None:
        files = discover_files(config, live_project)
        fix_files(config, files)

        assert fix_files(config, files) == []

    def test_preview_does_not_write(self, live_project: Path, config: dict) -> None:
        counter = live_project / "lib/demo_web/live/counter_live.ex"
        before = counter.read_text(encoding="utf-8")

        reports = fix_files(config, [counter], preview=True)

        assert reports[0].result.status is FixStatus.PREVIEW
        assert not reports[0].written
        assert "+ 4:" in reports[0].result.text
        assert counter.read_text(encoding="utf-8") == before

    def test_force_rewrites_existing_labels(self, live_project: Path, config: dict) -> None:
        labeled = live_project / "lib/demo_web/live/labeled_live.ex"

        report = fix_file(labeled, ConfigManager.get_rule(config, "live_view_sections"), force=True)

        assert report is not None and report.written
        assert "  # ---------- EVENT HANDLERS ----------" in labeled.read_text(encoding="utf-8")

    def test_web_entry_file_is_never_fixed(self, live_project: Path, config: dict) -> None:
        rule = ConfigManager.get_rule(config, "live_view_sections")
        assert fix_file(live_project / "lib/demo_web.ex", rule, force=True) is None

    def test_disabled_rule_fixes_nothing(self, live_project: Path, config: dict) -> None:
        config["rules"]["live_view_sections"]["enabled"] = False
        assert fix_files(config, discover_files(config, live_project)) == []

    def test_configured_label_template_is_used(self, live_project: Path, config: dict) -> None:
        config["rules"]["live_view_sections"]["label_template"] = {"prefix": "", "suffix": ""}
        render_only = live_project / "lib/demo_web/live/render_only_live.ex"

        fix_files(config, [render_only])

        assert "\n  # RENDERING\n  def render(assigns) do" in render_only.read_text(encoding="utf-8")
