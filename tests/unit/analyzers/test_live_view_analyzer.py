"""Tests for LiveViewSectionsAnalyzer."""
from __future__ import annotations

import pytest

from section_audit.core.analyzers import ANALYZERS, LiveViewSectionsAnalyzer, enabled_analyzers, get_analyzer
from section_audit.core.analyzers.live_view import (
    COMPONENT_STRUCTURE_TITLE,
    EXTERNAL_TEMPLATES_TITLE,
    component_issues,
    has_documented_props,
    is_web_entry_file,
    uses_external_templates,
)
from section_audit.core.violation import MISSING_SECTIONS_TITLE, Severity, parse_missing_sections

LIVE_PATH = "lib/demo_web/live/counter_live.ex"


@pytest.fixture
def analyzer() -> LiveViewSectionsAnalyzer:
    return LiveViewSectionsAnalyzer()


@pytest.fixture
def rule_cfg(all_sections) -> dict:
    return {
        "required": all_sections,
        "violation_level": "warning",
        "check_external_templates": True,
        "check_component_structure": True,
    }


class TestSectionLabels:
    def test_one_aggregated_violation_for_missing_sections(self, analyzer, rule_cfg, fixture_text) -> None:
        violations = analyzer.check(LIVE_PATH, fixture_text("missing_sections_live.ex"), rule_cfg)

        assert len(violations) == 1
        v = violations[0]
        assert v.message == (
            "LiveView missing labeled sections\n"
            '   Missing sections: ["LIFECYCLE CALLBACKS", "EVENT HANDLERS", "RENDERING"]'
        )
        assert v.title == MISSING_SECTIONS_TITLE
        assert v.file == LIVE_PATH
        assert v.line == 4
        assert v.rule == "live_view_sections"
        assert v.severity is Severity.WARNING
        assert parse_missing_sections(v.message) == rule_cfg["required"]

    def test_only_missing_sections_are_listed(self, analyzer, rule_cfg, fixture_text) -> None:
        violations = analyzer.check(LIVE_PATH, fixture_text("partial_sections_live.ex"), rule_cfg)

        assert parse_missing_sections(violations[0].message) == ["EVENT HANDLERS", "RENDERING"]
        assert violations[0].line == 10

    def test_labeled_module_has_no_violations(self, analyzer, rule_cfg, fixture_text) -> None:
        assert analyzer.check(LIVE_PATH, fixture_text("labeled_live.ex"), rule_cfg) == []

    def test_sections_for_absent_categories_are_not_required(self, analyzer, rule_cfg, fixture_text) -> None:
        violations = analyzer.check(LIVE_PATH, fixture_text("render_only_live.ex"), rule_cfg)

        assert parse_missing_sections(violations[0].message) == ["RENDERING"]

    def test_prose_mentions_do_not_satisfy_requirements(self, analyzer, rule_cfg, fixture_text) -> None:
        violations = analyzer.check(LIVE_PATH, fixture_text("false_positive_live.ex"), rule_cfg)

        assert len(violations) == 1
        assert sorted(parse_missing_sections(violations[0].message)) == sorted(rule_cfg["required"])

    def test_info_callbacks_require_event_handlers_label(self, analyzer, rule_cfg, fixture_text) -> None:
        violations = analyzer.check(LIVE_PATH, fixture_text("nested_live.ex"), rule_cfg)

        missing = [v for v in violations if v.title == MISSING_SECTIONS_TITLE]
        assert parse_missing_sections(missing[0].message) == rule_cfg["required"]
        assert missing[0].line == 7

    def test_labels_inside_heredocs_do_not_count(self, analyzer, rule_cfg, fixture_text) -> None:
        violations = analyzer.check(LIVE_PATH, fixture_text("heredoc_docs_live.ex"), rule_cfg)

        missing = [v for v in violations if v.title == MISSING_SECTIONS_TITLE]
        assert parse_missing_sections(missing[0].message) == rule_cfg["required"]
        assert missing[0].line == 16

    def test_error_level_from_config(self, analyzer, rule_cfg, fixture_text) -> None:
        rule_cfg["violation_level"] = "error"

        violations = analyzer.check(LIVE_PATH, fixture_text("missing_sections_live.ex"), rule_cfg)

        assert violations[0].is_error

    def test_empty_required_list_disables_the_label_check(self, analyzer, rule_cfg, fixture_text) -> None:
        rule_cfg["required"] = []
        assert analyzer.check(LIVE_PATH, fixture_text("missing_sections_live.ex"), rule_cfg) == []

    def test_non_candidates_are_skipped(self, analyzer, rule_cfg, fixture_text) -> None:
        content = fixture_text("missing_sections_live.ex")

        assert analyzer.check("lib/demo_web.ex", content, rule_cfg) == []
        assert analyzer.check("README.md", content, rule_cfg) == []
        assert analyzer.check("lib/demo/math.ex", "defmodule Demo.Math do\nend\n", rule_cfg) == []


class TestStructureChecks:
    def test_stateful_component_issues(self, analyzer, rule_cfg, fixture_text) -> None:
        content = fixture_text("stateful_component.ex")

        violations = analyzer.check("lib/demo_web/components/modal_component.ex", content, rule_cfg)
        titles = [v.title for v in violations]

        assert titles.count(MISSING_SECTIONS_TITLE) == 1
        assert titles.count(EXTERNAL_TEMPLATES_TITLE) == 1
        assert titles.count(COMPONENT_STRUCTURE_TITLE) == 3
        assert {v.details for v in violations if v.title == COMPONENT_STRUCTURE_TITLE} == {
            "Component doesn't use embedded HEEx templates",
            "Stateful component missing @impl true def update callback",
            "Component props are not documented with @moduledoc or @doc",
        }

    def test_documented_component_is_clean(self, analyzer, rule_cfg, fixture_text) -> None:
        content = fixture_text("documented_component.ex")

        assert analyzer.check("lib/demo_web/components/card_component.ex", content, rule_cfg) == []

    def test_structure_checks_can_be_disabled(self, analyzer, rule_cfg, fixture_text) -> None:
        rule_cfg.update(required=[], check_external_templates=False, check_component_structure=False)

        assert analyzer.check("lib/modal_component.ex", fixture_text("stateful_component.ex"), rule_cfg) == []

    @pytest.mark.parametrize(
        "snippet",
        [
            'Phoenix.View.render(DemoWeb.PageView, "index.html", assigns)',
            'render(conn, "index.html")',
            "render(socket, :index)",
            'render_template("index.html", assigns)',
        ],
    )
    def test_external_template_patterns(self, snippet: str) -> None:
        assert uses_external_templates(snippet)

    def test_embedded_heex_is_not_an_external_template(self, fixture_text) -> None:
        assert not uses_external_templates(fixture_text("missing_sections_live.ex"))

    def test_function_component_needs_no_update_callback(self) -> None:
        content = (
            "defmodule DemoWeb.BadgeComponent do\n"
            "  @moduledoc \"\"\"\n  Badge.\n\n  ## Props\n  \"\"\"\n"
            "  use Phoenix.LiveComponent\n\n"
            "  def render(assigns) do\n    ~H\"\"\"\n    <span><%= @label %></span>\n    \"\"\"\n  end\nend\n"
        )
        assert component_issues(content) == []

    def test_prop_tuples_count_as_documentation(self) -> None:
        assert has_documented_props('@doc "Props: {:prop, :title}"')
        assert not has_documented_props("@moduledoc false")

    def test_live_views_have_no_component_issues(self, fixture_text) -> None:
        assert component_issues(fixture_text("missing_sections_live.ex")) == []


@pytest.mark.parametrize(
    "path,expected",
    [
        ("lib/demo_web.ex", True),
        ("/abs/lib/my_app_web.ex", True),
        ("lib/demo_web/live/page_live.ex", False),
        ("lib/DemoWeb.ex", False),
    ],
)
def test_is_web_entry_file(path: str, expected: bool) -> None:
    assert is_web_entry_file(path) is expected


class TestRegistry:
    def test_registry_contains_live_view_rule(self) -> None:
        assert isinstance(ANALYZERS["live_view_sections"], LiveViewSectionsAnalyzer)
        assert get_analyzer("live_view_sections") is ANALYZERS["live_view_sections"]

    def test_unknown_rule_raises(self) -> None:
        with pytest.raises(KeyError, match="Unknown rule"):
            get_analyzer("nope")

    def test_disabled_rules_are_filtered(self) -> None:
        config = {"rules": {"live_view_sections": {"enabled": False}}}
        assert enabled_analyzers(config) == []
        assert [a.name for a in enabled_analyzers({"rules": {}})] == ["live_view_sections"]

    def test_only_filter(self) -> None:
        assert [a.name for a in enabled_analyzers({}, only=["live_view_sections"])] == ["live_view_sections"]
