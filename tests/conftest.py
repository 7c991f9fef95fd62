import logging
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"
FIXTURES_DIR = TESTS_ROOT / "fixtures"

# Make src/ importable as 'section_audit' without an install
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from section_audit.core.utils.stdlib_logging import reset_stdlib_logging_for_tests  # noqa: E402

ALL_SECTIONS = ["LIFECYCLE CALLBACKS", "EVENT HANDLERS", "RENDERING"]


@pytest.fixture
def fixture_text():
    """Return the content of a file under tests/fixtures."""

    def _read(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def all_sections() -> list[str]:
    return list(ALL_SECTIONS)


@pytest.fixture
def live_project(tmp_path: Path, fixture_text) -> Path:
    """A minimal Phoenix project tree with a few LiveView modules."""
    live_dir = tmp_path / "lib" / "demo_web" / "live"
    live_dir.mkdir(parents=True)
    (live_dir / "counter_live.ex").write_text(fixture_text("missing_sections_live.ex"), encoding="utf-8")
    (live_dir / "labeled_live.ex").write_text(fixture_text("labeled_live.ex"), encoding="utf-8")
    (live_dir / "render_only_live.ex").write_text(fixture_text("render_only_live.ex"), encoding="utf-8")
    (tmp_path / "lib" / "demo_web.ex").write_text(
        "defmodule DemoWeb do\n  def live_view do\n    quote do\n      use Phoenix.LiveView\n    end\n  end\nend\n",
        encoding="utf-8",
    )
    deps = tmp_path / "deps" / "phoenix" / "lib"
    deps.mkdir(parents=True)
    (deps / "vendored_live.ex").write_text(fixture_text("missing_sections_live.ex"), encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_stdlib_logging_for_tests()
    logging.getLogger().setLevel(logging.WARNING)
