from __future__ import annotations

"""
Unit tests for the Bottom-Up Aggregation Driver.

Runs the driver against real directory trees with a scripted completion
client and verifies processing order, eligibility, fallback reports,
failure isolation and the run counters.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import patch

import pytest

from autodocument.core.pipeline.aggregator import AggregationDriver, ProgressCallback
from autodocument.core.services.analyzer import FileAnalyzer
from autodocument.core.services.scanner import TreeScanner
from autodocument.core.tools.base import ArtifactTool
from autodocument.core.tools.registry import DOCUMENTATION_TOOL
from autodocument.domain.config import AutodocConfig
from autodocument.infra.llm.base import CompletionClient, CompletionResponse


def _driver(
        root: Path,
        config: AutodocConfig,
        client: CompletionClient,
        progress: Optional[ProgressCallback] = None,
) -> AggregationDriver:
    scanner = TreeScanner(str(root), config)
    tool = ArtifactTool(DOCUMENTATION_TOOL, client, config.update_existing)
    return AggregationDriver(str(root), scanner, FileAnalyzer(config), tool, progress=progress)


@pytest.fixture
def nested(tmp_path: Path, make_tree: Callable[[Path, Dict[str, Any]], Path]) -> Path:
    """
    /repo
      a.py, b.py
      pkg/ (c.py, d.py)
        inner/ (e.py, f.py)
      solo/ (g.py)
    """
    return make_tree(tmp_path / "repo", {
        "a.py": "a = 1",
        "b.py": "b = 2",
        "pkg": {
            "c.py": "c = 3",
            "d.py": "d = 4",
            "inner": {"e.py": "e = 5", "f.py": "f = 6"},
        },
        "solo": {"g.py": "g = 7"},
    })


# -----------------------------------------------------------------------------
# Ordering and Aggregation
# -----------------------------------------------------------------------------

def test_children_are_generated_before_parents(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-01: Each parent request already sees its subdirectory artifacts."""
    result = _driver(nested, make_config(), scripted_client).run()

    messages = [user for _, user in scripted_client.calls]
    assert len(messages) == 3
    assert "File: e.py" in messages[0]
    assert "File: c.py" in messages[1]
    assert "Sub-directory Documentation: inner\n```markdown\n# Generated\n" in messages[1]
    assert "File: a.py" in messages[2]
    assert "Sub-directory Documentation: pkg" in messages[2]

    assert result.total_directories == 4
    assert result.successful_generations == 3
    assert result.failed_generations == 0
    assert result.ok


def test_single_file_directory_is_inlined_into_parent(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-02: A single-file leaf gets no artifact; its code reaches the parent."""
    _driver(nested, make_config(), scripted_client).run()

    assert not (nested / "solo" / "documentation.md").exists()
    root_message = scripted_client.calls[-1][1]
    assert "# solo - g.py" in root_message
    assert "g = 7" in root_message


def test_root_uses_top_level_prompt(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-03: Only the root request uses the top-level system prompt."""
    _driver(nested, make_config(), scripted_client).run()

    prompts = [system for system, _ in scripted_client.calls]
    assert prompts[-1].startswith(DOCUMENTATION_TOOL.prompts.top_level_prompt)
    assert not prompts[0].startswith(DOCUMENTATION_TOOL.prompts.top_level_prompt)


def test_container_directories_synthesize_children(
        tmp_path: Path,
        make_tree: Callable[[Path, Dict[str, Any]], Path],
        make_config: Callable[..., AutodocConfig],
        scripted_client,
) -> None:
    """TC-04: A directory without code files but with subdirectories is still documented."""
    root = make_tree(tmp_path / "repo", {
        "group": {
            "x": {"a.py": "a", "b.py": "b"},
            "y": {"c.py": "c", "d.py": "d"},
        },
    })

    result = _driver(root, make_config(), scripted_client).run()

    assert result.successful_generations == 4
    group_message = scripted_client.calls[2][1]
    assert group_message.startswith("Generate documentation that synthesizes")
    assert "Sub-directory Documentation: x" in group_message
    assert "Sub-directory Documentation: y" in group_message
    assert (root / "group" / "documentation.md").exists()


def test_single_file_root_is_not_documented(
        tmp_path: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-05: A root with one file and no subdirectories produces nothing."""
    (tmp_path / "only.py").write_text("x = 1", encoding="utf-8")

    result = _driver(tmp_path, make_config(), scripted_client).run()

    assert result.total_directories == 1
    assert result.successful_generations == 0
    assert scripted_client.calls == []


# -----------------------------------------------------------------------------
# Limits and Fallbacks
# -----------------------------------------------------------------------------

def test_limited_directory_gets_fallback_report(
        tmp_path: Path,
        make_tree: Callable[[Path, Dict[str, Any]], Path],
        make_config: Callable[..., AutodocConfig],
        scripted_client,
) -> None:
    """TC-06: Exceeding the file-count ceiling writes undocumented.md instead of calling the model."""
    root = make_tree(tmp_path / "repo", {"big": {"a.py": "a", "b.py": "b", "c.py": "c"}})

    result = _driver(root, make_config(max_files_per_directory=2), scripted_client).run()

    fallback = root / "big" / "undocumented.md"
    assert fallback.exists()
    assert "Too many files (3 > 2)" in fallback.read_text(encoding="utf-8")
    assert not (root / "big" / "documentation.md").exists()
    assert result.fallback_files == 1
    # Only the root container reaches the model
    assert len(scripted_client.calls) == 1


# -----------------------------------------------------------------------------
# Failure Isolation
# -----------------------------------------------------------------------------

def test_failed_generation_does_not_stop_the_run(
        tmp_path: Path,
        make_tree: Callable[[Path, Dict[str, Any]], Path],
        make_config: Callable[..., AutodocConfig],
        client_factory,
) -> None:
    """TC-07: One failing directory is recorded while the others proceed."""
    root = make_tree(tmp_path / "repo", {
        "bad": {"bad1.py": "x", "bad2.py": "y"},
        "good": {"ok1.py": "x", "ok2.py": "y"},
    })
    client = client_factory(responses={
        "File: bad1.py": CompletionResponse(content="", successful=False, error="model overloaded"),
    })

    result = _driver(root, make_config(), client).run()

    assert result.failed_generations == 1
    assert result.successful_generations == 2
    assert [(e.directory, e.error) for e in result.errors] == [(str(root / "bad"), "model overloaded")]
    assert not result.ok
    assert (root / "good" / "documentation.md").exists()


def test_unexpected_exception_is_counted_as_failure(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-08: An exception escaping one directory is recorded and the loop continues."""
    driver = _driver(nested, make_config(), scripted_client)
    real_analyze = driver.analyzer.analyze_files
    broken = str(nested / "pkg")

    def flaky(directory: str, files: List[str]):
        if directory == broken:
            raise RuntimeError("disk vanished")
        return real_analyze(directory, files)

    with patch.object(driver.analyzer, "analyze_files", side_effect=flaky):
        result = driver.run()

    assert result.failed_generations == 1
    assert result.errors[0].directory == broken
    assert result.errors[0].error == "disk vanished"
    assert result.successful_generations == 2


def test_missing_root_records_global_error(
        tmp_path: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-09: A missing root yields one global error keyed by the root."""
    root = tmp_path / "missing"

    result = _driver(root, make_config(), scripted_client).run()

    assert result.total_directories == 0
    assert result.failed_generations == 0
    assert len(result.errors) == 1
    assert result.errors[0].directory == str(root)
    assert result.errors[0].error.startswith("Global error:")


# -----------------------------------------------------------------------------
# Update Policy
# -----------------------------------------------------------------------------

def test_rerun_counts_updates_and_skips(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-10: A second run updates existing artifacts or skips them when updates are off."""
    driver = _driver(nested, make_config(), scripted_client)
    driver.run()

    updated = driver.run()
    assert updated.updated_generations == 3
    assert updated.skipped_generations == 0

    calls_before = len(scripted_client.calls)
    skipped = driver.run(update_existing=False)
    assert skipped.skipped_generations == 3
    assert skipped.updated_generations == 0
    assert skipped.successful_generations == 3
    assert len(scripted_client.calls) == calls_before


# -----------------------------------------------------------------------------
# Progress Reporting
# -----------------------------------------------------------------------------

def test_progress_reports_every_directory(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-11: Every visited directory is reported with relative path and position."""
    events: List[Tuple[str, int, int, int]] = []

    _driver(nested, make_config(), scripted_client, progress=lambda *args: events.append(args)).run()

    assert [e[0] for e in events] == ["pkg/inner", "pkg", "solo", "."]
    assert [e[2] for e in events] == [1, 2, 3, 4]
    assert all(e[3] == 4 for e in events)
    assert events[-1][1] == 2


def test_progress_callback_errors_are_ignored(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-12: A broken progress sink never interrupts generation."""
    def broken(*args: Any) -> None:
        raise RuntimeError("terminal gone")

    result = _driver(nested, make_config(), scripted_client, progress=broken).run()

    assert result.successful_generations == 3
    assert result.ok


# -----------------------------------------------------------------------------
# Child Content Hand-off
# -----------------------------------------------------------------------------

def test_single_file_directory_is_handed_over_exactly_once(
        nested: Path, make_config: Callable[..., AutodocConfig], scripted_client
) -> None:
    """TC-13: The root receives the pkg artifact plus a single inlined block for solo."""
    driver = _driver(nested, make_config(), scripted_client)

    with patch.object(driver.tool, "generate", wraps=driver.tool.generate) as spy:
        driver.run()

    root_call = spy.call_args_list[-1]
    assert root_call.args[0] == str(nested)
    child_content = root_call.kwargs["child_content"]
    assert [item.path for item in child_content] == [str(nested / "pkg"), str(nested / "solo")]

    solo_items = [item for item in child_content if item.path == str(nested / "solo")]
    assert len(solo_items) == 1
    assert "g = 7" in solo_items[0].content


def test_empty_container_is_logged_and_still_generated(
        tmp_path: Path,
        make_tree: Callable[[Path, Dict[str, Any]], Path],
        make_config: Callable[..., AutodocConfig],
        scripted_client,
        caplog,
) -> None:
    """TC-14: A container whose subdirectories contribute nothing is noted at DEBUG level."""
    root = make_tree(tmp_path / "repo", {"group": {"empty": {}}})
    group = str(root / "group")

    with caplog.at_level(logging.DEBUG, logger="autodocument.core.pipeline.aggregator"):
        result = _driver(root, make_config(), scripted_client).run()

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith(f"'{group}' has no code files and no subdirectory content") for m in messages)
    assert not any(m.startswith(f"'{root}' has no code files") for m in messages)

    group_message = scripted_client.calls[0][1]
    assert group_message.startswith("Generate comprehensive but concise documentation")
    assert "File:" not in group_message
    assert result.successful_generations == 2
