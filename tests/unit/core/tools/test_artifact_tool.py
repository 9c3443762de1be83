from __future__ import annotations

"""
Unit tests for the generic Artifact Tool.

Verifies the update policy (skip vs regenerate), system prompt selection by
directory role, failure reporting through the outcome object and the
markdown reports (fallback and run summary).
"""

from pathlib import Path
from unittest.mock import patch

from autodocument.core.tools.base import ArtifactTool
from autodocument.core.tools.registry import DOCUMENTATION_TOOL, TESTPLAN_TOOL
from autodocument.domain.analysis_models import AnalysisResult, AnalyzedFile, ChildContentItem, ExcludedFile
from autodocument.domain.generation_models import AggregationResult
from autodocument.domain.prompts import DOCUMENTATION_PROMPTS, UPDATE_EXISTING_CONTENT_PROMPT
from autodocument.infra.llm.base import CompletionResponse


def _analysis(directory: Path) -> AnalysisResult:
    path = directory / "main.py"
    path.write_text("print('hi')", encoding="utf-8")
    return AnalysisResult(analyzed_files=[AnalyzedFile(path=str(path), content="print('hi')", extension=".py")])


# -----------------------------------------------------------------------------
# Generation
# -----------------------------------------------------------------------------

def test_creates_artifact(tmp_path: Path, scripted_client) -> None:
    """TC-01: A fresh directory gets a new artifact with the model output."""
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client)

    outcome = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert outcome.success is True
    assert outcome.is_update is False and outcome.skipped is False
    assert (tmp_path / "documentation.md").read_text(encoding="utf-8") == "# Generated\n"
    system_prompt, user_message = scripted_client.calls[0]
    assert system_prompt == DOCUMENTATION_PROMPTS.system_prompt
    assert "File: main.py" in user_message


def test_skips_existing_artifact_when_updates_disabled(tmp_path: Path, scripted_client) -> None:
    """TC-02: With updates disabled an existing artifact is returned untouched."""
    (tmp_path / "documentation.md").write_text("# Old", encoding="utf-8")
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client, update_existing=False)

    outcome = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert outcome.success is True
    assert outcome.skipped is True
    assert outcome.is_update is False
    assert outcome.content == "# Old"
    assert scripted_client.calls == []
    assert (tmp_path / "documentation.md").read_text(encoding="utf-8") == "# Old"


def test_repeated_skips_return_identical_content(tmp_path: Path, scripted_client) -> None:
    """TC-11: Two generations with updates disabled both skip and return the same text."""
    (tmp_path / "documentation.md").write_text("# Kept", encoding="utf-8")
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client, update_existing=False)

    first = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)
    second = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert first.skipped and second.skipped
    assert first.content == second.content == "# Kept"
    assert scripted_client.calls == []


def test_unreadable_artifact_is_kept_when_updates_disabled(tmp_path: Path, scripted_client) -> None:
    """TC-12: An existing but unreadable artifact is still skipped, never overwritten."""
    artifact = tmp_path / "documentation.md"
    artifact.write_text("# Hand-written, keep me", encoding="utf-8")
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client, update_existing=False)

    with patch("autodocument.core.tools.base.read_existing_text", side_effect=PermissionError("denied")):
        outcome = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert outcome.success is True
    assert outcome.skipped is True
    assert outcome.is_update is False
    assert scripted_client.calls == []
    assert artifact.read_text(encoding="utf-8") == "# Hand-written, keep me"


def test_unreadable_artifact_fails_when_updates_enabled(tmp_path: Path, scripted_client) -> None:
    """TC-13: With updates enabled an unreadable artifact is a failure, not a blind overwrite."""
    artifact = tmp_path / "documentation.md"
    artifact.write_text("# Hand-written, keep me", encoding="utf-8")
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client)

    with patch("autodocument.core.tools.base.read_existing_text", side_effect=PermissionError("denied")):
        outcome = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert outcome.success is False
    assert outcome.is_update is True
    assert outcome.error == "Error reading existing documentation.md: denied"
    assert scripted_client.calls == []
    assert artifact.read_text(encoding="utf-8") == "# Hand-written, keep me"


def test_regenerates_existing_artifact(tmp_path: Path, scripted_client) -> None:
    """TC-03: An existing artifact is sent for reference and replaced."""
    (tmp_path / "documentation.md").write_text("# Old", encoding="utf-8")
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client)

    outcome = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert outcome.is_update is True
    system_prompt, user_message = scripted_client.calls[0]
    assert system_prompt.endswith(UPDATE_EXISTING_CONTENT_PROMPT)
    assert "Existing documentation for reference:\n```markdown\n# Old\n```" in user_message
    assert (tmp_path / "documentation.md").read_text(encoding="utf-8") == "# Generated\n"


def test_prompt_selection_by_role(tmp_path: Path, scripted_client) -> None:
    """TC-04: Root uses the top-level prompt, parents with children the aggregation prompt."""
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client)
    child = [ChildContentItem(path=str(tmp_path / "sub"), content="# Sub")]

    tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=True, child_content=child)
    tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False, child_content=child)

    assert scripted_client.calls[0][0].startswith(DOCUMENTATION_PROMPTS.top_level_prompt)
    assert scripted_client.calls[1][0].startswith(DOCUMENTATION_PROMPTS.with_children_prompt)


def test_unsuccessful_response_is_reported(tmp_path: Path, client_factory) -> None:
    """TC-05: A failed completion yields a failed outcome and writes nothing."""
    client = client_factory(default=CompletionResponse(content="", successful=False, error="rate limited"))
    tool = ArtifactTool(TESTPLAN_TOOL, client)

    outcome = tool.generate(str(tmp_path), _analysis(tmp_path), is_top_level=False)

    assert outcome.success is False
    assert outcome.error == "rate limited"
    assert not (tmp_path / "testplan.md").exists()


def test_client_exception_is_reported(tmp_path: Path, client_factory) -> None:
    """TC-06: Exceptions raised by the client are converted into a failed outcome."""
    client = client_factory()

    def explode(system_prompt: str, user_message: str) -> CompletionResponse:
        raise RuntimeError("socket closed")

    client._complete = explode
    outcome = ArtifactTool(DOCUMENTATION_TOOL, client).generate(
        str(tmp_path), _analysis(tmp_path), is_top_level=False
    )

    assert outcome.success is False
    assert outcome.error == "Error generating documentation: socket closed"


def test_with_update_policy_returns_copy(scripted_client) -> None:
    """TC-07: Changing the policy never mutates the registered tool."""
    tool = ArtifactTool(DOCUMENTATION_TOOL, scripted_client)

    assert tool.with_update_policy(None) is tool
    assert tool.with_update_policy(True) is tool
    other = tool.with_update_policy(False)
    assert other is not tool
    assert other.update_existing is False and tool.update_existing is True


# -----------------------------------------------------------------------------
# Reports
# -----------------------------------------------------------------------------

def test_fallback_content_lists_files_and_reason(tmp_path: Path, scripted_client) -> None:
    """TC-08: The fallback report carries the reason, both file lists and guidance."""
    tool = ArtifactTool(TESTPLAN_TOOL, scripted_client)
    directory = tmp_path / "big"
    analysis = AnalysisResult(
        analyzed_files=[AnalyzedFile(path=str(directory / "a.py"), content="", extension=".py")],
        excluded_files=[ExcludedFile(path=str(directory / "b.py"), reason="excluded due to file count limit")],
        limited=True,
        limit_reason="Too many files (2 > 1)",
    )

    report = tool.create_fallback_content(str(directory), analysis)

    assert report.startswith("# big - Test Plan Skipped\n")
    assert "## Reason\n\nToo many files (2 > 1)" in report
    assert "- `a.py`" in report
    assert "- `b.py`: excluded due to file count limit" in report
    assert "proper testplan.md file" in report


def test_result_summary(scripted_client) -> None:
    """TC-09: The summary shows every counter and lists the errors."""
    result = AggregationResult(
        total_directories=4,
        successful_generations=2,
        failed_generations=1,
        fallback_files=1,
        updated_generations=1,
    )
    result.record_error("/repo/pkg", "boom")

    summary = ArtifactTool(DOCUMENTATION_TOOL, scripted_client).format_result_summary(result)

    assert summary.startswith("# generate_documentation Generation Complete")
    assert "- Total directories processed: 4" in summary
    assert "- Failed generations: 1" in summary
    assert "- Fallback files created: 1" in summary
    assert "- **/repo/pkg**: boom" in summary
    assert "undocumented.md" in summary


def test_result_summary_without_errors_has_no_error_section(scripted_client) -> None:
    """TC-10: A clean run omits the Errors heading."""
    summary = ArtifactTool(DOCUMENTATION_TOOL, scripted_client).format_result_summary(AggregationResult())

    assert "## Errors" not in summary
