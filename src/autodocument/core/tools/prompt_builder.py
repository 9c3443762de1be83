from __future__ import annotations

"""
Prompt Assembly for the Artifact Tools.

Turns an analysis result and the collected child content into the system
prompt and user message sent to the completion client.
"""

from typing import List, Optional, Sequence, Tuple

from autodocument.domain.analysis_models import AnalysisResult, ChildContentItem
from autodocument.domain.prompts import UPDATE_EXISTING_CONTENT_PROMPT, PromptSet
from autodocument.infra.fs import relative_display_path


def build_system_prompt(
        prompts: PromptSet,
        is_top_level: bool,
        has_children: bool,
        has_existing: bool,
) -> str:
    """Select the role prompt and append the update instruction if needed."""
    prompt = prompts.select(is_top_level, has_children)
    if has_existing:
        prompt += f" {UPDATE_EXISTING_CONTENT_PROMPT}"
    return prompt


def build_user_message(
        directory: str,
        analysis: AnalysisResult,
        child_content: Sequence[ChildContentItem],
        artifact_label: str,
        closing_instruction: str,
        existing_content: Optional[str] = None,
) -> str:
    """
    Compose the user message for one directory.

    A container directory whose subdirectories produced nothing gets the
    bare code-files header with no listing; the message is still sent.

    Args:
        directory: Directory being processed; file paths are shown relative to it.
        analysis: Result of the analyzer for the directory.
        child_content: Subdirectory artifacts and inlined single-file blocks.
        artifact_label: Human name of the artifact ('documentation', 'test plan').
        closing_instruction: Output guidance appended last.
        existing_content: Current artifact text when regenerating.

    Returns:
        str: The complete user message.
    """
    files = _relative_files(directory, analysis)

    if not files and child_content:
        message = (
            f"Generate {artifact_label} that synthesizes and summarizes information from the "
            f"following subdirectory content. This directory contains no code files itself, "
            f"but needs {artifact_label} that aggregates information from its subdirectories:"
        )
    else:
        message = f"Generate comprehensive but concise {artifact_label} for the following code files:"
        if files:
            message += "\n\n" + "\n\n".join(f"File: {path}\n```\n{content}\n```" for path, content in files)

    if child_content:
        children = "\n\n".join(
            f"Sub-directory {_title(artifact_label)}: {relative_display_path(item.path, directory)}\n"
            f"```markdown\n{item.content}\n```"
            for item in child_content
        )
        message += f"\n\nAdditionally, incorporate information from these subdirectories:\n\n{children}"

    if existing_content:
        message += f"\n\nExisting {artifact_label} for reference:\n```markdown\n{existing_content}\n```"

    message += f"\n\n{closing_instruction}"
    return message


def _relative_files(directory: str, analysis: AnalysisResult) -> List[Tuple[str, str]]:
    return [
        (relative_display_path(f.path, directory), f.content)
        for f in analysis.analyzed_files
    ]


def _title(label: str) -> str:
    return " ".join(word.capitalize() for word in label.split())
