from __future__ import annotations

"""
Generic Artifact Tool.

One parameterized generator replaces a family of near-identical tools: a
ToolSpec names the artifact and fallback files and carries the prompt set,
and ArtifactTool implements the generation, fallback report and run
summary for any spec.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from autodocument.core.tools.prompt_builder import build_system_prompt, build_user_message
from autodocument.domain.analysis_models import AnalysisResult, ChildContentItem
from autodocument.domain.generation_models import AggregationResult, GenerationOutcome
from autodocument.domain.prompts import PromptSet
from autodocument.infra.fs import read_existing_text, relative_display_path, write_text_file
from autodocument.infra.llm.base import CompletionClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """
    Static description of one artifact tool.

    Attributes:
        name: Registry key (e.g. 'generate_documentation').
        description: One-line summary shown by the CLI.
        output_filename: Artifact file written into each directory.
        fallback_filename: Report file written when limits are exceeded.
        title: Heading word used in reports ('Documentation', 'Test Plan').
        artifact_label: Lower-case noun used in prompts and guidance.
        prompts: Role-specific system prompts.
    """
    name: str
    description: str
    output_filename: str
    fallback_filename: str
    title: str
    artifact_label: str
    prompts: PromptSet


class ArtifactTool:
    """
    Generator bound to one ToolSpec and one completion client.

    Args:
        spec: Tool description.
        client: Completion provider.
        update_existing: Whether an existing artifact is regenerated.
    """

    def __init__(self, spec: ToolSpec, client: CompletionClient, update_existing: bool = True) -> None:
        self.spec = spec
        self.client = client
        self.update_existing = update_existing

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def description(self) -> str:
        return self.spec.description

    @property
    def output_filename(self) -> str:
        return self.spec.output_filename

    @property
    def fallback_filename(self) -> str:
        return self.spec.fallback_filename

    def with_update_policy(self, update_existing: Optional[bool]) -> "ArtifactTool":
        """Return a copy using another update policy (None keeps the current one)."""
        if update_existing is None or update_existing == self.update_existing:
            return self
        return ArtifactTool(self.spec, self.client, update_existing)

    # =========================================================================
    # GENERATION
    # =========================================================================

    def generate(
            self,
            directory: str,
            analysis: AnalysisResult,
            is_top_level: bool,
            child_content: Sequence[ChildContentItem] = (),
    ) -> GenerationOutcome:
        """
        Produce and write the artifact of one directory.

        An existing artifact is returned untouched when the update policy
        forbids overwriting it; the completion client is not called then.

        Args:
            directory: Directory being processed.
            analysis: Analyzer output for the directory.
            is_top_level: Whether the directory is the project root.
            child_content: Subdirectory artifacts and inlined single files.

        Returns:
            GenerationOutcome: Result of the call. Failures are reported in
                               the outcome, not raised.
        """
        output_path = os.path.join(directory, self.spec.output_filename)
        is_update = os.path.isfile(output_path)

        existing: Optional[str] = None
        read_error: Optional[OSError] = None
        if is_update:
            try:
                existing = read_existing_text(output_path)
            except OSError as e:
                logger.warning(f"Could not read existing artifact '{output_path}': {e}")
                read_error = e

        if is_update and not self.update_existing:
            logger.info(f"Skipping {output_path}: artifact exists and updates are disabled")
            return GenerationOutcome(
                output_path=output_path,
                success=True,
                content=existing or "",
                is_update=False,
                skipped=True,
            )

        if read_error is not None:
            return GenerationOutcome(
                output_path=output_path,
                success=False,
                error=f"Error reading existing {self.spec.output_filename}: {read_error}",
                is_update=True,
            )

        system_prompt = build_system_prompt(
            self.spec.prompts, is_top_level, bool(child_content), has_existing=is_update
        )
        user_message = build_user_message(
            directory,
            analysis,
            child_content,
            self.spec.artifact_label,
            self.spec.prompts.closing_instruction,
            existing_content=existing,
        )

        try:
            response = self.client.complete(system_prompt, user_message)
        except Exception as e:
            logger.error(f"Completion call failed for '{directory}': {e}")
            return GenerationOutcome(
                output_path=output_path,
                success=False,
                error=f"Error generating {self.spec.artifact_label}: {e}",
                is_update=is_update,
            )

        if not response.successful:
            return GenerationOutcome(
                output_path=output_path,
                success=False,
                error=response.error or f"Unknown error during {self.spec.artifact_label} generation",
                is_update=is_update,
            )

        try:
            write_text_file(output_path, response.content)
        except OSError as e:
            logger.error(f"Failed to write '{output_path}': {e}")
            return GenerationOutcome(
                output_path=output_path,
                success=False,
                error=f"Error writing {self.spec.output_filename}: {e}",
                is_update=is_update,
            )

        logger.info(f"{'Updated' if is_update else 'Created'} {output_path}")
        return GenerationOutcome(
            output_path=output_path,
            success=True,
            content=response.content,
            is_update=is_update,
        )

    # =========================================================================
    # REPORTS
    # =========================================================================

    def create_fallback_content(self, directory: str, analysis: AnalysisResult) -> str:
        """
        Build the markdown report written instead of an artifact when the
        directory exceeds its limits.
        """
        lines = [f"# {os.path.basename(directory)} - {self.spec.title} Skipped", ""]

        if analysis.limited and analysis.limit_reason:
            lines += ["## Reason", "", analysis.limit_reason, ""]

        if analysis.analyzed_files:
            lines += ["## Analyzed Files", ""]
            lines += [f"- `{relative_display_path(f.path, directory)}`" for f in analysis.analyzed_files]
            lines.append("")

        if analysis.excluded_files:
            lines += ["## Excluded Files", ""]
            lines += [
                f"- `{relative_display_path(f.path, directory)}`: {f.reason}"
                for f in analysis.excluded_files
            ]
            lines.append("")

        lines += [
            "## How to Fix",
            "",
            f"You can manually create the {self.spec.artifact_label} for this directory by replacing "
            f"this file with a proper {self.spec.output_filename} file.",
            "Alternatively, you can increase the file limits in the tool configuration and run again.",
        ]
        return "\n".join(lines) + "\n"

    def format_result_summary(self, result: AggregationResult) -> str:
        """Render the run counters and errors as markdown."""
        lines = [
            f"# {self.spec.name} Generation Complete",
            "",
            "## Summary",
            "",
            f"- Total directories processed: {result.total_directories}",
            f"- Successful generations: {result.successful_generations}",
            f"- Updated generations: {result.updated_generations}",
            f"- Skipped generations: {result.skipped_generations}",
            f"- Failed generations: {result.failed_generations}",
            f"- Fallback files created: {result.fallback_files}",
            "",
        ]

        if result.errors:
            lines += ["## Errors", ""]
            lines += [f"- **{e.directory}**: {e.error}" for e in result.errors]
            lines.append("")

        lines += [
            "## Next Steps",
            "",
            f"- Review the generated {self.spec.output_filename} files",
            f"- Manually update any {self.spec.fallback_filename} files if needed",
            "- Consider adjusting configuration parameters if too many files were skipped",
        ]
        return "\n".join(lines) + "\n"
