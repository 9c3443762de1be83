from __future__ import annotations

"""
Bottom-Up Aggregation Driver.

Runs one sequential pass over the project tree, deepest directories first,
so that every parent is processed after all of its subdirectories have been
visited. For each directory the driver applies the eligibility policy,
gathers child content, runs the analyzer and either writes a fallback
report or invokes the artifact tool, accumulating run statistics.
"""

import logging
import os
from typing import Callable, List, Optional

from autodocument.core.services.analyzer import FileAnalyzer
from autodocument.core.services.collector import ChildContentCollector
from autodocument.core.services.scanner import TreeScanner
from autodocument.core.tools.base import ArtifactTool
from autodocument.domain.generation_models import AggregationResult
from autodocument.infra.fs import relative_display_path, write_text_file

logger = logging.getLogger(__name__)

# (relative_directory, code_file_count, current_index, total_directories)
ProgressCallback = Callable[[str, int, int, int], None]


class AggregationDriver:
    """
    Orchestrates one bottom-up generation run.

    Args:
        root_path: Project root.
        scanner: Tree scanner bound to the same root.
        analyzer: File selection policy.
        tool: Artifact tool invoked for eligible directories.
        collector: Child-content collector; built from the scanner and the
                   tool's artifact filename when omitted.
        progress: Optional sink notified once per visited directory.
    """

    def __init__(
            self,
            root_path: str,
            scanner: TreeScanner,
            analyzer: FileAnalyzer,
            tool: ArtifactTool,
            collector: Optional[ChildContentCollector] = None,
            progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.root_path = os.path.abspath(root_path)
        self.scanner = scanner
        self.analyzer = analyzer
        self.tool = tool
        self.collector = collector or ChildContentCollector(scanner, tool.output_filename)
        self.progress = progress

    def run(self, update_existing: Optional[bool] = None) -> AggregationResult:
        """
        Execute the whole pass.

        Per-directory failures are recorded and the loop continues. A failure
        to compute the processing order is folded into a single global error
        keyed by the root path.

        Args:
            update_existing: Overrides the tool's update policy for this run.

        Returns:
            AggregationResult: Final counters and errors.
        """
        result = AggregationResult()
        tool = self.tool.with_update_policy(update_existing)

        try:
            directories = self.scanner.create_bottom_up_order()
        except OSError as e:
            logger.error(f"Cannot compute processing order for '{self.root_path}': {e}")
            result.record_error(self.root_path, f"Global error: {e}")
            return result

        result.total_directories = len(directories)
        logger.info(f"Processing {len(directories)} directories bottom-up with tool '{tool.name}'")

        for index, directory in enumerate(directories):
            try:
                self._process_directory(tool, directory, index, len(directories), result)
            except Exception as e:
                logger.error(f"Error processing directory '{directory}': {e}", exc_info=True)
                result.failed_generations += 1
                result.record_error(directory, str(e))

        logger.info(
            f"Run finished: {result.successful_generations} generated, "
            f"{result.failed_generations} failed, {result.fallback_files} fallback"
        )
        return result

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _process_directory(
            self,
            tool: ArtifactTool,
            directory: str,
            index: int,
            total: int,
            result: AggregationResult,
    ) -> None:
        files = self.scanner.get_code_files(directory)
        self._report_progress(directory, len(files), index + 1, total)

        has_subdirectories = self.scanner.has_subdirectories(directory)
        if not self._is_eligible(directory, files, has_subdirectories):
            logger.debug(f"Skipping '{directory}': not eligible for generation")
            return

        child_content = self.collector.collect(directory)
        if not files and not child_content:
            logger.debug(
                f"'{directory}' has no code files and no subdirectory content; "
                f"generating from an empty listing"
            )
        analysis = self.analyzer.analyze_files(directory, files)

        if analysis.limited:
            fallback_path = os.path.join(directory, tool.fallback_filename)
            write_text_file(fallback_path, tool.create_fallback_content(directory, analysis))
            result.fallback_files += 1
            logger.info(f"Wrote fallback report {fallback_path}: {analysis.limit_reason}")
            return

        outcome = tool.generate(
            directory,
            analysis,
            is_top_level=directory == self.root_path,
            child_content=child_content,
        )

        if outcome.success:
            result.successful_generations += 1
            if outcome.skipped:
                result.skipped_generations += 1
            elif outcome.is_update:
                result.updated_generations += 1
        else:
            result.failed_generations += 1
            result.record_error(directory, outcome.error or "Unknown error")
            logger.warning(f"Generation failed for '{directory}': {outcome.error}")

    def _is_eligible(self, directory: str, files: List[str], has_subdirectories: bool) -> bool:
        if self.analyzer.should_document(directory, files, has_subdirectories):
            return True
        return not files and has_subdirectories

    def _report_progress(self, directory: str, file_count: int, current: int, total: int) -> None:
        if self.progress is None:
            return
        relative = relative_display_path(directory, self.root_path)
        try:
            self.progress(relative, file_count, current, total)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")
