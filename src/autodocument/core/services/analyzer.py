from __future__ import annotations

"""
File Selection and Analysis Service.

Classifies the immediate files of a directory into "analyzed" (content read
and forwarded to the generator) and "excluded with reason", enforcing the
per-file size ceiling and the directory-wide file-count and aggregate-size
ceilings. Also hosts the eligibility policy that decides whether a
directory deserves its own artifact.
"""

import logging
import os
from typing import List

from autodocument.domain import constants as const
from autodocument.domain.analysis_models import AnalysisResult, AnalyzedFile, ExcludedFile
from autodocument.domain.config import AutodocConfig
from autodocument.infra.fs import read_text_file

logger = logging.getLogger(__name__)


class FileAnalyzer:
    """
    Applies the file selection policy of one run.

    Args:
        config: Runtime configuration carrying the allow-list and ceilings.
    """

    def __init__(self, config: AutodocConfig) -> None:
        self.config = config

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def analyze_files(self, directory: str, file_paths: List[str]) -> AnalysisResult:
        """
        Select and read the code files of one directory.

        The file-count ceiling takes precedence: when it is exceeded the
        first N candidates are analyzed, every remaining candidate is listed
        as excluded and no aggregate-size check runs. Otherwise files are
        analyzed in order until the aggregate ceiling is reached; files
        after that point are neither analyzed nor listed.

        Args:
            directory: Directory that owns the files.
            file_paths: Immediate file paths, in scan order.

        Returns:
            AnalysisResult: Analyzed and excluded files plus limit flags.
        """
        result = AnalysisResult()
        candidates = self._partition(file_paths, result)

        max_files = self.config.max_files_per_directory
        if len(candidates) > max_files:
            result.limited = True
            result.limit_reason = f"Too many files ({len(candidates)} > {max_files})"
            logger.info(f"File count limit hit in '{directory}': {result.limit_reason}")

            for path in candidates[:max_files]:
                self._process_file(path, result)
            for path in candidates[max_files:]:
                result.excluded_files.append(ExcludedFile(path=path, reason=const.REASON_FILE_COUNT_LIMIT))
            return result

        max_total = self.config.max_total_size_bytes
        for path in candidates:
            self._process_file(path, result)
            if result.total_size >= max_total:
                result.limited = True
                result.limit_reason = (
                    f"Total size exceeds limit ({round(result.total_size / 1024)}KB >= "
                    f"{round(max_total / 1024)}KB)"
                )
                logger.info(f"Aggregate size limit hit in '{directory}': {result.limit_reason}")
                break

        return result

    def should_document(self, directory: str, file_paths: List[str], has_subdirectories: bool) -> bool:
        """
        Decide whether a directory gets its own artifact.

        A directory holding exactly one qualifying file and no subdirectories
        is deferred to its parent, which inlines the file instead.

        Returns:
            bool: True when at least one qualifying file is present, except
                  for the single-file case above.
        """
        count = len(self.qualifying_files(file_paths))
        if count == 1 and not has_subdirectories:
            return False
        return count > 0

    def qualifying_files(self, file_paths: List[str]) -> List[str]:
        """Filter paths down to allow-listed, non-markdown files."""
        out: List[str] = []
        for path in file_paths:
            ext = _extension(path)
            if ext != const.DOCUMENTATION_EXTENSION and self.config.is_code_extension(ext):
                out.append(path)
        return out

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _partition(self, file_paths: List[str], result: AnalysisResult) -> List[str]:
        """Return the candidates and record every dropped file as excluded."""
        candidates: List[str] = []
        for path in file_paths:
            ext = _extension(path)
            if ext == const.DOCUMENTATION_EXTENSION:
                result.excluded_files.append(ExcludedFile(path=path, reason=const.REASON_DOCUMENTATION_FILE))
            elif not self.config.is_code_extension(ext):
                result.excluded_files.append(ExcludedFile(path=path, reason=const.REASON_UNSUPPORTED_TYPE))
            else:
                candidates.append(path)
        return candidates

    def _process_file(self, path: str, result: AnalysisResult) -> None:
        """Stat, size-check and read one file into the result."""
        limit = self.config.max_file_size_bytes
        try:
            size = os.path.getsize(path)
            if size > limit:
                result.excluded_files.append(ExcludedFile(
                    path=path,
                    reason=(
                        f"File size ({round(size / 1024)}KB) exceeds limit "
                        f"({self.config.max_file_size_kb}KB)"
                    ),
                ))
                return

            content = read_text_file(path)
        except OSError as e:
            logger.warning(f"Failed to analyze '{path}': {e}")
            result.excluded_files.append(ExcludedFile(path=path, reason=f"Error reading file: {e}"))
            return

        result.analyzed_files.append(AnalyzedFile(path=path, content=content, extension=_extension(path)))
        result.total_size += size


def _extension(path: str) -> str:
    return os.path.splitext(path)[1].lower()
