from __future__ import annotations

"""
Child-Content Collector.

Gathers what the immediate subdirectories of a directory contribute to its
generation request: artifacts already written by the subdirectories that
were processed on their own, and the raw content of single-file
subdirectories that were deferred to their parent.
"""

import logging
import os
from typing import List

from autodocument.core.services.scanner import TreeScanner
from autodocument.domain import constants as const
from autodocument.domain.analysis_models import ChildContentItem
from autodocument.infra.fs import read_text_file, relative_display_path

logger = logging.getLogger(__name__)


class ChildContentCollector:
    """
    Builds the child-content list for a parent directory.

    Args:
        scanner: Scanner supplying filtered shallow listings and size-aware reads.
        artifact_filename: Name of the artifact written by the active tool.
    """

    def __init__(self, scanner: TreeScanner, artifact_filename: str) -> None:
        self.scanner = scanner
        self.artifact_filename = artifact_filename

    def collect(self, directory: str) -> List[ChildContentItem]:
        """Subdirectory artifacts first, inlined single-file content second."""
        return self.get_subdirectory_artifacts(directory) + self.get_single_file_subdirectories(directory)

    def get_subdirectory_artifacts(self, directory: str) -> List[ChildContentItem]:
        """
        Read the artifact of every immediate subdirectory that has one.

        Returns:
            List[ChildContentItem]: Verbatim artifact text keyed by subdirectory.
        """
        items: List[ChildContentItem] = []
        for subdir in self.scanner.list_subdirectories(directory):
            artifact = self.scanner.get_artifact_file(subdir, self.artifact_filename)
            if artifact is None:
                continue
            try:
                items.append(ChildContentItem(path=subdir, content=read_text_file(artifact)))
            except OSError as e:
                logger.warning(f"Could not read artifact '{artifact}': {e}")
        return items

    def get_single_file_subdirectories(self, directory: str) -> List[ChildContentItem]:
        """
        Inline the sole code file of every single-file subdirectory.

        Files above the per-file size ceiling are left out silently.

        Returns:
            List[ChildContentItem]: One fenced code block per subdirectory.
        """
        items: List[ChildContentItem] = []
        for subdir in self.scanner.list_subdirectories(directory):
            files = [
                f for f in self.scanner.get_code_files(subdir)
                if os.path.splitext(f)[1].lower() != const.DOCUMENTATION_EXTENSION
            ]
            if len(files) != 1:
                continue

            content = self.scanner.read_file_content(files[0])
            if content is None:
                continue

            items.append(ChildContentItem(
                path=subdir,
                content=format_single_file_block(directory, subdir, files[0], content),
            ))
        return items


def format_single_file_block(parent: str, subdir: str, file_path: str, content: str) -> str:
    """Wrap a deferred file as a fenced block with its provenance."""
    return (
        f"# {os.path.basename(subdir)} - {os.path.basename(file_path)}\n\n"
        f"This file is from a single-file directory: {relative_display_path(subdir, parent)}\n\n"
        f"```\n{content}\n```"
    )
