from __future__ import annotations

"""
Directory Tree Scanning Service.

Walks the project root once to build an immutable DirectoryNode tree and
derives the bottom-up processing order from it. Also answers the shallow,
always-fresh listing queries used by the aggregation driver while a long
run is in progress (subdirectories, code files, artifact lookups).

Every listing applies the same filters: ignore rules, hidden-entry policy
and, for code files, the extension allow-list.
"""

import logging
import os
from typing import List, Optional, Set, Tuple

from autodocument.core.services.ignore import IgnoreOracle
from autodocument.domain.config import AutodocConfig
from autodocument.domain.tree_models import DirectoryNode
from autodocument.infra.fs import read_text_file

logger = logging.getLogger(__name__)


class TreeScanner:
    """
    Filesystem traversal bound to one project root.

    Args:
        root_path: Project root to scan.
        config: Runtime configuration (hidden policy, allow-list, limits).
        oracle: Pre-built ignore oracle. When omitted and the configuration
                respects ignore files, one is created and loaded here.
    """

    def __init__(
            self,
            root_path: str,
            config: AutodocConfig,
            oracle: Optional[IgnoreOracle] = None,
    ) -> None:
        self.root_path = os.path.abspath(root_path)
        self.config = config

        if oracle is None and config.respect_gitignore:
            oracle = IgnoreOracle(self.root_path, config.ignore_filename)
            oracle.load_rules()
        self.oracle = oracle

    # =========================================================================
    # FULL TREE
    # =========================================================================

    def scan(self) -> DirectoryNode:
        """
        Recursively scan the root directory.

        Returns:
            DirectoryNode: The root node. Unreadable directories appear as
                           empty leaves.
        """
        logger.debug(f"Scanning directory tree: {self.root_path}")
        return self._scan_directory(self.root_path)

    def create_bottom_up_order(self) -> List[str]:
        """
        Linearize the tree so that every directory follows its subdirectories.

        Returns:
            List[str]: Absolute directory paths, deepest first, each once.

        Raises:
            NotADirectoryError: If the root is missing or not a directory.
        """
        if not os.path.isdir(self.root_path):
            raise NotADirectoryError(f"Root path is not a directory: {self.root_path}")

        root = self.scan()
        order: List[str] = []
        visited: Set[str] = set()
        self._post_order(root, order, visited)

        logger.debug(f"Bottom-up order computed: {len(order)} directories")
        return order

    def find_leaf_directories(self) -> List[str]:
        """Return every directory of the tree that has no subdirectories."""
        return [node.path for node in self.scan().walk() if node.is_leaf]

    # =========================================================================
    # SHALLOW QUERIES
    # =========================================================================

    def has_subdirectories(self, directory: str) -> bool:
        """Fresh check for at least one non-filtered subdirectory."""
        return bool(self.list_subdirectories(directory))

    def list_subdirectories(self, directory: str) -> List[str]:
        """Fresh listing of the non-filtered immediate subdirectories."""
        try:
            _, dirs = self._list_entries(directory)
        except OSError as e:
            logger.warning(f"Cannot list subdirectories of '{directory}': {e}")
            return []
        return dirs

    def get_code_files(self, directory: str) -> List[str]:
        """
        Fresh listing of the immediate files whose extension is allow-listed.

        Returns:
            List[str]: Absolute file paths sorted by name.
        """
        try:
            files, _ = self._list_entries(directory)
        except OSError as e:
            logger.warning(f"Cannot list files of '{directory}': {e}")
            return []
        return [f for f in files if self.config.is_code_extension(os.path.splitext(f)[1])]

    def get_artifact_file(self, directory: str, filename: str) -> Optional[str]:
        """Return the path of an artifact inside `directory`, or None if absent."""
        candidate = os.path.join(directory, filename)
        return candidate if os.path.isfile(candidate) else None

    def read_file_content(self, path: str) -> Optional[str]:
        """
        Read a file as text while honoring the per-file size ceiling.

        Returns:
            Optional[str]: The content, or None when the file is too large
                           or unreadable.
        """
        try:
            size = os.path.getsize(path)
            if size > self.config.max_file_size_bytes:
                logger.warning(
                    f"Skipping oversize file '{path}' ({size} bytes > "
                    f"{self.config.max_file_size_bytes} bytes)"
                )
                return None
            return read_text_file(path)
        except OSError as e:
            logger.warning(f"Failed to read '{path}': {e}")
            return None

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _scan_directory(self, directory: str) -> DirectoryNode:
        name = os.path.basename(directory) or directory
        try:
            files, dirs = self._list_entries(directory)
        except OSError as e:
            logger.warning(f"Error scanning directory '{directory}': {e}")
            return DirectoryNode(path=directory, name=name)

        children = tuple(self._scan_directory(d) for d in dirs)
        return DirectoryNode(path=directory, name=name, files=tuple(files), subdirectories=children)

    def _post_order(self, node: DirectoryNode, order: List[str], visited: Set[str]) -> None:
        for sub in node.subdirectories:
            self._post_order(sub, order, visited)
        if node.path not in visited:
            visited.add(node.path)
            order.append(node.path)

    def _list_entries(self, directory: str) -> Tuple[List[str], List[str]]:
        """
        List one directory level.

        Returns:
            Tuple[List[str], List[str]]: (files, subdirectories), absolute and
                                         sorted by name.

        Raises:
            OSError: If the directory cannot be listed.
        """
        files: List[str] = []
        dirs: List[str] = []

        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if entry.name.startswith(".") and not self.config.include_hidden:
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError:
                continue
            if not (is_dir or is_file):
                continue
            if self.oracle is not None and self.oracle.should_ignore(entry.path, is_dir=is_dir):
                continue

            (dirs if is_dir else files).append(entry.path)

        return files, dirs
