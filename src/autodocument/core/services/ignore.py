from __future__ import annotations

"""
Ignore Rule Oracle.

Wraps the gitignore-style rules found at the project root and answers
whether a given path must be skipped by the scanner. Pattern semantics are
delegated to pathspec; this module only handles loading and path
normalization (root-relative, forward slashes).
"""

import logging
import os
from typing import Iterable, List, Optional

import pathspec

from autodocument.domain import constants as const
from autodocument.infra.fs import read_text_file

logger = logging.getLogger(__name__)


class IgnoreOracle:
    """
    Answers "should this path be skipped" for one project root.

    Rules are loaded once per run. When the rule file is absent or
    unreadable the oracle ignores nothing.
    """

    def __init__(self, root_path: str, ignore_filename: str = const.DEFAULT_IGNORE_FILENAME) -> None:
        self.root_path = os.path.abspath(root_path)
        self.ignore_filename = ignore_filename
        self._spec: Optional[pathspec.PathSpec] = None
        self.rule_count = 0

    # -------------------------------------------------------------------------
    # Rule Loading
    # -------------------------------------------------------------------------

    def load_rules(self) -> bool:
        """
        Read the root-relative rule file.

        Returns:
            bool: True when a rule file was found and parsed.
        """
        rule_file = os.path.join(self.root_path, self.ignore_filename)
        if not os.path.isfile(rule_file):
            logger.debug(f"No ignore file at {rule_file}; nothing will be ignored.")
            self._spec = None
            self.rule_count = 0
            return False

        try:
            lines = read_text_file(rule_file).splitlines()
        except OSError as e:
            logger.warning(f"Could not read ignore file '{rule_file}': {e}")
            self._spec = None
            self.rule_count = 0
            return False

        self._spec = pathspec.GitIgnoreSpec.from_lines(lines)
        self.rule_count = len(self._spec.patterns)
        logger.debug(f"Loaded {self.rule_count} ignore rules from {rule_file}")
        return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def should_ignore(self, path: str, is_dir: bool = False) -> bool:
        """
        Check a path against the loaded rules.

        Args:
            path: Absolute path, or a path relative to the root.
            is_dir: Marks the path as a directory so that directory-only
                    rules such as 'build/' can match.

        Returns:
            bool: True if the path is ignored. The root itself and paths
                  outside the root are never ignored.
        """
        if self._spec is None:
            return False

        rel = self._to_relative(path)
        if rel is None:
            return False

        if is_dir:
            rel += "/"
        return self._spec.match_file(rel)

    def filter_paths(self, paths: Iterable[str]) -> List[str]:
        """Drop ignored paths, preserving the input order."""
        return [p for p in paths if not self.should_ignore(p, is_dir=os.path.isdir(p))]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _to_relative(self, path: str) -> Optional[str]:
        absolute = path if os.path.isabs(path) else os.path.join(self.root_path, path)
        rel = os.path.relpath(os.path.abspath(absolute), self.root_path)
        rel = rel.replace(os.sep, "/")
        if rel == "." or rel == ".." or rel.startswith("../"):
            return None
        return rel
