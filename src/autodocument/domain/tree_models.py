from __future__ import annotations

"""
Directory Tree Domain Models.

Defines the immutable node structure produced by a single recursive scan of
the project root.
"""

from dataclasses import dataclass, field
from typing import Iterator, Tuple


@dataclass(frozen=True)
class DirectoryNode:
    """
    One filesystem directory captured during a scan.

    Attributes:
        path: Absolute path, unique key of the node.
        name: Final path segment.
        files: Absolute paths of the files directly inside the directory.
        subdirectories: Owned child nodes, in scan order.
    """
    path: str
    name: str
    files: Tuple[str, ...] = field(default_factory=tuple)
    subdirectories: Tuple["DirectoryNode", ...] = field(default_factory=tuple)

    @property
    def is_leaf(self) -> bool:
        """True when the directory has no (non-filtered) subdirectories."""
        return not self.subdirectories

    def walk(self) -> Iterator["DirectoryNode"]:
        """Yield this node and every descendant, parents first."""
        yield self
        for sub in self.subdirectories:
            yield from sub.walk()
