from __future__ import annotations

"""
File Analysis Domain Models.

Defines the Data Transfer Objects exchanged between the analyzer, the
child-content collector and the artifact tools.
"""

from dataclasses import dataclass, field
from typing import List, Optional

# -----------------------------------------------------------------------------
# FILE-LEVEL MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalyzedFile:
    """
    A file whose content was read and will be sent to the generator.

    Attributes:
        path: Absolute path of the file.
        content: Full text content.
        extension: Lower-cased extension including the leading dot.
    """
    path: str
    content: str
    extension: str


@dataclass(frozen=True)
class ExcludedFile:
    """
    A file left out of the generation request.

    Attributes:
        path: Absolute path of the file.
        reason: Human-readable classification of the exclusion.
    """
    path: str
    reason: str


@dataclass(frozen=True)
class ChildContentItem:
    """
    Content contributed by an immediate subdirectory.

    Attributes:
        path: Absolute path of the subdirectory it came from.
        content: Artifact text or an inlined single-file code block.
    """
    path: str
    content: str

# -----------------------------------------------------------------------------
# DIRECTORY-LEVEL MODELS
# -----------------------------------------------------------------------------

@dataclass
class AnalysisResult:
    """
    Per-directory outcome of the file analyzer.

    `limited` is only set by directory-wide ceilings (file count or aggregate
    size); a file excluded for its own size does not set it.

    Attributes:
        analyzed_files: Files read successfully, in input order.
        excluded_files: Files left out, with the reason.
        limited: Whether a directory-wide ceiling was hit.
        total_size: Sum of the sizes of the analyzed files, in bytes.
        limit_reason: Description of the ceiling that was hit.
    """
    analyzed_files: List[AnalyzedFile] = field(default_factory=list)
    excluded_files: List[ExcludedFile] = field(default_factory=list)
    limited: bool = False
    total_size: int = 0
    limit_reason: Optional[str] = None
