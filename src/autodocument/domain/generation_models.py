from __future__ import annotations

"""
Generation Domain Data Models.

Defines the result structures used to communicate outcomes between the
artifact tools, the aggregation driver and the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# PER-DIRECTORY OUTCOME
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class GenerationOutcome:
    """
    Result of one generator call for a single directory.

    Attributes:
        output_path: Absolute path of the artifact file.
        success: Whether an artifact is in place after the call.
        content: Generated text, or the pre-existing text when skipped.
        error: Failure description when `success` is False.
        is_update: True when an artifact existed and was regenerated.
        skipped: True when an artifact existed and the update policy kept it.
    """
    output_path: str
    success: bool
    content: str = ""
    error: Optional[str] = None
    is_update: bool = False
    skipped: bool = False

# -----------------------------------------------------------------------------
# RUN-LEVEL AGGREGATION
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AggregationError:
    """
    Failure recorded for one directory (or for the root on a setup failure).

    Attributes:
        directory: Absolute path of the failing directory.
        error: Descriptive error message.
    """
    directory: str
    error: str


@dataclass
class AggregationResult:
    """
    Counters accumulated over one bottom-up pass.

    Mutated only by the aggregation driver while the run is in progress.

    Attributes:
        total_directories: Number of directories in the bottom-up order.
        successful_generations: Generator calls that ended with an artifact.
        failed_generations: Generator calls or directories that failed.
        fallback_files: Directories that received a fallback artifact.
        updated_generations: Successful calls that replaced an artifact.
        skipped_generations: Successful calls that kept an existing artifact.
        errors: Per-directory failures, in processing order.
    """
    total_directories: int = 0
    successful_generations: int = 0
    failed_generations: int = 0
    fallback_files: int = 0
    updated_generations: int = 0
    skipped_generations: int = 0
    errors: List[AggregationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the run recorded no error."""
        return not self.errors

    def record_error(self, directory: str, error: str) -> None:
        """Append a failure entry."""
        self.errors.append(AggregationError(directory=directory, error=error))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the counters for JSON rendering."""
        return {
            "total_directories": self.total_directories,
            "successful_generations": self.successful_generations,
            "failed_generations": self.failed_generations,
            "fallback_files": self.fallback_files,
            "updated_generations": self.updated_generations,
            "skipped_generations": self.skipped_generations,
            "errors": [{"directory": e.directory, "error": e.error} for e in self.errors],
        }
