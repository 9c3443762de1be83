from __future__ import annotations

"""
Logging Configuration Model.

Describes how the logging subsystem is initialized for one process: the
severity threshold, the console sink and the optional rotating log file.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable logging setup.

    Attributes:
        level: Minimum severity captured by every sink.
        console: Whether records are echoed to stderr.
        log_file: Optional path of a rotating log file.
        max_bytes: Size threshold that triggers a rollover.
        backup_count: Rotated segments kept on disk.
        console_fmt: Format of console lines.
        file_fmt: Format of file lines.
        datefmt: Timestamp format of file lines.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
