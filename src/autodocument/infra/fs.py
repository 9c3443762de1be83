from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation and the small set of text I/O
primitives used to read source files and persist artifacts. Acts as an
abstraction over the 'os' module to keep path handling uniform across
Windows and Unix-like systems.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "Autodocument"
UNIX_APP_DIR_NAME = ".autodocument"
TEXT_ENCODING = "utf-8"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/Autodocument
    - Linux/Mac: ~/.autodocument

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def relative_display_path(path: str, start: str) -> str:
    """Return `path` relative to `start` with forward slashes, '.' for the start itself."""
    rel = os.path.relpath(path, start)
    return rel.replace(os.sep, "/")

# -----------------------------------------------------------------------------
# TEXT I/O API
# -----------------------------------------------------------------------------

def read_text_file(path: str) -> str:
    """
    Read a whole file as UTF-8 text.

    Undecodable byte sequences are replaced so binary noise in a source file
    never aborts a run.

    Raises:
        OSError: If the file cannot be opened.
    """
    with open(path, "r", encoding=TEXT_ENCODING, errors="replace") as f:
        return f.read()


def read_existing_text(path: str) -> Optional[str]:
    """
    Read a file if it exists.

    Returns:
        Optional[str]: The content, or None when the file is absent.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not os.path.isfile(path):
        return None
    return read_text_file(path)


def write_text_file(path: str, content: str) -> None:
    """
    Create or overwrite a text file.

    Raises:
        OSError: If filesystem write permissions are denied.
    """
    with open(path, "w", encoding=TEXT_ENCODING) as f:
        f.write(content)
