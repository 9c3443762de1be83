from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed namespace into
raw configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict, List, Optional

from autodocument.domain import constants as const

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the autodocument CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="autodocument",
        description=(
            "Generate per-directory documentation, test plans or code reviews by "
            "walking a project bottom-up and asking an LLM about each directory."
        ),
    )

    p.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Project directory to process (full path recommended).",
    )

    # --- Tool Selection ---
    p.add_argument(
        "-t", "--tool",
        dest="tool",
        default=const.DEFAULT_TOOL,
        help=f"Artifact tool to run (default: {const.DEFAULT_TOOL}). See --list-tools.",
    )
    p.add_argument(
        "--no-update",
        action="store_true",
        help="Keep existing artifacts; only create missing ones.",
    )
    p.add_argument(
        "--list-tools",
        action="store_true",
        help="List the available tools and exit.",
    )

    # --- Provider ---
    p.add_argument(
        "--provider",
        dest="provider",
        choices=const.SUPPORTED_PROVIDERS,
        default=None,
        help=f"Completion backend (default: {const.DEFAULT_PROVIDER}).",
    )
    p.add_argument("--model", dest="model", default=None, help="Model identifier.")
    p.add_argument(
        "--api-key",
        dest="api_key",
        default=None,
        help="API key (defaults to OPENROUTER_API_KEY or ANTHROPIC_API_KEY).",
    )

    # --- File Selection Limits ---
    p.add_argument(
        "--max-file-size-kb",
        dest="max_file_size_kb",
        type=int,
        default=None,
        help="Per-file size ceiling in KB.",
    )
    p.add_argument(
        "--max-files",
        dest="max_files_per_directory",
        type=int,
        default=None,
        help="Maximum code files analyzed per directory.",
    )
    p.add_argument(
        "--ext",
        dest="code_extensions",
        default=None,
        help="Comma-separated code extensions (e.g. .py,.ts).",
    )
    p.add_argument(
        "--include-hidden",
        action="store_true",
        help="Scan dot-prefixed files and directories.",
    )
    p.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Do not apply the root .gitignore rules.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration file.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective settings (without the API key) and continue.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options that were actually given appear in the result.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    for key in ("provider", "model", "api_key", "max_file_size_kb", "max_files_per_directory"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value

    if args.code_extensions:
        overrides["code_extensions"] = _split_csv(args.code_extensions)
    if args.include_hidden:
        overrides["include_hidden"] = True
    if args.no_gitignore:
        overrides["respect_gitignore"] = False
    if args.no_update:
        overrides["update_existing"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of trimmed items."""
    if value is None:
        return None
    return [x.strip() for x in value.split(",") if x.strip()]
