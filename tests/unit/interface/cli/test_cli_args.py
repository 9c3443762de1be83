from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration keys.
2. CSV string parsing logic.
3. Options that were not given stay out of the overrides.
"""

import pytest

from autodocument.interface.cli.args import _split_csv, args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_defaults_produce_no_overrides():
    """TC-01: A bare invocation leaves the configuration untouched."""
    args = parse_args(["/repo"])

    assert args.path == "/repo"
    assert args.tool == "generate_documentation"
    assert args_to_overrides(args) == {}


def test_value_options_mapping():
    """TC-02: Value options map onto configuration keys with their types."""
    args = parse_args([
        "/repo",
        "--provider", "anthropic",
        "--model", "claude-3-5-haiku-latest",
        "--api-key", "sk-test",
        "--max-file-size-kb", "50",
        "--max-files", "4",
    ])

    assert args_to_overrides(args) == {
        "provider": "anthropic",
        "model": "claude-3-5-haiku-latest",
        "api_key": "sk-test",
        "max_file_size_kb": 50,
        "max_files_per_directory": 4,
    }


def test_boolean_flags_mapping():
    """TC-03: Store-true flags translate into their configuration polarity."""
    overrides = args_to_overrides(parse_args(["/repo", "--include-hidden", "--no-gitignore", "--no-update"]))

    assert overrides == {"include_hidden": True, "respect_gitignore": False, "update_existing": False}


def test_extensions_csv():
    """TC-04: --ext accepts a comma-separated list."""
    overrides = args_to_overrides(parse_args(["/repo", "--ext", ".py, .ts,,go"]))

    assert overrides["code_extensions"] == [".py", ".ts", "go"]
    assert _split_csv(None) is None


def test_tool_selection_and_modes():
    """TC-05: Tool and output switches are parsed but are not configuration."""
    args = parse_args(["-t", "autoreview", "--json", "--dump-config", "--debug", "--list-tools"])

    assert args.path is None
    assert args.tool == "autoreview"
    assert args.json_output and args.dump_config and args.debug and args.list_tools
    assert args_to_overrides(args) == {}


def test_invalid_provider_is_rejected():
    """TC-06: Unknown providers fail at parse time."""
    with pytest.raises(SystemExit):
        parse_args(["/repo", "--provider", "gemini"])
