from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration resolution
(defaults, persisted settings, environment, command-line overrides),
pipeline execution with progress reporting, and result rendering.

Exit codes:
    0: Run completed without errors.
    1: Run completed with errors, or failed unexpectedly.
    2: Invalid path, tool or configuration.
    130: Interrupted by the user.
"""

import json
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from autodocument.core.pipeline.engine import PipelineRun, run_pipeline
from autodocument.core.pipeline.validator import validate_config
from autodocument.core.tools.registry import BUILTIN_TOOLS, UnknownToolError
from autodocument.domain.config import (
    apply_env_overrides,
    get_default_config,
    load_config,
    save_config,
)
from autodocument.infra.logging import LoggingConfig, configure_logging, get_logger
from autodocument.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# PROGRESS REPORTING
# -----------------------------------------------------------------------------

class ProgressReporter:
    """
    Progress sink that logs one line per visited directory plus a periodic
    heartbeat, so long runs visibly stay alive.
    """

    def __init__(self) -> None:
        self.visited = 0

    def __call__(self, directory: str, file_count: int, current: int, total: int) -> None:
        self.visited += 1
        percent = round(current / total * 100) if total else 100
        logger.info(
            f"[{percent}%] Processing directory: {directory} ({file_count} files, {current}/{total})"
        )
        if current % 3 == 0 or percent % 10 == 0:
            stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
            logger.info(f"Heartbeat at {stamp}: {percent}% complete")

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (stderr, optional file)
    configure_logging(LoggingConfig(
        level="DEBUG" if args.debug else "INFO",
        console=True,
        log_file=args.log_file,
    ))

    if args.list_tools:
        _print_tools(args.json_output)
        return EXIT_OK

    # 3. Configuration hierarchy: defaults < saved settings < environment < CLI
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(apply_env_overrides(base_conf), cli_args.args_to_overrides(args))

    try:
        config, warnings = validate_config(raw_conf, strict=False)
    except (TypeError, ValueError) as e:
        return _fail(f"Invalid configuration: {e}", EXIT_USAGE)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(config.to_dict(mask_secrets=True), ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        save_config(config.to_dict(mask_secrets=False))
        logger.info("Configuration saved.")
        if not args.path:
            return EXIT_OK

    # 4. Pre-flight checks
    if not args.path:
        return _fail("A project path is required.", EXIT_USAGE)

    root_path = os.path.abspath(os.path.expanduser(args.path))
    if not os.path.isdir(root_path):
        return _fail(f"Path does not exist or is not a directory: {root_path}", EXIT_USAGE)

    # 5. Pipeline execution
    logger.info(f"Targeting project directory: {root_path}")
    try:
        run = run_pipeline(
            root_path,
            config,
            tool_name=args.tool,
            progress=ProgressReporter(),
        )
    except UnknownToolError as e:
        return _fail(str(e), EXIT_USAGE)
    except ValueError as e:
        return _fail(str(e), EXIT_USAGE)
    except KeyboardInterrupt:
        logger.warning("Run interrupted by user.")
        print("Interrupted. Artifacts written so far are kept.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Pipeline failure: {e}", exc_info=True)
        print(f"ERROR: Pipeline failure: {e}", file=sys.stderr)
        return EXIT_FAILURE

    # 6. Rendering
    if args.json_output:
        print(json.dumps(_run_to_dict(run), ensure_ascii=False, indent=2))
    else:
        print(run.summary)

    return EXIT_OK if run.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge of the non-None overrides into the base configuration."""
    out = dict(base)
    for k, v in overrides.items():
        if v is not None:
            out[k] = v
    return out


def _fail(msg: str, code: int) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return code


def _run_to_dict(run: PipelineRun) -> Dict[str, Any]:
    data: Dict[str, Any] = {"root_path": run.root_path, "tool": run.tool_name, "ok": run.ok}
    data.update(run.result.to_dict())
    return data


def _print_tools(as_json: bool) -> None:
    if as_json:
        payload = [
            {
                "name": spec.name,
                "description": spec.description,
                "output_filename": spec.output_filename,
                "fallback_filename": spec.fallback_filename,
            }
            for spec in BUILTIN_TOOLS
        ]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    for spec in BUILTIN_TOOLS:
        print(f"{spec.name:<24} {spec.output_filename:<18} {spec.description}")


if __name__ == "__main__":
    sys.exit(main())
