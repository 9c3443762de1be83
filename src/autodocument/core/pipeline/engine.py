from __future__ import annotations

"""
Core orchestration pipeline.

Wires one run together:
1. Normalizes the project root.
2. Builds the completion client and resolves the requested tool.
3. Builds the scanner, analyzer and child-content collector.
4. Runs the bottom-up aggregation driver.
5. Renders the run summary.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from autodocument.core.pipeline.aggregator import AggregationDriver, ProgressCallback
from autodocument.core.services.analyzer import FileAnalyzer
from autodocument.core.services.collector import ChildContentCollector
from autodocument.core.services.scanner import TreeScanner
from autodocument.core.tools.registry import build_default_registry
from autodocument.domain import constants as const
from autodocument.domain.config import AutodocConfig
from autodocument.domain.generation_models import AggregationResult
from autodocument.infra.fs import normalize_path
from autodocument.infra.llm import CompletionClient, create_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineRun:
    """
    Outcome of one pipeline execution.

    Attributes:
        root_path: Absolute project root that was processed.
        tool_name: Name of the tool that ran.
        result: Counters and errors of the run.
        summary: Markdown report rendered by the tool.
    """
    root_path: str
    tool_name: str
    result: AggregationResult
    summary: str

    @property
    def ok(self) -> bool:
        return self.result.ok


def run_pipeline(
        root_path: str,
        config: AutodocConfig,
        *,
        tool_name: str = const.DEFAULT_TOOL,
        client: Optional[CompletionClient] = None,
        progress: Optional[ProgressCallback] = None,
        update_existing: Optional[bool] = None,
) -> PipelineRun:
    """
    Execute a full bottom-up generation run.

    Args:
        root_path: Directory to process.
        config: Validated runtime configuration.
        tool_name: Registered tool to run.
        client: Completion client; created from `config` when omitted.
        progress: Optional per-directory progress sink.
        update_existing: Overrides `config.update_existing` when given.

    Returns:
        PipelineRun: The counters and the rendered summary.

    Raises:
        UnknownToolError: If `tool_name` is not registered.
        ValueError: If the client cannot be created (e.g. missing API key).
    """
    root = normalize_path(root_path, os.getcwd())
    logger.info(f"Pipeline execution started for: {root}")

    if client is None:
        client = create_client(config)

    registry = build_default_registry(client, update_existing=config.update_existing)
    tool = registry.get_tool(tool_name)

    scanner = TreeScanner(root, config)
    driver = AggregationDriver(
        root_path=root,
        scanner=scanner,
        analyzer=FileAnalyzer(config),
        tool=tool,
        collector=ChildContentCollector(scanner, tool.output_filename),
        progress=progress,
    )

    result = driver.run(update_existing=update_existing)
    return PipelineRun(
        root_path=root,
        tool_name=tool.name,
        result=result,
        summary=tool.format_result_summary(result),
    )
