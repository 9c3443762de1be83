from __future__ import annotations

"""
Artifact Tool Registry.

Central lookup of the available artifact tools by name. The default
registry exposes documentation, test plan and code review generation, all
backed by the same generic ArtifactTool.
"""

import logging
from typing import Dict, List

from autodocument.core.tools.base import ArtifactTool, ToolSpec
from autodocument.domain import constants as const
from autodocument.domain.prompts import DOCUMENTATION_PROMPTS, REVIEW_PROMPTS, TESTPLAN_PROMPTS
from autodocument.infra.llm.base import CompletionClient

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# BUILT-IN TOOL SPECS
# -----------------------------------------------------------------------------
DOCUMENTATION_TOOL = ToolSpec(
    name=const.TOOL_DOCUMENTATION,
    description="Generates documentation for code in a repository by recursively "
                "analyzing directories and files",
    output_filename=const.DOCUMENTATION_FILENAME,
    fallback_filename=const.DOCUMENTATION_FALLBACK_FILENAME,
    title="Documentation",
    artifact_label="documentation",
    prompts=DOCUMENTATION_PROMPTS,
)

TESTPLAN_TOOL = ToolSpec(
    name=const.TOOL_TESTPLAN,
    description="Generates a test plan for code in a repository by recursively "
                "analyzing directories and files",
    output_filename=const.TESTPLAN_FILENAME,
    fallback_filename=const.TESTPLAN_FALLBACK_FILENAME,
    title="Test Plan",
    artifact_label="test plan",
    prompts=TESTPLAN_PROMPTS,
)

REVIEW_TOOL = ToolSpec(
    name=const.TOOL_REVIEW,
    description="Generates a code review for a repository by recursively "
                "analyzing directories and files",
    output_filename=const.REVIEW_FILENAME,
    fallback_filename=const.REVIEW_FALLBACK_FILENAME,
    title="Code Review",
    artifact_label="code review",
    prompts=REVIEW_PROMPTS,
)

BUILTIN_TOOLS = (DOCUMENTATION_TOOL, TESTPLAN_TOOL, REVIEW_TOOL)


class UnknownToolError(LookupError):
    """Raised when a tool name is not registered."""


class ToolRegistry:
    """
    Name-keyed store of artifact tools.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, ArtifactTool] = {}

    def register(self, tool: ArtifactTool) -> None:
        """Add a tool, replacing any tool registered under the same name."""
        if tool.name in self._tools:
            logger.warning(f"Tool '{tool.name}' is already registered. Replacing it.")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get_tool(self, name: str) -> ArtifactTool:
        """
        Look up a tool by name.

        Raises:
            UnknownToolError: If no tool has that name.
        """
        try:
            return self._tools[name]
        except KeyError:
            available = ", ".join(self.list_tools()) or "none"
            raise UnknownToolError(f"Unknown tool '{name}'. Available tools: {available}") from None

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> List[str]:
        """Registered tool names, in registration order."""
        return list(self._tools)


def build_default_registry(client: CompletionClient, update_existing: bool = True) -> ToolRegistry:
    """
    Create a registry holding the built-in tools.

    Args:
        client: Completion provider shared by every tool.
        update_existing: Default update policy of the tools.

    Returns:
        ToolRegistry: The populated registry.
    """
    registry = ToolRegistry()
    for spec in BUILTIN_TOOLS:
        registry.register(ArtifactTool(spec, client, update_existing))
    return registry
