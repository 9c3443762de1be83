from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A scripted completion client so that no test ever reaches the network.
3. Factories for configurations and on-disk project trees.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from autodocument.domain.config import AutodocConfig  # noqa: E402
from autodocument.infra.llm.base import CompletionClient, CompletionResponse  # noqa: E402


# -----------------------------------------------------------------------------
# Test Doubles
# -----------------------------------------------------------------------------
class ScriptedClient(CompletionClient):
    """
    Completion client returning canned responses and recording every call.

    `responses` maps a substring of the user message to a
    response; anything else gets `default`.
    """

    provider_name = "scripted"

    def __init__(
            self,
            default: Optional[CompletionResponse] = None,
            responses: Optional[Dict[str, CompletionResponse]] = None,
    ) -> None:
        super().__init__("test-model", token_counter=lambda text, model: len(text) // 4)
        self.default = default or CompletionResponse(content="# Generated\n", successful=True)
        self.responses = responses or {}
        self.calls: List[Tuple[str, str]] = []

    def _complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        self.calls.append((system_prompt, user_message))
        for marker, response in self.responses.items():
            if marker in user_message:
                return response
        return self.default


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def scripted_client() -> ScriptedClient:
    """A client that always succeeds with a short markdown body."""
    return ScriptedClient()


@pytest.fixture
def client_factory() -> Callable[..., ScriptedClient]:
    """Build scripted clients with custom responses."""
    return ScriptedClient


@pytest.fixture
def make_config() -> Callable[..., AutodocConfig]:
    """
    Build an AutodocConfig with test-friendly defaults.

    Returns:
        Callable[..., AutodocConfig]: Factory accepting field overrides.
    """
    def _factory(**overrides: Any) -> AutodocConfig:
        values: Dict[str, Any] = {"api_key": "test-key"}
        values.update(overrides)
        return AutodocConfig(**values)

    return _factory


@pytest.fixture
def make_tree() -> Callable[[Path, Dict[str, Any]], Path]:
    """
    Materialize a nested dict as files and directories.

    Values that are dicts become directories, strings become file contents
    and ints become files of that many bytes.
    """
    def _build(root: Path, spec: Dict[str, Any]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for name, value in spec.items():
            target = root / name
            if isinstance(value, dict):
                _build(target, value)
            elif isinstance(value, int):
                target.write_text("x" * value, encoding="utf-8")
            else:
                target.write_text(value, encoding="utf-8")
        return root

    return _build
