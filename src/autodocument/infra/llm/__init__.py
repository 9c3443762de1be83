from __future__ import annotations

"""
LLM Completion Infrastructure.

Facade over the provider-specific completion clients.
"""

from autodocument.infra.llm.anthropic_client import AnthropicClient
from autodocument.infra.llm.base import CompletionClient, CompletionResponse
from autodocument.infra.llm.factory import create_client
from autodocument.infra.llm.openrouter_client import OpenRouterClient

__all__ = [
    "CompletionClient",
    "CompletionResponse",
    "OpenRouterClient",
    "AnthropicClient",
    "create_client",
]
