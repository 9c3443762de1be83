from __future__ import annotations

"""
Completion Client Contracts.

Defines the provider-agnostic interface used by the artifact tools to turn a
system prompt and a user message into generated markdown.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from autodocument.core.processing.tokenizer import count_tokens

logger = logging.getLogger(__name__)

TokenCounter = Callable[[str, str], int]


@dataclass(frozen=True)
class CompletionResponse:
    """
    Outcome of one completion request.

    Attributes:
        content: Generated text (empty on failure).
        successful: Whether the provider returned usable content.
        error: Failure description when `successful` is False.
    """
    content: str
    successful: bool
    error: Optional[str] = None


class CompletionClient(ABC):
    """
    Base class for completion providers.

    Args:
        model: Provider model identifier.
        token_counter: Prompt size estimator, `(text, model) -> tokens`.
    """

    provider_name: str = "base"

    def __init__(self, model: str, token_counter: Optional[TokenCounter] = None) -> None:
        self.model = model
        self._count_tokens = token_counter or count_tokens

    def complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        """
        Request a completion. Transport and API failures are returned as an
        unsuccessful response, never raised.
        """
        estimate = self._count_tokens(system_prompt + "\n" + user_message, self.model)
        logger.debug(f"{self.provider_name}: sending ~{estimate} prompt tokens to {self.model}")
        return self._complete(system_prompt, user_message)

    @abstractmethod
    def _complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        pass
