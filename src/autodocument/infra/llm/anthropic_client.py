from __future__ import annotations

"""
Anthropic Completion Client.

Uses the official SDK to send the system prompt and user message directly
to the Messages API.
"""

import logging
from typing import Optional

import anthropic

from autodocument.domain import constants as const
from autodocument.infra.llm.base import CompletionClient, CompletionResponse, TokenCounter

logger = logging.getLogger(__name__)


class AnthropicClient(CompletionClient):
    """
    Messages API client for Claude models.

    Raises:
        ValueError: If no API key is provided.
    """

    provider_name = const.PROVIDER_ANTHROPIC

    def __init__(
            self,
            api_key: str,
            model: str = const.DEFAULT_ANTHROPIC_MODEL,
            temperature: float = const.DEFAULT_TEMPERATURE,
            max_tokens: int = const.DEFAULT_MAX_TOKENS,
            timeout: int = const.DEFAULT_REQUEST_TIMEOUT,
            token_counter: Optional[TokenCounter] = None,
    ) -> None:
        if not api_key:
            raise ValueError(
                "Anthropic API key is required. Set ANTHROPIC_API_KEY or pass --api-key."
            )
        super().__init__(model, token_counter)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout)

    def _complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_message}],
            )
        except anthropic.APIError as e:
            msg = f"Anthropic API error: {e}"
            logger.error(msg)
            return CompletionResponse(content="", successful=False, error=msg)

        text = "".join(
            getattr(block, "text", "") for block in response.content
            if getattr(block, "type", "") == "text"
        )
        return CompletionResponse(content=text, successful=True)
