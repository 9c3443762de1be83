from __future__ import annotations

"""
OpenRouter Completion Client.

Talks to the OpenAI-compatible chat-completions endpoint exposed by
OpenRouter using plain HTTP requests.
"""

import logging
from typing import Any, Dict, Optional

import requests

from autodocument.domain import constants as const
from autodocument.infra.llm.base import CompletionClient, CompletionResponse, TokenCounter
from autodocument.infra.llm.common import APP_TITLE, USER_AGENT

logger = logging.getLogger(__name__)


class OpenRouterClient(CompletionClient):
    """
    Chat-completions client for OpenRouter.

    Raises:
        ValueError: If no API key is provided.
    """

    provider_name = const.PROVIDER_OPENROUTER

    def __init__(
            self,
            api_key: str,
            model: str = const.DEFAULT_MODEL,
            base_url: str = const.OPENROUTER_BASE_URL,
            temperature: float = const.DEFAULT_TEMPERATURE,
            max_tokens: int = const.DEFAULT_MAX_TOKENS,
            timeout: int = const.DEFAULT_REQUEST_TIMEOUT,
            token_counter: Optional[TokenCounter] = None,
    ) -> None:
        if not api_key:
            raise ValueError(
                "OpenRouter API key is required. Set OPENROUTER_API_KEY or pass --api-key."
            )
        super().__init__(model, token_counter)
        self.api_key = api_key
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def _complete(self, system_prompt: str, user_message: str) -> CompletionResponse:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "HTTP-Referer": const.OPENROUTER_REFERER,
            "X-Title": APP_TITLE,
        }
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            response = requests.post(self.endpoint, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            msg = f"OpenRouter request timed out after {self.timeout}s"
            logger.warning(msg)
            return CompletionResponse(content="", successful=False, error=msg)
        except requests.exceptions.RequestException as e:
            msg = f"OpenRouter communication error: {e}"
            logger.error(msg)
            return CompletionResponse(content="", successful=False, error=msg)
        except ValueError as e:
            msg = f"OpenRouter returned a malformed response: {e}"
            logger.error(msg)
            return CompletionResponse(content="", successful=False, error=msg)

        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            error = data.get("error") if isinstance(data, dict) else None
            detail = error.get("message") if isinstance(error, dict) else "no choices returned"
            msg = f"OpenRouter returned no completion: {detail}"
            logger.error(msg)
            return CompletionResponse(content="", successful=False, error=msg)

        return CompletionResponse(content=content, successful=True)
