from __future__ import annotations

"""
Completion Client Factory.

Maps the configured provider to a concrete client.
"""

import logging
from typing import Optional

from autodocument.domain import constants as const
from autodocument.domain.config import AutodocConfig
from autodocument.infra.llm.anthropic_client import AnthropicClient
from autodocument.infra.llm.base import CompletionClient, TokenCounter
from autodocument.infra.llm.openrouter_client import OpenRouterClient

logger = logging.getLogger(__name__)


def create_client(config: AutodocConfig, token_counter: Optional[TokenCounter] = None) -> CompletionClient:
    """
    Build the completion client selected by `config.provider`.

    OpenRouter model ids carry a vendor prefix ('anthropic/...'); when the
    Anthropic backend is used with such an id, the SDK default model is used.

    Raises:
        ValueError: If the provider is unknown or the API key is missing.
    """
    if config.provider == const.PROVIDER_OPENROUTER:
        logger.debug(f"Using OpenRouter with model {config.model}")
        return OpenRouterClient(
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout,
            token_counter=token_counter,
        )

    if config.provider == const.PROVIDER_ANTHROPIC:
        model = config.model
        if "/" in model:
            model = const.DEFAULT_ANTHROPIC_MODEL
        logger.debug(f"Using Anthropic with model {model}")
        return AnthropicClient(
            api_key=config.api_key,
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.request_timeout,
            token_counter=token_counter,
        )

    raise ValueError(f"Unsupported provider: {config.provider}")
