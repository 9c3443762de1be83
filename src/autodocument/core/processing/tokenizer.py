from __future__ import annotations

"""
Prompt Size Estimation.

Estimates how many tokens a prompt will consume before it is sent to the
completion provider. Uses a Strategy Pattern: tiktoken encodings for the
model families it covers and a character-density heuristic for the rest,
or whenever an encoder cannot be loaded.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict

import tiktoken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

CHARS_PER_TOKEN_AVG = 4
MODERN_ENCODING = "o200k_base"
LEGACY_ENCODING = "cl100k_base"

# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for model-specific tokenization algorithms.
    """

    @abstractmethod
    def count(self, text: str, model_id: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.
            model_id: Specific model identifier for encoding selection.

        Returns:
            int: Total token count.
        """
        pass


class HeuristicStrategy(TokenizerStrategy):
    """
    Fallback algorithm using character density estimation.
    """

    def count(self, text: str, model_id: str) -> int:
        """Estimate tokens using the characters-to-token ratio."""
        if not text:
            return 0
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoder via tiktoken.

    Claude models routed through OpenRouter have no public encoder; the
    modern OpenAI encoding is used as a close approximation.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, "tiktoken.Encoding"] = {}

    def count(self, text: str, model_id: str) -> int:
        """Execute local BPE encoding via tiktoken."""
        encoding_name = MODERN_ENCODING
        if any(x in model_id.lower() for x in ["gpt-4-", "gpt-3.5", "legacy"]):
            encoding_name = LEGACY_ENCODING

        encoding = self._cache.get(encoding_name)
        if encoding is None:
            try:
                encoding = tiktoken.get_encoding(encoding_name)
            except ValueError:
                logger.debug(f"Encoding '{encoding_name}' not found, falling back to {LEGACY_ENCODING}.")
                encoding = tiktoken.get_encoding(LEGACY_ENCODING)
            self._cache[encoding_name] = encoding

        return len(encoding.encode(text, disallowed_special=()))

# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Model-aware token estimation with graceful fallback.
    """

    def __init__(self) -> None:
        self.heuristic = HeuristicStrategy()
        tiktoken_strategy = TiktokenStrategy()

        # Model family prefix -> strategy
        self._strategy_map: Dict[str, TokenizerStrategy] = {
            "gpt": tiktoken_strategy,
            "o1": tiktoken_strategy,
            "o3": tiktoken_strategy,
            "o4": tiktoken_strategy,
            "claude": tiktoken_strategy,
            "anthropic/": tiktoken_strategy,
            "openai/": tiktoken_strategy,
        }

    def count(self, text: str, model: str) -> int:
        """
        Determine the strategy and calculate the token count.

        Args:
            text: Raw input text.
            model: Target model identifier.

        Returns:
            int: Estimated token count, never raising.
        """
        if not text:
            return 0

        model_lower = model.lower()
        strategy: TokenizerStrategy = self.heuristic
        for prefix, strat in self._strategy_map.items():
            if prefix in model_lower:
                strategy = strat
                break

        try:
            return strategy.count(text, model)
        except Exception as e:
            logger.warning(f"Strategy {type(strategy).__name__} failed: {e}. Using heuristic fallback.")
            return self.heuristic.count(text, model)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_SERVICE_INSTANCE = TokenizerService()


def count_tokens(text: str, model: str) -> int:
    """
    Estimate the number of tokens of `text` for the target model.

    Args:
        text: Input string content.
        model: Target model name (e.g., "anthropic/claude-3-7-sonnet").

    Returns:
        int: Total token count.
    """
    return _SERVICE_INSTANCE.count(text, model)
