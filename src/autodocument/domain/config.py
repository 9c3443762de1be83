from __future__ import annotations

"""
Configuration Domain Management.

Defines the immutable runtime configuration handed to every component and
handles persistent storage of user preferences as JSON in the user data
directory. Raw configuration travels as a dictionary (defaults, persisted
state, environment, CLI overrides) until the validator turns it into an
AutodocConfig.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from autodocument.domain import constants as const
from autodocument.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")

# Environment variable -> configuration key
ENV_OVERRIDES: Dict[str, str] = {
    "AUTODOCUMENT_PROVIDER": "provider",
    "OPENROUTER_MODEL": "model",
    "MAX_FILE_SIZE_KB": "max_file_size_kb",
    "MAX_FILES_PER_DIR": "max_files_per_directory",
}

API_KEY_ENV_BY_PROVIDER: Dict[str, str] = {
    const.PROVIDER_OPENROUTER: "OPENROUTER_API_KEY",
    const.PROVIDER_ANTHROPIC: "ANTHROPIC_API_KEY",
}


# -----------------------------------------------------------------------------
# Runtime Configuration Model
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AutodocConfig:
    """
    Immutable configuration passed explicitly to the scanner, analyzer,
    tools and driver.

    Attributes:
        provider: Completion backend identifier ('openrouter' or 'anthropic').
        api_key: Credential for the selected provider.
        model: Model identifier understood by the provider.
        base_url: API root for OpenRouter-compatible endpoints.
        temperature: Sampling temperature for completions.
        max_tokens: Maximum completion length.
        request_timeout: HTTP timeout in seconds for one completion call.
        code_extensions: Allow-list of lower-cased extensions with a dot.
        max_file_size_kb: Per-file size ceiling.
        max_files_per_directory: Per-directory qualifying file ceiling.
        max_total_size_kb: Aggregate size ceiling; derived when None.
        respect_gitignore: Whether root ignore rules are applied.
        include_hidden: Whether dot-prefixed entries are scanned.
        ignore_filename: Name of the root-relative ignore rule file.
        update_existing: Whether existing artifacts are regenerated.
    """
    provider: str = const.DEFAULT_PROVIDER
    api_key: str = ""
    model: str = const.DEFAULT_MODEL
    base_url: str = const.OPENROUTER_BASE_URL
    temperature: float = const.DEFAULT_TEMPERATURE
    max_tokens: int = const.DEFAULT_MAX_TOKENS
    request_timeout: int = const.DEFAULT_REQUEST_TIMEOUT

    code_extensions: Tuple[str, ...] = tuple(const.DEFAULT_CODE_EXTENSIONS)
    max_file_size_kb: int = const.DEFAULT_MAX_FILE_SIZE_KB
    max_files_per_directory: int = const.DEFAULT_MAX_FILES_PER_DIRECTORY
    max_total_size_kb: Optional[int] = None

    respect_gitignore: bool = True
    include_hidden: bool = False
    ignore_filename: str = const.DEFAULT_IGNORE_FILENAME

    update_existing: bool = True

    @property
    def max_file_size_bytes(self) -> int:
        """Per-file ceiling in bytes."""
        return self.max_file_size_kb * 1024

    @property
    def max_total_size_bytes(self) -> int:
        """Aggregate ceiling in bytes (file-count ceiling x per-file ceiling by default)."""
        if self.max_total_size_kb is not None:
            return self.max_total_size_kb * 1024
        return self.max_files_per_directory * self.max_file_size_bytes

    def is_code_extension(self, extension: str) -> bool:
        """Check an extension against the allow-list, case-insensitively."""
        return extension.lower() in self.code_extensions

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Serialize into the raw dictionary schema."""
        data: Dict[str, Any] = {
            "provider": self.provider,
            "api_key": self.api_key,
            "model": self.model,
            "base_url": self.base_url,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "request_timeout": self.request_timeout,
            "code_extensions": list(self.code_extensions),
            "max_file_size_kb": self.max_file_size_kb,
            "max_files_per_directory": self.max_files_per_directory,
            "max_total_size_kb": self.max_total_size_kb,
            "respect_gitignore": self.respect_gitignore,
            "include_hidden": self.include_hidden,
            "ignore_filename": self.ignore_filename,
            "update_existing": self.update_existing,
        }
        if mask_secrets and self.api_key:
            data["api_key"] = "***"
        return data


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default raw configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return AutodocConfig().to_dict(mask_secrets=False)


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default persisted state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": const.CURRENT_CONFIG_VERSION,
        "settings": {},
    }


def apply_env_overrides(
        raw: Dict[str, Any],
        environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Layer environment variables on top of a raw configuration.

    The API key is resolved after the provider so that ANTHROPIC_API_KEY is
    only picked when the Anthropic backend is selected.

    Args:
        raw: Base configuration dictionary.
        environ: Environment mapping; defaults to os.environ.

    Returns:
        Dict[str, Any]: A new dictionary with the overrides applied.
    """
    env = os.environ if environ is None else environ
    out = dict(raw)

    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            out[key] = value

    provider = str(out.get("provider") or const.DEFAULT_PROVIDER).strip().lower()
    key_var = API_KEY_ENV_BY_PROVIDER.get(provider)
    if key_var and env.get(key_var) and not out.get("api_key"):
        out["api_key"] = env[key_var]

    return out


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load persisted state from disk.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    default_state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            logger.warning("Corrupted config file. Resetting to defaults.")
            return default_state

        state = default_state
        settings = data.get("settings")
        if isinstance(settings, dict):
            state["settings"].update(settings)

        state["version"] = const.CURRENT_CONFIG_VERSION
        return state

    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = const.CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Retrieve defaults merged with the persisted settings.
    """
    defaults = get_default_config()
    defaults.update(load_app_state().get("settings", {}))
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the provided raw configuration. The API key is never written.
    """
    settings = {k: v for k, v in config.items() if k != "api_key"}
    state = load_app_state()
    state["settings"] = settings
    save_app_state(state)
