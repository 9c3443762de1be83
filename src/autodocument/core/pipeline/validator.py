from __future__ import annotations

"""
Configuration Validation Service.

Acts as the gatekeeper between raw configuration dictionaries (persisted
state, environment, CLI) and the immutable AutodocConfig consumed by the
core. Handles type coercion, default injection and domain normalization.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from autodocument.domain import constants as const
from autodocument.domain.config import AutodocConfig, get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[AutodocConfig, List[str]]:
    """
    Validate and normalize a raw configuration dictionary.

    Converts untrusted inputs into strictly typed parameters and fills
    missing keys with domain defaults.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on invalid values instead of coercing.

    Returns:
        Tuple[AutodocConfig, List[str]]: The normalized configuration and a
                                         list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return AutodocConfig(), warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    unknown = sorted(k for k in config if k not in defaults)
    for key in unknown:
        warnings.append(f"Unknown configuration key '{key}' ignored.")

    # Declarative schema
    string_fields = ["api_key", "model", "base_url", "ignore_filename"]
    bool_fields = ["respect_gitignore", "include_hidden", "update_existing"]
    positive_int_fields = [
        "max_tokens", "request_timeout", "max_file_size_kb", "max_files_per_directory",
    ]

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in positive_int_fields:
        merged[field] = _as_positive_int(merged.get(field), defaults[field], field, warnings, strict)

    merged["max_total_size_kb"] = _as_optional_positive_int(
        merged.get("max_total_size_kb"), "max_total_size_kb", warnings, strict
    )
    merged["temperature"] = _as_temperature(merged.get("temperature"), defaults["temperature"], warnings, strict)
    merged["provider"] = _normalize_provider(merged.get("provider"), warnings, strict)

    extensions = _as_list_str(
        merged.get("code_extensions"), defaults["code_extensions"], "code_extensions", warnings, strict
    )
    merged["code_extensions"] = tuple(_normalize_extensions(extensions, warnings, strict))

    return AutodocConfig(**merged), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _fail(msg: str, warnings: List[str], strict: bool, exc: type = TypeError) -> None:
    """Raise in strict mode, otherwise record a fallback warning."""
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    _fail(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    _fail(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce ints and numeric strings; reject zero and negatives."""
    if value is None:
        return fallback

    parsed: Optional[int] = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and not strict:
        try:
            parsed = int(value.strip(), 10)
            warnings.append(f"Field '{field}' converted from '{value}' to {parsed}.")
        except ValueError:
            parsed = None

    if parsed is None:
        _fail(f"Invalid field '{field}': expected int, received {type(value).__name__}.", warnings, strict)
        return fallback

    if parsed <= 0:
        _fail(f"Invalid field '{field}': must be greater than zero, received {parsed}.",
              warnings, strict, ValueError)
        return fallback

    return parsed


def _as_optional_positive_int(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[int]:
    """Same as _as_positive_int but None/empty keeps the derived default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    sentinel = -1
    result = _as_positive_int(value, sentinel, field, warnings, strict)
    return None if result == sentinel else result


def _as_temperature(value: Any, fallback: float, warnings: List[str], strict: bool) -> float:
    """Coerce the sampling temperature into the [0, 2] range."""
    if value is None:
        return fallback

    parsed: Optional[float] = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        parsed = float(value)
    elif isinstance(value, str) and not strict:
        try:
            parsed = float(value.strip())
        except ValueError:
            parsed = None

    if parsed is None or not 0.0 <= parsed <= 2.0:
        _fail(f"Invalid field 'temperature': expected a number in [0, 2], received {value!r}.",
              warnings, strict, ValueError)
        return fallback

    return parsed


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out else list(fallback)

    _fail(f"Invalid field '{field}': expected list[str], received {type(value).__name__}.", warnings, strict)
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extensions(exts: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Lower-case extensions, prefix them with a dot and drop duplicates."""
    out: List[str] = []
    for ext in exts:
        e = ext.strip().lower()
        if not e:
            continue
        if not e.startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '.{e}'.")
            e = "." + e
        if e not in out:
            out.append(e)
    return out if out else list(const.DEFAULT_CODE_EXTENSIONS)


def _normalize_provider(value: Any, warnings: List[str], strict: bool) -> str:
    """Restrict the provider to the supported backends."""
    provider = str(value or const.DEFAULT_PROVIDER).strip().lower()
    if provider in const.SUPPORTED_PROVIDERS:
        return provider

    _fail(f"Unsupported provider '{value}'. Expected one of {const.SUPPORTED_PROVIDERS}.",
          warnings, strict, ValueError)
    return const.DEFAULT_PROVIDER
