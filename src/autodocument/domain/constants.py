from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Provides centralized access to application-wide constants: configuration
versioning, LLM provider defaults, file-processing limits and the names of
the artifact files written by each tool.
"""

from typing import List

CURRENT_CONFIG_VERSION = "1.0.0"
APP_VERSION = "0.3.0"

# -----------------------------------------------------------------------------
# LLM PROVIDERS
# -----------------------------------------------------------------------------
PROVIDER_OPENROUTER = "openrouter"
PROVIDER_ANTHROPIC = "anthropic"
SUPPORTED_PROVIDERS: List[str] = [PROVIDER_OPENROUTER, PROVIDER_ANTHROPIC]

DEFAULT_PROVIDER = PROVIDER_OPENROUTER
DEFAULT_MODEL = "anthropic/claude-3-7-sonnet"
DEFAULT_ANTHROPIC_MODEL = "claude-3-7-sonnet-20250219"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_REFERER = "https://github.com/PARS-DOE/autodocument"

DEFAULT_TEMPERATURE = 0.5
DEFAULT_MAX_TOKENS = 4000
DEFAULT_REQUEST_TIMEOUT = 120

# -----------------------------------------------------------------------------
# FILE PROCESSING
# -----------------------------------------------------------------------------
DEFAULT_CODE_EXTENSIONS: List[str] = [
    ".ts", ".js", ".tsx", ".jsx", ".py", ".java",
    ".c", ".cpp", ".cs", ".php", ".rb", ".go", ".rs",
]
DOCUMENTATION_EXTENSION = ".md"
DEFAULT_MAX_FILE_SIZE_KB = 100
DEFAULT_MAX_FILES_PER_DIRECTORY = 10
DEFAULT_IGNORE_FILENAME = ".gitignore"

# -----------------------------------------------------------------------------
# TOOL ARTIFACTS
# -----------------------------------------------------------------------------
TOOL_DOCUMENTATION = "generate_documentation"
TOOL_TESTPLAN = "autotestplan"
TOOL_REVIEW = "autoreview"
DEFAULT_TOOL = TOOL_DOCUMENTATION

DOCUMENTATION_FILENAME = "documentation.md"
DOCUMENTATION_FALLBACK_FILENAME = "undocumented.md"
TESTPLAN_FILENAME = "testplan.md"
TESTPLAN_FALLBACK_FILENAME = "untested.md"
REVIEW_FILENAME = "review.md"
REVIEW_FALLBACK_FILENAME = "review-skipped.md"

# -----------------------------------------------------------------------------
# EXCLUSION REASONS
# -----------------------------------------------------------------------------
REASON_DOCUMENTATION_FILE = "documentation file excluded from code analysis"
REASON_UNSUPPORTED_TYPE = "unsupported file type"
REASON_FILE_COUNT_LIMIT = "excluded due to file count limit"
