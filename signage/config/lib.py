"""Centralized environment configuration management for signage-composer.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

The import pipeline itself never reads configuration; only the CLI and the
generation client do.

Example:
    >>> from signage.config import EnvVar, get_environment
    >>>
    >>> width = get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH)  # Returns int
    >>> url = get_environment(EnvVar.SIGNAGE_PROXY_URL)  # Returns str | None
    >>>
    >>> # Override at runtime
    >>> width = get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH, override=1280)
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "SIGNAGE_PROXY_URL").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by signage-composer.

    Categories:
        - llm: generation proxy and model settings
        - canvas: default canvas bounds and overflow policy
    """

    # -------------------------------------------------------------------------
    # Generation proxy
    # -------------------------------------------------------------------------
    SIGNAGE_PROXY_URL = EnvConfig(
        name="SIGNAGE_PROXY_URL",
        default=None,
        var_type=str,
        description="Chat-completion proxy endpoint (e.g. https://.../api/generate)",
        category="llm",
    )
    SIGNAGE_CLARIFY_MODEL = EnvConfig(
        name="SIGNAGE_CLARIFY_MODEL",
        default="gpt-4.1-nano",
        var_type=str,
        description="Model used for the cheap clarifying-questions pass",
        category="llm",
    )
    SIGNAGE_GENERATION_MODEL = EnvConfig(
        name="SIGNAGE_GENERATION_MODEL",
        default="gpt-4.1-mini",
        var_type=str,
        description="Model used for the signage generation pass",
        category="llm",
    )
    SIGNAGE_TEMPERATURE = EnvConfig(
        name="SIGNAGE_TEMPERATURE",
        default=0.7,
        var_type=float,
        description="Sampling temperature sent to the proxy",
        category="llm",
    )
    SIGNAGE_MAX_TOKENS = EnvConfig(
        name="SIGNAGE_MAX_TOKENS",
        default=2048,
        var_type=int,
        description="max_tokens sent to the proxy",
        category="llm",
    )
    SIGNAGE_PROXY_TIMEOUT = EnvConfig(
        name="SIGNAGE_PROXY_TIMEOUT",
        default=60.0,
        var_type=float,
        description="HTTP timeout for proxy calls in seconds",
        category="llm",
    )

    # -------------------------------------------------------------------------
    # Canvas
    # -------------------------------------------------------------------------
    SIGNAGE_CANVAS_WIDTH = EnvConfig(
        name="SIGNAGE_CANVAS_WIDTH",
        default=1920,
        var_type=int,
        description="Bounding-box width used to size the canvas",
        category="canvas",
    )
    SIGNAGE_CANVAS_HEIGHT = EnvConfig(
        name="SIGNAGE_CANVAS_HEIGHT",
        default=1080,
        var_type=int,
        description="Bounding-box height used to size the canvas",
        category="canvas",
    )
    SIGNAGE_OVERFLOW = EnvConfig(
        name="SIGNAGE_OVERFLOW",
        default="none",
        var_type=str,
        description="Overflow policy for laid-out boxes (none, clip, shrink)",
        category="canvas",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is float:
        try:
            parsed = float(value)
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.

    Example:
        >>> get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH)
        1920
        >>> get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH, override=1280)
        1280
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_proxy_url(override: str | None = None) -> str:
    """Get the generation proxy URL.

    Resolution: override > SIGNAGE_PROXY_URL.

    Raises:
        ValueError: If no proxy URL is configured.
    """
    url = get_environment(EnvVar.SIGNAGE_PROXY_URL, override=override or None)
    if not url:
        raise ValueError(
            "No generation proxy configured. Set SIGNAGE_PROXY_URL or pass a URL."
        )
    return url


def get_canvas_bounds(
    width: int | None = None, height: int | None = None
) -> tuple[int, int]:
    """Get the (width, height) bounding box used to size canvases."""
    return (
        get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH, override=width),
        get_environment(EnvVar.SIGNAGE_CANVAS_HEIGHT, override=height),
    )


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (llm, canvas). None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_proxy_url",
    "get_canvas_bounds",
    # Introspection
    "list_environment_variables",
]
