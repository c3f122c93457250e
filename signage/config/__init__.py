"""Centralized configuration management for signage-composer.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from signage.config import EnvVar, get_environment
    >>>
    >>> width = get_environment(EnvVar.SIGNAGE_CANVAS_WIDTH)  # Returns int: 1920
    >>> url = get_environment(EnvVar.SIGNAGE_PROXY_URL)  # Returns str | None
    >>>
    >>> for var in list_environment_variables("llm"):
    ...     info = get_environment_info(var)
    ...     print(f"{info.name}: {info.description}")

Environment Variable Categories:
    llm: generation proxy URL, model names, sampling settings
    canvas: default canvas bounding box and overflow policy
"""

from .lib import (
    EnvConfig,
    EnvVar,
    get_canvas_bounds,
    get_environment,
    get_environment_info,
    get_proxy_url,
    list_environment_variables,
)

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
