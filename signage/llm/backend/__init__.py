"""Chat-completion backends.

Provides the abstract base class, the exception hierarchy and the httpx-based
proxy backend.
"""

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    Message,
    ProxyError,
    RateLimitError,
)
from .proxy import ProxyBackend

__all__ = [
    # Base classes and types
    "LLMBackend",
    "Message",
    "GenerationConfig",
    "GenerationResult",
    # Exceptions
    "LLMError",
    "RateLimitError",
    "InvalidResponseError",
    "AuthenticationError",
    "ProxyError",
    # Implementations
    "ProxyBackend",
]
