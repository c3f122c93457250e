"""Abstract base class for chat-completion backends.

Defines the interface the signage generator talks to, plus the exception
hierarchy shared by all backend implementations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

Message = dict[str, str]


@dataclass
class GenerationConfig:
    """Configuration for one chat completion.

    Attributes:
        model: Model identifier forwarded to the proxy.
        temperature: Sampling temperature (0.0-2.0). Lower = more deterministic.
        max_tokens: Maximum tokens to generate in response.
    """

    model: str = "gpt-4.1-mini"
    temperature: float = 0.7
    max_tokens: int = 2048


@dataclass
class GenerationResult:
    """Result from a chat completion.

    Attributes:
        content: Generated text content.
        finish_reason: Why generation stopped ('stop', 'length', ...).
        usage: Token usage dict (prompt_tokens, completion_tokens, total_tokens).
        model: Model identifier that was used.
        raw_response: Provider-specific raw response for debugging.
    """

    content: str
    finish_reason: str = "stop"
    usage: dict[str, int] = field(default_factory=dict)
    model: str = ""
    raw_response: Any = None


class LLMBackend(ABC):
    """Abstract interface for chat-completion backends.

    Example:
        >>> backend = ProxyBackend(url="https://proxy.example.com/chat")
        >>> result = backend.complete(
        ...     [{"role": "user", "content": "Hello"}], GenerationConfig()
        ... )
        >>> print(result.content)
    """

    @abstractmethod
    def complete(
        self,
        messages: list[Message],
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Run one chat completion.

        Args:
            messages: Chat messages as {"role", "content"} dicts.
            config: Model and sampling options.

        Returns:
            GenerationResult with the generated content.

        Raises:
            AuthenticationError: If the proxy rejects the credentials.
            RateLimitError: If the proxy rate limit is exceeded.
            ProxyError: If the proxy is unreachable or returns an error.
            InvalidResponseError: If the response body is malformed.
        """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get the provider identifier (e.g. 'proxy', 'mock')."""

    @property
    def name(self) -> str:
        """Get backend identifier for logging."""
        return self.provider


class LLMError(Exception):
    """Base exception for backend errors."""


class RateLimitError(LLMError):
    """Raised when the rate limit is exceeded.

    Attributes:
        retry_after: Suggested wait time in seconds before retry.
    """

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class InvalidResponseError(LLMError):
    """Raised when a response cannot be parsed as expected."""


class AuthenticationError(LLMError):
    """Raised when authentication with the proxy fails."""


class ProxyError(LLMError):
    """Raised when the proxy is unreachable or answers with an error status.

    Attributes:
        status_code: HTTP status code, or None for transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


__all__ = [
    "Message",
    "LLMBackend",
    "GenerationConfig",
    "GenerationResult",
    "LLMError",
    "RateLimitError",
    "InvalidResponseError",
    "AuthenticationError",
    "ProxyError",
]
