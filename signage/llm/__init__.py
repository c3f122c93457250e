"""Generation client for signage documents.

Turns a plain-language request into an imported signage composition by
talking to a chat-completion proxy.

Main components:
- SignageGenerator: Orchestrates prompts, backend calls, import and retries
- LLMBackend: Abstract interface for chat backends
- ProxyBackend: httpx client for the generation proxy

Example:
    >>> from signage.llm import SignageGenerator, ProxyBackend
    >>> generator = SignageGenerator(ProxyBackend(url="https://proxy.example.com/chat"))
    >>> questions = generator.clarify("lobby sign for a dental clinic")
    >>> output = generator.generate("lobby sign for a dental clinic", "Name: Bright Smiles")
"""

from .backend import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    LLMError,
    Message,
    ProxyBackend,
    ProxyError,
    RateLimitError,
)
from .generator import (
    GenerationOutput,
    GenerationStats,
    GeneratorConfig,
    RetryConfig,
    RetryStrategy,
    SignageGenerator,
)

__all__ = [
    # Main API
    "SignageGenerator",
    "ProxyBackend",
    # Generator types
    "GeneratorConfig",
    "GenerationStats",
    "GenerationOutput",
    "RetryConfig",
    "RetryStrategy",
    # Backend types
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
]
