"""Retry strategy and response cleanup for signage generation.

Models often wrap the document in markdown fences or add chatter around it.
These helpers isolate the JSON object before it reaches the importer, and
decide which backend errors are worth another attempt.
"""

import logging
import re
from dataclasses import dataclass

from ..backend.base import (
    AuthenticationError,
    InvalidResponseError,
    LLMError,
    ProxyError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^\s*```[a-zA-Z]*\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?\s*```\s*$")


@dataclass
class RetryConfig:
    """Configuration for retry strategy.

    Attributes:
        max_retries: Maximum number of retry attempts.
        exponential_backoff: Use exponential backoff for rate limits.
        initial_delay: Initial delay for backoff (seconds).
        max_delay: Maximum delay between retries (seconds).
    """

    max_retries: int = 3
    exponential_backoff: bool = True
    initial_delay: float = 1.0
    max_delay: float = 30.0


class RetryStrategy:
    """Handles retries and response cleanup for generation.

    Example:
        >>> strategy = RetryStrategy()
        >>> strategy.extract_json_text('```json\\n{"version": "2.0"}\\n```')
        '{"version": "2.0"}'
    """

    def __init__(self, config: RetryConfig | None = None):
        self._config = config or RetryConfig()

    @property
    def config(self) -> RetryConfig:
        return self._config

    @staticmethod
    def strip_code_fences(text: str) -> str:
        """Remove a surrounding ```json ... ``` fence, if any."""
        cleaned = _FENCE_OPEN.sub("", text.strip(), count=1)
        return _FENCE_CLOSE.sub("", cleaned, count=1).strip()

    @classmethod
    def extract_json_text(cls, text: str) -> str:
        """Isolate the outermost balanced JSON object in text.

        Braces inside string literals are ignored. When no balanced object is
        found the fence-stripped text is returned unchanged, so the importer
        can report the parse error.

        Args:
            text: Raw model output.

        Returns:
            The JSON object text, or the cleaned input.
        """
        cleaned = cls.strip_code_fences(text)
        start = cleaned.find("{")
        if start == -1:
            return cleaned

        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(cleaned[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return cleaned[start : i + 1]
        return cleaned

    def get_backoff_delay(self, attempt: int, error: Exception | None = None) -> float:
        """Calculate backoff delay for retry attempt.

        A RateLimitError carrying retry_after takes precedence, capped at
        max_delay.

        Args:
            attempt: Current attempt number (0-based).
            error: The error that triggered the retry.

        Returns:
            Delay in seconds before next attempt.
        """
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(max(error.retry_after, 0.0), self._config.max_delay)

        if not self._config.exponential_backoff:
            return self._config.initial_delay

        delay = self._config.initial_delay * (2**attempt)
        return min(delay, self._config.max_delay)

    def should_retry(self, error: Exception, attempt: int) -> bool:
        """Determine if error should trigger retry.

        Args:
            error: The exception that occurred.
            attempt: Current attempt number (0-based).

        Returns:
            True if should retry, False otherwise.
        """
        if attempt + 1 >= self._config.max_retries:
            return False

        if isinstance(error, AuthenticationError):
            return False
        if isinstance(error, (RateLimitError, InvalidResponseError)):
            return True
        if isinstance(error, ProxyError):
            # Transport failures and 5xx are transient; other 4xx are not.
            return error.status_code is None or error.status_code >= 500
        return isinstance(error, LLMError)


__all__ = ["RetryStrategy", "RetryConfig"]
