"""Chat-completion proxy backend.

Talks to an OpenAI-compatible chat endpoint that holds the provider keys, so
the client never sees them. Request body:

    {"model": ..., "messages": [...], "temperature": ..., "max_tokens": ...}

Response body (only the fields read here):

    {"choices": [{"message": {"content": "..."}, "finish_reason": "stop"}],
     "usage": {...}, "model": "..."}
"""

import logging
from typing import Any

import httpx

from signage.config import EnvVar, get_environment, get_proxy_url

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMBackend,
    Message,
    ProxyError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class ProxyBackend(LLMBackend):
    """Backend that POSTs chat requests to the generation proxy.

    Environment:
        SIGNAGE_PROXY_URL: Proxy endpoint (required unless url is given).
        SIGNAGE_PROXY_TIMEOUT: Request timeout in seconds.

    Example:
        >>> backend = ProxyBackend(url="https://proxy.example.com/v1/chat")
        >>> result = backend.complete(build_clarify_messages("cafe menu"))
        >>> print(result.content)
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ):
        """Initialize proxy backend.

        Args:
            url: Proxy endpoint. Defaults to SIGNAGE_PROXY_URL.
            timeout: Request timeout in seconds. Defaults to SIGNAGE_PROXY_TIMEOUT.
            client: Preconfigured httpx client (e.g. with a MockTransport).

        Raises:
            ValueError: If no proxy URL is configured.
        """
        self._url = get_proxy_url(url)
        self._timeout = get_environment(EnvVar.SIGNAGE_PROXY_TIMEOUT, override=timeout)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self._timeout)

    @property
    def provider(self) -> str:
        return "proxy"

    @property
    def url(self) -> str:
        """Proxy endpoint URL."""
        return self._url

    def close(self) -> None:
        """Close the underlying HTTP client if this backend created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ProxyBackend":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def complete(
        self,
        messages: list[Message],
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        config = config or GenerationConfig()
        payload = {
            "model": config.model,
            "messages": messages,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }

        try:
            response = self._client.post(self._url, json=payload, timeout=self._timeout)
        except httpx.TimeoutException as e:
            raise ProxyError(f"Proxy request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ProxyError(f"Proxy request failed: {e}") from e

        status = response.status_code
        if status in (401, 403):
            raise AuthenticationError(f"Proxy rejected credentials ({status})")
        if status == 429:
            raise RateLimitError(
                "Proxy rate limit exceeded",
                retry_after=_parse_retry_after(response.headers.get("retry-after")),
            )
        if not response.is_success:
            raise ProxyError(
                f"Proxy returned {status}: {response.text[:200]}", status_code=status
            )

        try:
            data = response.json()
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise InvalidResponseError(f"Malformed proxy response: {e}") from e
        if not isinstance(content, str):
            raise InvalidResponseError("Malformed proxy response: content is not a string")

        usage = data.get("usage") if isinstance(data.get("usage"), dict) else {}
        logger.debug("Proxy completion from %s (%d chars)", config.model, len(content))

        return GenerationResult(
            content=content,
            finish_reason=choice.get("finish_reason") or "stop",
            usage={k: v for k, v in usage.items() if isinstance(v, int)},
            model=data.get("model") or config.model,
            raw_response=data,
        )


__all__ = ["ProxyBackend"]
