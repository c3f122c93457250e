"""Tests for chat-completion backends."""

import json

import httpx
import pytest

from .base import (
    AuthenticationError,
    GenerationConfig,
    GenerationResult,
    InvalidResponseError,
    LLMError,
    ProxyError,
    RateLimitError,
)
from .proxy import ProxyBackend

PROXY_URL = "https://proxy.test/v1/chat"


def _backend(handler) -> ProxyBackend:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ProxyBackend(url=PROXY_URL, timeout=5.0, client=client)


def _ok(content: str = '{"version": "2.0"}') -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "model": "gpt-4.1-mini",
            "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        },
    )


class TestGenerationTypes:
    """Tests for backend dataclasses and exceptions."""

    @pytest.mark.unit
    def test_config_defaults(self):
        """Test default generation config."""
        config = GenerationConfig()
        assert config.model == "gpt-4.1-mini"
        assert config.temperature == 0.7
        assert config.max_tokens == 2048

    @pytest.mark.unit
    def test_result_defaults(self):
        """Test GenerationResult defaults."""
        result = GenerationResult(content="hi")
        assert result.finish_reason == "stop"
        assert result.usage == {}

    @pytest.mark.unit
    def test_exception_hierarchy(self):
        """All backend errors derive from LLMError."""
        for error in (AuthenticationError, RateLimitError, InvalidResponseError, ProxyError):
            assert issubclass(error, LLMError)

    @pytest.mark.unit
    def test_rate_limit_retry_after(self):
        """RateLimitError carries retry_after."""
        assert RateLimitError("slow down", retry_after=2.5).retry_after == 2.5


class TestProxyBackend:
    """Tests for ProxyBackend with a mocked transport."""

    @pytest.mark.unit
    def test_request_payload(self):
        """The proxy receives model, messages, temperature and max_tokens."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return _ok()

        messages = [{"role": "user", "content": "Hello"}]
        config = GenerationConfig(model="gpt-4.1-nano", temperature=0.2, max_tokens=100)
        _backend(handler).complete(messages, config)

        assert seen["url"] == PROXY_URL
        assert seen["method"] == "POST"
        assert seen["body"] == {
            "model": "gpt-4.1-nano",
            "messages": messages,
            "temperature": 0.2,
            "max_tokens": 100,
        }

    @pytest.mark.unit
    def test_reads_content(self):
        """Content, usage and model are read from the response."""
        result = _backend(lambda request: _ok("hello")).complete([])
        assert result.content == "hello"
        assert result.finish_reason == "stop"
        assert result.usage["total_tokens"] == 15
        assert result.model == "gpt-4.1-mini"

    @pytest.mark.unit
    @pytest.mark.parametrize("status", [401, 403])
    def test_authentication_error(self, status):
        """401 and 403 map to AuthenticationError."""
        backend = _backend(lambda request: httpx.Response(status))
        with pytest.raises(AuthenticationError):
            backend.complete([])

    @pytest.mark.unit
    def test_rate_limit(self):
        """429 maps to RateLimitError with Retry-After."""
        backend = _backend(lambda request: httpx.Response(429, headers={"Retry-After": "3"}))
        with pytest.raises(RateLimitError) as exc_info:
            backend.complete([])
        assert exc_info.value.retry_after == 3.0

    @pytest.mark.unit
    def test_rate_limit_without_header(self):
        """A missing Retry-After leaves retry_after unset."""
        backend = _backend(lambda request: httpx.Response(429))
        with pytest.raises(RateLimitError) as exc_info:
            backend.complete([])
        assert exc_info.value.retry_after is None

    @pytest.mark.unit
    def test_server_error(self):
        """Other non-2xx statuses map to ProxyError."""
        backend = _backend(lambda request: httpx.Response(502, text="bad gateway"))
        with pytest.raises(ProxyError) as exc_info:
            backend.complete([])
        assert exc_info.value.status_code == 502
        assert "502" in str(exc_info.value)

    @pytest.mark.unit
    def test_transport_error(self):
        """Connection failures map to ProxyError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused")

        with pytest.raises(ProxyError) as exc_info:
            _backend(handler).complete([])
        assert exc_info.value.status_code is None

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"{}",
            b'{"choices": []}',
            b'{"choices": [{"message": {}}]}',
            b'{"choices": [{"message": {"content": 42}}]}',
        ],
    )
    def test_malformed_body(self, body):
        """Malformed bodies map to InvalidResponseError."""
        backend = _backend(lambda request: httpx.Response(200, content=body))
        with pytest.raises(InvalidResponseError):
            backend.complete([])

    @pytest.mark.unit
    def test_url_from_environment(self, monkeypatch):
        """The proxy URL falls back to SIGNAGE_PROXY_URL."""
        monkeypatch.setenv("SIGNAGE_PROXY_URL", "https://env.proxy/chat")
        backend = ProxyBackend(client=httpx.Client(transport=httpx.MockTransport(lambda r: _ok())))
        assert backend.url == "https://env.proxy/chat"

    @pytest.mark.unit
    def test_missing_url(self, monkeypatch):
        """Without a URL the backend cannot be created."""
        monkeypatch.delenv("SIGNAGE_PROXY_URL", raising=False)
        with pytest.raises(ValueError):
            ProxyBackend()
