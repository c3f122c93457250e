"""Tests for the signage generator module.

Covers:
- RetryStrategy: response cleanup and retry decisions
- SignageGenerator: orchestration with a mocked backend
"""

import json

import pytest

from signage.layout import OverflowPolicy
from signage.prompt import FEEDBACK_HEADER, GENERATE_SYSTEM_PROMPT

from ..backend.base import (
    AuthenticationError,
    InvalidResponseError,
    ProxyError,
    RateLimitError,
)
from .lib import GenerationOutput, GenerationStats, GeneratorConfig, SignageGenerator
from .retry import RetryConfig, RetryStrategy

VALID_DOC = json.dumps(
    {
        "version": "2.0",
        "frames": [
            {"elements": [{"id": "e1", "type": "text", "role": "headline", "runs": [{"text": "Hi"}]}]}
        ],
    }
)


def _config(**overrides) -> GeneratorConfig:
    values = dict(
        max_retries=3,
        clarify_model="clarify-model",
        generation_model="generation-model",
        temperature=0.5,
        max_tokens=1000,
        canvas_width=1920,
        canvas_height=1080,
        overflow="none",
        style_index=0,
        initial_delay=0.0,
    )
    values.update(overrides)
    return GeneratorConfig(**values)


# =============================================================================
# RetryStrategy Tests
# =============================================================================


class TestRetryConfig:
    """Tests for RetryConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        """Test default configuration values."""
        config = RetryConfig()
        assert config.max_retries == 3
        assert config.exponential_backoff is True
        assert config.initial_delay == 1.0
        assert config.max_delay == 30.0


class TestRetryStrategyCleanup:
    """Tests for fence stripping and JSON isolation."""

    @pytest.mark.unit
    def test_strip_json_fence(self):
        """Test removing a ```json fence."""
        assert RetryStrategy.strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    @pytest.mark.unit
    def test_strip_bare_fence(self):
        """Test removing a bare ``` fence."""
        assert RetryStrategy.strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    @pytest.mark.unit
    def test_strip_no_fence(self):
        """Unfenced text is only trimmed."""
        assert RetryStrategy.strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    @pytest.mark.unit
    def test_extract_from_chatter(self):
        """Test isolating the object from surrounding text."""
        text = 'Here is your sign:\n{"version": "2.0", "frames": []}\nEnjoy!'
        assert RetryStrategy.extract_json_text(text) == '{"version": "2.0", "frames": []}'

    @pytest.mark.unit
    def test_extract_nested_objects(self):
        """Test that the outermost object is kept whole."""
        text = 'x {"a": {"b": {"c": 1}}} y {"d": 2}'
        assert RetryStrategy.extract_json_text(text) == '{"a": {"b": {"c": 1}}}'

    @pytest.mark.unit
    def test_extract_ignores_braces_in_strings(self):
        """Braces inside string literals do not affect balancing."""
        text = '{"text": "a } b \\" {"} trailing'
        assert RetryStrategy.extract_json_text(text) == '{"text": "a } b \\" {"}'

    @pytest.mark.unit
    def test_extract_unbalanced(self):
        """Unbalanced text is returned cleaned but otherwise intact."""
        assert RetryStrategy.extract_json_text('{"a": 1') == '{"a": 1'

    @pytest.mark.unit
    def test_extract_no_object(self):
        """Text without an object is returned as-is."""
        assert RetryStrategy.extract_json_text("no json") == "no json"


class TestRetryStrategyBackoff:
    """Tests for backoff delay calculation."""

    @pytest.mark.unit
    def test_exponential_backoff(self):
        """Test exponential backoff calculation."""
        strategy = RetryStrategy(RetryConfig(initial_delay=1.0, max_delay=30.0))
        assert strategy.get_backoff_delay(0) == 1.0
        assert strategy.get_backoff_delay(1) == 2.0
        assert strategy.get_backoff_delay(2) == 4.0

    @pytest.mark.unit
    def test_backoff_max_delay(self):
        """Test that delay is capped at max_delay."""
        strategy = RetryStrategy(RetryConfig(initial_delay=1.0, max_delay=10.0))
        assert strategy.get_backoff_delay(10) == 10.0

    @pytest.mark.unit
    def test_backoff_disabled(self):
        """Test constant delay without exponential backoff."""
        strategy = RetryStrategy(RetryConfig(exponential_backoff=False, initial_delay=2.0))
        assert strategy.get_backoff_delay(5) == 2.0

    @pytest.mark.unit
    def test_retry_after_wins(self):
        """Test Retry-After from a rate limit takes precedence."""
        strategy = RetryStrategy(RetryConfig(max_delay=10.0))
        assert strategy.get_backoff_delay(0, RateLimitError("x", retry_after=4.0)) == 4.0
        assert strategy.get_backoff_delay(0, RateLimitError("x", retry_after=99.0)) == 10.0


class TestRetryStrategyShouldRetry:
    """Tests for retry decision logic."""

    @pytest.fixture
    def strategy(self):
        """Create a RetryStrategy with three attempts."""
        return RetryStrategy(RetryConfig(max_retries=3))

    @pytest.mark.unit
    def test_rate_limit_retried(self, strategy):
        """Rate limits are retried."""
        assert strategy.should_retry(RateLimitError("slow"), 0)

    @pytest.mark.unit
    def test_auth_not_retried(self, strategy):
        """Authentication errors are never retried."""
        assert not strategy.should_retry(AuthenticationError("denied"), 0)

    @pytest.mark.unit
    def test_proxy_server_error_retried(self, strategy):
        """5xx and transport errors are retried."""
        assert strategy.should_retry(ProxyError("bad gateway", status_code=502), 0)
        assert strategy.should_retry(ProxyError("refused"), 0)

    @pytest.mark.unit
    def test_proxy_client_error_not_retried(self, strategy):
        """Other 4xx statuses are not retried."""
        assert not strategy.should_retry(ProxyError("bad request", status_code=400), 0)

    @pytest.mark.unit
    def test_last_attempt_not_retried(self, strategy):
        """No retry once attempts are exhausted."""
        assert not strategy.should_retry(RateLimitError("slow"), 2)

    @pytest.mark.unit
    def test_non_llm_error_not_retried(self, strategy):
        """Unrelated exceptions are not retried."""
        assert not strategy.should_retry(ValueError("boom"), 0)


# =============================================================================
# SignageGenerator Tests
# =============================================================================


class TestGeneratorConfig:
    """Tests for GeneratorConfig environment resolution."""

    @pytest.mark.unit
    def test_reads_environment(self, monkeypatch):
        """Unset fields come from SIGNAGE_* variables."""
        monkeypatch.setenv("SIGNAGE_GENERATION_MODEL", "env-model")
        monkeypatch.setenv("SIGNAGE_CANVAS_WIDTH", "1280")
        monkeypatch.setenv("SIGNAGE_OVERFLOW", "clip")
        config = GeneratorConfig()
        assert config.generation_model == "env-model"
        assert config.canvas_width == 1280
        assert config.overflow is OverflowPolicy.CLIP

    @pytest.mark.unit
    def test_explicit_values_win(self, monkeypatch):
        """Explicit fields override the environment."""
        monkeypatch.setenv("SIGNAGE_GENERATION_MODEL", "env-model")
        assert GeneratorConfig(generation_model="explicit").generation_model == "explicit"

    @pytest.mark.unit
    def test_canvas_bounds(self, monkeypatch):
        """Canvas bounds resolve per axis, explicit values first."""
        monkeypatch.setenv("SIGNAGE_CANVAS_WIDTH", "1280")
        monkeypatch.setenv("SIGNAGE_CANVAS_HEIGHT", "720")
        config = GeneratorConfig(canvas_height=900)
        assert (config.canvas_width, config.canvas_height) == (1280, 900)

    @pytest.mark.unit
    def test_unknown_overflow(self, monkeypatch):
        """An unknown overflow policy falls back to none."""
        monkeypatch.setenv("SIGNAGE_OVERFLOW", "squash")
        assert GeneratorConfig().overflow is OverflowPolicy.NONE


class TestSignageGeneratorClarify:
    """Tests for the clarify pass."""

    @pytest.mark.unit
    def test_returns_questions(self, mock_llm_backend):
        """Test questions are parsed from the model answer."""
        generator = SignageGenerator(mock_llm_backend, _config())
        questions = generator.clarify("sign for my shop")
        assert len(questions) == 3
        messages, config = mock_llm_backend.calls[0]
        assert messages[1]["content"] == "sign for my shop"
        assert config.model == "clarify-model"

    @pytest.mark.unit
    def test_unusable_answer(self, scripted_backend):
        """Test an unusable answer yields no questions."""
        generator = SignageGenerator(scripted_backend("I cannot help"), _config())
        assert generator.clarify("sign") == []

    @pytest.mark.unit
    def test_backend_error_propagates(self, scripted_backend):
        """Test backend errors are raised to the caller."""
        generator = SignageGenerator(scripted_backend(AuthenticationError("denied")), _config())
        with pytest.raises(AuthenticationError):
            generator.clarify("sign")


class TestSignageGeneratorGenerate:
    """Tests for the generation pass."""

    @pytest.mark.unit
    def test_generate_success(self, mock_llm_backend):
        """Test a fenced document is imported on the first attempt."""
        generator = SignageGenerator(mock_llm_backend, _config())
        output = generator.generate("welcome sign for a bakery", "Name: Crumbs")

        assert isinstance(output, GenerationOutput)
        assert output.result.success
        assert output.result.meta.title == "Crumbs Bakery"
        assert output.result.frames[0].canvas_width == 1920
        assert [p.id for p in output.result.frames[0].positioned_elements] == ["title", "hours"]
        assert output.stats.attempts == 1
        assert output.stats.total_tokens == 100
        assert output.stats.final_model == "generation-model"
        assert output.raw_response.startswith("```json")

    @pytest.mark.unit
    def test_generation_messages(self, mock_llm_backend):
        """Test the backend receives the generation prompt and config."""
        SignageGenerator(mock_llm_backend, _config()).generate("a sign", "blue")
        messages, config = mock_llm_backend.calls[0]
        assert messages[0]["content"] == GENERATE_SYSTEM_PROMPT
        assert "## SIGN REQUEST\na sign" in messages[1]["content"]
        assert (config.model, config.temperature, config.max_tokens) == (
            "generation-model",
            0.5,
            1000,
        )

    @pytest.mark.unit
    def test_retry_with_feedback(self, scripted_backend):
        """Test a failed import re-prompts with the error list."""
        backend = scripted_backend('{"version": "2.0"}', VALID_DOC)
        output = SignageGenerator(backend, _config()).generate("a sign")

        assert output.result.success
        assert output.stats.attempts == 2
        assert output.stats.validation_retries == 1
        retry_prompt = backend.calls[1][0][1]["content"]
        assert FEEDBACK_HEADER in retry_prompt
        assert "- No frames array found." in retry_prompt

    @pytest.mark.unit
    def test_parse_error_feedback(self, scripted_backend):
        """Test parse errors are fed back too."""
        backend = scripted_backend("not json at all", VALID_DOC)
        SignageGenerator(backend, _config()).generate("a sign")
        assert "parse error" in backend.calls[1][0][1]["content"]

    @pytest.mark.unit
    def test_exhausted_retries(self, scripted_backend):
        """Test InvalidResponseError after all attempts fail."""
        backend = scripted_backend("[]", "[]")
        generator = SignageGenerator(backend, _config(max_retries=2))
        with pytest.raises(InvalidResponseError) as exc_info:
            generator.generate("a sign")
        assert "after 2 attempts" in str(exc_info.value)
        assert "Input is not an object." in str(exc_info.value)

    @pytest.mark.unit
    def test_transient_backend_error_retried(self, scripted_backend):
        """Test retryable backend errors trigger another attempt."""
        backend = scripted_backend(ProxyError("bad gateway", status_code=502), VALID_DOC)
        output = SignageGenerator(backend, _config()).generate("a sign")
        assert output.result.success
        assert output.stats.attempts == 2
        assert output.stats.validation_retries == 0

    @pytest.mark.unit
    def test_auth_error_raised(self, scripted_backend):
        """Test non-retryable backend errors are raised immediately."""
        backend = scripted_backend(AuthenticationError("denied"))
        with pytest.raises(AuthenticationError):
            SignageGenerator(backend, _config()).generate("a sign")
        assert len(backend.calls) == 1

    @pytest.mark.unit
    def test_canvas_and_overflow_forwarded(self, scripted_backend):
        """Test canvas bounds from the config reach the importer."""
        backend = scripted_backend(VALID_DOC)
        output = SignageGenerator(
            backend, _config(canvas_width=800, canvas_height=800)
        ).generate("a sign")
        frame = output.result.frames[0]
        assert (frame.canvas_width, frame.canvas_height) == (800, 450)

    @pytest.mark.unit
    def test_stats_defaults(self):
        """Test GenerationStats defaults."""
        stats = GenerationStats()
        assert (stats.attempts, stats.validation_retries, stats.total_tokens) == (0, 0, 0)
