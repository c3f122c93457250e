"""LLM module test fixtures."""

from __future__ import annotations

import json
import os
from typing import Callable, Generator

import pytest

from signage.llm.backend.base import (
    GenerationConfig,
    GenerationResult,
    LLMBackend,
    Message,
)
from signage.prompt import CLARIFY_SYSTEM_PROMPT

# =============================================================================
# Mock LLM Backend
# =============================================================================


class MockLLMBackend(LLMBackend):
    """Mock chat backend for testing without a proxy.

    Without scripted responses it answers deterministically: the clarify pass
    gets three canned questions, the generation pass gets a canned document
    chosen by request keywords. Scripted responses (strings or exceptions)
    are consumed in order, one per call.
    """

    MOCK_QUESTIONS_JSON = json.dumps(
        {
            "questions": [
                "What is the name of the business?",
                "Which colors match your brand?",
                "Is there an offer or date to highlight?",
            ]
        }
    )

    MOCK_BAKERY_JSON = """```json
{
  "version": "2.0",
  "meta": {"title": "Crumbs Bakery", "intent": "quick-signage", "aspectRatio": "16:9"},
  "tokens": {"colors": {"primary": "#5C3D2E", "bg": "#FFF8F0"}, "fonts": {"display": "Georgia"}},
  "frames": [{
    "background": {"type": "solid", "color": "$bg"},
    "layout": {"direction": "vertical", "align": "center", "justify": "center", "children": ["title", "hours"]},
    "elements": [
      {"id": "title", "type": "text", "role": "headline", "runs": [{"text": "Welcome to Crumbs"}], "blockStyle": {"color": "$primary"}},
      {"id": "hours", "type": "text", "role": "detail", "runs": [{"text": "Open daily 7am - 3pm"}]}
    ]
  }]
}
```"""

    MOCK_SIMPLE_JSON = """{
  "version": "2.0",
  "frames": [{
    "elements": [{"id": "hello", "type": "text", "role": "headline", "runs": [{"text": "Hello"}]}]
  }]
}"""

    def __init__(self, responses: list[str | Exception] | None = None):
        self._responses = list(responses) if responses is not None else None
        self.calls: list[tuple[list[Message], GenerationConfig | None]] = []

    @property
    def provider(self) -> str:
        """Return mock provider name."""
        return "mock"

    def complete(
        self,
        messages: list[Message],
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        """Return the next scripted response or a keyword-based canned one."""
        self.calls.append((messages, config))
        model = config.model if config else "mock-model-v1"

        if self._responses is not None:
            if not self._responses:
                raise AssertionError("MockLLMBackend ran out of scripted responses")
            response = self._responses.pop(0)
            if isinstance(response, Exception):
                raise response
            content = response
        elif messages and messages[0]["content"] == CLARIFY_SYSTEM_PROMPT:
            content = self.MOCK_QUESTIONS_JSON
        else:
            query = messages[-1]["content"].lower() if messages else ""
            content = self.MOCK_BAKERY_JSON if "bakery" in query else self.MOCK_SIMPLE_JSON

        return GenerationResult(
            content=content,
            finish_reason="stop",
            model=model,
            usage={"total_tokens": 100},
        )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_llm_backend() -> MockLLMBackend:
    """Create a keyword-driven mock backend."""
    return MockLLMBackend()


@pytest.fixture
def scripted_backend() -> Callable[..., MockLLMBackend]:
    """Factory for a mock backend that replays the given responses in order.

    Example:
        >>> backend = scripted_backend("not json", MOCK_DOC)
    """

    def _make(*responses: str | Exception) -> MockLLMBackend:
        return MockLLMBackend(list(responses))

    return _make


@pytest.fixture
def preserve_env_keys() -> Generator[None, None, None]:
    """Preserve and restore SIGNAGE_* variables around a test."""
    saved = {key: value for key, value in os.environ.items() if key.startswith("SIGNAGE_")}

    yield

    for key in [key for key in os.environ if key.startswith("SIGNAGE_")]:
        if key not in saved:
            os.environ.pop(key, None)
    os.environ.update(saved)
