"""SignageGenerator orchestrator for the two-pass generation conversation.

Integrates the prompt builders, a chat backend and the composition assembler
to turn a plain-language request into an imported signage composition.
"""

import logging
import time
from dataclasses import dataclass

from signage.compose import ImportResult, import_signage
from signage.config import EnvVar, get_canvas_bounds, get_environment
from signage.layout import OverflowPolicy
from signage.prompt import (
    build_clarify_messages,
    build_generation_messages,
    parse_clarify_response,
)

from ..backend import LLMBackend, ProxyBackend
from ..backend.base import GenerationConfig, InvalidResponseError, LLMError
from .retry import RetryConfig, RetryStrategy

logger = logging.getLogger(__name__)

CLARIFY_MAX_TOKENS = 512


@dataclass
class GeneratorConfig:
    """Configuration for SignageGenerator.

    Fields left as None are read from the environment (SIGNAGE_* variables)
    when the config is created.

    Attributes:
        max_retries: Maximum generation attempts before failing.
        clarify_model: Model for the clarifying-questions pass.
        generation_model: Model for the document pass.
        temperature: Sampling temperature (0.0-2.0).
        max_tokens: Token budget for the document pass.
        canvas_width: Bounding box width handed to the importer.
        canvas_height: Bounding box height handed to the importer.
        overflow: Overflow policy handed to the importer.
        style_index: Fixed creative direction; random when None.
        include_schema: Append allow-lists and limits to the system prompt.
        initial_delay: First backoff delay after a retryable backend error.
    """

    max_retries: int = 3
    clarify_model: str | None = None
    generation_model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    canvas_width: int | None = None
    canvas_height: int | None = None
    overflow: OverflowPolicy | str | None = None
    style_index: int | None = None
    include_schema: bool = False
    initial_delay: float = 1.0

    def __post_init__(self) -> None:
        self.clarify_model = get_environment(EnvVar.SIGNAGE_CLARIFY_MODEL, self.clarify_model)
        self.generation_model = get_environment(
            EnvVar.SIGNAGE_GENERATION_MODEL, self.generation_model
        )
        self.temperature = get_environment(EnvVar.SIGNAGE_TEMPERATURE, self.temperature)
        self.max_tokens = get_environment(EnvVar.SIGNAGE_MAX_TOKENS, self.max_tokens)
        self.canvas_width, self.canvas_height = get_canvas_bounds(
            self.canvas_width, self.canvas_height
        )
        overflow = get_environment(EnvVar.SIGNAGE_OVERFLOW, self.overflow)
        try:
            self.overflow = OverflowPolicy(overflow)
        except ValueError:
            logger.warning("Unknown overflow policy %r, using none", overflow)
            self.overflow = OverflowPolicy.NONE


@dataclass
class GenerationStats:
    """Statistics from signage generation.

    Attributes:
        attempts: Number of generation attempts made.
        validation_retries: Number of re-prompts carrying import errors.
        total_tokens: Total tokens used across all attempts.
        final_model: Model identifier used for the last completion.
    """

    attempts: int = 0
    validation_retries: int = 0
    total_tokens: int = 0
    final_model: str = ""


@dataclass
class GenerationOutput:
    """Complete output from signage generation.

    Attributes:
        result: Successful ImportResult with composed frames.
        stats: Generation statistics.
        raw_response: Raw model response content of the successful attempt.
    """

    result: ImportResult
    stats: GenerationStats
    raw_response: str


class SignageGenerator:
    """Orchestrates the clarify and generate passes.

    Pipeline:
        1. Build generation messages (with error feedback after a failure)
        2. Run the chat completion
        3. Strip fences and isolate the JSON object
        4. Import via import_signage
        5. Retry with feedback on errors

    Example:
        >>> generator = SignageGenerator(ProxyBackend())
        >>> questions = generator.clarify("welcome sign for a bakery")
        >>> output = generator.generate("welcome sign for a bakery", "Name: Crumbs")
        >>> output.result.frames[0].canvas_width
        1920
    """

    def __init__(
        self,
        backend: LLMBackend | None = None,
        config: GeneratorConfig | None = None,
    ):
        """Initialize SignageGenerator.

        Args:
            backend: Chat backend. Creates a ProxyBackend from the environment if None.
            config: Generator configuration.
        """
        self._backend = backend or ProxyBackend()
        self._config = config or GeneratorConfig()
        self._retry_strategy = RetryStrategy(
            RetryConfig(
                max_retries=self._config.max_retries,
                initial_delay=self._config.initial_delay,
            )
        )

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def clarify(self, description: str) -> list[str]:
        """Ask the model for up to three clarifying questions.

        Args:
            description: What the user asked for.

        Returns:
            Question strings; empty when the model answer was unusable.

        Raises:
            LLMError: If the backend call fails.
        """
        result = self._backend.complete(
            build_clarify_messages(description),
            GenerationConfig(
                model=self._config.clarify_model,
                temperature=self._config.temperature,
                max_tokens=CLARIFY_MAX_TOKENS,
            ),
        )
        questions = parse_clarify_response(result.content)
        if not questions:
            logger.warning("Clarify pass returned no usable questions")
        return questions

    def generate(self, description: str, answers: str = "") -> GenerationOutput:
        """Generate and import a signage document.

        Args:
            description: What the user asked for.
            answers: Answers to the clarifying questions.

        Returns:
            GenerationOutput with a successful ImportResult.

        Raises:
            LLMError: If a backend error is not retryable.
            InvalidResponseError: If no attempt produced an importable document.
        """
        stats = GenerationStats()
        gen_config = GenerationConfig(
            model=self._config.generation_model,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        last_error: Exception | None = None
        feedback: list[str] | None = None

        for attempt in range(self._config.max_retries):
            stats.attempts += 1
            if feedback:
                stats.validation_retries += 1

            messages = build_generation_messages(
                description,
                answers,
                style_index=self._config.style_index,
                feedback=feedback,
                include_schema=self._config.include_schema,
            )

            try:
                result = self._backend.complete(messages, gen_config)
            except LLMError as e:
                last_error = e
                logger.error("LLM error on attempt %d: %s", attempt + 1, e)
                if not self._retry_strategy.should_retry(e, attempt):
                    raise
                delay = self._retry_strategy.get_backoff_delay(attempt, e)
                if delay > 0:
                    time.sleep(delay)
                continue

            stats.total_tokens += result.usage.get("total_tokens", 0)
            stats.final_model = result.model

            imported = import_signage(
                self._retry_strategy.extract_json_text(result.content),
                self._config.canvas_width,
                self._config.canvas_height,
                overflow=self._config.overflow,
            )

            if imported.success:
                logger.info(
                    "Generated signage successfully after %d attempt(s)", stats.attempts
                )
                return GenerationOutput(
                    result=imported, stats=stats, raw_response=result.content
                )

            feedback = imported.errors
            last_error = InvalidResponseError("; ".join(imported.errors))
            logger.warning("Import errors on attempt %d: %s", attempt + 1, last_error)

        raise InvalidResponseError(
            f"Failed to generate valid signage after {stats.attempts} attempts. "
            f"Last error: {last_error}"
        )


__all__ = [
    "GeneratorConfig",
    "GenerationStats",
    "GenerationOutput",
    "SignageGenerator",
]
