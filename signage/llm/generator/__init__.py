"""Signage generation orchestration.

Provides SignageGenerator for the clarify and generate passes, plus the
retry strategy used to clean up and retry model responses.
"""

from .lib import GenerationOutput, GenerationStats, GeneratorConfig, SignageGenerator
from .retry import RetryConfig, RetryStrategy

__all__ = [
    "SignageGenerator",
    "GeneratorConfig",
    "GenerationStats",
    "GenerationOutput",
    "RetryConfig",
    "RetryStrategy",
]
