"""Prompt building module for the signage generation conversation.

Provides the clarify/generate system prompts and chat message builders.
"""

from signage.prompt.lib import (
    CLARIFY_SYSTEM_PROMPT,
    FEEDBACK_HEADER,
    GENERATE_SYSTEM_PROMPT,
    STYLE_DIRECTIONS,
    build_clarify_messages,
    build_generation_messages,
    parse_clarify_response,
    wrap_user_prompt,
)

__all__ = [
    "CLARIFY_SYSTEM_PROMPT",
    "GENERATE_SYSTEM_PROMPT",
    "STYLE_DIRECTIONS",
    "FEEDBACK_HEADER",
    "wrap_user_prompt",
    "build_clarify_messages",
    "build_generation_messages",
    "parse_clarify_response",
]
