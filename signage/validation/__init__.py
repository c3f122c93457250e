"""Schema sanitizer - untrusted JSON in, bounded canonical Document out.

Example:
    >>> from signage.validation import validate_and_sanitize
    >>> result = validate_and_sanitize(json.loads(llm_text))
    >>> if result.valid:
    ...     doc = result.document
"""

from .lib import (
    ERROR_ALL_FRAMES_INVALID,
    ERROR_NO_FRAMES,
    ERROR_NOT_OBJECT,
    SanitizeResult,
    sanitize_background,
    sanitize_color,
    sanitize_element,
    sanitize_frame,
    sanitize_url,
    validate_and_sanitize,
)

__all__ = [
    "SanitizeResult",
    "ERROR_NOT_OBJECT",
    "ERROR_NO_FRAMES",
    "ERROR_ALL_FRAMES_INVALID",
    "sanitize_color",
    "sanitize_url",
    "sanitize_background",
    "sanitize_element",
    "sanitize_frame",
    "validate_and_sanitize",
]
