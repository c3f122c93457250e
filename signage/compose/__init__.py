"""Compose module - the end-to-end signage import pipeline.

Example:
    >>> from signage.compose import import_signage
    >>> result = import_signage(llm_text, 1920, 1080)
    >>> if result.success:
    ...     for frame in result.frames:
    ...         print(frame.background.css, len(frame.positioned_elements))
"""

from .lib import (
    ASPECT_RATIOS,
    ComposedFrame,
    ImportResult,
    PaintedBackground,
    aspect_ratio_to_size,
    build_background_css,
    import_signage,
)

__all__ = [
    "ASPECT_RATIOS",
    "ComposedFrame",
    "ImportResult",
    "PaintedBackground",
    "aspect_ratio_to_size",
    "build_background_css",
    "import_signage",
]
