"""Layout module - single-axis stack layout for sanitized frames.

This module provides:
- resolve_layout: frame + canvas size -> absolute PositionedElement boxes
- OverflowPolicy: none / clip / shrink handling of oversized content
- Measurer: pluggable content-size estimation (HeuristicMeasurer by default)

Example:
    >>> from signage.layout import resolve_layout
    >>> for box in resolve_layout(frame, 1920, 1080, table):
    ...     print(box.id, box.x, box.y, box.w, box.h)
"""

from .lib import OverflowPolicy, PositionedElement, resolve_layout
from .measure import Extent, HeuristicMeasurer, Measurer, round_half_up

__all__ = [
    # Resolver
    "OverflowPolicy",
    "PositionedElement",
    "resolve_layout",
    # Measurement
    "Extent",
    "Measurer",
    "HeuristicMeasurer",
    "round_half_up",
]
