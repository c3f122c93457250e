"""Content measurement for the stack layout.

The layout algorithm only needs a main-axis and cross-axis extent per child.
Producing those extents is delegated to a `Measurer` so that real text
shaping can replace the heuristics without touching the algorithm.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping

from signage.schema import (
    DividerElement,
    ImageElement,
    LayoutDirection,
    ShapeElement,
    SpacerElement,
    TextElement,
    get_role_typography,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Extent:
    """Size of a child along the stack's main and cross axes."""

    main: float
    cross: float


class Measurer(ABC):
    """Abstract interface for estimating element extents."""

    @abstractmethod
    def measure(
        self,
        element: Any,
        available_cross: float,
        direction: str,
        tokens: Mapping[str, Any] | None = None,
    ) -> Extent:
        """Estimate the extent of one element.

        Args:
            element: Sanitized element (any Element variant).
            available_cross: Cross-axis space inside the frame padding.
            direction: Layout direction ("vertical" or "horizontal").
            tokens: Token table, for measurers that need font metrics.

        Returns:
            Extent along the main and cross axes in pixels.
        """


class HeuristicMeasurer(Measurer):
    """Metric-free estimator.

    Text assumes an average glyph width of 0.52 em and wraps each explicit
    line independently. Images and shapes take fixed fractions of the cross
    axis. Font families and token values are ignored.
    """

    char_width_ratio = 0.52
    divider_margin = 8
    spacer_extent = 16
    image_ratio = 0.5
    shape_ratio = 0.3

    def text_height(self, element: TextElement, available_width: float) -> int:
        """Estimate the rendered height of a text element."""
        typography = get_role_typography(element.role)
        font_size = element.block_style.font_size or typography.font_size
        line_height = element.block_style.line_height or typography.line_height
        char_width = font_size * self.char_width_ratio

        total_lines = 0
        for line in element.plain_text.split("\n"):
            line_width = max(len(line), 1) * char_width
            if available_width > 0:
                total_lines += max(1, math.ceil(line_width / available_width))
            else:
                total_lines += 1
        return math.ceil(total_lines * font_size * line_height)

    def measure(self, element, available_cross, direction, tokens=None) -> Extent:
        vertical = direction == LayoutDirection.VERTICAL.value

        if isinstance(element, SpacerElement):
            return Extent(main=self.spacer_extent, cross=0)

        if isinstance(element, ImageElement):
            size = round_half_up(available_cross * self.image_ratio)
            return Extent(main=size, cross=available_cross if vertical else size)

        if isinstance(element, ShapeElement):
            size = round_half_up(available_cross * self.shape_ratio)
            return Extent(main=size, cross=size)

        if isinstance(element, TextElement):
            flow = self.text_height(element, available_cross)
        elif isinstance(element, DividerElement):
            flow = element.style.thickness + self.divider_margin
        else:
            raise TypeError(f"Cannot measure element of type {type(element).__name__}")

        # Text and dividers span the cross axis in a vertical stack. In a
        # horizontal stack their estimated height becomes the cross extent.
        if vertical:
            return Extent(main=flow, cross=available_cross)
        return Extent(main=available_cross, cross=flow)
