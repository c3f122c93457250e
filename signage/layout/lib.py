"""Single-axis stack layout resolver.

Given one sanitized Frame and a canvas size, computes an absolute pixel box
for every child of the frame's stack container:

1. Main axis follows layout.direction (vertical: main = height).
2. Each child in layout.ordered_child_ids is measured by a Measurer.
3. Children are placed along the main axis according to justify, and on the
   cross axis according to align.
4. Boxes are rounded half-up to integers.

The resolver is pure: the same frame and canvas always produce identical
output, and nothing is cached between calls.
"""

import logging
from enum import Enum
from typing import Any, Mapping

from signage.schema import Align, Element, Frame, Justify, LayoutDirection, SignageModel

from .measure import HeuristicMeasurer, Measurer, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_MEASURER = HeuristicMeasurer()


class OverflowPolicy(str, Enum):
    """What to do when estimated content does not fit the canvas.

    - NONE: leave boxes as computed; they may extend past the canvas
    - CLIP: intersect every box with the canvas rectangle
    - SHRINK: scale main-axis extents and gap so the content fits
    """

    NONE = "none"
    CLIP = "clip"
    SHRINK = "shrink"


class PositionedElement(SignageModel):
    """A sanitized element with absolute pixel geometry."""

    id: str
    x: int
    y: int
    w: int
    h: int
    element: Element


def _clip(x: int, y: int, w: int, h: int, width: int, height: int) -> tuple[int, int, int, int]:
    left = min(max(x, 0), width)
    top = min(max(y, 0), height)
    right = max(min(x + w, width), left)
    bottom = max(min(y + h, height), top)
    return left, top, right - left, bottom - top


def resolve_layout(
    frame: Frame,
    canvas_width: int,
    canvas_height: int,
    tokens: Mapping[str, Any] | None = None,
    *,
    measurer: Measurer | None = None,
    overflow: OverflowPolicy | str = OverflowPolicy.NONE,
) -> list[PositionedElement]:
    """Resolve a frame's stack layout into positioned elements.

    Args:
        frame: Sanitized frame.
        canvas_width: Canvas width in pixels.
        canvas_height: Canvas height in pixels.
        tokens: Token table handed to the measurer.
        measurer: Extent estimator. Defaults to HeuristicMeasurer.
        overflow: Overflow policy applied when content exceeds the canvas.

    Returns:
        One PositionedElement per existing child, in layout order. Empty when
        the frame has no children.

    Example:
        >>> boxes = resolve_layout(frame, 1920, 1080)
        >>> [(b.id, b.x, b.y, b.w, b.h) for b in boxes]
        [('e1', 60, 487, 1800, 106)]
    """
    overflow = OverflowPolicy(overflow)
    measurer = measurer or DEFAULT_MEASURER
    layout = frame.layout

    by_id = frame.element_map()
    children = [by_id[child_id] for child_id in layout.ordered_child_ids if child_id in by_id]
    if not children:
        return []

    vertical = layout.direction == LayoutDirection.VERTICAL.value
    main_size, cross_size = (canvas_height, canvas_width) if vertical else (canvas_width, canvas_height)
    padding = layout.padding
    gap: float = layout.gap
    available_cross = max(0, cross_size - padding * 2)
    available_main = max(0, main_size - padding * 2)

    extents = [
        measurer.measure(child, available_cross, layout.direction, tokens) for child in children
    ]
    mains = [extent.main for extent in extents]
    count = len(children)
    total_main = sum(mains) + gap * (count - 1)

    if overflow is OverflowPolicy.SHRINK and total_main > available_main and total_main > 0:
        scale = available_main / total_main
        mains = [main * scale for main in mains]
        gap *= scale
        total_main = sum(mains) + gap * (count - 1)
        logger.debug("Shrunk stack content by %.3f to fit %s px", scale, available_main)

    # === JUSTIFY ===
    step = gap
    if layout.justify == Justify.START.value:
        cursor = padding
    elif layout.justify == Justify.END.value:
        cursor = main_size - padding - total_main
    elif layout.justify == Justify.SPACE_BETWEEN.value and count > 1:
        cursor = padding
        step = (available_main - total_main + gap * (count - 1)) / (count - 1)
    elif layout.justify == Justify.SPACE_BETWEEN.value:
        cursor = padding
    else:
        cursor = max(padding, (main_size - total_main) / 2)

    positioned: list[PositionedElement] = []
    for child, extent, main in zip(children, extents, mains):
        # === ALIGN ===
        if layout.align == Align.START.value:
            cross_offset = padding
        elif layout.align == Align.END.value:
            cross_offset = cross_size - padding - extent.cross
        else:
            cross_offset = (cross_size - extent.cross) / 2

        if vertical:
            x, y, w, h = cross_offset, cursor, extent.cross, main
        else:
            x, y, w, h = cursor, cross_offset, main, extent.cross
        box = (round_half_up(x), round_half_up(y), round_half_up(w), round_half_up(h))
        if overflow is OverflowPolicy.CLIP:
            box = _clip(*box, canvas_width, canvas_height)

        positioned.append(
            PositionedElement(id=child.id, x=box[0], y=box[1], w=box[2], h=box[3], element=child)
        )
        cursor += main + step

    logger.debug(
        "Resolved %d children on %dx%d canvas (%s, justify=%s, align=%s)",
        count,
        canvas_width,
        canvas_height,
        layout.direction,
        layout.justify,
        layout.align,
    )
    return positioned


__all__ = [
    "OverflowPolicy",
    "PositionedElement",
    "resolve_layout",
]
