"""Composition assembler: signage text in, positioned composition out.

Pipeline:
    parse JSON -> sanitize -> build token table -> size canvas from aspect
    ratio -> resolve each frame's layout -> package frames

The import is all-or-nothing at the document level: either at least one frame
survives sanitization and the import succeeds, or it fails with an error list.
Malformed input never raises.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import Field

from signage.layout import (
    Measurer,
    OverflowPolicy,
    PositionedElement,
    resolve_layout,
    round_half_up,
)
from signage.schema import (
    AspectRatio,
    Background,
    Branding,
    GradientKind,
    Meta,
    SignageModel,
    Transition,
)
from signage.schema.lib import DEFAULT_BACKGROUND_COLOR, DEFAULT_GRADIENT_DIRECTION
from signage.tokens import TokenTable, build_token_table
from signage.validation import validate_and_sanitize
from signage.validation.lib import GRADIENT_DIRECTION_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANVAS_WIDTH = 1920
DEFAULT_MAX_CANVAS_HEIGHT = 1080

ASPECT_RATIOS: dict[str, tuple[int, int]] = {
    AspectRatio.LANDSCAPE.value: (16, 9),
    AspectRatio.CLASSIC.value: (4, 3),
    AspectRatio.PORTRAIT.value: (9, 16),
    AspectRatio.SQUARE.value: (1, 1),
}


# =============================================================================
# Canvas sizing
# =============================================================================


def aspect_ratio_to_size(
    ratio: str,
    max_width: int = DEFAULT_MAX_CANVAS_WIDTH,
    max_height: int = DEFAULT_MAX_CANVAS_HEIGHT,
) -> tuple[int, int]:
    """Fit an aspect ratio into a bounding box.

    The width is tried first; if the matching height exceeds the box, the
    height becomes binding instead. Neither bound is ever exceeded.

    Args:
        ratio: Aspect ratio string such as "16:9". Unknown ratios use 16:9.
        max_width: Bounding box width. Non-positive values use 1920.
        max_height: Bounding box height. Non-positive values use 1080.

    Returns:
        (width, height) in pixels.

    Example:
        >>> aspect_ratio_to_size("9:16", 1920, 1080)
        (608, 1080)
    """
    ratio_w, ratio_h = ASPECT_RATIOS.get(ratio, ASPECT_RATIOS[AspectRatio.LANDSCAPE.value])
    max_width = max_width if max_width and max_width > 0 else DEFAULT_MAX_CANVAS_WIDTH
    max_height = max_height if max_height and max_height > 0 else DEFAULT_MAX_CANVAS_HEIGHT

    width = max_width
    height = round_half_up(width * ratio_h / ratio_w)
    if height > max_height:
        height = max_height
        width = round_half_up(height * ratio_w / ratio_h)
    return width, height


# =============================================================================
# Backgrounds
# =============================================================================


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_background_css(background: Any) -> str:
    """Render a sanitized Background as a CSS `background` value.

    Args:
        background: SolidBackground or GradientBackground.

    Returns:
        CSS string; an overlay with opacity > 0 is layered on top.

    Example:
        >>> build_background_css(SolidBackground(color="#112233"))
        '#112233'
    """
    if background.type == "gradient":
        gradient = background.gradient
        stops = ", ".join(
            f"{stop.color} {_format_number(stop.position)}%" for stop in gradient.stops
        )
        if gradient.kind == GradientKind.RADIAL.value:
            css = f"radial-gradient(circle, {stops})"
        elif gradient.kind == GradientKind.CONIC.value:
            css = f"conic-gradient(from 0deg, {stops})"
        else:
            direction = gradient.direction
            if not GRADIENT_DIRECTION_PATTERN.fullmatch(direction):
                direction = DEFAULT_GRADIENT_DIRECTION
            css = f"linear-gradient({direction}, {stops})"
    else:
        css = background.color or DEFAULT_BACKGROUND_COLOR

    overlay = background.overlay
    if overlay is not None and overlay.opacity > 0:
        tint = f"{overlay.color}{round_half_up(overlay.opacity * 255):02x}"
        css = f"linear-gradient({tint}, {tint}), {css}"
    return css


# =============================================================================
# Results
# =============================================================================


class PaintedBackground(SignageModel):
    """A sanitized background together with its CSS rendering."""

    source: Background
    css: str


class ComposedFrame(SignageModel):
    """One frame ready to paint."""

    duration: float
    transition: Transition
    background: PaintedBackground
    canvas_width: int = Field(alias="canvasWidth")
    canvas_height: int = Field(alias="canvasHeight")
    positioned_elements: tuple[PositionedElement, ...] = Field(
        default=(), alias="positionedElements"
    )


@dataclass
class ImportResult:
    """Outcome of import_signage.

    Attributes:
        success: True when at least one frame was composed.
        frames: Composed frames (empty on failure).
        meta: Sanitized document metadata, or None on failure.
        branding: Sanitized branding, or None on failure.
        tokens: Token table of the document, or None on failure.
        errors: Failure reasons, or advisories on success.
    """

    success: bool
    frames: list[ComposedFrame] = field(default_factory=list)
    meta: Meta | None = None
    branding: Branding | None = None
    tokens: TokenTable | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict (wire field names)."""
        return {
            "success": self.success,
            "frames": [frame.to_wire() for frame in self.frames],
            "meta": self.meta.to_wire() if self.meta else None,
            "branding": self.branding.to_wire() if self.branding else None,
            "tokens": self.tokens.to_dict() if self.tokens is not None else None,
            "errors": list(self.errors),
        }


# =============================================================================
# Pipeline
# =============================================================================


def import_signage(
    text: str,
    max_canvas_width: int = DEFAULT_MAX_CANVAS_WIDTH,
    max_canvas_height: int = DEFAULT_MAX_CANVAS_HEIGHT,
    *,
    measurer: Measurer | None = None,
    overflow: OverflowPolicy | str = OverflowPolicy.NONE,
) -> ImportResult:
    """Parse, sanitize and lay out a signage document.

    Args:
        text: Raw JSON text, typically from a generative model with code
            fences already stripped.
        max_canvas_width: Bounding box width for the canvas.
        max_canvas_height: Bounding box height for the canvas.
        measurer: Optional content measurer for the layout resolver.
        overflow: Overflow policy for the layout resolver.

    Returns:
        ImportResult. Never raises for string input.

    Example:
        >>> result = import_signage('{"version": "2.0", "frames": [{}]}')
        >>> result.success, result.frames[0].canvas_width
        (True, 1920)
    """
    try:
        raw = json.loads(text)
    except (ValueError, RecursionError) as e:
        logger.debug("Signage text failed to parse: %s", e)
        return ImportResult(success=False, errors=[f"parse error: {e}"])

    sanitized = validate_and_sanitize(raw)
    if not sanitized.valid or sanitized.document is None:
        return ImportResult(success=False, errors=list(sanitized.errors))

    document = sanitized.document
    table = build_token_table(document.tokens)
    width, height = aspect_ratio_to_size(
        document.meta.aspect_ratio, max_canvas_width, max_canvas_height
    )

    frames = [
        ComposedFrame(
            duration=frame.duration,
            transition=frame.transition,
            background=PaintedBackground(
                source=frame.background, css=build_background_css(frame.background)
            ),
            canvas_width=width,
            canvas_height=height,
            positioned_elements=tuple(
                resolve_layout(
                    frame, width, height, table, measurer=measurer, overflow=overflow
                )
            ),
        )
        for frame in document.frames
    ]
    logger.debug("Composed %d frame(s) on a %dx%d canvas", len(frames), width, height)

    return ImportResult(
        success=True,
        frames=frames,
        meta=document.meta,
        branding=document.branding,
        tokens=table,
        errors=list(sanitized.errors),
    )


__all__ = [
    "ASPECT_RATIOS",
    "PaintedBackground",
    "ComposedFrame",
    "ImportResult",
    "aspect_ratio_to_size",
    "build_background_css",
    "import_signage",
]
