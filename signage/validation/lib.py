"""Schema sanitizer for untrusted signage documents.

This module turns arbitrary parsed JSON (typically produced by a generative
model) into a bounded, canonical `Document`. Only three structural defects
reject the input outright:
    - the input is not an object
    - `frames` is missing, empty or not a list
    - no frame survives frame-level sanitization

Every other defect is repaired in place of being reported: enums fall back to
defaults, numbers are clamped, colors and URLs are checked, strings are
length-capped and arrays truncated. Advisory messages (unknown version,
truncated lists) accumulate in the result without failing it.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from signage.schema import (
    Align,
    Animation,
    AnimationType,
    AspectRatio,
    BlockStyle,
    Branding,
    Contrast,
    DividerElement,
    DividerStyle,
    Document,
    ElementType,
    Frame,
    Gradient,
    GradientBackground,
    GradientKind,
    GradientStop,
    ImageElement,
    Intent,
    Justify,
    Layout,
    LayoutDirection,
    Meta,
    Overlay,
    Role,
    RunStyle,
    ShapeElement,
    ShapeKind,
    ShapeStyle,
    SolidBackground,
    SpacerElement,
    TextAlign,
    TextElement,
    TextRun,
    TextTransform,
    Transition,
    TransitionType,
)
from signage.schema import lib as schema
from signage.tokens import (
    TokenTable,
    build_token_table,
    clamp_int,
    clamp_number,
    clean_text,
    is_hex_color,
    parse_number,
    resolve,
    sanitize_font,
)

logger = logging.getLogger(__name__)

SAFE_URL_PATTERN = re.compile(r"^https://.+", re.IGNORECASE)
DANGEROUS_URL_PATTERN = re.compile(r"^(javascript|data|blob|vbscript):", re.IGNORECASE)
CSS_LENGTH_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)?(px|%|em|rem|vw|vh)?$")
GRADIENT_DIRECTION_PATTERN = re.compile(
    r"^(to (top|bottom|left|right)( (top|bottom|left|right))?|-?[0-9]+(\.[0-9]+)?deg)$",
    re.IGNORECASE,
)

ERROR_NOT_OBJECT = "Input is not an object."
ERROR_NO_FRAMES = "No frames array found."
ERROR_ALL_FRAMES_INVALID = "All frames were invalid."


@dataclass
class SanitizeResult:
    """Outcome of validate_and_sanitize.

    Attributes:
        valid: True when a Document was produced.
        document: The sanitized Document, or None on structural failure.
        errors: Structural errors (when invalid) or advisories (when valid).
    """

    valid: bool
    document: Document | None = None
    errors: list[str] = field(default_factory=list)


# =============================================================================
# Field helpers
# =============================================================================


def _enum_value(value: Any, enum_type: type, default: Any) -> str:
    """Return value if it is one of enum_type's values, else default's value."""
    allowed = {member.value for member in enum_type}
    if isinstance(value, str) and value in allowed:
        return value
    return default.value


def _optional_enum(value: Any, enum_type: type) -> str | None:
    allowed = {member.value for member in enum_type}
    return value if isinstance(value, str) and value in allowed else None


def _describe(value: Any) -> str:
    """Short printable form of an untrusted scalar for advisory messages."""
    if isinstance(value, str):
        return clean_text(value)[: schema.MAX_ID_LENGTH]
    if value is None or isinstance(value, (bool, float)):
        return str(value)
    if isinstance(value, int) and value.bit_length() <= 64:
        return str(value)
    return type(value).__name__


def _capped_str(value: Any, limit: int, default: str | None = None) -> str | None:
    return clean_text(value)[:limit] if isinstance(value, str) else default


def _format_px(number: float) -> str:
    return f"{int(number)}px" if number.is_integer() else f"{number}px"


def _optional_int(value: Any, low: int, high: int) -> int | None:
    """Clamp an optional integer field; unparseable values are dropped."""
    if parse_number(value) is None:
        return None
    return clamp_int(value, low, high, low)


def _optional_float(value: Any, low: float, high: float) -> float | None:
    if parse_number(value) is None:
        return None
    return clamp_number(value, low, high, low)


def sanitize_color(
    value: Any, table: TokenTable, fallback: str = schema.DEFAULT_TEXT_COLOR
) -> str:
    """Resolve a color token and require `#rrggbb`, else return fallback."""
    resolved = resolve(value, table)
    return resolved if is_hex_color(resolved) else fallback


def sanitize_url(value: Any) -> str:
    """Return the trimmed URL if it is https and not a script/data scheme.

    Anything else becomes the empty string.
    """
    if not isinstance(value, str):
        return ""
    trimmed = clean_text(value).strip()
    if not trimmed or DANGEROUS_URL_PATTERN.match(trimmed):
        return ""
    if not SAFE_URL_PATTERN.match(trimmed):
        return ""
    return trimmed


def _sanitize_gradient_direction(value: Any) -> str:
    """Keep `to <side>[ <side>]` or `<n>deg` directions, else `to bottom`."""
    if isinstance(value, str) and GRADIENT_DIRECTION_PATTERN.fullmatch(value.strip()):
        return value.strip()
    return schema.DEFAULT_GRADIENT_DIRECTION


def _sanitize_layout_spacing(value: Any, table: TokenTable, default: int) -> int:
    low, high = schema.LAYOUT_SPACING_RANGE
    if isinstance(value, str) and value.startswith("$"):
        resolved = resolve(value, table)
        if isinstance(resolved, int) and not isinstance(resolved, bool):
            return clamp_int(resolved, low, high, default)
        return default
    return clamp_int(value, low, high, default)


# =============================================================================
# Element sanitization
# =============================================================================


def _sanitize_run_style(raw: Any, table: TokenTable) -> RunStyle | None:
    if not isinstance(raw, dict):
        return None
    values: dict[str, Any] = {
        "font_size": _optional_int(raw.get("fontSize"), *schema.FONT_SIZE_RANGE),
        "font_weight": _optional_int(raw.get("fontWeight"), *schema.FONT_WEIGHT_RANGE),
    }
    if raw.get("fontFamily"):
        values["font_family"] = sanitize_font(raw["fontFamily"], table)
    if raw.get("color"):
        values["color"] = sanitize_color(raw["color"], table)
    values = {key: value for key, value in values.items() if value is not None}
    return RunStyle(**values) if values else None


def _sanitize_run(raw: Any, table: TokenTable) -> TextRun | None:
    if not isinstance(raw, dict):
        return None
    text = raw.get("text")
    if not isinstance(text, str) or not text:
        return None
    return TextRun(text=clean_text(text), style=_sanitize_run_style(raw.get("style"), table))


def _sanitize_block_style(raw: Any, table: TokenTable) -> BlockStyle:
    if not isinstance(raw, dict):
        return BlockStyle()

    values: dict[str, Any] = {
        "font_size": _optional_int(raw.get("fontSize"), *schema.FONT_SIZE_RANGE),
        "font_weight": _optional_int(raw.get("fontWeight"), *schema.FONT_WEIGHT_RANGE),
        "line_height": _optional_float(raw.get("lineHeight"), *schema.LINE_HEIGHT_RANGE),
        "opacity": _optional_float(raw.get("opacity"), *schema.OPACITY_RANGE),
        "text_shadow": _capped_str(raw.get("textShadow"), schema.MAX_CSS_EFFECT_LENGTH),
    }
    if raw.get("fontFamily"):
        values["font_family"] = sanitize_font(raw["fontFamily"], table)
    if raw.get("color"):
        values["color"] = sanitize_color(raw["color"], table)
    values["align"] = _optional_enum(raw.get("align"), TextAlign)
    values["text_transform"] = _optional_enum(raw.get("textTransform"), TextTransform)

    spacing = raw.get("letterSpacing")
    if isinstance(spacing, str):
        values["letter_spacing"] = _capped_str(spacing, schema.MAX_LETTER_SPACING_LENGTH)
    elif parse_number(spacing) is not None:
        values["letter_spacing"] = _format_px(
            clamp_number(spacing, *schema.LETTER_SPACING_RANGE, 0.0)
        )

    return BlockStyle(**{k: v for k, v in values.items() if v is not None})


def _sanitize_animation(raw: Any) -> Animation | None:
    if not isinstance(raw, dict):
        return None
    values: dict[str, Any] = {
        "speed": _optional_float(raw.get("speed"), *schema.ANIMATION_SPEED_RANGE),
    }
    values["type"] = _optional_enum(raw.get("type"), AnimationType)
    for key, name in (("startColor", "start_color"), ("endColor", "end_color")):
        if is_hex_color(raw.get(key)):
            values[name] = raw[key]
    values = {k: v for k, v in values.items() if v is not None}
    return Animation(**values) if values else None


def _sanitize_divider_style(raw: dict[str, Any], table: TokenTable) -> DividerStyle:
    width = raw.get("width")
    if not (isinstance(width, str) and CSS_LENGTH_PATTERN.match(width.strip())):
        width = schema.DEFAULT_DIVIDER_WIDTH
    return DividerStyle(
        color=sanitize_color(raw.get("color"), table, schema.DEFAULT_DIVIDER_COLOR),
        thickness=clamp_int(
            raw.get("thickness"), *schema.THICKNESS_RANGE, schema.DEFAULT_DIVIDER_THICKNESS
        ),
        width=width.strip(),
        box_shadow=_capped_str(raw.get("boxShadow"), schema.MAX_CSS_EFFECT_LENGTH),
    )


def _sanitize_shape_style(raw: dict[str, Any], table: TokenTable) -> ShapeStyle:
    radius = raw.get("borderRadius")
    if isinstance(radius, str):
        border_radius = _capped_str(radius, schema.MAX_BORDER_RADIUS_LENGTH)
    elif parse_number(radius) is not None:
        border_radius = _format_px(clamp_number(radius, *schema.BORDER_RADIUS_RANGE, 0.0))
    else:
        border_radius = None

    return ShapeStyle(
        color=sanitize_color(raw.get("color"), table, schema.DEFAULT_SHAPE_COLOR),
        box_shadow=_capped_str(raw.get("boxShadow"), schema.MAX_CSS_EFFECT_LENGTH),
        border_radius=border_radius,
        opacity=_optional_float(raw.get("opacity"), *schema.OPACITY_RANGE),
        backdrop_filter=_capped_str(raw.get("backdropFilter"), schema.MAX_FILTER_LENGTH),
        filter=_capped_str(raw.get("filter"), schema.MAX_FILTER_LENGTH),
        gradient=_capped_str(raw.get("gradient"), schema.MAX_CSS_EFFECT_LENGTH),
    )


def sanitize_element(raw: Any, element_id: str, table: TokenTable):
    """Sanitize one element dict into its typed Element variant.

    Args:
        raw: Untrusted element value.
        element_id: Id already made unique within the frame.
        table: Token table for color and font references.

    Returns:
        A TextElement, DividerElement, ImageElement, ShapeElement or
        SpacerElement, or None when raw is not an object.
    """
    if not isinstance(raw, dict):
        return None

    element_type = _enum_value(raw.get("type"), ElementType, ElementType.TEXT)
    common = {
        "id": element_id,
        "role": _enum_value(raw.get("role"), Role, Role.BODY),
        "animation": _sanitize_animation(raw.get("animation")),
    }
    style = raw.get("style") if isinstance(raw.get("style"), dict) else {}

    if element_type == ElementType.TEXT.value:
        runs = [
            run
            for run in (_sanitize_run(r, table) for r in _as_list(raw.get("runs")))
            if run is not None
        ][: schema.MAX_RUNS_PER_ELEMENT]
        if not runs:
            fallback = raw.get("text")
            if not isinstance(fallback, str) or not fallback:
                fallback = schema.DEFAULT_RUN_TEXT
            runs = [TextRun(text=clean_text(fallback))]
        return TextElement(
            **common,
            runs=tuple(runs),
            block_style=_sanitize_block_style(raw.get("blockStyle"), table),
        )

    if element_type == ElementType.DIVIDER.value:
        return DividerElement(**common, style=_sanitize_divider_style(style, table))

    if element_type == ElementType.IMAGE.value:
        return ImageElement(
            **common,
            url=sanitize_url(raw.get("url")),
            alt=_capped_str(raw.get("alt"), schema.MAX_ALT_LENGTH, schema.DEFAULT_ALT),
        )

    if element_type == ElementType.SHAPE.value:
        return ShapeElement(
            **common,
            shape=_enum_value(raw.get("shape"), ShapeKind, ShapeKind.RECT),
            style=_sanitize_shape_style(style, table),
        )

    return SpacerElement(**common)


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _unique_id(candidate: str, seen: set[str]) -> str:
    """Suffix candidate with -2, -3, ... until it is unused."""
    if candidate not in seen:
        return candidate
    suffix_number = 2
    while True:
        suffix = f"-{suffix_number}"
        unique = candidate[: schema.MAX_ID_LENGTH - len(suffix)] + suffix
        if unique not in seen:
            return unique
        suffix_number += 1


# =============================================================================
# Frame sanitization
# =============================================================================


def sanitize_background(raw: Any, table: TokenTable):
    """Sanitize a frame background.

    A gradient with fewer than two usable stops degrades to a solid color.
    """
    if not isinstance(raw, dict):
        return SolidBackground()

    overlay = None
    if isinstance(raw.get("overlay"), dict):
        raw_overlay = raw["overlay"]
        overlay = Overlay(
            color=sanitize_color(
                raw_overlay.get("color"), table, schema.DEFAULT_OVERLAY_COLOR
            ),
            opacity=clamp_number(raw_overlay.get("opacity"), *schema.OPACITY_RANGE, 0.0),
        )

    gradient = raw.get("gradient")
    if raw.get("type") == "gradient" and isinstance(gradient, dict):
        stops = [
            GradientStop(
                color=sanitize_color(
                    stop.get("color"), table, schema.DEFAULT_BACKGROUND_COLOR
                ),
                position=clamp_number(stop.get("position"), *schema.STOP_POSITION_RANGE, 0.0),
            )
            for stop in _as_list(gradient.get("stops"))[: schema.MAX_GRADIENT_STOPS]
            if isinstance(stop, dict)
        ]
        if len(stops) >= schema.MIN_GRADIENT_STOPS:
            return GradientBackground(
                gradient=Gradient(
                    kind=_enum_value(gradient.get("type"), GradientKind, GradientKind.LINEAR),
                    direction=_sanitize_gradient_direction(gradient.get("direction")),
                    stops=tuple(stops),
                ),
                overlay=overlay,
            )
        logger.debug("Gradient has %d usable stops, using solid background", len(stops))

    return SolidBackground(
        color=sanitize_color(raw.get("color"), table, schema.DEFAULT_BACKGROUND_COLOR),
        overlay=overlay,
    )


def _sanitize_transition(raw: Any) -> Transition:
    if not isinstance(raw, dict):
        return Transition()
    return Transition(
        type=_enum_value(raw.get("type"), TransitionType, TransitionType.CUT),
        duration=clamp_number(
            raw.get("duration"),
            *schema.TRANSITION_DURATION_RANGE,
            schema.DEFAULT_TRANSITION_DURATION,
        ),
    )


def _order_children(raw_children: Any, element_ids: list[str]) -> tuple[str, ...]:
    """Filter the child ordering to existing ids, first occurrence wins.

    An ordering that ends up empty falls back to declaration order.
    """
    known = set(element_ids)
    ordered: list[str] = []
    for child in _as_list(raw_children):
        if isinstance(child, bool) or not isinstance(child, (str, int)):
            continue
        if isinstance(child, int) and child.bit_length() > 128:
            continue
        if isinstance(child, str):
            child_id = clean_text(child)[: schema.MAX_ID_LENGTH]
        else:
            child_id = str(child)
        if child_id in known and child_id not in ordered:
            ordered.append(child_id)
    return tuple(ordered or element_ids)


def sanitize_frame(
    raw: Any, table: TokenTable, index: int = 1, advisories: list[str] | None = None
) -> Frame | None:
    """Sanitize one frame.

    Args:
        raw: Untrusted frame value.
        table: Token table for references.
        index: 1-based frame number, used in advisory messages.
        advisories: Optional list that receives advisory messages.

    Returns:
        Sanitized Frame, or None when raw is not an object.
    """
    if not isinstance(raw, dict):
        return None

    raw_elements = _as_list(raw.get("elements"))
    if len(raw_elements) > schema.MAX_ELEMENTS_PER_FRAME and advisories is not None:
        advisories.append(
            f"Frame {index}: only the first {schema.MAX_ELEMENTS_PER_FRAME} "
            f"of {len(raw_elements)} elements were kept."
        )

    elements = []
    seen_ids: set[str] = set()
    for position, raw_element in enumerate(
        raw_elements[: schema.MAX_ELEMENTS_PER_FRAME], start=1
    ):
        if not isinstance(raw_element, dict):
            continue
        candidate = raw_element.get("id")
        if isinstance(candidate, str) and candidate:
            candidate = clean_text(candidate)[: schema.MAX_ID_LENGTH]
        else:
            candidate = f"el-{position}"
        element_id = _unique_id(candidate, seen_ids)
        seen_ids.add(element_id)
        elements.append(sanitize_element(raw_element, element_id, table))

    raw_layout = raw.get("layout") if isinstance(raw.get("layout"), dict) else {}
    layout = Layout(
        direction=_enum_value(
            raw_layout.get("direction"), LayoutDirection, LayoutDirection.VERTICAL
        ),
        align=_enum_value(raw_layout.get("align"), Align, Align.CENTER),
        justify=_enum_value(raw_layout.get("justify"), Justify, Justify.CENTER),
        padding=_sanitize_layout_spacing(
            raw_layout.get("padding"), table, schema.DEFAULT_PADDING
        ),
        gap=_sanitize_layout_spacing(raw_layout.get("gap"), table, schema.DEFAULT_GAP),
        ordered_child_ids=_order_children(
            raw_layout.get("children"), [element.id for element in elements]
        ),
    )

    return Frame(
        duration=clamp_number(
            raw.get("duration"), *schema.DURATION_RANGE, schema.DEFAULT_DURATION
        ),
        transition=_sanitize_transition(raw.get("transition")),
        background=sanitize_background(raw.get("background"), table),
        layout=layout,
        elements=tuple(elements),
    )


# =============================================================================
# Document sanitization
# =============================================================================


def _sanitize_meta(raw: Any) -> Meta:
    if not isinstance(raw, dict):
        return Meta()
    return Meta(
        title=_capped_str(raw.get("title"), schema.MAX_TITLE_LENGTH, schema.DEFAULT_TITLE),
        intent=_enum_value(raw.get("intent"), Intent, Intent.QUICK_SIGNAGE),
        contrast=_enum_value(raw.get("contrast"), Contrast, Contrast.NORMAL),
        aspect_ratio=_enum_value(raw.get("aspectRatio"), AspectRatio, AspectRatio.LANDSCAPE),
    )


def _sanitize_branding(raw: Any) -> Branding:
    if not isinstance(raw, dict):
        return Branding()
    return Branding(
        org_name=_capped_str(raw.get("orgName"), schema.MAX_ORG_NAME_LENGTH, ""),
        logo_url=sanitize_url(raw.get("logoUrl")),
        palette_hint=_capped_str(raw.get("palette"), schema.MAX_PALETTE_HINT_LENGTH, ""),
    )


def validate_and_sanitize(raw: Any) -> SanitizeResult:
    """Validate and sanitize an untrusted, already-parsed document.

    Pure function: the input is never mutated and identical input yields an
    identical result. Never raises for JSON-compatible input.

    Args:
        raw: Parsed JSON value.

    Returns:
        SanitizeResult with the Document and advisories, or valid=False with
        a single structural error.

    Example:
        >>> result = validate_and_sanitize({"frames": [{"elements": []}]})
        >>> result.valid
        True
        >>> result.errors
        ['Unknown version "None", treating as 2.0.']
    """
    if not isinstance(raw, dict):
        return SanitizeResult(valid=False, errors=[ERROR_NOT_OBJECT])

    advisories: list[str] = []
    version = raw.get("version")
    if version != schema.SCHEMA_VERSION:
        advisories.append(f'Unknown version "{_describe(version)}", treating as 2.0.')

    raw_frames = raw.get("frames")
    if not isinstance(raw_frames, list) or not raw_frames:
        return SanitizeResult(valid=False, errors=[ERROR_NO_FRAMES])

    table = build_token_table(raw.get("tokens"))

    if len(raw_frames) > schema.MAX_FRAMES:
        advisories.append(
            f"Only the first {schema.MAX_FRAMES} of {len(raw_frames)} frames were kept."
        )

    frames = [
        frame
        for frame in (
            sanitize_frame(raw_frame, table, index, advisories)
            for index, raw_frame in enumerate(raw_frames[: schema.MAX_FRAMES], start=1)
        )
        if frame is not None
    ]
    if not frames:
        return SanitizeResult(valid=False, errors=[ERROR_ALL_FRAMES_INVALID])

    document = Document(
        meta=_sanitize_meta(raw.get("meta")),
        branding=_sanitize_branding(raw.get("branding")),
        tokens=table.tokens,
        frames=tuple(frames),
    )
    logger.debug(
        "Sanitized document: %d frame(s), %d advisory message(s)",
        len(frames),
        len(advisories),
    )
    return SanitizeResult(valid=True, document=document, errors=advisories)


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
