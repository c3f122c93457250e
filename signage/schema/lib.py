"""Authoritative Schema Module for signage documents.

This module is the single source of truth for what a sanitized signage
document may contain. It provides:
- Allow-listed enums for every enumerated field
- Hard limits (counts, numeric ranges, string lengths)
- The font allow-list and its CSS stacks
- Role typography defaults used for text measurement
- Immutable pydantic models for Document -> Frame -> Element
- LLM-optimized schema exports

The models describe the *canonical* representation. Untrusted input never
reaches them directly; it goes through `signage.validation` first, which
repairs every field into a value these models accept.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

# =============================================================================
# Enums
# =============================================================================


class ElementType(str, Enum):
    """Closed set of paintable element kinds."""

    TEXT = "text"
    DIVIDER = "divider"
    IMAGE = "image"
    SHAPE = "shape"
    SPACER = "spacer"


class Role(str, Enum):
    """Semantic role of an element inside a frame.

    Roles drive typography defaults for text (see ROLE_TYPOGRAPHY).
    """

    HEADLINE = "headline"
    SUBHEAD = "subhead"
    BODY = "body"
    DETAIL = "detail"
    BRAND = "brand"
    ACCENT = "accent"
    MEDIA = "media"
    SPACER = "spacer"
    FOOTER = "footer"


class ShapeKind(str, Enum):
    """Vector shapes a shape element may draw."""

    RECT = "rect"
    CIRCLE = "circle"
    LINE = "line"
    ARROW = "arrow"
    TRIANGLE = "triangle"


class BackgroundType(str, Enum):
    """Frame background variants."""

    SOLID = "solid"
    GRADIENT = "gradient"


class GradientKind(str, Enum):
    """CSS gradient function used for gradient backgrounds."""

    LINEAR = "linear"
    RADIAL = "radial"
    CONIC = "conic"


class TransitionType(str, Enum):
    """How a frame enters after the previous one."""

    FADE = "fade"
    SLIDE = "slide"
    CUT = "cut"


class LayoutDirection(str, Enum):
    """Main axis of a frame's stack container.

    - VERTICAL: children flow top-to-bottom (main axis = height)
    - HORIZONTAL: children flow left-to-right (main axis = width)
    """

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Align(str, Enum):
    """Cross-axis alignment of stack children."""

    START = "start"
    CENTER = "center"
    END = "end"


class Justify(str, Enum):
    """Main-axis distribution of stack children."""

    START = "start"
    CENTER = "center"
    END = "end"
    SPACE_BETWEEN = "space-between"


class TextAlign(str, Enum):
    """Horizontal alignment of text inside its box."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class TextTransform(str, Enum):
    """Text case transformation (CSS text-transform)."""

    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"
    NONE = "none"


class Intent(str, Enum):
    """What the sign is for."""

    QUICK_SIGNAGE = "quick-signage"
    STORYBOARD = "storyboard"
    ANNOUNCEMENT = "announcement"
    WAYFINDING = "wayfinding"
    SCHEDULE = "schedule"


class Contrast(str, Enum):
    """Requested contrast level."""

    HIGH = "high"
    NORMAL = "normal"


class AspectRatio(str, Enum):
    """Supported canvas aspect ratios."""

    LANDSCAPE = "16:9"
    CLASSIC = "4:3"
    PORTRAIT = "9:16"
    SQUARE = "1:1"


class AnimationType(str, Enum):
    """Element animations a renderer may attach."""

    PULSE = "pulse"
    FLOAT = "float"
    SPIN = "spin"
    GLOW_PULSE = "glow-pulse"
    FADE_PULSE = "fade-pulse"
    GRADIENT_ROTATE = "gradient-rotate"
    GRADIENT_SHIFT = "gradient-shift"
    COLOR_TRANSITION = "color-transition"


# =============================================================================
# Limits
# =============================================================================

SCHEMA_VERSION = "2.0"

MAX_FRAMES = 3
MAX_ELEMENTS_PER_FRAME = 8
MAX_RUNS_PER_ELEMENT = 20
MIN_GRADIENT_STOPS = 2
MAX_GRADIENT_STOPS = 8

FONT_SIZE_RANGE = (18, 180)
FONT_WEIGHT_RANGE = (100, 900)
LINE_HEIGHT_RANGE = (0.8, 3.0)
DURATION_RANGE = (1.0, 120.0)
TRANSITION_DURATION_RANGE = (0.2, 2.0)
THICKNESS_RANGE = (1, 12)
STOP_POSITION_RANGE = (0.0, 100.0)
OPACITY_RANGE = (0.0, 1.0)
LAYOUT_SPACING_RANGE = (0, 200)
LETTER_SPACING_RANGE = (-5.0, 30.0)
BORDER_RADIUS_RANGE = (0.0, 999.0)
ANIMATION_SPEED_RANGE = (10.0, 5000.0)
SPACING_BOUNDS: dict[str, tuple[int, int]] = {
    "sm": (12, 24),
    "md": (28, 56),
    "lg": (60, 120),
}

MAX_ID_LENGTH = 32
MAX_TITLE_LENGTH = 100
MAX_ORG_NAME_LENGTH = 100
MAX_PALETTE_HINT_LENGTH = 50
MAX_ALT_LENGTH = 200
MAX_TOKEN_KEY_LENGTH = 24
MAX_CSS_EFFECT_LENGTH = 200
MAX_FILTER_LENGTH = 100
MAX_BORDER_RADIUS_LENGTH = 30
MAX_LETTER_SPACING_LENGTH = 20

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_TEXT_COLOR = "#111111"
DEFAULT_BACKGROUND_COLOR = "#ffffff"
DEFAULT_OVERLAY_COLOR = "#000000"
DEFAULT_DIVIDER_COLOR = "#cccccc"
DEFAULT_SHAPE_COLOR = "#3498db"

DEFAULT_TITLE = "Untitled Sign"
DEFAULT_DURATION = 15.0
DEFAULT_TRANSITION_DURATION = 0.5
DEFAULT_GRADIENT_DIRECTION = "to bottom"
DEFAULT_PADDING = 60
DEFAULT_GAP = 32
DEFAULT_DIVIDER_THICKNESS = 2
DEFAULT_DIVIDER_WIDTH = "60%"
DEFAULT_ALT = "Image"
DEFAULT_RUN_TEXT = "Text"

DEFAULT_TOKEN_COLORS: dict[str, str] = {
    "primary": "#2B2622",
    "bg": "#FDFCF8",
    "accent": "#B5A642",
    "muted": "#6B6B6B",
}
DEFAULT_SPACING: dict[str, int] = {"sm": 16, "md": 40, "lg": 80}

# =============================================================================
# Fonts
# =============================================================================

# The four families a document may use, keyed by bare family name.
FONT_STACKS: dict[str, str] = {
    "Old Standard TT": "Old Standard TT, serif",
    "Georgia": "Georgia, serif",
    "system-ui": (
        "system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif"
    ),
    "Roboto": "Roboto, sans-serif",
}
FALLBACK_FONT_FAMILY = "system-ui"
DEFAULT_DISPLAY_FONT = "Old Standard TT"
DEFAULT_BODY_FONT = "system-ui"

# =============================================================================
# Role typography
# =============================================================================


@dataclass(frozen=True)
class RoleTypography:
    """Typography a text element falls back to when blockStyle is silent."""

    font_size: int
    font_weight: int
    font_family: str
    line_height: float


_SMALL_TYPE = RoleTypography(24, 400, "$body", 1.0)

ROLE_TYPOGRAPHY: dict[Role, RoleTypography] = {
    Role.HEADLINE: RoleTypography(96, 700, "$display", 1.1),
    Role.SUBHEAD: RoleTypography(56, 600, "$display", 1.2),
    Role.BODY: RoleTypography(40, 400, "$body", 1.4),
    Role.DETAIL: RoleTypography(32, 400, "$body", 1.3),
    Role.BRAND: RoleTypography(28, 600, "$display", 1.2),
    Role.FOOTER: RoleTypography(24, 400, "$body", 1.3),
    Role.ACCENT: _SMALL_TYPE,
    Role.MEDIA: _SMALL_TYPE,
    Role.SPACER: _SMALL_TYPE,
}


def get_role_typography(role: Role | str) -> RoleTypography:
    """Get typography defaults for a role, falling back to body."""
    try:
        return ROLE_TYPOGRAPHY[Role(role)]
    except ValueError:
        return ROLE_TYPOGRAPHY[Role.BODY]


# =============================================================================
# Models
# =============================================================================


class SignageModel(BaseModel):
    """Base for all canonical models: immutable, alias-aware, enum values."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "use_enum_values": True,
    }

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape (camelCase keys, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Meta(SignageModel):
    """Document-level metadata."""

    title: str = Field(default=DEFAULT_TITLE, max_length=MAX_TITLE_LENGTH)
    intent: Intent = Intent.QUICK_SIGNAGE
    contrast: Contrast = Contrast.NORMAL
    aspect_ratio: AspectRatio = Field(
        default=AspectRatio.LANDSCAPE, alias="aspectRatio"
    )


class Branding(SignageModel):
    """Organisation branding hints."""

    org_name: str = Field(default="", alias="orgName", max_length=MAX_ORG_NAME_LENGTH)
    logo_url: str = Field(default="", alias="logoUrl")
    palette_hint: str = Field(
        default="", alias="palette", max_length=MAX_PALETTE_HINT_LENGTH
    )


class FontSlots(SignageModel):
    """Resolved CSS font stacks for the two font tokens."""

    display: str = FONT_STACKS[DEFAULT_DISPLAY_FONT]
    body: str = FONT_STACKS[DEFAULT_BODY_FONT]


class SpacingScale(SignageModel):
    """Spacing tokens in pixels."""

    sm: int = Field(default=DEFAULT_SPACING["sm"], ge=12, le=24)
    md: int = Field(default=DEFAULT_SPACING["md"], ge=28, le=56)
    lg: int = Field(default=DEFAULT_SPACING["lg"], ge=60, le=120)


class DesignTokens(SignageModel):
    """Sanitized design tokens: the source of a document's TokenTable."""

    colors: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TOKEN_COLORS))
    fonts: FontSlots = Field(default_factory=FontSlots)
    spacing: SpacingScale = Field(default_factory=SpacingScale)


class Transition(SignageModel):
    """Frame entry transition."""

    type: TransitionType = TransitionType.CUT
    duration: float = Field(default=DEFAULT_TRANSITION_DURATION, ge=0.2, le=2.0)


class GradientStop(SignageModel):
    """One color stop of a gradient."""

    color: str
    position: float = Field(default=0.0, ge=0.0, le=100.0)


class Gradient(SignageModel):
    """Gradient definition with 2..8 stops."""

    kind: GradientKind = Field(default=GradientKind.LINEAR, alias="type")
    direction: str = DEFAULT_GRADIENT_DIRECTION
    stops: tuple[GradientStop, ...] = Field(
        min_length=MIN_GRADIENT_STOPS, max_length=MAX_GRADIENT_STOPS
    )


class Overlay(SignageModel):
    """Translucent tint painted over a background."""

    color: str = DEFAULT_OVERLAY_COLOR
    opacity: float = Field(default=0.0, ge=0.0, le=1.0)


class SolidBackground(SignageModel):
    """Single-color background."""

    type: Literal["solid"] = "solid"
    color: str = DEFAULT_BACKGROUND_COLOR
    overlay: Overlay | None = None


class GradientBackground(SignageModel):
    """Gradient background."""

    type: Literal["gradient"] = "gradient"
    gradient: Gradient
    overlay: Overlay | None = None


Background = Annotated[
    Union[SolidBackground, GradientBackground], Field(discriminator="type")
]


class Layout(SignageModel):
    """Single-axis stack container of a frame."""

    direction: LayoutDirection = LayoutDirection.VERTICAL
    align: Align = Align.CENTER
    justify: Justify = Justify.CENTER
    padding: int = Field(default=DEFAULT_PADDING, ge=0, le=200)
    gap: int = Field(default=DEFAULT_GAP, ge=0, le=200)
    ordered_child_ids: tuple[str, ...] = Field(default=(), alias="children")


class Animation(SignageModel):
    """Optional element animation hint for renderers."""

    type: AnimationType | None = None
    speed: float | None = Field(default=None, ge=10.0, le=5000.0)
    start_color: str | None = Field(default=None, alias="startColor")
    end_color: str | None = Field(default=None, alias="endColor")


class RunStyle(SignageModel):
    """Inline style override for one text run."""

    font_size: int | None = Field(default=None, alias="fontSize", ge=18, le=180)
    font_weight: int | None = Field(default=None, alias="fontWeight", ge=100, le=900)
    font_family: str | None = Field(default=None, alias="fontFamily")
    color: str | None = None


class TextRun(SignageModel):
    """A span of text with optional inline style."""

    text: str = Field(min_length=1)
    style: RunStyle | None = None


class BlockStyle(SignageModel):
    """Block-level style of a text element. Unset values use role defaults."""

    font_family: str | None = Field(default=None, alias="fontFamily")
    font_size: int | None = Field(default=None, alias="fontSize", ge=18, le=180)
    font_weight: int | None = Field(default=None, alias="fontWeight", ge=100, le=900)
    color: str | None = None
    align: TextAlign | None = None
    line_height: float | None = Field(
        default=None, alias="lineHeight", ge=0.8, le=3.0
    )
    text_shadow: str | None = Field(default=None, alias="textShadow")
    letter_spacing: str | None = Field(default=None, alias="letterSpacing")
    text_transform: TextTransform | None = Field(default=None, alias="textTransform")
    opacity: float | None = Field(default=None, ge=0.0, le=1.0)


class DividerStyle(SignageModel):
    """Divider stroke."""

    color: str = DEFAULT_DIVIDER_COLOR
    thickness: int = Field(default=DEFAULT_DIVIDER_THICKNESS, ge=1, le=12)
    width: str = DEFAULT_DIVIDER_WIDTH
    box_shadow: str | None = Field(default=None, alias="boxShadow")


class ShapeStyle(SignageModel):
    """Fill and effects of a shape."""

    color: str = DEFAULT_SHAPE_COLOR
    box_shadow: str | None = Field(default=None, alias="boxShadow")
    border_radius: str | None = Field(default=None, alias="borderRadius")
    opacity: float | None = Field(default=None, ge=0.0, le=1.0)
    backdrop_filter: str | None = Field(default=None, alias="backdropFilter")
    filter: str | None = None
    gradient: str | None = None


class _ElementBase(SignageModel):
    id: str = Field(min_length=1, max_length=MAX_ID_LENGTH)
    role: Role = Role.BODY
    animation: Animation | None = None


class TextElement(_ElementBase):
    """Rich text made of runs."""

    type: Literal["text"] = "text"
    runs: tuple[TextRun, ...] = Field(min_length=1, max_length=MAX_RUNS_PER_ELEMENT)
    block_style: BlockStyle = Field(default_factory=BlockStyle, alias="blockStyle")

    @property
    def plain_text(self) -> str:
        """Concatenated text of all runs."""
        return "".join(run.text for run in self.runs)


class DividerElement(_ElementBase):
    """Horizontal rule."""

    type: Literal["divider"] = "divider"
    style: DividerStyle = Field(default_factory=DividerStyle)


class ImageElement(_ElementBase):
    """Remote image. An empty url renders as a placeholder."""

    type: Literal["image"] = "image"
    url: str = ""
    alt: str = Field(default=DEFAULT_ALT, max_length=MAX_ALT_LENGTH)


class ShapeElement(_ElementBase):
    """Decorative vector shape."""

    type: Literal["shape"] = "shape"
    shape: ShapeKind = ShapeKind.RECT
    style: ShapeStyle = Field(default_factory=ShapeStyle)


class SpacerElement(_ElementBase):
    """Empty breathing room."""

    type: Literal["spacer"] = "spacer"


Element = Annotated[
    Union[TextElement, DividerElement, ImageElement, ShapeElement, SpacerElement],
    Field(discriminator="type"),
]


class Frame(SignageModel):
    """One slide of a composition."""

    duration: float = Field(default=DEFAULT_DURATION, ge=1.0, le=120.0)
    transition: Transition = Field(default_factory=Transition)
    background: Background = Field(default_factory=SolidBackground)
    layout: Layout = Field(default_factory=Layout)
    elements: tuple[Element, ...] = Field(
        default=(), max_length=MAX_ELEMENTS_PER_FRAME
    )

    def element_map(self) -> dict[str, Any]:
        """Map element id to element."""
        return {element.id: element for element in self.elements}


class Document(SignageModel):
    """A sanitized signage document."""

    version: Literal["2.0"] = SCHEMA_VERSION
    meta: Meta = Field(default_factory=Meta)
    branding: Branding = Field(default_factory=Branding)
    tokens: DesignTokens = Field(default_factory=DesignTokens)
    frames: tuple[Frame, ...] = Field(min_length=1, max_length=MAX_FRAMES)


# =============================================================================
# Schema export
# =============================================================================


def export_json_schema() -> dict[str, Any]:
    """Export the Document JSON Schema (wire field names).

    Returns:
        JSON Schema dict suitable for validation or LLM prompts.
    """
    return Document.model_json_schema(by_alias=True)


def export_llm_schema() -> dict[str, Any]:
    """Export an LLM-optimized schema with allow-lists and limits.

    Designed for injection into generation prompts so the model sees the same
    bounds the sanitizer enforces.

    Returns:
        Dict with schema, allow-lists, limits and font families.
    """
    return {
        "schema": export_json_schema(),
        "allow_lists": {
            "element_types": [t.value for t in ElementType],
            "roles": [r.value for r in Role],
            "shapes": [s.value for s in ShapeKind],
            "gradient_types": [g.value for g in GradientKind],
            "transitions": [t.value for t in TransitionType],
            "directions": [d.value for d in LayoutDirection],
            "aligns": [a.value for a in Align],
            "justifies": [j.value for j in Justify],
            "intents": [i.value for i in Intent],
            "aspect_ratios": [a.value for a in AspectRatio],
            "animations": [a.value for a in AnimationType],
        },
        "limits": {
            "frames": MAX_FRAMES,
            "elements_per_frame": MAX_ELEMENTS_PER_FRAME,
            "runs_per_element": MAX_RUNS_PER_ELEMENT,
            "gradient_stops": [MIN_GRADIENT_STOPS, MAX_GRADIENT_STOPS],
            "font_size": list(FONT_SIZE_RANGE),
            "font_weight": list(FONT_WEIGHT_RANGE),
            "line_height": list(LINE_HEIGHT_RANGE),
            "duration": list(DURATION_RANGE),
            "transition_duration": list(TRANSITION_DURATION_RANGE),
            "spacing": {k: list(v) for k, v in SPACING_BOUNDS.items()},
        },
        "fonts": list(FONT_STACKS),
        "tokens": {
            "colors": "$<name> for any key in tokens.colors",
            "fonts": ["$display", "$body"],
            "spacing": ["$sm", "$md", "$lg"],
        },
    }


__all__ = [
    # Enums
    "ElementType",
    "Role",
    "ShapeKind",
    "BackgroundType",
    "GradientKind",
    "TransitionType",
    "LayoutDirection",
    "Align",
    "Justify",
    "TextAlign",
    "TextTransform",
    "Intent",
    "Contrast",
    "AspectRatio",
    "AnimationType",
    # Fonts and typography
    "FONT_STACKS",
    "FALLBACK_FONT_FAMILY",
    "RoleTypography",
    "ROLE_TYPOGRAPHY",
    "get_role_typography",
    # Models
    "SignageModel",
    "Meta",
    "Branding",
    "FontSlots",
    "SpacingScale",
    "DesignTokens",
    "Transition",
    "GradientStop",
    "Gradient",
    "Overlay",
    "SolidBackground",
    "GradientBackground",
    "Background",
    "Layout",
    "Animation",
    "RunStyle",
    "TextRun",
    "BlockStyle",
    "DividerStyle",
    "ShapeStyle",
    "TextElement",
    "DividerElement",
    "ImageElement",
    "ShapeElement",
    "SpacerElement",
    "Element",
    "Frame",
    "Document",
    # Schema generation
    "export_json_schema",
    "export_llm_schema",
]
