"""Schema module - authoritative source for signage document definitions.

This module provides:
- Allow-listed enums (element types, roles, shapes, transitions, ...)
- Hard limits and defaults enforced by the sanitizer
- Immutable Document -> Frame -> Element models
- JSON Schema generation for LLM integration

Example usage:
    >>> from signage.schema import Document, export_llm_schema
    >>> schema = export_llm_schema()  # For LLM prompt injection
    >>> Document.model_validate(wire_dict).to_wire()
"""

from .lib import (
    FALLBACK_FONT_FAMILY,
    FONT_STACKS,
    ROLE_TYPOGRAPHY,
    Align,
    Animation,
    AnimationType,
    AspectRatio,
    Background,
    BackgroundType,
    BlockStyle,
    Branding,
    Contrast,
    DesignTokens,
    DividerElement,
    DividerStyle,
    Document,
    Element,
    ElementType,
    FontSlots,
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
    RoleTypography,
    RunStyle,
    ShapeElement,
    ShapeKind,
    ShapeStyle,
    SignageModel,
    SolidBackground,
    SpacerElement,
    SpacingScale,
    TextAlign,
    TextElement,
    TextRun,
    TextTransform,
    Transition,
    TransitionType,
    export_json_schema,
    export_llm_schema,
    get_role_typography,
)

__all__ = [
    # Enums
    "Align",
    "AnimationType",
    "AspectRatio",
    "BackgroundType",
    "Contrast",
    "ElementType",
    "GradientKind",
    "Intent",
    "Justify",
    "LayoutDirection",
    "Role",
    "ShapeKind",
    "TextAlign",
    "TextTransform",
    "TransitionType",
    # Fonts and typography
    "FALLBACK_FONT_FAMILY",
    "FONT_STACKS",
    "ROLE_TYPOGRAPHY",
    "RoleTypography",
    "get_role_typography",
    # Models
    "Animation",
    "Background",
    "BlockStyle",
    "Branding",
    "DesignTokens",
    "DividerElement",
    "DividerStyle",
    "Document",
    "Element",
    "FontSlots",
    "Frame",
    "Gradient",
    "GradientBackground",
    "GradientStop",
    "ImageElement",
    "Layout",
    "Meta",
    "Overlay",
    "RunStyle",
    "ShapeElement",
    "ShapeStyle",
    "SignageModel",
    "SolidBackground",
    "SpacerElement",
    "SpacingScale",
    "TextElement",
    "TextRun",
    "Transition",
    # Schema generation
    "export_json_schema",
    "export_llm_schema",
]
