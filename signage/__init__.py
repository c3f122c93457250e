"""signage-composer: sanitize, lay out and compose generated digital signage."""

from signage.compose import ComposedFrame, ImportResult, import_signage
from signage.layout import OverflowPolicy, PositionedElement, resolve_layout
from signage.schema import Document, Frame, export_json_schema, export_llm_schema
from signage.tokens import TokenTable, build_token_table
from signage.validation import SanitizeResult, validate_and_sanitize

__all__ = [
    # Pipeline
    "import_signage",
    "ImportResult",
    "ComposedFrame",
    # Schema
    "Document",
    "Frame",
    "export_json_schema",
    "export_llm_schema",
    # Tokens
    "TokenTable",
    "build_token_table",
    # Validation
    "validate_and_sanitize",
    "SanitizeResult",
    # Layout
    "resolve_layout",
    "PositionedElement",
    "OverflowPolicy",
]
