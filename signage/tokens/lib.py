"""Token Table: flat symbol table for design tokens.

A document's `tokens` object names colors, two font slots and three spacing
steps. Elements refer to them as `$name`. This module sanitizes the raw
tokens object, flattens it into an immutable `TokenTable` and resolves
references against it.

It also hosts the value primitives every sanitizer stage shares: hex color
checks, lenient numeric parsing and font allow-listing.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from signage.schema import (
    FALLBACK_FONT_FAMILY,
    FONT_STACKS,
    DesignTokens,
    FontSlots,
    SpacingScale,
)
from signage.schema.lib import (
    DEFAULT_BODY_FONT,
    DEFAULT_DISPLAY_FONT,
    DEFAULT_SPACING,
    DEFAULT_TOKEN_COLORS,
    MAX_TOKEN_KEY_LENGTH,
    SPACING_BOUNDS,
)

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "$"
HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")

# Color keys that would shadow a font or spacing slot in the flat table.
RESERVED_TOKEN_KEYS = frozenset({"display", "body", "sm", "md", "lg"})

_FONT_NAMES = {name.lower(): name for name in FONT_STACKS}


# =============================================================================
# Value primitives
# =============================================================================


def is_hex_color(value: Any) -> bool:
    """Check whether value is a `#rrggbb` string."""
    return isinstance(value, str) and HEX_COLOR_PATTERN.fullmatch(value) is not None


def clean_text(value: str) -> str:
    """Replace code points that cannot be encoded as UTF-8 (lone surrogates)."""
    return value.encode("utf-8", "replace").decode("utf-8")


def parse_number(value: Any) -> float | None:
    """Parse a JSON-ish number leniently.

    Accepts ints, floats and numeric strings. Booleans, NaN, infinities,
    integers too large for a float and anything else yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def clamp_number(value: Any, low: float, high: float, default: float) -> float:
    """Parse value and clamp it into [low, high], or return default."""
    number = parse_number(value)
    if number is None:
        return default
    return max(low, min(high, number))


def clamp_int(value: Any, low: int, high: int, default: int) -> int:
    """Like clamp_number, rounded half-up to an int."""
    return int(math.floor(clamp_number(value, low, high, default) + 0.5))


def match_font_family(value: str) -> str | None:
    """Match a font value against the allow-list by bare family name.

    The bare name is the first comma-separated entry with quotes removed,
    compared case-insensitively.

    Returns:
        The canonical family name, or None if not allow-listed.
    """
    bare = value.split(",")[0].strip().replace("'", "").replace('"', "")
    return _FONT_NAMES.get(bare.lower())


def sanitize_font(value: Any, table: Mapping[str, Any] | None = None) -> str:
    """Resolve a font reference to an allow-listed CSS font stack.

    Args:
        value: Raw font value (family name, stack or `$display`/`$body`).
        table: Token table used to resolve references.

    Returns:
        One of the four canonical stacks; system-ui when unknown.
    """
    resolved = resolve(value, table) if table is not None else value
    if isinstance(resolved, str):
        family = match_font_family(resolved)
        if family is not None:
            return FONT_STACKS[family]
    return FONT_STACKS[FALLBACK_FONT_FAMILY]


# =============================================================================
# Token sanitization
# =============================================================================


def sanitize_tokens(raw: Any) -> DesignTokens:
    """Sanitize a raw tokens object into DesignTokens.

    Never raises. Colors keep any key whose value is a hex color and are
    completed with primary/bg/accent/muted defaults. Fonts resolve to stacks.
    Spacing is clamped into each slot's bounds.
    """
    raw = raw if isinstance(raw, dict) else {}

    colors: dict[str, str] = {}
    raw_colors = raw.get("colors")
    if isinstance(raw_colors, dict):
        for key, value in raw_colors.items():
            name = clean_text(str(key))[:MAX_TOKEN_KEY_LENGTH]
            if not name or name in RESERVED_TOKEN_KEYS:
                continue
            if is_hex_color(value):
                colors[name] = value
    for name, fallback in DEFAULT_TOKEN_COLORS.items():
        colors.setdefault(name, fallback)

    raw_fonts = raw.get("fonts")
    if isinstance(raw_fonts, dict):
        fonts = FontSlots(
            display=sanitize_font(raw_fonts.get("display") or DEFAULT_DISPLAY_FONT),
            body=sanitize_font(raw_fonts.get("body") or DEFAULT_BODY_FONT),
        )
    else:
        fonts = FontSlots()

    raw_spacing = raw.get("spacing")
    raw_spacing = raw_spacing if isinstance(raw_spacing, dict) else {}
    spacing = SpacingScale(
        **{
            slot: clamp_int(raw_spacing.get(slot), low, high, DEFAULT_SPACING[slot])
            for slot, (low, high) in SPACING_BOUNDS.items()
        }
    )

    return DesignTokens(colors=colors, fonts=fonts, spacing=spacing)


# =============================================================================
# Token table
# =============================================================================


class TokenTable(Mapping[str, Any]):
    """Immutable `$name` -> value map built from sanitized DesignTokens.

    Values are hex colors (str), font stacks (str) or spacing pixels (int).

    Example:
        >>> table = build_token_table({"colors": {"brand": "#ff0000"}})
        >>> table["$brand"]
        '#ff0000'
        >>> resolve("$lg", table)
        80
    """

    __slots__ = ("_tokens", "_values")

    def __init__(self, tokens: DesignTokens):
        values: dict[str, Any] = {}
        for name, color in tokens.colors.items():
            values[TOKEN_PREFIX + name] = color
        values[TOKEN_PREFIX + "display"] = tokens.fonts.display
        values[TOKEN_PREFIX + "body"] = tokens.fonts.body
        values[TOKEN_PREFIX + "sm"] = tokens.spacing.sm
        values[TOKEN_PREFIX + "md"] = tokens.spacing.md
        values[TOKEN_PREFIX + "lg"] = tokens.spacing.lg
        self._tokens = tokens
        self._values = MappingProxyType(values)

    @property
    def tokens(self) -> DesignTokens:
        """The sanitized DesignTokens this table was built from."""
        return self._tokens

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"TokenTable({dict(self._values)!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain dict copy, for serialization."""
        return dict(self._values)


def build_token_table(raw: Any = None) -> TokenTable:
    """Build a TokenTable from a raw (possibly malformed) tokens object.

    Args:
        raw: Tokens dict from untrusted input, already-sanitized
            DesignTokens, or None.

    Returns:
        Immutable TokenTable. Never raises.
    """
    tokens = raw if isinstance(raw, DesignTokens) else sanitize_tokens(raw)
    table = TokenTable(tokens)
    logger.debug("Built token table with %d entries", len(table))
    return table


def resolve(value: Any, table: Mapping[str, Any]) -> Any:
    """Resolve a `$name` reference against a token table.

    Non-string values, strings without the `$` prefix and unknown references
    are returned unchanged; callers validate the result themselves.
    """
    if isinstance(value, str) and value.startswith(TOKEN_PREFIX) and value in table:
        return table[value]
    return value


__all__ = [
    "TOKEN_PREFIX",
    "HEX_COLOR_PATTERN",
    "RESERVED_TOKEN_KEYS",
    "is_hex_color",
    "clean_text",
    "parse_number",
    "clamp_number",
    "clamp_int",
    "match_font_family",
    "sanitize_font",
    "sanitize_tokens",
    "TokenTable",
    "build_token_table",
    "resolve",
]
