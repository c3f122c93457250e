"""Token Table - `$name` design-token resolution.

Example:
    >>> from signage.tokens import build_token_table, resolve
    >>> table = build_token_table({"colors": {"primary": "#222222"}})
    >>> resolve("$primary", table)
    '#222222'
"""

from .lib import (
    HEX_COLOR_PATTERN,
    RESERVED_TOKEN_KEYS,
    TOKEN_PREFIX,
    TokenTable,
    build_token_table,
    clamp_int,
    clamp_number,
    clean_text,
    is_hex_color,
    match_font_family,
    parse_number,
    resolve,
    sanitize_font,
    sanitize_tokens,
)

__all__ = [
    # Table
    "TokenTable",
    "build_token_table",
    "resolve",
    "sanitize_tokens",
    # Value primitives
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
]
