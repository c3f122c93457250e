"""Unit tests for the Token Table."""

import pytest

from signage.schema import FONT_STACKS, DesignTokens

from .lib import (
    TokenTable,
    build_token_table,
    clean_text,
    clamp_int,
    is_hex_color,
    match_font_family,
    parse_number,
    resolve,
    sanitize_font,
    sanitize_tokens,
)


class TestPrimitives:
    """Tests for shared value primitives."""

    @pytest.mark.unit
    def test_hex_color(self):
        """Only #rrggbb strings are hex colors."""
        assert is_hex_color("#A1b2C3")
        assert not is_hex_color("#abc")
        assert not is_hex_color("red")
        assert not is_hex_color("$primary")
        assert not is_hex_color(None)

    @pytest.mark.unit
    def test_hex_color_rejects_trailing_newline(self):
        """A trailing newline does not slip past the hex check."""
        assert not is_hex_color("#aabbcc\n")

    @pytest.mark.unit
    def test_clean_text(self):
        """Lone surrogates are replaced, other text is untouched."""
        assert clean_text("a\ud800") == "a?"
        assert clean_text("Café \U0001f600") == "Café \U0001f600"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [(12, 12.0), (1.5, 1.5), ("42", 42.0), (" 7 ", 7.0)],
    )
    def test_parse_number_accepts(self, value, expected):
        """Numbers and numeric strings parse."""
        assert parse_number(value) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value", [True, False, None, "abc", float("nan"), float("inf"), [], {}, 10**400]
    )
    def test_parse_number_rejects(self, value):
        """Bools, non-finite, oversized and non-numeric values yield None."""
        assert parse_number(value) is None

    @pytest.mark.unit
    def test_clamp_int_rounds_half_up(self):
        """clamp_int clamps then rounds half-up."""
        assert clamp_int(2.5, 1, 12, 2) == 3
        assert clamp_int(99, 1, 12, 2) == 12
        assert clamp_int("junk", 1, 12, 2) == 2

    @pytest.mark.unit
    def test_match_font_family(self):
        """Fonts match by bare, case-insensitive family name."""
        assert match_font_family("georgia") == "Georgia"
        assert match_font_family("'Old Standard TT', serif") == "Old Standard TT"
        assert match_font_family("Comic Sans MS") is None

    @pytest.mark.unit
    def test_sanitize_font_unknown_is_system_ui(self):
        """Unknown fonts fall back to the system-ui stack."""
        assert sanitize_font("Papyrus") == FONT_STACKS["system-ui"]
        assert sanitize_font(42) == FONT_STACKS["system-ui"]

    @pytest.mark.unit
    def test_sanitize_font_resolves_tokens(self):
        """Font tokens resolve through the table."""
        table = build_token_table({"fonts": {"display": "Georgia"}})
        assert sanitize_font("$display", table) == FONT_STACKS["Georgia"]


class TestSanitizeTokens:
    """Tests for sanitize_tokens."""

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", [None, "tokens", 5, [], {}])
    def test_malformed_input_gives_defaults(self, raw):
        """Malformed token objects yield full defaults."""
        tokens = sanitize_tokens(raw)
        assert tokens == DesignTokens()
        assert tokens.colors["primary"] == "#2B2622"
        assert tokens.spacing.md == 40

    @pytest.mark.unit
    def test_invalid_colors_dropped_and_defaults_filled(self):
        """Invalid colors are dropped; required keys are filled."""
        tokens = sanitize_tokens(
            {"colors": {"primary": "red", "brand": "#FF0000", "display": "#000000"}}
        )
        assert tokens.colors["primary"] == "#2B2622"
        assert tokens.colors["brand"] == "#FF0000"
        assert "display" not in tokens.colors

    @pytest.mark.unit
    def test_long_color_keys_truncated(self):
        """Color keys are capped at 24 characters."""
        tokens = sanitize_tokens({"colors": {"k" * 40: "#010203"}})
        assert "k" * 24 in tokens.colors

    @pytest.mark.unit
    def test_surrogate_color_key_cleaned(self):
        """Color keys with lone surrogates are cleaned before use."""
        tokens = sanitize_tokens({"colors": {"br\ud800and": "#010203"}})
        assert tokens.colors["br?and"] == "#010203"
        assert tokens.model_dump_json()

    @pytest.mark.unit
    def test_oversized_spacing_uses_default(self):
        """Integers too large for a float fall back to the slot default."""
        tokens = sanitize_tokens({"spacing": {"md": 10**400}})
        assert tokens.spacing.md == 40

    @pytest.mark.unit
    def test_spacing_clamped_into_bounds(self):
        """Spacing slots are clamped into their ranges."""
        tokens = sanitize_tokens({"spacing": {"sm": 1, "md": "50", "lg": 999}})
        assert (tokens.spacing.sm, tokens.spacing.md, tokens.spacing.lg) == (12, 50, 120)

    @pytest.mark.unit
    def test_fonts_resolve_to_stacks(self):
        """Font slots always hold canonical stacks."""
        tokens = sanitize_tokens({"fonts": {"display": "roboto", "body": "Wingdings"}})
        assert tokens.fonts.display == FONT_STACKS["Roboto"]
        assert tokens.fonts.body == FONT_STACKS["system-ui"]


class TestTokenTable:
    """Tests for TokenTable and resolve."""

    @pytest.mark.unit
    def test_table_contains_all_slots(self):
        """Table flattens colors, fonts and spacing with $ keys."""
        table = build_token_table(None)
        for key in ("$primary", "$bg", "$accent", "$muted", "$display", "$body", "$sm", "$md", "$lg"):
            assert key in table
        assert table["$lg"] == 80

    @pytest.mark.unit
    def test_round_trip(self):
        """resolve('$k') equals the table entry for every key."""
        table = build_token_table({"colors": {"brand": "#123456"}})
        for key, value in table.items():
            assert resolve(key, table) == value

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["#ffffff", "plain", "$missing", 12, None])
    def test_non_tokens_pass_through(self, value):
        """Non-token values are returned unchanged."""
        table = build_token_table(None)
        assert resolve(value, table) == value

    @pytest.mark.unit
    def test_table_is_immutable(self):
        """TokenTable rejects item assignment."""
        table = build_token_table(None)
        with pytest.raises(TypeError):
            table["$primary"] = "#000000"  # type: ignore[index]

    @pytest.mark.unit
    def test_accepts_sanitized_tokens(self):
        """build_token_table accepts DesignTokens directly."""
        tokens = sanitize_tokens({"colors": {"brand": "#abcdef"}})
        table = build_token_table(tokens)
        assert isinstance(table, TokenTable)
        assert table.tokens is tokens
        assert table.to_dict()["$brand"] == "#abcdef"
