"""Tests for prompt building."""

import pytest

from signage.prompt import (
    CLARIFY_SYSTEM_PROMPT,
    FEEDBACK_HEADER,
    GENERATE_SYSTEM_PROMPT,
    STYLE_DIRECTIONS,
    build_clarify_messages,
    build_generation_messages,
    parse_clarify_response,
    wrap_user_prompt,
)


class TestWrapUserPrompt:
    """Tests for wrap_user_prompt."""

    @pytest.mark.unit
    def test_includes_description_and_answers(self):
        """Description and answers appear in their sections."""
        prompt = wrap_user_prompt("Bakery welcome sign", "Name: Crumbs", style_index=0)
        assert "## SIGN REQUEST\nBakery welcome sign" in prompt
        assert "## USER PREFERENCES\nName: Crumbs" in prompt

    @pytest.mark.unit
    def test_fixed_style_index(self):
        """A style index selects that direction."""
        assert STYLE_DIRECTIONS[3] in wrap_user_prompt("x", style_index=3)

    @pytest.mark.unit
    def test_style_index_wraps(self):
        """Indices past the end wrap around."""
        assert STYLE_DIRECTIONS[1] in wrap_user_prompt("x", style_index=len(STYLE_DIRECTIONS) + 1)

    @pytest.mark.unit
    def test_random_style_is_one_of_directions(self):
        """Without an index some direction is chosen."""
        prompt = wrap_user_prompt("x")
        assert any(direction in prompt for direction in STYLE_DIRECTIONS)

    @pytest.mark.unit
    def test_empty_answers_placeholder(self):
        """Missing answers are marked explicitly."""
        assert "(none given)" in wrap_user_prompt("x", "", style_index=0)

    @pytest.mark.unit
    def test_eight_directions(self):
        """There are eight style directions."""
        assert len(STYLE_DIRECTIONS) == 8


class TestMessages:
    """Tests for chat message builders."""

    @pytest.mark.unit
    def test_clarify_messages(self):
        """Clarify pass uses the clarify system prompt."""
        messages = build_clarify_messages("  A menu board  ")
        assert messages == [
            {"role": "system", "content": CLARIFY_SYSTEM_PROMPT},
            {"role": "user", "content": "A menu board"},
        ]

    @pytest.mark.unit
    def test_generation_messages(self):
        """Generation pass pairs the system prompt with the wrapped request."""
        messages = build_generation_messages("Menu", "Vegan", style_index=2)
        assert messages[0] == {"role": "system", "content": GENERATE_SYSTEM_PROMPT}
        assert messages[1]["content"] == wrap_user_prompt("Menu", "Vegan", style_index=2)

    @pytest.mark.unit
    def test_feedback_appended(self):
        """Errors from a failed attempt are fed back."""
        messages = build_generation_messages(
            "Menu", style_index=0, feedback=["No frames array found."]
        )
        content = messages[1]["content"]
        assert FEEDBACK_HEADER in content
        assert "- No frames array found." in content

    @pytest.mark.unit
    def test_schema_reference(self):
        """include_schema appends allow-lists and limits."""
        system = build_generation_messages("Menu", style_index=0, include_schema=True)[0]["content"]
        assert "## REFERENCE" in system
        assert '"elements_per_frame": 8' in system

    @pytest.mark.unit
    def test_prompt_names_only_allowed_fonts(self):
        """The generation prompt lists the four allowed fonts."""
        for font in ("Old Standard TT", "Georgia", "system-ui", "Roboto"):
            assert font in GENERATE_SYSTEM_PROMPT


class TestParseClarifyResponse:
    """Tests for parse_clarify_response."""

    @pytest.mark.unit
    def test_plain_json(self):
        """Questions are read from a JSON object."""
        text = '{"questions": ["One?", "Two?", "Three?"]}'
        assert parse_clarify_response(text) == ["One?", "Two?", "Three?"]

    @pytest.mark.unit
    def test_fenced_json(self):
        """Markdown fences and chatter are tolerated."""
        text = 'Sure!\n```json\n{"questions": [" A? ", "B?"]}\n```'
        assert parse_clarify_response(text) == ["A?", "B?"]

    @pytest.mark.unit
    def test_capped_at_three(self):
        """At most three questions are returned."""
        text = '{"questions": ["1", "2", "3", "4"]}'
        assert parse_clarify_response(text) == ["1", "2", "3"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "text",
        ["", "no json here", "{broken", '{"questions": "one"}', '["a", "b"]', '{"questions": [1, ""]}'],
    )
    def test_malformed(self, text):
        """Malformed responses yield an empty list."""
        assert parse_clarify_response(text) == []
