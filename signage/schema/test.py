"""Unit tests for the Schema module."""

import pytest
from pydantic import ValidationError

from signage.schema import (
    FONT_STACKS,
    ROLE_TYPOGRAPHY,
    Document,
    ElementType,
    Frame,
    Layout,
    Role,
    SolidBackground,
    TextElement,
    TextRun,
    export_json_schema,
    export_llm_schema,
    get_role_typography,
)


def _minimal_document() -> Document:
    return Document(
        frames=(
            Frame(
                layout=Layout(ordered_child_ids=("h",)),
                elements=(
                    TextElement(id="h", role=Role.HEADLINE, runs=(TextRun(text="Hi"),)),
                ),
            ),
        )
    )


class TestRoleTypography:
    """Tests for role typography defaults."""

    @pytest.mark.unit
    def test_every_role_has_typography(self):
        """Every Role has an entry in ROLE_TYPOGRAPHY."""
        for role in Role:
            assert role in ROLE_TYPOGRAPHY

    @pytest.mark.unit
    def test_headline_defaults(self):
        """Headline is large, bold and uses the display font."""
        typo = get_role_typography("headline")
        assert typo.font_size == 96
        assert typo.font_weight == 700
        assert typo.font_family == "$display"
        assert typo.line_height == pytest.approx(1.1)

    @pytest.mark.unit
    def test_unknown_role_falls_back_to_body(self):
        """Unknown role strings resolve to body typography."""
        assert get_role_typography("banner") == ROLE_TYPOGRAPHY[Role.BODY]


class TestModels:
    """Tests for the canonical pydantic models."""

    @pytest.mark.unit
    def test_models_are_frozen(self):
        """Models reject attribute assignment."""
        doc = _minimal_document()
        with pytest.raises(ValidationError):
            doc.meta.title = "Changed"

    @pytest.mark.unit
    def test_enum_values_are_stored_as_strings(self):
        """Enum fields hold their string values."""
        element = _minimal_document().frames[0].elements[0]
        assert element.role == "headline"
        assert element.type == ElementType.TEXT.value

    @pytest.mark.unit
    def test_to_wire_uses_camel_case_aliases(self):
        """to_wire emits wire keys and omits unset optionals."""
        wire = _minimal_document().to_wire()
        assert wire["version"] == "2.0"
        assert wire["meta"]["aspectRatio"] == "16:9"
        assert wire["frames"][0]["layout"]["children"] == ["h"]
        element = wire["frames"][0]["elements"][0]
        assert element["blockStyle"] == {}
        assert "animation" not in element
        assert "style" not in element["runs"][0]

    @pytest.mark.unit
    def test_wire_form_validates_back(self):
        """The wire form parses back into an equal model."""
        doc = _minimal_document()
        assert Document.model_validate(doc.to_wire()) == doc

    @pytest.mark.unit
    def test_element_union_discriminates_on_type(self):
        """Frame elements are parsed by their type tag."""
        frame = Frame.model_validate(
            {"elements": [{"id": "s", "type": "spacer", "role": "spacer"}]}
        )
        assert frame.elements[0].type == "spacer"

    @pytest.mark.unit
    def test_background_defaults_to_white_solid(self):
        """Default frame background is solid white."""
        assert Frame().background == SolidBackground(color="#ffffff")

    @pytest.mark.unit
    def test_document_requires_a_frame(self):
        """Documents must have at least one frame."""
        with pytest.raises(ValidationError):
            Document(frames=())

    @pytest.mark.unit
    def test_document_frame_cap(self):
        """Documents hold at most three frames."""
        with pytest.raises(ValidationError):
            Document(frames=(Frame(),) * 4)

    @pytest.mark.unit
    def test_plain_text_joins_runs(self):
        """TextElement.plain_text concatenates run texts."""
        element = TextElement(
            id="t", runs=(TextRun(text="Hello "), TextRun(text="World"))
        )
        assert element.plain_text == "Hello World"


class TestSchemaExport:
    """Tests for JSON Schema export."""

    @pytest.mark.unit
    def test_json_schema_has_frames(self):
        """Document schema exposes the frames property."""
        schema = export_json_schema()
        assert "frames" in schema["properties"]

    @pytest.mark.unit
    def test_llm_schema_lists_allow_lists(self):
        """LLM schema carries allow-lists and limits."""
        schema = export_llm_schema()
        assert schema["allow_lists"]["element_types"] == [t.value for t in ElementType]
        assert schema["limits"]["frames"] == 3
        assert schema["limits"]["elements_per_frame"] == 8
        assert schema["fonts"] == list(FONT_STACKS)
