"""Unit tests for the schema sanitizer."""

import copy
import json
import re

import pytest

from signage.schema import FONT_STACKS

from .lib import (
    ERROR_ALL_FRAMES_INVALID,
    ERROR_NO_FRAMES,
    ERROR_NOT_OBJECT,
    validate_and_sanitize,
    sanitize_url,
)

HEX = re.compile(r"^#[0-9a-fA-F]{6}$")


def _frame(*elements, **extra):
    frame = {"elements": list(elements)}
    frame.update(extra)
    return frame


def _doc(*frames, **extra):
    doc = {"version": "2.0", "frames": list(frames)}
    doc.update(extra)
    return doc


def _text(element_id="t", text="Hi", **extra):
    element = {"id": element_id, "type": "text", "runs": [{"text": text}]}
    element.update(extra)
    return element


def _colors(document):
    """Collect every color value in a wire document."""
    found = []

    def walk(node, key=None):
        if isinstance(node, dict):
            for k, v in node.items():
                walk(v, k)
        elif isinstance(node, list):
            for item in node:
                walk(item, key)
        elif key in {"color", "startColor", "endColor"} and node is not None:
            found.append(node)

    walk(document)
    return found


class TestStructuralErrors:
    """Tests for inputs the sanitizer rejects."""

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["a bare string", 42, None, [1, 2], True])
    def test_non_object_rejected(self, raw):
        """Non-object input fails with a single structural error."""
        result = validate_and_sanitize(raw)
        assert not result.valid
        assert result.document is None
        assert result.errors == [ERROR_NOT_OBJECT]

    @pytest.mark.unit
    @pytest.mark.parametrize("frames", [None, [], "frames", {"0": {}}])
    def test_missing_frames_rejected(self, frames):
        """Missing, empty or non-list frames fail."""
        raw = {"version": "2.0"}
        if frames is not None:
            raw["frames"] = frames
        result = validate_and_sanitize(raw)
        assert not result.valid
        assert result.errors == [ERROR_NO_FRAMES]

    @pytest.mark.unit
    def test_all_frames_invalid(self):
        """Frames that are not objects all fail together."""
        result = validate_and_sanitize(_doc(1, "two", None))
        assert not result.valid
        assert result.errors == [ERROR_ALL_FRAMES_INVALID]

    @pytest.mark.unit
    def test_input_not_mutated(self, rich_document):
        """Sanitization never mutates its input."""
        before = copy.deepcopy(rich_document)
        validate_and_sanitize(rich_document)
        assert rich_document == before


class TestAdvisories:
    """Tests for advisory messages on valid documents."""

    @pytest.mark.unit
    def test_unknown_version(self):
        """A wrong version is accepted with an advisory."""
        raw = _doc(_frame(_text()))
        raw["version"] = "1.0"
        result = validate_and_sanitize(raw)
        assert result.valid
        assert result.errors == ['Unknown version "1.0", treating as 2.0.']
        assert result.document.version == "2.0"

    @pytest.mark.unit
    def test_oversized_version_described_by_type(self):
        """A huge integer version is named by type in the advisory."""
        raw = _doc(_frame(_text()))
        raw["version"] = 10**400
        result = validate_and_sanitize(raw)
        assert result.valid
        assert result.errors == ['Unknown version "int", treating as 2.0.']

    @pytest.mark.unit
    def test_frames_truncated(self):
        """Scenario D: only the first three of five frames survive."""
        frames = [_frame(_text(text=f"Frame {i}")) for i in range(5)]
        result = validate_and_sanitize(_doc(*frames))
        assert result.valid
        assert len(result.document.frames) == 3
        assert result.document.frames[2].elements[0].plain_text == "Frame 2"
        assert "Only the first 3 of 5 frames were kept." in result.errors

    @pytest.mark.unit
    def test_elements_truncated(self):
        """Elements beyond eight are dropped with an advisory."""
        elements = [_text(f"t{i}") for i in range(11)]
        result = validate_and_sanitize(_doc(_frame(*elements)))
        frame = result.document.frames[0]
        assert len(frame.elements) == 8
        assert frame.elements[-1].id == "t7"
        assert "Frame 1: only the first 8 of 11 elements were kept." in result.errors

    @pytest.mark.unit
    def test_clean_document_has_no_advisories(self, hello_document):
        """A well-formed document produces no messages."""
        assert validate_and_sanitize(hello_document).errors == []


class TestFrames:
    """Tests for frame-level repair."""

    @pytest.mark.unit
    def test_defaults(self, hello_document):
        """Missing frame fields take their defaults."""
        frame = validate_and_sanitize(hello_document).document.frames[0]
        assert frame.duration == 15
        assert frame.transition.type == "cut"
        assert frame.transition.duration == 0.5
        assert frame.background.type == "solid"
        assert frame.background.color == "#ffffff"
        assert frame.layout.direction == "vertical"
        assert frame.layout.padding == 60
        assert frame.layout.gap == 32
        assert frame.layout.ordered_child_ids == ("e1",)

    @pytest.mark.unit
    def test_numbers_clamped(self):
        """Out-of-range numbers are clamped."""
        raw = _doc(
            _frame(
                _text(),
                duration=999,
                transition={"type": "wipe", "duration": 0.01},
                layout={"padding": -10, "gap": 500},
            )
        )
        frame = validate_and_sanitize(raw).document.frames[0]
        assert frame.duration == 120
        assert frame.transition.type == "cut"
        assert frame.transition.duration == 0.2
        assert frame.layout.padding == 0
        assert frame.layout.gap == 200

    @pytest.mark.unit
    def test_non_numeric_duration_defaults(self):
        """Booleans and junk strings fall back to defaults."""
        raw = _doc(_frame(_text(), duration=True), _frame(_text(), duration="soon"))
        frames = validate_and_sanitize(raw).document.frames
        assert [f.duration for f in frames] == [15, 15]

    @pytest.mark.unit
    def test_spacing_tokens_resolve(self):
        """Layout padding and gap accept spacing tokens."""
        raw = _doc(
            _frame(_text(), layout={"padding": "$lg", "gap": "$sm"}),
            tokens={"spacing": {"lg": 100}},
        )
        layout = validate_and_sanitize(raw).document.frames[0].layout
        assert layout.padding == 100
        assert layout.gap == 16

    @pytest.mark.unit
    def test_enums_fall_back(self):
        """Unknown layout enums use their defaults."""
        raw = _doc(
            _frame(_text(), layout={"direction": "diagonal", "align": "middle", "justify": 3})
        )
        layout = validate_and_sanitize(raw).document.frames[0].layout
        assert (layout.direction, layout.align, layout.justify) == (
            "vertical",
            "center",
            "center",
        )

    @pytest.mark.unit
    def test_child_order_filtered(self):
        """Unknown and duplicate child ids are dropped from the ordering."""
        raw = _doc(_frame(_text("a"), _text("b"), layout={"children": ["b", "ghost", "b", "a"]}))
        layout = validate_and_sanitize(raw).document.frames[0].layout
        assert layout.ordered_child_ids == ("b", "a")

    @pytest.mark.unit
    def test_child_order_defaults_to_declaration(self):
        """An ordering with no usable ids falls back to declaration order."""
        raw = _doc(_frame(_text("a"), _text("b"), layout={"children": ["ghost"]}))
        layout = validate_and_sanitize(raw).document.frames[0].layout
        assert layout.ordered_child_ids == ("a", "b")

    @pytest.mark.unit
    def test_invalid_frames_skipped(self):
        """Non-object frames are dropped while valid ones survive."""
        result = validate_and_sanitize(_doc("junk", _frame(_text())))
        assert result.valid
        assert len(result.document.frames) == 1


class TestBackground:
    """Tests for background sanitization."""

    @pytest.mark.unit
    def test_single_stop_gradient_degrades(self):
        """Scenario B: a one-stop gradient becomes solid."""
        background = {
            "type": "gradient",
            "color": "#123456",
            "gradient": {"stops": [{"color": "#ff0000", "position": 0}]},
        }
        frame = validate_and_sanitize(_doc(_frame(_text(), background=background))).document.frames[0]
        assert frame.background.type == "solid"
        assert frame.background.color == "#123456"

    @pytest.mark.unit
    def test_gradient_sanitized(self):
        """Gradient kind, direction, stops and overlay are repaired."""
        background = {
            "type": "gradient",
            "gradient": {
                "type": "spiral",
                "stops": [{"color": "nope", "position": 150}, {"color": "#00ff00"}]
                + [{"color": "#000000", "position": 50}] * 10,
            },
            "overlay": {"color": "$accent", "opacity": 3},
        }
        bg = validate_and_sanitize(_doc(_frame(_text(), background=background))).document.frames[0].background
        assert bg.type == "gradient"
        assert bg.gradient.kind == "linear"
        assert bg.gradient.direction == "to bottom"
        assert len(bg.gradient.stops) == 8
        assert bg.gradient.stops[0].color == "#ffffff"
        assert bg.gradient.stops[0].position == 100
        assert bg.gradient.stops[1].position == 0
        assert bg.overlay.color == "#B5A642"
        assert bg.overlay.opacity == 1

    @pytest.mark.unit
    def test_token_color_resolves(self):
        """Solid background colors resolve tokens."""
        frame = validate_and_sanitize(
            _doc(_frame(_text(), background={"type": "solid", "color": "$muted"}))
        ).document.frames[0]
        assert frame.background.color == "#6B6B6B"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "direction,expected",
        [
            ("to bottom right", "to bottom right"),
            ("135deg", "135deg"),
            (" -45.5deg ", "-45.5deg"),
            ("red); background:url(x", "to bottom"),
            ("to bottom\n", "to bottom"),
            (135, "to bottom"),
        ],
    )
    def test_gradient_direction_allow_list(self, direction, expected):
        """Only side keywords and degree angles survive as directions."""
        background = {
            "type": "gradient",
            "gradient": {
                "direction": direction,
                "stops": [{"color": "#000000"}, {"color": "#ffffff", "position": 100}],
            },
        }
        bg = validate_and_sanitize(_doc(_frame(_text(), background=background))).document.frames[0].background
        assert bg.gradient.direction == expected


class TestElements:
    """Tests for element sanitization."""

    @pytest.mark.unit
    def test_javascript_url_removed(self):
        """Scenario C: javascript: image URLs become empty."""
        image = {"id": "img", "type": "image", "url": "javascript:alert(1)"}
        element = validate_and_sanitize(_doc(_frame(image))).document.frames[0].elements[0]
        assert element.url == ""
        assert element.alt == "Image"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://cdn.example.com/a.png", "https://cdn.example.com/a.png"),
            ("  https://x.io/b  ", "https://x.io/b"),
            ("http://insecure.example.com", ""),
            ("data:image/png;base64,AAA", ""),
            ("VBScript:msgbox", ""),
            ("https://", ""),
            (None, ""),
        ],
    )
    def test_sanitize_url(self, url, expected):
        """Only https URLs survive."""
        assert sanitize_url(url) == expected

    @pytest.mark.unit
    def test_unknown_type_becomes_text(self):
        """Unknown element types become text with fallback runs."""
        element = validate_and_sanitize(
            _doc(_frame({"id": "x", "type": "video", "text": "Watch"}))
        ).document.frames[0].elements[0]
        assert element.type == "text"
        assert element.plain_text == "Watch"
        assert element.role == "body"

    @pytest.mark.unit
    def test_empty_runs_fall_back(self):
        """Empty runs are dropped and replaced by 'Text'."""
        element = validate_and_sanitize(
            _doc(_frame({"id": "x", "type": "text", "runs": [{"text": ""}, "bad"]}))
        ).document.frames[0].elements[0]
        assert [run.text for run in element.runs] == ["Text"]

    @pytest.mark.unit
    def test_runs_capped(self):
        """Text elements keep at most twenty runs."""
        runs = [{"text": str(i)} for i in range(30)]
        element = validate_and_sanitize(
            _doc(_frame({"id": "x", "type": "text", "runs": runs}))
        ).document.frames[0].elements[0]
        assert len(element.runs) == 20

    @pytest.mark.unit
    def test_text_styles_sanitized(self):
        """Run and block styles are clamped and allow-listed."""
        element = validate_and_sanitize(
            _doc(
                _frame(
                    {
                        "id": "x",
                        "type": "text",
                        "runs": [{"text": "A", "style": {"fontSize": 4, "fontFamily": "Comic Sans", "color": "pink"}}],
                        "blockStyle": {
                            "fontSize": 500,
                            "fontWeight": 950,
                            "lineHeight": 0.1,
                            "align": "justify",
                            "fontFamily": "$display",
                            "letterSpacing": 99,
                            "textTransform": "uppercase",
                            "opacity": "0.5",
                        },
                    }
                )
            )
        ).document.frames[0].elements[0]
        style = element.runs[0].style
        assert style.font_size == 18
        assert style.font_family == FONT_STACKS["system-ui"]
        assert style.color == "#111111"
        block = element.block_style
        assert block.font_size == 180
        assert block.font_weight == 900
        assert block.line_height == 0.8
        assert block.align is None
        assert block.font_family == FONT_STACKS["Old Standard TT"]
        assert block.letter_spacing == "30px"
        assert block.text_transform == "uppercase"
        assert block.opacity == 0.5

    @pytest.mark.unit
    def test_divider_defaults(self):
        """Divider style repairs color, thickness and width."""
        element = validate_and_sanitize(
            _doc(_frame({"id": "d", "type": "divider", "style": {"thickness": 40, "width": "wide"}}))
        ).document.frames[0].elements[0]
        assert element.style.color == "#cccccc"
        assert element.style.thickness == 12
        assert element.style.width == "60%"

    @pytest.mark.unit
    def test_shape_sanitized(self):
        """Shapes allow-list their kind and cap style extras."""
        element = validate_and_sanitize(
            _doc(
                _frame(
                    {
                        "id": "s",
                        "type": "shape",
                        "shape": "hexagon",
                        "style": {"borderRadius": 12, "filter": "blur(2px)" * 50},
                    }
                )
            )
        ).document.frames[0].elements[0]
        assert element.shape == "rect"
        assert element.style.color == "#3498db"
        assert element.style.border_radius == "12px"
        assert len(element.style.filter) == 100

    @pytest.mark.unit
    def test_animation_sanitized(self):
        """Animations keep only valid fields and vanish when empty."""
        frame = validate_and_sanitize(
            _doc(
                _frame(
                    _text("a", animation={"type": "spin", "speed": 1, "startColor": "$primary"}),
                    _text("b", animation={"type": "explode"}),
                )
            )
        ).document.frames[0]
        animation = frame.elements[0].animation
        assert animation.type == "spin"
        assert animation.speed == 10
        assert animation.start_color is None
        assert frame.elements[1].animation is None

    @pytest.mark.unit
    def test_ids_generated_and_unique(self):
        """Missing ids are generated and duplicates suffixed."""
        frame = validate_and_sanitize(
            _doc(
                _frame(
                    {"type": "spacer"},
                    _text("dup"),
                    _text("dup"),
                    _text("x" * 40),
                    _text("x" * 40),
                )
            )
        ).document.frames[0]
        ids = [element.id for element in frame.elements]
        assert ids[0] == "el-1"
        assert ids[1:3] == ["dup", "dup-2"]
        assert ids[3] == "x" * 32
        assert ids[4] == "x" * 30 + "-2"
        assert len(set(ids)) == len(ids)


class TestDocumentProperties:
    """Property-style tests over whole documents."""

    @pytest.mark.unit
    def test_meta_and_branding(self, rich_document):
        """Meta and branding are carried through."""
        rich_document["branding"]["logoUrl"] = "javascript:void(0)"
        rich_document["meta"]["title"] = "T" * 300
        doc = validate_and_sanitize(rich_document).document
        assert doc.meta.intent == "announcement"
        assert len(doc.meta.title) == 100
        assert doc.branding.org_name == "Green Valley Co-op"
        assert doc.branding.logo_url == ""
        assert doc.branding.palette_hint == "earthy greens"

    @pytest.mark.unit
    def test_idempotence(self, rich_document):
        """Sanitizing a sanitized document yields the same document."""
        doc = validate_and_sanitize(rich_document).document
        again = validate_and_sanitize(doc.to_wire())
        assert again.valid
        assert again.errors == []
        assert again.document == doc

    @pytest.mark.unit
    def test_idempotence_after_repairs(self):
        """Idempotence holds for heavily repaired input."""
        raw = _doc(
            _frame(
                {"type": "video"},
                _text("a", blockStyle={"letterSpacing": 1.5}),
                _text("a"),
                {"type": "shape", "style": {"borderRadius": 4}},
                layout={"children": ["nobody"], "padding": "12"},
                background={"type": "gradient", "gradient": {"stops": [{"color": "#000000"}]}},
            )
        )
        doc = validate_and_sanitize(raw).document
        assert validate_and_sanitize(doc.to_wire()).document == doc

    @pytest.mark.unit
    def test_bounds_and_colors(self, rich_document):
        """All colors are hex and counts are within limits."""
        doc = validate_and_sanitize(rich_document).document
        assert len(doc.frames) <= 3
        for frame in doc.frames:
            assert len(frame.elements) <= 8
            assert 1 <= frame.duration <= 120
        wire = doc.to_wire()
        colors = _colors(wire["frames"]) + list(wire["tokens"]["colors"].values())
        assert colors
        assert all(HEX.match(color) for color in colors)

    @pytest.mark.unit
    def test_tokens_resolved_in_elements(self, rich_document):
        """Token references never survive into sanitized colors."""
        doc = validate_and_sanitize(rich_document).document
        title = doc.frames[0].elements[0]
        assert title.block_style.color == "#1B4332"
        assert title.runs[1].style.color == "#E9C46A"
        assert title.block_style.font_family == FONT_STACKS["Georgia"]
        assert doc.frames[0].background.gradient.stops[0].color == "#F1FAEE"

    @pytest.mark.unit
    def test_deterministic(self, rich_document):
        """Identical input yields identical output."""
        assert validate_and_sanitize(rich_document) == validate_and_sanitize(rich_document)


class TestHostileStrings:
    """Tests for strings that are not encodable as UTF-8."""

    BAD = "x\ud800y"

    def _document(self):
        bad = self.BAD
        return _doc(
            _frame(
                _text(bad, text=bad, blockStyle={"textShadow": bad, "letterSpacing": bad}),
                {"id": "fallback", "type": "text", "runs": "none", "text": bad},
                {"id": "img", "type": "image", "url": "https://example.com/" + bad, "alt": bad},
                {
                    "id": "box",
                    "type": "shape",
                    "style": {"boxShadow": bad, "borderRadius": bad, "filter": bad},
                },
                {"id": "rule", "type": "divider", "style": {"boxShadow": bad, "width": bad}},
                layout={"children": [bad, "img", "\udfff"]},
            ),
            meta={"title": bad},
            branding={"orgName": bad, "palette": bad},
            tokens={"colors": {bad: "#123456"}},
            version=bad,
        )

    @pytest.mark.unit
    def test_document_is_encodable(self):
        """Every surviving string encodes as UTF-8."""
        result = validate_and_sanitize(self._document())
        assert result.valid
        encoded = json.dumps(result.document.to_wire(), ensure_ascii=False)
        encoded.encode("utf-8")
        assert "\ud800" not in encoded
        assert "x?y" in encoded
        assert result.errors == ['Unknown version "x?y", treating as 2.0.']

    @pytest.mark.unit
    def test_fields_cleaned(self):
        """Ids, text runs and metadata carry the replacement character."""
        doc = validate_and_sanitize(self._document()).document
        frame = doc.frames[0]
        assert [element.id for element in frame.elements][:2] == ["x?y", "fallback"]
        assert frame.elements[0].plain_text == "x?y"
        assert frame.elements[1].plain_text == "x?y"
        assert frame.elements[2].url == "https://example.com/x?y"
        assert frame.elements[2].alt == "x?y"
        assert frame.layout.ordered_child_ids == ("x?y", "img")
        assert (doc.meta.title, doc.branding.org_name) == ("x?y", "x?y")
        assert doc.tokens.colors["x?y"] == "#123456"

    @pytest.mark.unit
    def test_idempotent(self):
        """Cleaned documents sanitize to themselves."""
        doc = validate_and_sanitize(self._document()).document
        assert validate_and_sanitize(doc.to_wire()).document == doc
