"""Tests for the composition assembler."""

import json

import pytest

from signage.layout import OverflowPolicy
from signage.schema import (
    Gradient,
    GradientBackground,
    GradientStop,
    Overlay,
    SolidBackground,
)

from .lib import ImportResult, aspect_ratio_to_size, build_background_css, import_signage


class TestAspectRatioToSize:
    """Tests for canvas sizing."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "ratio,expected",
        [
            ("16:9", (1920, 1080)),
            ("4:3", (1440, 1080)),
            ("9:16", (608, 1080)),
            ("1:1", (1080, 1080)),
            ("21:9", (1920, 1080)),
        ],
    )
    def test_fits_default_box(self, ratio, expected):
        """Ratios fit the 1920x1080 box by the binding dimension."""
        assert aspect_ratio_to_size(ratio, 1920, 1080) == expected

    @pytest.mark.unit
    def test_width_binding(self):
        """A tall box makes the width binding."""
        assert aspect_ratio_to_size("16:9", 1280, 2000) == (1280, 720)

    @pytest.mark.unit
    def test_never_exceeds_bounds(self):
        """Neither dimension exceeds its bound."""
        for ratio in ("16:9", "4:3", "9:16", "1:1"):
            width, height = aspect_ratio_to_size(ratio, 1000, 700)
            assert width <= 1000 and height <= 700

    @pytest.mark.unit
    def test_non_positive_bounds_use_defaults(self):
        """Zero or negative bounds fall back to 1920x1080."""
        assert aspect_ratio_to_size("16:9", 0, -5) == (1920, 1080)


class TestBuildBackgroundCss:
    """Tests for background CSS rendering."""

    @staticmethod
    def _gradient(kind, direction="to right"):
        return GradientBackground(
            gradient=Gradient(
                kind=kind,
                direction=direction,
                stops=(
                    GradientStop(color="#000000", position=0),
                    GradientStop(color="#ffffff", position=37.5),
                ),
            )
        )

    @pytest.mark.unit
    def test_solid(self):
        """Solid backgrounds render their color."""
        assert build_background_css(SolidBackground(color="#112233")) == "#112233"

    @pytest.mark.unit
    def test_linear(self):
        """Linear gradients keep their direction."""
        assert (
            build_background_css(self._gradient("linear"))
            == "linear-gradient(to right, #000000 0%, #ffffff 37.5%)"
        )

    @pytest.mark.unit
    def test_linear_empty_direction(self):
        """An empty direction renders as 'to bottom'."""
        assert build_background_css(self._gradient("linear", "")).startswith(
            "linear-gradient(to bottom, "
        )

    @pytest.mark.unit
    def test_linear_unsafe_direction(self):
        """A direction outside the allow-list renders as 'to bottom'."""
        css = build_background_css(self._gradient("linear", "red); background:url(x"))
        assert css.startswith("linear-gradient(to bottom, ")
        assert "url(" not in css

    @pytest.mark.unit
    def test_radial_and_conic(self):
        """Radial and conic gradients use fixed shapes."""
        assert build_background_css(self._gradient("radial")).startswith("radial-gradient(circle, ")
        assert build_background_css(self._gradient("conic")).startswith(
            "conic-gradient(from 0deg, "
        )

    @pytest.mark.unit
    def test_overlay(self):
        """Overlays are layered as a translucent flat gradient."""
        background = SolidBackground(color="#ffffff", overlay=Overlay(color="#000000", opacity=0.5))
        assert (
            build_background_css(background)
            == "linear-gradient(#00000080, #00000080), #ffffff"
        )

    @pytest.mark.unit
    def test_transparent_overlay_ignored(self):
        """Overlays with zero opacity are not rendered."""
        background = SolidBackground(color="#ffffff", overlay=Overlay(opacity=0))
        assert build_background_css(background) == "#ffffff"


class TestImportSignage:
    """Tests for import_signage."""

    @pytest.mark.unit
    def test_hello_scenario(self, hello_document):
        """Scenario A: one centered headline on a white 1920x1080 frame."""
        result = import_signage(json.dumps(hello_document), 1920, 1080)
        assert result.success
        assert result.errors == []
        assert len(result.frames) == 1
        frame = result.frames[0]
        assert frame.duration == 15
        assert frame.background.source.type == "solid"
        assert frame.background.css == "#ffffff"
        assert (frame.canvas_width, frame.canvas_height) == (1920, 1080)
        assert len(frame.positioned_elements) == 1
        box = frame.positioned_elements[0]
        assert (box.id, box.x, box.y, box.w, box.h) == ("e1", 60, 487, 1800, 106)

    @pytest.mark.unit
    def test_parse_error(self):
        """Malformed JSON aborts with a parse error."""
        result = import_signage("{not json")
        assert not result.success
        assert result.frames == []
        assert result.meta is None and result.tokens is None
        assert len(result.errors) == 1
        assert result.errors[0].startswith("parse error: ")

    @pytest.mark.unit
    def test_oversized_number_uses_default(self):
        """A number too large for a float is treated as unparseable."""
        text = '{"version": "2.0", "frames": [{"duration": 1%s}]}' % ("0" * 400)
        result = import_signage(text)
        assert result.success
        assert result.frames[0].duration == 15

    @pytest.mark.unit
    def test_overlong_integer_literal(self):
        """An integer literal past the interpreter's digit limit never raises."""
        text = '{"version": "2.0", "frames": [{"duration": 1%s}]}' % ("0" * 5000)
        result = import_signage(text)
        assert isinstance(result, ImportResult)
        if not result.success:
            assert result.errors[0].startswith("parse error: ")
        else:
            assert result.frames[0].duration == 15

    @pytest.mark.unit
    def test_deep_nesting(self):
        """Pathologically nested JSON fails as a parse error."""
        result = import_signage("[" * 100000 + "]" * 100000)
        assert not result.success
        assert result.errors[0].startswith("parse error: ")

    @pytest.mark.unit
    def test_bare_string(self):
        """Scenario E: a JSON string document fails cleanly."""
        result = import_signage('"just a string"')
        assert not result.success
        assert result.errors
        assert result.frames == []

    @pytest.mark.unit
    def test_structural_error_propagates(self):
        """Sanitizer structural errors are returned as-is."""
        result = import_signage('{"version": "2.0", "frames": []}')
        assert not result.success
        assert result.errors == ["No frames array found."]

    @pytest.mark.unit
    def test_rich_document(self, rich_document_text):
        """A full document composes every frame with tokens and meta."""
        result = import_signage(rich_document_text, 1920, 1080)
        assert result.success
        assert len(result.frames) == 2
        assert result.meta.title == "Farmers Market"
        assert result.branding.org_name == "Green Valley Co-op"
        assert result.tokens["$leaf"] == "#2D6A4F"
        first = result.frames[0]
        assert first.transition.type == "fade"
        assert first.background.css.startswith("linear-gradient(#0000001a, #0000001a), ")
        assert [box.id for box in first.positioned_elements] == ["title", "rule", "when", "logo"]
        assert first.positioned_elements[0].y == 80
        second = result.frames[1]
        assert second.background.css == "#1B4332"
        assert [box.id for box in second.positioned_elements] == ["dot", "gap", "cta"]

    @pytest.mark.unit
    def test_canvas_follows_aspect_ratio(self, hello_document):
        """Every frame shares the canvas sized from meta.aspectRatio."""
        hello_document["meta"] = {"aspectRatio": "9:16"}
        hello_document["frames"].append({"elements": []})
        result = import_signage(json.dumps(hello_document), 1920, 1080)
        assert [(f.canvas_width, f.canvas_height) for f in result.frames] == [
            (608, 1080),
            (608, 1080),
        ]
        assert result.frames[1].positioned_elements == ()

    @pytest.mark.unit
    def test_overflow_forwarded(self):
        """The overflow policy reaches the layout resolver."""
        images = [{"id": f"i{n}", "type": "image"} for n in range(4)]
        text = json.dumps({"version": "2.0", "frames": [{"elements": images}]})
        clipped = import_signage(text, overflow=OverflowPolicy.CLIP)
        for box in clipped.frames[0].positioned_elements:
            assert 0 <= box.y and box.y + box.h <= 1080

    @pytest.mark.unit
    def test_to_dict_is_json_serializable(self, rich_document_text):
        """ImportResult.to_dict produces plain JSON with wire names."""
        data = import_signage(rich_document_text).to_dict()
        encoded = json.loads(json.dumps(data))
        assert encoded["success"] is True
        frame = encoded["frames"][0]
        assert {"canvasWidth", "canvasHeight", "positionedElements"} <= set(frame)
        assert frame["positionedElements"][0]["element"]["blockStyle"]["align"] == "center"
        assert encoded["tokens"]["$display"] == "Georgia, serif"

    @pytest.mark.unit
    def test_failure_to_dict(self):
        """Failed results serialize with null sections."""
        data = import_signage("[]").to_dict()
        assert data == {
            "success": False,
            "frames": [],
            "meta": None,
            "branding": None,
            "tokens": None,
            "errors": ["Input is not an object."],
        }


HOSTILE_DOCUMENTS = [
    '{"frames": [{"background": {"type": "gradient", "gradient": {"stops": [1, "x", null]}}}]}',
    '{"frames": [{"elements": [{"type": "text", "runs": "abc"}]}]}',
    '{"frames": [{"layout": [], "elements": "x"}]}',
    '{"frames": [{}], "tokens": [], "meta": 5, "branding": "b"}',
    '{"frames": [{}], "tokens": {"colors": [], "fonts": "Georgia", "spacing": 3}}',
    '{"frames": [{"elements": [{"type": "shape", "style": [], "animation": "spin"}]}]}',
    '{"frames": [{"elements": [{"blockStyle": {"fontSize": {}, "color": []}, "runs": [{"text": 1}]}]}]}',
    '{"frames": [{"layout": {"children": [{}, null, 1e999, true, -0]}}]}',
    '{"frames": [{"duration": 1e999, "transition": {"duration": -1e999}}]}',
    '{"frames": [{"duration": NaN, "layout": {"padding": Infinity, "gap": "$nope"}}]}',
    '{"frames": [{"elements": [{"id": "\\ud800", "runs": [{"text": "\\udfff"}]}]}]}',
    '{"frames": [{"background": {"type": "gradient", "gradient": {"direction": {}, "stops": [{}, {}]}}}]}',
    '{"frames": [{"elements": [{"type": "divider", "style": {"width": 40, "thickness": "wide"}}]}]}',
    '{"frames": [{"elements": [{"type": "image", "url": ["https://x"], "alt": 5}]}]}',
    '{"version": {"major": 2}, "frames": [{}]}',
    '{"frames": [null, 1, "frame", []]}',
    '{"frames": [{"elements": [{"id": 100000000000000000000000000000000000000000}]}]}',
    '{"frames": [{"layout": {"children": [100000000000000000000000000000000000000000000000]}}]}',
    "[[[[[[[[[[]]]]]]]]]]",
    "",
    "null",
]


class TestHostileInput:
    """import_signage always returns a result for malformed documents."""

    @pytest.mark.unit
    @pytest.mark.parametrize("text", HOSTILE_DOCUMENTS)
    def test_returns_import_result(self, text):
        """Hostile input yields an ImportResult instead of raising."""
        result = import_signage(text)
        assert isinstance(result, ImportResult)
        json.dumps(result.to_dict(), ensure_ascii=False).encode("utf-8")
