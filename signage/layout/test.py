"""Unit tests for the stack layout resolver and measurers."""

import pytest

from signage.validation import validate_and_sanitize

from .lib import OverflowPolicy, resolve_layout
from .measure import Extent, HeuristicMeasurer, Measurer, round_half_up


def _frame(*elements, **layout):
    """Sanitize a single-frame document and return the frame."""
    raw = {"version": "2.0", "frames": [{"elements": list(elements), "layout": layout}]}
    return validate_and_sanitize(raw).document.frames[0]


def _text(element_id, text, font_size=50, line_height=1.0, role="body"):
    return {
        "id": element_id,
        "type": "text",
        "role": role,
        "runs": [{"text": text}],
        "blockStyle": {"fontSize": font_size, "lineHeight": line_height},
    }


def _boxes(positioned):
    return [(p.id, p.x, p.y, p.w, p.h) for p in positioned]


class FixedMeasurer(Measurer):
    """Measurer that gives every element the same extent."""

    def measure(self, element, available_cross, direction, tokens=None):
        return Extent(main=100, cross=50)


class TestRoundHalfUp:
    """Tests for round_half_up."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (-1.5, -1), (2.49, 2)]
    )
    def test_rounding(self, value, expected):
        """Halves round toward positive infinity."""
        assert round_half_up(value) == expected


class TestHeuristicMeasurer:
    """Tests for the default estimators."""

    @pytest.mark.unit
    def test_text_single_line(self):
        """Short text occupies one line."""
        frame = _frame(_text("t", "Hi"))
        assert HeuristicMeasurer().text_height(frame.elements[0], 1800) == 50

    @pytest.mark.unit
    def test_text_wraps(self):
        """Long lines wrap by estimated character width."""
        frame = _frame(_text("t", "x" * 40, font_size=100))
        # 40 chars * 52px = 2080px over 1800px -> 2 lines
        assert HeuristicMeasurer().text_height(frame.elements[0], 1800) == 200

    @pytest.mark.unit
    def test_explicit_newlines(self):
        """Each newline starts a new line, empty lines included."""
        frame = _frame(_text("t", "A\n\nB"))
        assert HeuristicMeasurer().text_height(frame.elements[0], 1800) == 150

    @pytest.mark.unit
    def test_text_role_defaults(self):
        """Role typography applies when blockStyle is silent."""
        frame = _frame({"id": "h", "type": "text", "role": "headline", "runs": [{"text": "Hello"}]})
        assert HeuristicMeasurer().text_height(frame.elements[0], 1800) == 106

    @pytest.mark.unit
    def test_zero_width_does_not_divide(self):
        """No available width still yields one line per physical line."""
        frame = _frame(_text("t", "Hello"))
        assert HeuristicMeasurer().text_height(frame.elements[0], 0) == 50

    @pytest.mark.unit
    def test_fixed_extents(self):
        """Divider, spacer, image and shape use fixed estimators."""
        frame = _frame(
            {"id": "d", "type": "divider", "style": {"thickness": 4}},
            {"id": "s", "type": "spacer"},
            {"id": "i", "type": "image"},
            {"id": "c", "type": "shape", "shape": "circle"},
        )
        measurer = HeuristicMeasurer()
        divider, spacer, image, shape = frame.elements
        assert measurer.measure(divider, 1000, "vertical") == Extent(12, 1000)
        assert measurer.measure(spacer, 1000, "vertical") == Extent(16, 0)
        assert measurer.measure(image, 1000, "vertical") == Extent(500, 1000)
        assert measurer.measure(image, 1000, "horizontal") == Extent(500, 500)
        assert measurer.measure(shape, 1000, "vertical") == Extent(300, 300)

    @pytest.mark.unit
    def test_horizontal_text_spans_available_cross(self):
        """In a horizontal stack text takes the cross space as its main extent."""
        frame = _frame(_text("t", "Hi"))
        assert HeuristicMeasurer().measure(frame.elements[0], 960, "horizontal") == Extent(960, 50)


class TestResolveLayout:
    """Tests for resolve_layout."""

    @pytest.mark.unit
    def test_centered_headline(self, hello_document):
        """Scenario A geometry: centered with default padding."""
        frame = validate_and_sanitize(hello_document).document.frames[0]
        boxes = resolve_layout(frame, 1920, 1080)
        assert _boxes(boxes) == [("e1", 60, 487, 1800, 106)]
        assert boxes[0].element == frame.elements[0]

    @pytest.mark.unit
    def test_zero_children(self):
        """A frame without elements yields no boxes."""
        assert resolve_layout(_frame(), 1920, 1080) == []

    @pytest.mark.unit
    def test_child_order_respected(self):
        """Children are emitted in layout order, not declaration order."""
        frame = _frame(_text("a", "A"), _text("b", "B"), children=["b", "a"], justify="start")
        assert [box.id for box in resolve_layout(frame, 1920, 1080)] == ["b", "a"]

    @pytest.mark.unit
    def test_space_between(self):
        """First child starts at padding and last ends at main - padding."""
        frame = _frame(
            {"id": "a", "type": "spacer"},
            {"id": "b", "type": "spacer"},
            {"id": "c", "type": "spacer"},
            justify="space-between",
            padding=100,
            gap=20,
        )
        boxes = resolve_layout(frame, 1000, 1000)
        assert [box.y for box in boxes] == [100, 492, 884]
        assert boxes[0].y == 100
        assert boxes[-1].y + boxes[-1].h == 900

    @pytest.mark.unit
    def test_space_between_single_child_is_start(self):
        """space-between with one child behaves like start."""
        frame = _frame({"id": "a", "type": "spacer"}, justify="space-between", padding=40)
        assert resolve_layout(frame, 1000, 1000)[0].y == 40

    @pytest.mark.unit
    def test_justify_end(self):
        """justify end places content against the far padding."""
        frame = _frame({"id": "c", "type": "shape"}, justify="end")
        box = resolve_layout(frame, 1000, 800)[0]
        assert (box.y, box.h) == (476, 264)

    @pytest.mark.unit
    @pytest.mark.parametrize("align,expected_x", [("start", 60), ("center", 368), ("end", 676)])
    def test_cross_alignment(self, align, expected_x):
        """align positions children on the cross axis."""
        frame = _frame({"id": "c", "type": "shape"}, align=align)
        box = resolve_layout(frame, 1000, 800)[0]
        assert (box.x, box.w) == (expected_x, 264)

    @pytest.mark.unit
    def test_horizontal_direction(self):
        """Horizontal stacks flow along x."""
        frame = _frame(_text("t", "Hi"), direction="horizontal", justify="start")
        assert _boxes(resolve_layout(frame, 1920, 1080)) == [("t", 60, 515, 960, 50)]

    @pytest.mark.unit
    def test_deterministic(self, rich_document):
        """Identical inputs give identical output."""
        document = validate_and_sanitize(rich_document).document
        for frame in document.frames:
            assert resolve_layout(frame, 1920, 1080) == resolve_layout(frame, 1920, 1080)

    @pytest.mark.unit
    def test_custom_measurer(self):
        """A custom Measurer replaces the heuristics."""
        frame = _frame(_text("a", "A"), _text("b", "B"), justify="start", align="start", gap=10)
        boxes = resolve_layout(frame, 1000, 1000, measurer=FixedMeasurer())
        assert _boxes(boxes) == [("a", 60, 60, 50, 100), ("b", 60, 170, 50, 100)]


class TestOverflow:
    """Tests for overflow policies."""

    def _overflowing_frame(self):
        images = [{"id": f"i{n}", "type": "image"} for n in range(3)]
        return _frame(*images, padding=0, gap=0)

    @pytest.mark.unit
    def test_none_leaves_boxes_unclamped(self):
        """The default policy lets content run past the canvas."""
        boxes = resolve_layout(self._overflowing_frame(), 400, 400)
        assert [(b.y, b.h) for b in boxes] == [(0, 200), (200, 200), (400, 200)]

    @pytest.mark.unit
    def test_clip(self):
        """clip intersects every box with the canvas."""
        boxes = resolve_layout(self._overflowing_frame(), 400, 400, overflow=OverflowPolicy.CLIP)
        assert [(b.y, b.h) for b in boxes] == [(0, 200), (200, 200), (400, 0)]
        assert all(b.w == 400 for b in boxes)

    @pytest.mark.unit
    def test_shrink(self):
        """shrink scales main extents so content fits."""
        boxes = resolve_layout(self._overflowing_frame(), 400, 400, overflow="shrink")
        assert [(b.y, b.h) for b in boxes] == [(0, 133), (133, 133), (267, 133)]
        assert boxes[-1].y + boxes[-1].h == 400

    @pytest.mark.unit
    def test_shrink_noop_when_content_fits(self):
        """shrink changes nothing when content already fits."""
        frame = _frame({"id": "c", "type": "shape"})
        assert resolve_layout(frame, 1000, 800, overflow="shrink") == resolve_layout(frame, 1000, 800)

    @pytest.mark.unit
    def test_invalid_policy_rejected(self):
        """Unknown overflow policies raise ValueError."""
        with pytest.raises(ValueError):
            resolve_layout(_frame(), 100, 100, overflow="scroll")
