"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Sample signage documents shared by the sub-package tests
- Global test configuration
"""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Sample Documents
# =============================================================================

HELLO_DOCUMENT: dict[str, Any] = {
    "version": "2.0",
    "frames": [
        {
            "elements": [
                {"id": "e1", "type": "text", "role": "headline", "runs": [{"text": "Hello"}]}
            ]
        }
    ],
}

RICH_DOCUMENT: dict[str, Any] = {
    "version": "2.0",
    "meta": {
        "title": "Farmers Market",
        "intent": "announcement",
        "contrast": "high",
        "aspectRatio": "16:9",
    },
    "branding": {
        "orgName": "Green Valley Co-op",
        "logoUrl": "https://example.org/logo.png",
        "palette": "earthy greens",
    },
    "tokens": {
        "colors": {
            "primary": "#1B4332",
            "bg": "#F1FAEE",
            "accent": "#E9C46A",
            "muted": "#6C757D",
            "leaf": "#2D6A4F",
        },
        "fonts": {"display": "Georgia", "body": "Roboto"},
        "spacing": {"sm": 16, "md": 40, "lg": 80},
    },
    "frames": [
        {
            "duration": 12,
            "transition": {"type": "fade", "duration": 0.8},
            "background": {
                "type": "gradient",
                "gradient": {
                    "type": "linear",
                    "direction": "to bottom right",
                    "stops": [
                        {"color": "$bg", "position": 0},
                        {"color": "#D8F3DC", "position": 100},
                    ],
                },
                "overlay": {"color": "#000000", "opacity": 0.1},
            },
            "layout": {
                "direction": "vertical",
                "align": "center",
                "justify": "space-between",
                "padding": "$lg",
                "gap": "$md",
                "children": ["title", "rule", "when", "logo"],
            },
            "elements": [
                {
                    "id": "title",
                    "type": "text",
                    "role": "headline",
                    "runs": [
                        {"text": "Saturday "},
                        {"text": "Market", "style": {"color": "$accent", "fontWeight": 800}},
                    ],
                    "blockStyle": {
                        "fontFamily": "$display",
                        "color": "$primary",
                        "align": "center",
                        "letterSpacing": 2,
                    },
                },
                {
                    "id": "rule",
                    "type": "divider",
                    "role": "accent",
                    "style": {"color": "$leaf", "thickness": 4, "width": "40%"},
                },
                {
                    "id": "when",
                    "type": "text",
                    "role": "body",
                    "runs": [{"text": "8am - 1pm\nMain Street Lot"}],
                },
                {
                    "id": "logo",
                    "type": "image",
                    "role": "media",
                    "url": "https://example.org/logo.png",
                    "alt": "Co-op logo",
                },
            ],
        },
        {
            "duration": 8,
            "background": {"type": "solid", "color": "$primary"},
            "layout": {"direction": "horizontal", "justify": "start", "align": "start"},
            "elements": [
                {"id": "dot", "type": "shape", "role": "accent", "shape": "circle"},
                {"id": "gap", "type": "spacer", "role": "spacer"},
                {
                    "id": "cta",
                    "type": "text",
                    "role": "subhead",
                    "runs": [{"text": "Fresh produce every week"}],
                    "animation": {"type": "pulse", "speed": 1200},
                },
            ],
        },
    ],
}


@pytest.fixture
def hello_document() -> dict[str, Any]:
    """Minimal one-headline document (deep copy, safe to mutate)."""
    return copy.deepcopy(HELLO_DOCUMENT)


@pytest.fixture
def rich_document() -> dict[str, Any]:
    """Two-frame document exercising tokens, gradients and every element type."""
    return copy.deepcopy(RICH_DOCUMENT)


@pytest.fixture
def rich_document_text(rich_document: dict[str, Any]) -> str:
    """The rich document serialized as JSON text."""
    return json.dumps(rich_document)
