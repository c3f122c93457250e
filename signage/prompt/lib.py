"""Prompts for the two-pass signage conversation.

Pass 1 (clarify) asks the model for exactly three follow-up questions about
the user's request. Pass 2 (generate) asks for a signage document in the
stack-layout wire format that `signage.compose.import_signage` accepts.
"""

import json
import random
from typing import Any

from signage.schema import export_llm_schema

CLARIFY_SYSTEM_PROMPT = """You are a sign-design assistant. The user described the sign they need. Ask EXACTLY 3 short follow-up questions to make a great sign.

Your questions must be SPECIFIC to what the user asked for. Read the request carefully and ask about the gaps.

GOOD questions (specific to the request):
- "welcome sign for a bakery" -> "What's the bakery name and any tagline?"
- a conference -> "Single-day or multi-day? Should we include a hashtag or URL?"
- a clear purpose -> skip mood and ask about colors, timing or wording

BAD questions (too generic):
- "What text should go on the sign?" (when they already said)
- "What feeling should it evoke?"
- "Landscape or portrait?" (unless it actually matters)

This app can produce text, shapes, dividers, gradients, colors and animations. It cannot fetch photos or use external assets, so do not ask about them.

Respond with ONLY this JSON, no markdown, no commentary:

{
  "questions": [
    "<specific follow-up #1>",
    "<specific follow-up #2>",
    "<specific follow-up #3>"
  ]
}"""

GENERATE_SYSTEM_PROMPT = """You are an award-winning signage designer. You adapt your style to the sign's purpose: warm for cafes, clean for corporate lobbies, bold for events. Output ONLY valid JSON, no markdown.

## ELEMENT CATALOG
- element.type: "text", "shape", "divider", "image", "spacer"
- shape.shape: "rect", "circle", "triangle", "line", "arrow"
- roles: "headline", "subhead", "body", "detail", "brand", "footer", "accent", "media", "spacer"
- image: https URL only, otherwise leave "url" empty and a placeholder is shown

## LAYOUT MODEL
Each frame has ONE stack container. Children flow along a single axis:
- "direction": "vertical" (top to bottom) or "horizontal" (left to right)
- "justify": "start" | "center" | "end" | "space-between" (main axis)
- "align": "start" | "center" | "end" (cross axis)
- "padding" and "gap": pixels (0-200) or a spacing token "$sm" | "$md" | "$lg"
- "children": element ids in display order
Element sizes are estimated from content; do not give positions.

## LIMITS
- At most 3 frames, at most 8 elements per frame, at most 20 runs per text element
- fontSize 18-180, fontWeight 100-900, lineHeight 0.8-3.0
- frame duration 1-120 seconds, transition duration 0.2-2.0 seconds
- Fonts: ONLY "Old Standard TT", "Georgia", "system-ui", "Roboto"
- Colors: "#rrggbb" or a color token such as "$primary"

## JSON STRUCTURE
{
  "version": "2.0",
  "meta": { "title": "...", "intent": "quick-signage"|"storyboard"|"announcement"|"wayfinding"|"schedule", "contrast": "high"|"normal", "aspectRatio": "16:9"|"4:3"|"9:16"|"1:1" },
  "branding": { "orgName": "", "logoUrl": "", "palette": "" },
  "tokens": {
    "colors": { "primary": "#hex", "bg": "#hex", "accent": "#hex", "muted": "#hex" },
    "fonts": { "display": "Georgia", "body": "Roboto" },
    "spacing": { "sm": 16, "md": 40, "lg": 80 }
  },
  "frames": [{
    "duration": 15,
    "transition": { "type": "fade"|"slide"|"cut", "duration": 0.8 },
    "background": {
      "type": "gradient"|"solid",
      "color": "#hex",
      "gradient": { "type": "linear"|"radial"|"conic", "direction": "135deg", "stops": [{"color": "#hex", "position": 0}, {"color": "#hex", "position": 100}] },
      "overlay": { "color": "#000000", "opacity": 0.2 }
    },
    "layout": { "direction": "vertical", "align": "center", "justify": "center", "padding": "$lg", "gap": "$md", "children": ["headline", "rule", "details"] },
    "elements": [
      { "id": "headline", "type": "text", "role": "headline", "runs": [{"text": "..."}], "blockStyle": { "fontFamily": "$display", "fontSize": 120, "fontWeight": 700, "color": "$primary", "align": "center" } },
      { "id": "rule", "type": "divider", "role": "accent", "style": { "color": "$accent", "thickness": 3, "width": "40%" } },
      { "id": "details", "type": "text", "role": "body", "runs": [{"text": "..."}], "blockStyle": { "fontFamily": "$body", "color": "$muted" } }
    ]
  }]
}

## STYLE EXTRAS
- blockStyle: textShadow (CSS), letterSpacing ("0.1em" or px number), textTransform ("uppercase"|"lowercase"|"capitalize"|"none"), opacity 0-1
- shape style: color, boxShadow, borderRadius, opacity, backdropFilter, filter, gradient (CSS string)
- divider style: color, thickness (1-12), width ("30%"-"60%"), boxShadow
- animation (any element): { "type": "pulse"|"float"|"spin"|"glow-pulse"|"fade-pulse"|"gradient-rotate"|"gradient-shift"|"color-transition", "speed": 10-5000, "startColor": "#hex", "endColor": "#hex" }

## DESIGN GUIDELINES
- Clear hierarchy: headline -> supporting text -> detail. Signs are read from a distance.
- High contrast between text and background is non-negotiable.
- Use "space-between" with a vertical stack to pin a headline to the top and a footer to the bottom.
- Use spacers and dividers to give the stack rhythm.
- For multi-frame signs: frame 1 hero statement, frame 2 details, frame 3 call to action.
- Light and solid backgrounds are fine when they serve the design. Do not default to dark neon."""

STYLE_DIRECTIONS: tuple[str, ...] = (
    "Consider a BOLD, dramatic look: dark background, vibrant gradients, high energy.",
    "Consider a CLEAN, corporate look: light background, professional fonts, refined palette.",
    "Consider a WARM, inviting look: earthy tones, friendly serif type, gentle animations.",
    "Consider a PLAYFUL, colorful look: bright palette, bouncy animations, energetic shapes.",
    "Consider a MINIMAL, modern look: lots of whitespace, one accent color, understated type.",
    "Consider a RETRO or VINTAGE look: warm tones, serif fonts, classic centered layout.",
    "Consider an ELEGANT, luxurious look: dark with gold accents, serif display font, slow animations.",
    "Consider a TECH or FUTURISTIC look: dark background, geometric type, cyan or lime accents.",
)

FEEDBACK_HEADER = "PREVIOUS ATTEMPT HAD ERRORS:"


def wrap_user_prompt(
    description: str,
    answers: str = "",
    style_index: int | None = None,
) -> str:
    """Wrap the user's description with creative direction.

    Args:
        description: What the user asked for.
        answers: The user's answers to the clarifying questions.
        style_index: Index into STYLE_DIRECTIONS; random when None.

    Returns:
        User message for the generation pass.
    """
    if style_index is None:
        style_hint = random.choice(STYLE_DIRECTIONS)
    else:
        style_hint = STYLE_DIRECTIONS[style_index % len(STYLE_DIRECTIONS)]

    return f"""## SIGN REQUEST
{description.strip()}

## USER PREFERENCES
{answers.strip() or "(none given)"}

## CREATIVE DIRECTION
Design an eye-catching sign that matches the tone and context of the request.

{style_hint}
Let the sign's PURPOSE guide your choices. A cafe menu should feel different from a tech conference banner.

MUST-HAVES:
- One stack layout per frame with an intentional direction, justify and align.
- A strong headline (80-160px) styled for the mood.
- A background that fits the context.
- Between 3 and 8 elements per frame.
- Only the four allowed fonts."""


def build_clarify_messages(description: str) -> list[dict[str, str]]:
    """Build chat messages for the clarifying-questions pass."""
    return [
        {"role": "system", "content": CLARIFY_SYSTEM_PROMPT},
        {"role": "user", "content": description.strip()},
    ]


def build_generation_messages(
    description: str,
    answers: str = "",
    *,
    style_index: int | None = None,
    feedback: list[str] | None = None,
    include_schema: bool = False,
) -> list[dict[str, str]]:
    """Build chat messages for the generation pass.

    Args:
        description: What the user asked for.
        answers: Answers to the clarifying questions.
        style_index: Fixed style direction (random when None).
        feedback: Error messages from a previous failed attempt.
        include_schema: Append allow-lists and limits as JSON.

    Returns:
        List of {"role", "content"} message dicts.
    """
    system_prompt = GENERATE_SYSTEM_PROMPT
    if include_schema:
        schema = export_llm_schema()
        reference = {"allow_lists": schema["allow_lists"], "limits": schema["limits"]}
        system_prompt += "\n\n## REFERENCE\n" + json.dumps(reference, indent=2)

    user_prompt = wrap_user_prompt(description, answers, style_index)
    if feedback:
        errors = "\n".join(f"- {message}" for message in feedback)
        user_prompt += (
            f"\n\n{FEEDBACK_HEADER}\n{errors}\nPlease fix these issues in your response."
        )

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def parse_clarify_response(text: str) -> list[str]:
    """Extract up to three questions from a clarify-pass response.

    Tolerates markdown fences and surrounding chatter. Returns an empty list
    when no questions can be recovered.
    """
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return []
    try:
        data: Any = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return []
    if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
        return []
    questions = [q.strip() for q in data["questions"] if isinstance(q, str) and q.strip()]
    return questions[:3]


__all__ = [
    "CLARIFY_SYSTEM_PROMPT",
    "GENERATE_SYSTEM_PROMPT",
    "STYLE_DIRECTIONS",
    "FEEDBACK_HEADER",
    "wrap_user_prompt",
    "build_clarify_messages",
    "build_generation_messages",
    "parse_clarify_response",
]
