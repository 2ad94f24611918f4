"""
Semantic palette derivation.

Turns a list of candidate hex colors into a labeled palette and repairs every
role whose contrast against the background falls below its floor. Every repair
substitutes a literal constant, so the floor holds even for monochrome or
otherwise adversarial images.
"""

import logging

from ..color import (
    contrast_ratio,
    darken,
    is_dark,
    is_hex_color,
    lighten,
    relative_luminance,
)
from .model import ROLES, Palette

logger = logging.getLogger(__name__)

# Contrast requirements
MIN_TEXT_CONTRAST = 4.5  # text against background
MIN_UI_CONTRAST = 3.0  # primary/secondary/accent and semantic colors

MIN_CANDIDATES = 8

# Used verbatim whenever extraction yields fewer than MIN_CANDIDATES colors
FALLBACK_CANDIDATES = (
    "#1e1e2e",
    "#89b4fa",
    "#94e2d5",
    "#f5c2e7",
    "#f38ba8",
    "#a6e3a1",
    "#f9e2af",
    "#cdd6f4",
)

FALLBACK_BACKGROUND = "#1e1e2e"
LIGHT_TEXT = "#cdd6f4"
DARK_TEXT = "#1e1e2e"

SEMANTIC_DEFAULTS = {
    "error": "#f38ba8",
    "success": "#a6e3a1",
    "warning": "#f9e2af",
}
SEMANTIC_BRIGHT = {
    "error": "#ff5555",
    "success": "#50fa7b",
    "warning": "#f1fa8c",
}

BG_LIGHT_FOR_LIGHT_TEXT = "#45475a"
BG_LIGHT_FOR_DARK_TEXT = "#9399b2"

BG_LIGHT_DARKEN = 0.25
BG_DARK_DARKEN = 0.15
BUTTON_BG_SHIFT = 0.1

# Near-imperceptible cursorline highlight
CURSORLINE_DARKEN = 0.45
CURSORLINE_LIGHTEN = 0.02


def prepare_candidates(candidates):
    """Filter, normalize, dedupe and sort candidate colors by luminance.

    Tokens that are not "#rrggbb" are dropped. When fewer than MIN_CANDIDATES
    valid tokens remain, the fixed fallback list replaces them entirely.

    Returns:
        list of lowercase hex strings sorted darkest first
    """
    valid = [c.lower() for c in candidates if is_hex_color(c)]
    if len(valid) < MIN_CANDIDATES:
        logger.warning(
            "Only %d usable candidate colors, using default palette", len(valid)
        )
        valid = list(FALLBACK_CANDIDATES)

    unique = list(dict.fromkeys(valid))
    return sorted(unique, key=lambda c: (relative_luminance(c), c))


def _pick(colors, index):
    return colors[min(index, len(colors) - 1)]


def _repair_text(background, text):
    if contrast_ratio(background, text) >= MIN_TEXT_CONTRAST:
        return text

    text = LIGHT_TEXT if relative_luminance(background) < 0.5 else DARK_TEXT
    if contrast_ratio(background, text) >= MIN_TEXT_CONTRAST:
        return text

    # Mid-luminance backgrounds: one of the extremes always clears 4.5:1
    return max(("#ffffff", "#000000"), key=lambda c: contrast_ratio(background, c))


def derive_bg_light(background, text):
    if is_dark(background):
        return BG_LIGHT_FOR_LIGHT_TEXT if not is_dark(text) else BG_LIGHT_FOR_DARK_TEXT
    return darken(background, BG_LIGHT_DARKEN)


def derive_cursorline(primary, background, text):
    if not is_dark(text):
        if is_dark(primary):
            return lighten(primary, CURSORLINE_LIGHTEN)
        return darken(primary, CURSORLINE_DARKEN)
    return lighten(background, CURSORLINE_LIGHTEN)


def derive_button_bg(background):
    if is_dark(background):
        return lighten(background, BUTTON_BG_SHIFT)
    return darken(background, BUTTON_BG_SHIFT)


def derive_extended_roles(colors):
    """Compute the extended roles from an existing core role mapping."""
    return {
        "cursorline": derive_cursorline(
            colors["primary"], colors["background"], colors["text"]
        ),
        "button_bg": derive_button_bg(colors["background"]),
    }


def derive_colors(candidates):
    """Assign semantic roles to candidate colors with contrast repair.

    Args:
        candidates: ordered hex strings from the extraction step

    Returns:
        dict mapping every role name to a lowercase hex color
    """
    colors_by_lum = prepare_candidates(candidates)
    colors = {}

    # === BACKGROUND ===
    background = colors_by_lum[0]
    if relative_luminance(background) > 0.5:
        background = FALLBACK_BACKGROUND
    colors["background"] = background

    # === TEXT ===
    colors["text"] = _repair_text(background, colors_by_lum[-1])

    # === ACCENTS ===
    for role, index in (("primary", 3), ("secondary", 4), ("accent", 5)):
        value = _pick(colors_by_lum, index)
        if contrast_ratio(background, value) < MIN_UI_CONTRAST:
            value = colors["text"]
        colors[role] = value

    # === SEMANTIC COLORS ===
    for role, default in SEMANTIC_DEFAULTS.items():
        value = default
        if contrast_ratio(background, value) < MIN_UI_CONTRAST:
            value = SEMANTIC_BRIGHT[role]
        colors[role] = value

    # === BACKGROUND VARIANTS ===
    colors["bg_light"] = derive_bg_light(background, colors["text"])
    colors["bg_dark"] = darken(background, BG_DARK_DARKEN)

    # === EXTENDED ===
    colors.update(derive_extended_roles(colors))

    return {role: colors[role] for role in ROLES}


def generate_palette(candidates, name, source_image, created_at=None):
    """Derive a complete Palette from candidate colors.

    Args:
        candidates: ordered hex strings (invalid tokens are ignored)
        name: palette name
        source_image: path of the source image, or "custom"
        created_at: optional timestamp, defaults to now (UTC)

    Returns:
        Palette
    """
    colors = derive_colors(candidates)
    kwargs = {} if created_at is None else {"created_at": created_at}
    return Palette(name=name, colors=colors, source_image=str(source_image), **kwargs)
