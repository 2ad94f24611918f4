import re

from .errors import MalformedColor

# Hex strings are always emitted lowercase: "#rrggbb"
HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
CANDIDATE_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

DEFAULT_FACTOR = 0.15


def is_hex_color(token):
    """True if ``token`` is "#" followed by exactly six hex digits."""
    return isinstance(token, str) and bool(CANDIDATE_RE.match(token))


def hex_to_rgb(hex_color):
    if not isinstance(hex_color, str):
        raise MalformedColor(f"Not a hex color: {hex_color!r}")
    match = HEX_COLOR_RE.match(hex_color.strip())
    if not match:
        raise MalformedColor(f"Not a hex color: {hex_color!r}")
    digits = match.group(1)
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))


def rgb_to_hex(r, g, b):
    r, g, b = (max(0, min(255, int(c))) for c in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(hex_color):
    return rgb_to_hex(*hex_to_rgb(hex_color))


def relative_luminance(hex_color):
    """Calculate relative luminance per WCAG 2.0"""

    def channel(c):
        c = c / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = hex_to_rgb(hex_color)
    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def contrast_ratio(color_a, color_b):
    """Calculate contrast ratio between two hex colors"""
    lum_a = relative_luminance(color_a)
    lum_b = relative_luminance(color_b)
    lighter = max(lum_a, lum_b)
    darker = min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05)


def is_dark(hex_color):
    return relative_luminance(hex_color) < 0.5


def lighten(hex_color, factor=DEFAULT_FACTOR):
    """Shift every channel toward 255 by ``factor * 255``."""
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(*(min(255, int(c + 255 * factor)) for c in (r, g, b)))


def darken(hex_color, factor=DEFAULT_FACTOR):
    """Shift every channel toward 0 by ``factor * 255``."""
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(*(max(0, int(c - 255 * factor)) for c in (r, g, b)))


def to_rgba_hex(hex_color, alpha="ff"):
    """Hyprland gradient form: "#89b4fa" -> "89B4FAff"."""
    return f"{normalize_hex(hex_color)[1:].upper()}{alpha}"


def to_rgba(hex_color, alpha="ff"):
    r, g, b = hex_to_rgb(hex_color)
    return f"rgba({r}, {g}, {b}, 0x{alpha})"


def to_rgb_triplet(hex_color):
    r, g, b = hex_to_rgb(hex_color)
    return f"{r}, {g}, {b}"
