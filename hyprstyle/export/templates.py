"""Placeholder substitution for application config templates."""

import re
from enum import Enum

from ..color import to_rgb_triplet, to_rgba, to_rgba_hex
from ..errors import UnresolvedPlaceholders

RGBA_ROLES = ("primary", "secondary", "accent", "bg_light", "bg_dark")
RGB_ROLES = ("bg_light", "button_bg", "accent", "text", "error", "success", "warning")

# Short names used by the shipped templates
ALIASES = {"BG": "background"}


class PlaceholderStyle(Enum):
    BRACED = "braced"  # ${NAME}
    AT_AT = "at_at"  # @@NAME@@

    @property
    def pattern(self):
        return _PATTERNS[self]


_PATTERNS = {
    PlaceholderStyle.BRACED: re.compile(r"\$\{([A-Z][A-Z0-9_]*)\}"),
    PlaceholderStyle.AT_AT: re.compile(r"@@([A-Z][A-Z0-9_]*)@@"),
}


def template_bindings(palette):
    """Flatten a palette into the uppercase names templates refer to.

    Every role is exposed as ``ROLE`` (hex). The RGBA roles are also exposed as
    ``ROLE_RGBA`` ("89B4FAff") and ``ROLE_RGBA_FN`` ("rgba(137, 180, 250, 0xff)"),
    the RGB roles as ``ROLE_RGB`` ("137, 180, 250").
    """
    colors = palette.colors
    bindings = {role.upper(): value for role, value in colors.items()}
    for alias, role in ALIASES.items():
        bindings[alias] = colors[role]
    for role in RGBA_ROLES:
        bindings[f"{role.upper()}_RGBA"] = to_rgba_hex(colors[role])
        bindings[f"{role.upper()}_RGBA_FN"] = to_rgba(colors[role])
    for role in RGB_ROLES:
        bindings[f"{role.upper()}_RGB"] = to_rgb_triplet(colors[role])
    return bindings


def find_placeholders(text, style=None):
    styles = [style] if style else list(PlaceholderStyle)
    found = set()
    for s in styles:
        found.update(s.pattern.findall(text))
    return found


def has_unresolved_placeholders(text, style=None):
    """True if ``text`` still contains a placeholder of ``style`` (any style if None)."""
    return bool(find_placeholders(text, style))


def render_template(text, bindings, style, source=None):
    """Substitute ``bindings`` into ``text`` using ``style`` placeholders.

    Raises:
        UnresolvedPlaceholders: if any placeholder has no binding
    """
    rendered = style.pattern.sub(
        lambda m: str(bindings.get(m.group(1), m.group(0))), text
    )
    leftover = find_placeholders(rendered, style)
    if leftover:
        raise UnresolvedPlaceholders(leftover, source=source)
    return rendered
