from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping

from ..color import normalize_hex

CORE_ROLES = (
    "primary",
    "secondary",
    "accent",
    "background",
    "text",
    "error",
    "success",
    "warning",
    "bg_light",
    "bg_dark",
)
EXTENDED_ROLES = ("cursorline", "button_bg")
ROLES = CORE_ROLES + EXTENDED_ROLES

CUSTOM_SOURCE = "custom"


def utcnow():
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True)
class Palette:
    """A complete semantic role -> hex color mapping for one theming run."""

    name: str
    colors: Mapping[str, str]
    source_image: str = CUSTOM_SOURCE
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        # Freeze a private, lowercased copy so callers cannot mutate the palette afterwards
        colors = {role: normalize_hex(value) for role, value in self.colors.items()}
        object.__setattr__(self, "colors", MappingProxyType(colors))

    def __getitem__(self, role):
        return self.colors[role]

    @property
    def background(self):
        return self.colors["background"]

    @property
    def text(self):
        return self.colors["text"]
