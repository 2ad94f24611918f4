from .generator import generate_palette
from .loader import load_palette_from_json
from .model import CORE_ROLES, ROLES, Palette
from .store import PaletteStore

__all__ = [
    "CORE_ROLES",
    "ROLES",
    "Palette",
    "PaletteStore",
    "generate_palette",
    "load_palette_from_json",
]
