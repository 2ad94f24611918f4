"""Named, durable palette records on disk."""

import logging
from pathlib import Path

from ..errors import InvalidName, NotFound
from ..export.json_export import export_json
from .loader import load_palette_from_json

logger = logging.getLogger(__name__)


def _check_name(name):
    if not name or name.startswith(".") or "/" in name or "\\" in name:
        raise InvalidName(f"Invalid palette name: {name!r}")
    return name


class PaletteStore:
    """Saves and loads palettes as ``<root>/<name>.json`` records."""

    def __init__(self, root):
        self.root = Path(root)

    def path_for(self, name):
        return self.root / f"{_check_name(name)}.json"

    def save(self, palette, name=None):
        path = self.path_for(name if name is not None else palette.name)
        self.root.mkdir(parents=True, exist_ok=True)
        export_json(palette, path, name=path.stem)
        logger.info("Saved palette: %s", path)
        return path

    def load(self, name):
        try:
            path = self.path_for(name)
        except InvalidName:
            raise NotFound(f"Palette not found: {name}") from None
        if not path.is_file():
            raise NotFound(f"Palette not found: {name}")
        return load_palette_from_json(path)

    def list(self):
        if not self.root.is_dir():
            return []
        return sorted(p.stem for p in self.root.glob("*.json") if p.is_file())

    def describe(self, name):
        palette = self.load(name)
        lines = [
            f"Palette: {palette.name}",
            f"  Timestamp: {palette.created_at.strftime('%Y-%m-%dT%H:%M:%SZ')}",
            f"  Source Image: {palette.source_image}",
            "  Colors:",
        ]
        for role, value in sorted(palette.colors.items()):
            lines.append(f"    {role.upper():12} = {value}")
        return "\n".join(lines)
