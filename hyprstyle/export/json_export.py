import json

from ..fsutil import atomic_write_text

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def palette_to_record(palette, name=None):
    """Build the on-disk record for a palette.

    Args:
        palette: The Palette to serialize
        name: Optional record name overriding ``palette.name``

    Returns:
        dict with name, timestamp, source_image and lowercase role colors
    """
    return {
        "name": name or palette.name,
        "timestamp": palette.created_at.strftime(TIMESTAMP_FORMAT),
        "source_image": palette.source_image,
        "colors": {role: value.lower() for role, value in palette.colors.items()},
    }


def export_json(palette, filepath, name=None):
    """Export palette as a JSON record, replacing any existing file atomically."""
    data = palette_to_record(palette, name=name)
    return atomic_write_text(filepath, json.dumps(data, indent=2) + "\n")
