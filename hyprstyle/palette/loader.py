import json
from datetime import datetime, timezone

from ..color import is_hex_color
from ..errors import MalformedRecord
from ..export.json_export import TIMESTAMP_FORMAT
from .generator import derive_extended_roles
from .model import CORE_ROLES, CUSTOM_SOURCE, EXTENDED_ROLES, Palette


def _parse_timestamp(value, json_path):
    if not isinstance(value, str):
        raise MalformedRecord(f"{json_path}: missing timestamp")
    try:
        parsed = datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        # Older records carry fractional seconds: "2025-12-25T14:30:22.123456Z"
        try:
            parsed = datetime.fromisoformat(value.rstrip("Z"))
        except ValueError as exc:
            raise MalformedRecord(f"{json_path}: bad timestamp {value!r}") from exc
    return parsed.replace(tzinfo=timezone.utc, microsecond=0)


def palette_from_record(data, json_path="<record>"):
    """Convert a decoded palette record into a Palette.

    Raises:
        MalformedRecord: if metadata is missing or any core role is absent or
            not a "#rrggbb" color
    """
    if not isinstance(data, dict):
        raise MalformedRecord(f"{json_path}: expected a JSON object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise MalformedRecord(f"{json_path}: missing name")

    raw_colors = data.get("colors")
    if not isinstance(raw_colors, dict):
        raise MalformedRecord(f"{json_path}: missing colors")

    colors = {}
    for role in CORE_ROLES + EXTENDED_ROLES:
        value = raw_colors.get(role)
        if value is None and role in EXTENDED_ROLES:
            continue
        if not is_hex_color(value):
            raise MalformedRecord(f"{json_path}: role {role!r} has invalid color {value!r}")
        colors[role] = value.lower()

    # Records written before the extended roles existed
    missing = {role for role in EXTENDED_ROLES if role not in colors}
    if missing:
        derived = derive_extended_roles(colors)
        colors.update({role: derived[role] for role in missing})

    source_image = data.get("source_image")
    return Palette(
        name=name,
        colors=colors,
        source_image=str(source_image) if source_image else CUSTOM_SOURCE,
        created_at=_parse_timestamp(data.get("timestamp"), json_path),
    )


def load_palette_from_json(json_path):
    """Load a Palette from a JSON record.

    Args:
        json_path: Path to palette JSON file

    Returns:
        Palette
    """
    try:
        with open(json_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedRecord(f"{json_path}: invalid JSON ({exc})") from exc

    return palette_from_record(data, json_path)
