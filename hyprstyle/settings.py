"""Runtime settings: paths, extraction and reload options."""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

EXTRACTORS = ("kmeans", "imagemagick")

BUILTIN_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# System files captured alongside the user's configs
SYSTEM_FILES = ("/etc/ly/config.ini",)


def _xdg_dir(variable, fallback):
    value = os.environ.get(variable)
    return Path(value) if value else Path.home() / fallback


@dataclass
class Settings:
    home: Path = field(default_factory=Path.home)
    config_home: Path = field(default_factory=lambda: _xdg_dir("XDG_CONFIG_HOME", ".config"))
    data_dir: Path = field(
        default_factory=lambda: _xdg_dir("XDG_DATA_HOME", ".local/share") / "hyprstyle"
    )
    templates_dir: Optional[Path] = None
    system_root: Path = Path("/")
    system_files: List[str] = field(default_factory=lambda: list(SYSTEM_FILES))
    default_image: Optional[Path] = None
    extractor: str = "kmeans"
    n_colors: int = 10
    command_timeout: float = 10.0
    reload_components: bool = True

    @property
    def backups_dir(self):
        return self.data_dir / "backups"

    @property
    def palettes_dir(self):
        return self.data_dir / "palettes"

    @property
    def template_dirs(self):
        dirs = []
        if self.templates_dir is not None:
            dirs.append(Path(self.templates_dir))
        else:
            dirs.append(self.config_home / "hyprstyle" / "templates")
        dirs.append(BUILTIN_TEMPLATES_DIR)
        return dirs

    def system_path(self, path):
        """Map an absolute system path like /etc/x under ``system_root``."""
        return self.system_root / Path(path).relative_to("/")


_PATH_FIELDS = {"home", "config_home", "data_dir", "templates_dir", "system_root", "default_image"}


def settings_path(config_home=None):
    base = Path(config_home) if config_home else _xdg_dir("XDG_CONFIG_HOME", ".config")
    return base / "hyprstyle" / "config.json"


def _normalize(settings):
    if settings.extractor not in EXTRACTORS:
        logger.warning("Unknown extractor %r, using kmeans", settings.extractor)
        settings.extractor = "kmeans"
    try:
        settings.n_colors = max(8, min(32, int(settings.n_colors)))
    except (TypeError, ValueError):
        logger.warning("Invalid n_colors %r, using %d", settings.n_colors, Settings.n_colors)
        settings.n_colors = Settings.n_colors
    try:
        settings.command_timeout = max(1.0, float(settings.command_timeout))
    except (TypeError, ValueError):
        logger.warning(
            "Invalid command_timeout %r, using %s",
            settings.command_timeout,
            Settings.command_timeout,
        )
        settings.command_timeout = Settings.command_timeout


def load_settings(path=None):
    """Load settings from JSON, falling back to defaults for missing keys.

    Unknown keys are ignored. ``HYPRSTYLE_DATA_DIR`` overrides ``data_dir``.
    """
    settings = Settings()
    path = Path(path) if path else settings_path(settings.config_home)
    if path.is_file():
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
            raw = {}
        known = {f.name for f in fields(Settings)}
        for key, value in raw.items() if isinstance(raw, dict) else ():
            if key not in known:
                continue
            if key in _PATH_FIELDS and value is not None:
                value = Path(value).expanduser()
            setattr(settings, key, value)

    env_data_dir = os.environ.get("HYPRSTYLE_DATA_DIR")
    if env_data_dir:
        settings.data_dir = Path(env_data_dir).expanduser()

    _normalize(settings)
    return settings
