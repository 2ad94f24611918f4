"""End-to-end theming: back up, derive or load a palette, render, reload."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import reload
from .backup import BackupManager, Snapshot, default_backup_paths
from .errors import PartialFailure, RenderError
from .export.targets import ApplyResult, apply_targets, missing_templates
from .extract import extract_candidates
from .palette import Palette, PaletteStore, generate_palette

logger = logging.getLogger(__name__)


@dataclass
class ThemeOutcome:
    palette: Palette
    snapshot: Snapshot
    applied: ApplyResult
    palette_path: Optional[Path] = None


def backup_manager(settings):
    return BackupManager(settings.backups_dir, settings.home, settings.system_root)


def backup_configs(settings):
    """Snapshot every file a theming operation may rewrite."""
    return backup_manager(settings).snapshot(default_backup_paths(settings))


def check_templates(settings):
    """Raise before anything is backed up if a registered template is missing."""
    missing = missing_templates(settings.template_dirs)
    if missing:
        raise RenderError(f"Missing templates: {', '.join(missing)}")


def render_palette(palette, settings, snapshot):
    """Render all application configs, raising if any of them failed.

    The error message carries the snapshot location so the user can restore.
    """
    result = apply_targets(palette, settings.config_home, settings.template_dirs)
    if not result.ok:
        logger.error("Backup of the previous configuration: %s", snapshot.path)
        raise PartialFailure(
            f"Failed to update {len(result.failed)} config(s); "
            f"previous configuration backed up as {snapshot.id}",
            result.failed,
        )
    return result


def generate_theme(image_path, settings, name=None, reload_components=None):
    """Derive a palette from ``image_path`` and apply it everywhere."""
    image_path = Path(image_path)
    check_templates(settings)
    # Extraction fails fast on a missing image, before anything is backed up
    candidates = extract_candidates(
        image_path,
        method=settings.extractor,
        n_colors=settings.n_colors,
        timeout=settings.command_timeout,
    )

    snapshot = backup_configs(settings)
    palette = generate_palette(candidates, name or image_path.stem, str(image_path.resolve()))
    applied = render_palette(palette, settings, snapshot)
    palette_path = PaletteStore(settings.palettes_dir).save(palette)

    if reload_components is None:
        reload_components = settings.reload_components
    reload.set_wallpaper(image_path, settings)
    if reload_components:
        reload.reload_components(settings)
    return ThemeOutcome(palette, snapshot, applied, palette_path)


def apply_palette(name, settings, reload_components=None):
    """Re-apply a saved palette by name."""
    palette = PaletteStore(settings.palettes_dir).load(name)
    check_templates(settings)
    snapshot = backup_configs(settings)
    applied = render_palette(palette, settings, snapshot)

    if reload_components is None:
        reload_components = settings.reload_components
    if reload_components:
        reload.reload_components(settings)
    return ThemeOutcome(palette, snapshot, applied)
