"""Timestamped snapshots of the configuration files hyprstyle touches."""

import logging
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict

from ..errors import NotFound
from ..export.targets import DEFAULT_TARGETS

logger = logging.getLogger(__name__)

SNAPSHOT_ID_FORMAT = "%Y-%m-%d_%H%M%S"
SNAPSHOT_ID_RE = re.compile(r"^(\d{4}-\d{2}-\d{2}_\d{6})(?:-(\d+))?$")

# First path components that restore under the system root instead of home
SYSTEM_PREFIXES = ("etc",)


def _sort_key(snapshot_id):
    match = SNAPSHOT_ID_RE.match(snapshot_id)
    return match.group(1), int(match.group(2) or 0)


def _is_relative_to(path, other):
    try:
        path.relative_to(other)
    except ValueError:
        return False
    return True


@dataclass
class Snapshot:
    """One snapshot directory; ``files`` maps relative paths to stored copies."""

    id: str
    path: Path
    files: Dict[str, Path] = field(default_factory=dict)

    @property
    def created_at(self):
        return datetime.strptime(_sort_key(self.id)[0], SNAPSHOT_ID_FORMAT)


class BackupManager:
    """Creates and enumerates snapshots under ``backups_dir``.

    Files under ``home`` are stored relative to it, everything else relative
    to ``system_root``, so ``/etc/ly/config.ini`` becomes ``etc/ly/config.ini``.
    """

    def __init__(self, backups_dir, home, system_root=Path("/"), clock=datetime.now):
        self.backups_dir = Path(backups_dir)
        self.home = Path(home)
        self.system_root = Path(system_root)
        self.clock = clock

    def relative_path(self, path):
        path = Path(path)
        if _is_relative_to(path, self.home):
            rel = path.relative_to(self.home)
            if rel.parts and rel.parts[0] in SYSTEM_PREFIXES:
                return None
            return rel
        if _is_relative_to(path, self.system_root):
            rel = path.relative_to(self.system_root)
            if rel.parts and rel.parts[0] in SYSTEM_PREFIXES:
                return rel
        return None

    def target_for(self, rel_path):
        """Where a stored file restores to."""
        rel = Path(rel_path)
        if rel.parts and rel.parts[0] in SYSTEM_PREFIXES:
            return self.system_root / rel
        return self.home / rel

    def _create_dir(self):
        self.backups_dir.mkdir(parents=True, exist_ok=True)
        base = self.clock().strftime(SNAPSHOT_ID_FORMAT)
        snapshot_id = base
        suffix = 0
        while True:
            path = self.backups_dir / snapshot_id
            try:
                path.mkdir()
            except FileExistsError:
                suffix += 1
                snapshot_id = f"{base}-{suffix}"
                continue
            return snapshot_id, path

    def snapshot(self, paths):
        """Copy every existing file in ``paths`` into a new snapshot.

        Raises ``OSError`` if a copy fails; the incomplete snapshot is removed.
        """
        snapshot_id, snapshot_path = self._create_dir()
        logger.info("Creating backup: %s", snapshot_path)
        snapshot = Snapshot(snapshot_id, snapshot_path)
        try:
            for source in paths:
                source = Path(source)
                if not source.is_file():
                    logger.debug("Not backing up missing file: %s", source)
                    continue
                rel = self.relative_path(source)
                if rel is None:
                    logger.warning("Cannot back up %s: not under home or a system prefix", source)
                    continue
                stored = snapshot_path / rel
                stored.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, stored)
                snapshot.files[rel.as_posix()] = stored
                logger.info("Backed up: %s", rel.as_posix())
        except OSError:
            shutil.rmtree(snapshot_path, ignore_errors=True)
            raise

        logger.info("Backup complete: %d files backed up", len(snapshot.files))
        return snapshot

    def list(self):
        """Snapshot ids, newest first."""
        if not self.backups_dir.is_dir():
            return []
        ids = [
            p.name
            for p in self.backups_dir.iterdir()
            if p.is_dir() and SNAPSHOT_ID_RE.match(p.name)
        ]
        return sorted(ids, key=_sort_key, reverse=True)

    def get(self, snapshot_id):
        if not isinstance(snapshot_id, str) or not SNAPSHOT_ID_RE.match(snapshot_id):
            raise NotFound(f"Backup not found: {snapshot_id}")
        path = self.backups_dir / snapshot_id
        if not path.is_dir():
            raise NotFound(f"Backup not found: {snapshot_id}")
        files = {
            f.relative_to(path).as_posix(): f
            for f in sorted(path.rglob("*"))
            if f.is_file()
        }
        return Snapshot(snapshot_id, path, files)


def default_backup_paths(settings):
    """Files captured before any operation that rewrites configuration."""
    config = settings.config_home
    paths = [config / target.target for target in DEFAULT_TARGETS]
    paths += [
        config / "hypr" / "hyprland.conf",
        config / "hypr" / "hyprpaper.conf",
        config / "nvim" / "init.lua",
    ]
    paths += [settings.system_path(p) for p in settings.system_files]

    seen = set()
    unique = []
    for path in paths:
        if path not in seen:
            seen.add(path)
            unique.append(path)
    return unique
