"""Copy a snapshot's files back to where they came from."""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from ..errors import PartialFailure
from ..fsutil import atomic_copy

logger = logging.getLogger(__name__)


def sudo_copy(source, target):
    """Privileged copy for system files.

    No timeout: sudo may be waiting on a password prompt.
    """
    target = Path(target)
    subprocess.run(["sudo", "mkdir", "-p", str(target.parent)], check=True)
    subprocess.run(["sudo", "cp", str(source), str(target)], check=True)


def _nearest_existing(path):
    path = Path(path)
    while not path.exists() and path != path.parent:
        path = path.parent
    return path


def _parent_writable(target):
    return os.access(_nearest_existing(Path(target).parent), os.W_OK)


def needs_escalation(target, home):
    target = Path(target)
    try:
        target.relative_to(home)
        return False
    except ValueError:
        return not _parent_writable(target)


@dataclass
class RestoreResult:
    snapshot_id: str
    restored: List[Path] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self):
        return not self.failed

    def raise_for_failures(self):
        if self.failed:
            raise PartialFailure(
                f"{len(self.failed)} file(s) failed to restore from {self.snapshot_id}",
                self.failed,
            )


def restore_snapshot(manager, snapshot_id, *, escalate=sudo_copy):
    """Restore every file in ``snapshot_id``, continuing past failures.

    Raises ``NotFound`` before touching anything if the snapshot is missing.
    Files that restored successfully stay applied when others fail.
    """
    snapshot = manager.get(snapshot_id)
    logger.info("Restoring from backup: %s", snapshot_id)
    result = RestoreResult(snapshot_id)

    for rel, source in sorted(snapshot.files.items()):
        target = manager.target_for(rel)
        try:
            if needs_escalation(target, manager.home):
                logger.warning("File requires sudo to restore: %s", rel)
                escalate(source, target)
                logger.info("Restored: %s (via sudo)", rel)
            else:
                atomic_copy(source, target)
                logger.info("Restored: %s", rel)
        except (OSError, subprocess.SubprocessError) as exc:
            logger.error("Failed to restore: %s (%s)", rel, exc)
            result.failed.append((str(target), str(exc)))
            continue
        result.restored.append(target)

    if result.ok:
        logger.info("Restore complete")
    else:
        logger.error("Some files failed to restore")
    return result
