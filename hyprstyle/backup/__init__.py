from .restore import RestoreResult, restore_snapshot, sudo_copy
from .snapshot import BackupManager, Snapshot, default_backup_paths

__all__ = [
    "BackupManager",
    "RestoreResult",
    "Snapshot",
    "default_backup_paths",
    "restore_snapshot",
    "sudo_copy",
]
