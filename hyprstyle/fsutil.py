"""Atomic replacement helpers for live configuration files."""

import os
import shutil
from pathlib import Path


def _tmp_path(target):
    return target.with_name(f".{target.name}.{os.getpid()}.tmp")


def atomic_write_text(path, text, encoding="utf-8"):
    """Write ``text`` next to ``path`` and rename it into place.

    Readers of ``path`` see either the old contents or the new ones, never a
    partial write.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = _tmp_path(target)
    try:
        with open(tmp, "w", encoding=encoding) as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        if target.exists():
            shutil.copymode(target, tmp)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return target


def atomic_copy(source, destination):
    """Copy ``source`` over ``destination`` via a temporary sibling file."""
    target = Path(destination)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = _tmp_path(target)
    try:
        shutil.copy2(source, tmp)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return target
