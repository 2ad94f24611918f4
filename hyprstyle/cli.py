import argparse
import logging
import sys
from pathlib import Path

from . import reload
from .backup import restore_snapshot
from .errors import HyprstyleError
from .export import generate_readability_report, print_palette
from .log import configure_logging
from .palette import PaletteStore
from .settings import EXTRACTORS, load_settings
from .theme import apply_palette, backup_configs, backup_manager, generate_theme

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hyprstyle",
        description="Theme Hyprland and friends from a wallpaper image or a saved palette",
    )
    parser.add_argument(
        "image_path",
        nargs="?",
        default=None,
        help="Wallpaper to derive the palette from (default: configured default_image)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--backup", "-b",
        action="store_true",
        help="Back up the current configuration files and exit",
    )
    mode.add_argument(
        "--restore", "-r",
        nargs="?",
        const="",
        default=None,
        metavar="ID",
        help="Restore a backup (interactive selection when ID is omitted)",
    )
    mode.add_argument(
        "--apply-palette", "-p",
        metavar="NAME",
        help="Apply a previously saved palette",
    )
    mode.add_argument(
        "--list", "-l",
        action="store_true",
        help="List saved palettes and backups",
    )
    mode.add_argument(
        "--palette-info", "-i",
        metavar="NAME",
        help="Show a saved palette and its readability report",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Do not ask for confirmation before restoring",
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Do not reload running components after applying or restoring",
    )
    parser.add_argument(
        "--extractor",
        choices=EXTRACTORS,
        default=None,
        help="Color extraction method (default: from settings, kmeans)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    settings = load_settings()
    if args.extractor:
        settings.extractor = args.extractor
    if args.no_reload:
        settings.reload_components = False

    if args.image_path and (
        args.backup or args.restore is not None or args.apply_palette
        or args.list or args.palette_info
    ):
        parser.error("image_path cannot be combined with another mode")

    try:
        if args.list:
            _run_list(settings)
        elif args.palette_info:
            _run_palette_info(settings, args.palette_info)
        elif args.backup:
            _run_backup(settings)
        elif args.restore is not None:
            return _run_restore(settings, args.restore or None, args.yes)
        elif args.apply_palette:
            _run_apply_palette(settings, args.apply_palette)
        else:
            image_path = args.image_path or settings.default_image
            if not image_path:
                parser.error("an image path is required (or set default_image in config.json)")
            _run_from_image(settings, image_path)
    except (HyprstyleError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.error("Interrupted")
        return 1
    return 0


def _run_list(settings):
    palettes = PaletteStore(settings.palettes_dir).list()
    backups = backup_manager(settings).list()

    print("Saved palettes:")
    if palettes:
        for name in palettes:
            print(f"  {name}")
    else:
        print("  (none)")

    print("\nAvailable backups:")
    if backups:
        for snapshot_id in backups:
            print(f"  {snapshot_id}")
    else:
        print("  (none)")


def _run_palette_info(settings, name):
    store = PaletteStore(settings.palettes_dir)
    print(store.describe(name))
    report, _ = generate_readability_report(store.load(name))
    print("\n" + report)


def _run_backup(settings):
    snapshot = backup_configs(settings)
    print(f"Backup created: {snapshot.path} ({len(snapshot.files)} files)")


def select_snapshot(snapshot_ids, prompt=None):
    """Ask the user to pick one of ``snapshot_ids`` (newest first).

    Returns None when the selection is empty or cancelled.
    """
    prompt = prompt or input
    print("\nAvailable backups:")
    for number, snapshot_id in enumerate(snapshot_ids, 1):
        print(f"  {number}) {snapshot_id}")
    choice = prompt("\nSelect backup number (Enter to cancel): ").strip()
    if not choice:
        return None
    if choice.isdigit() and 1 <= int(choice) <= len(snapshot_ids):
        return snapshot_ids[int(choice) - 1]
    if choice in snapshot_ids:
        return choice
    raise ValueError(f"Invalid selection: {choice}")


def confirm(message, prompt=None):
    prompt = prompt or input
    answer = prompt(f"{message} [y/N] ").strip().lower()
    return answer in ("y", "yes")


def _run_restore(settings, snapshot_id, assume_yes, prompt=None):
    manager = backup_manager(settings)
    if snapshot_id is None:
        snapshot_ids = manager.list()
        if not snapshot_ids:
            logger.warning("No backups found")
            return 0
        try:
            snapshot_id = select_snapshot(snapshot_ids, prompt)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
        if snapshot_id is None:
            print("Restore cancelled")
            return 0

    snapshot = manager.get(snapshot_id)
    if not assume_yes and not confirm(
        f"Restore {len(snapshot.files)} file(s) from {snapshot_id}?", prompt
    ):
        print("Restore cancelled")
        return 0

    result = restore_snapshot(manager, snapshot_id)
    print(f"Restored {len(result.restored)} file(s) from {snapshot_id}")
    result.raise_for_failures()
    if settings.reload_components:
        reload.reload_components(settings)
        print("Components reloaded")
    return 0


def _print_outcome(outcome):
    print_palette(outcome.palette)
    report, _ = generate_readability_report(outcome.palette)
    print("\n" + report)

    print("\n" + "=" * 60)
    print("Exported:")
    for path in outcome.applied.updated:
        print(f"  - {path}")
    if outcome.palette_path:
        print(f"  - {outcome.palette_path}")
    if outcome.applied.skipped:
        print(f"\nSkipped (not installed): {', '.join(outcome.applied.skipped)}")
    print(f"\nBackup: {outcome.snapshot.path}")
    print("=" * 60)


def _run_apply_palette(settings, name):
    print(f"Applying palette: {name}")
    _print_outcome(apply_palette(name, settings))


def _run_from_image(settings, image_path):
    print(f"Analyzing: {image_path}")
    _print_outcome(generate_theme(Path(image_path).expanduser(), settings))


if __name__ == "__main__":
    sys.exit(main())
