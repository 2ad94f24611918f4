"""Tell running desktop components to pick up new colors.

Every call here is fire-and-forget: failures are logged as warnings and
never fail the theming operation.
"""

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from .fsutil import atomic_write_text

logger = logging.getLogger(__name__)

NVIM_RELOAD_KEYS = (
    ":lua package.loaded['nvim-colors']=nil; require('nvim-colors').setup()<CR>"
)


def _run(cmd, timeout, description):
    try:
        subprocess.run(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=True,
        )
    except FileNotFoundError:
        logger.warning("%s not found, skipping %s", cmd[0], description)
    except subprocess.TimeoutExpired:
        logger.warning("Timed out during %s", description)
    except subprocess.CalledProcessError:
        logger.warning("Failed to %s", description)
    else:
        return True
    return False


def _is_running(process, timeout):
    try:
        result = subprocess.run(
            ["pgrep", "-x", process],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def _spawn(cmd):
    try:
        subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.warning("Failed to start %s: %s", cmd[0], exc)
        return False
    return True


def reload_hyprland(timeout=10.0):
    if shutil.which("hyprctl") is None:
        logger.warning("hyprctl not found, skipping Hyprland reload")
        return False
    logger.info("Reloading Hyprland...")
    return _run(["hyprctl", "reload"], timeout, "reload Hyprland")


def reload_kitty(timeout=10.0):
    # SIGUSR1 makes kitty re-read its config without closing windows
    if not _is_running("kitty", timeout):
        logger.info("Kitty not running, skipping reload")
        return False
    logger.info("Reloading Kitty...")
    return _run(["pkill", "-SIGUSR1", "kitty"], timeout, "reload Kitty")


def restart_waybar(timeout=10.0):
    if _is_running("waybar", timeout):
        logger.info("Restarting Waybar...")
        _run(["pkill", "waybar"], timeout, "stop Waybar")
        time.sleep(0.2)
    else:
        logger.info("Waybar not running, starting...")
    return _spawn(["waybar"])


def restart_mako(timeout=10.0):
    if not _run(["systemctl", "--user", "is-enabled", "mako"], timeout, "query Mako"):
        logger.warning("Mako not enabled, skipping restart")
        return False
    logger.info("Restarting Mako...")
    return _run(["systemctl", "--user", "restart", "mako"], timeout, "restart Mako")


def find_nvim_sockets(home, tmp_dir=Path("/tmp"), runtime_dir=None):
    """Neovim RPC sockets in the usual places, deduplicated and sorted."""
    home = Path(home)
    if runtime_dir is None:
        runtime_dir = Path(os.environ.get("XDG_RUNTIME_DIR", f"/run/user/{os.getuid()}"))

    candidates = [tmp_dir / "nvim.sock", home / ".cache" / "nvim" / "server.sock"]
    if tmp_dir.is_dir():
        candidates += list(tmp_dir.glob("nvim*.sock")) + list(tmp_dir.glob("nvim.*"))
    if runtime_dir.is_dir():
        candidates += list(runtime_dir.glob("nvim*")) + list(runtime_dir.glob("*/nvim*"))
    return sorted({p for p in candidates if p.is_socket()})


def reload_nvim(home, timeout=10.0):
    if not _is_running("nvim", timeout):
        logger.info("Neovim not running, skipping reload")
        return 0
    logger.info("Reloading Neovim...")
    sockets = find_nvim_sockets(home)
    if not sockets:
        logger.warning("No Neovim RPC socket found for hot reload")
        logger.warning("Start Neovim with: nvim --listen /tmp/nvim.sock")
        logger.warning("Colors will still apply on next Neovim restart")
        return 0

    reloaded = 0
    for socket in sockets:
        cmd = ["nvim", "--server", str(socket), "--remote-send", NVIM_RELOAD_KEYS]
        if _run(cmd, timeout, f"reload Neovim on {socket}"):
            logger.info("Reloaded colors on %s", socket)
            reloaded += 1
    return reloaded


def reload_components(settings):
    """Reload Hyprland, kitty, waybar, mako and any Neovim instances."""
    timeout = settings.command_timeout
    reload_hyprland(timeout)
    reload_kitty(timeout)
    restart_waybar(timeout)
    restart_mako(timeout)
    reload_nvim(settings.home, timeout)
    logger.info("Component reload complete")


def write_hyprpaper_config(image_path, config_home):
    image_path = Path(image_path).resolve()
    return atomic_write_text(
        Path(config_home) / "hypr" / "hyprpaper.conf",
        f"preload = {image_path}\nwallpaper = ,{image_path}\n",
    )


def set_wallpaper(image_path, settings):
    """Point hyprpaper at ``image_path`` and restart it."""
    if not Path(image_path).is_file():
        logger.warning("Image file not found, skipping wallpaper: %s", image_path)
        return False
    if shutil.which("hyprpaper") is None:
        logger.warning("hyprpaper not found, skipping wallpaper setting")
        return False

    logger.info("Setting wallpaper with hyprpaper...")
    try:
        config = write_hyprpaper_config(image_path, settings.config_home)
    except OSError as exc:
        logger.warning("Failed to write hyprpaper config: %s", exc)
        return False
    logger.info("Created hyprpaper config at %s", config)

    if _is_running("hyprpaper", settings.command_timeout):
        _run(["pkill", "hyprpaper"], settings.command_timeout, "stop hyprpaper")
        time.sleep(0.5)
    return _spawn(["hyprpaper"])
