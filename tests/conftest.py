"""
Shared fixtures for hyprstyle tests.

Every fixture works inside pytest's tmp_path so no test touches the real
home directory, /etc, or running desktop components.
"""

from datetime import datetime, timezone

import pytest
from PIL import Image

import hyprstyle.reload as reload
from hyprstyle.palette import generate_palette
from hyprstyle.settings import Settings

CATPPUCCIN = [
    "#1e1e2e",
    "#89b4fa",
    "#94e2d5",
    "#f5c2e7",
    "#f38ba8",
    "#a6e3a1",
    "#f9e2af",
    "#cdd6f4",
]


@pytest.fixture
def candidates():
    return list(CATPPUCCIN)


@pytest.fixture
def palette(candidates):
    return generate_palette(
        candidates,
        "mocha",
        "/wallpapers/mocha.png",
        created_at=datetime(2025, 12, 25, 14, 30, 22, tzinfo=timezone.utc),
    )


@pytest.fixture
def settings(tmp_path):
    """Settings rooted entirely in a temporary directory."""
    home = tmp_path / "home"
    config_home = home / ".config"
    config_home.mkdir(parents=True)
    system_root = tmp_path / "root"
    system_root.mkdir()
    return Settings(
        home=home,
        config_home=config_home,
        data_dir=tmp_path / "data",
        system_root=system_root,
        reload_components=False,
    )


@pytest.fixture
def installed_apps(settings):
    """Create the config directories and files of an existing desktop setup."""
    config = settings.config_home
    for directory in ("hypr", "kitty", "mako", "waybar", "wofi", "nvim"):
        (config / directory).mkdir(parents=True, exist_ok=True)
    (config / "hypr" / "hyprland.conf").write_text("monitor = ,preferred,auto,1\n")
    (config / "kitty" / "kitty.conf").write_text("font_size 11\n")
    (config / "nvim" / "init.lua").write_text("vim.opt.number = true\n")
    ly = settings.system_path("/etc/ly/config.ini")
    ly.parent.mkdir(parents=True)
    ly.write_text("animation = matrix\n")
    return settings


@pytest.fixture
def wallpaper(tmp_path):
    """A small striped image with a spread of dark to light colors."""
    stripes = [
        (20, 20, 35), (40, 40, 60), (70, 60, 90), (120, 90, 160),
        (90, 150, 200), (200, 120, 140), (180, 210, 160), (230, 225, 240),
    ]
    img = Image.new("RGB", (80, 10))
    for index, color in enumerate(stripes):
        img.paste(color, (index * 10, 0, index * 10 + 10, 10))
    path = tmp_path / "wall.png"
    img.save(path)
    return path


@pytest.fixture
def no_side_effects(monkeypatch):
    """Stop theming runs from touching hyprpaper or running components."""
    calls = []
    monkeypatch.setattr(
        reload, "set_wallpaper", lambda image, settings: calls.append(("wallpaper", image))
    )
    monkeypatch.setattr(reload, "reload_components", lambda settings: calls.append(("reload",)))
    return calls
