"""Application config files rendered from a palette."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..errors import RenderError
from ..fsutil import atomic_write_text
from .templates import PlaceholderStyle, render_template, template_bindings

logger = logging.getLogger(__name__)

HYPRLAND_SOURCE_LINE = "source = ~/.config/hypr/colors.conf"

NVIM_HOOK = """
-- Apply hyprstyle colors after plugins and colorscheme load
vim.api.nvim_create_autocmd("VimEnter", {
  callback = function()
    if pcall(require, "nvim-colors") then
      require("nvim-colors").setup()
    end
  end,
})
"""


def _append_once(path, marker, addition):
    contents = path.read_text(encoding="utf-8")
    if marker in contents:
        return False
    if contents and not contents.endswith("\n"):
        contents += "\n"
    atomic_write_text(path, contents + addition)
    return True


def ensure_hyprland_source(config_home):
    hyprland_conf = Path(config_home) / "hypr" / "hyprland.conf"
    if not hyprland_conf.is_file():
        logger.warning("hyprland.conf not found, not adding colors.conf source line")
        return
    if _append_once(hyprland_conf, HYPRLAND_SOURCE_LINE, HYPRLAND_SOURCE_LINE + "\n"):
        logger.warning("Added '%s' to %s", HYPRLAND_SOURCE_LINE, hyprland_conf)


def ensure_nvim_hook(config_home):
    init_file = Path(config_home) / "nvim" / "init.lua"
    if not init_file.is_file():
        raise RenderError(f"Neovim init.lua not found: {init_file}")
    if _append_once(init_file, "nvim-colors", NVIM_HOOK):
        logger.warning("Added nvim-colors VimEnter hook to %s", init_file)


@dataclass(frozen=True)
class TemplateTarget:
    """One application config produced from a template.

    ``target`` and ``requires`` are relative to the config home. When
    ``requires`` is set and that directory is missing, the application is
    treated as not installed and skipped.
    """

    name: str
    template: str
    target: str
    style: PlaceholderStyle = PlaceholderStyle.BRACED
    requires: Optional[str] = None
    after_write: Optional[Callable] = None

    def target_path(self, config_home):
        return Path(config_home) / self.target


DEFAULT_TARGETS = (
    TemplateTarget(
        "hyprland",
        "hyprland.colors.conf",
        "hypr/colors.conf",
        style=PlaceholderStyle.AT_AT,
        requires="hypr",
        after_write=ensure_hyprland_source,
    ),
    TemplateTarget("kitty", "kitty.conf", "kitty/kitty.conf"),
    TemplateTarget("mako", "mako.config", "mako/config"),
    TemplateTarget("waybar", "waybar.style.css", "waybar/style.css", requires="waybar"),
    TemplateTarget("wofi", "wofi.style.css", "wofi/style.css"),
    TemplateTarget(
        "nvim",
        "nvim.colors.lua",
        "nvim/lua/nvim-colors.lua",
        requires="nvim",
        after_write=ensure_nvim_hook,
    ),
    TemplateTarget(
        "hyprlock",
        "hyprlock.conf",
        "hypr/hyprlock.conf",
        style=PlaceholderStyle.AT_AT,
        requires="hypr",
    ),
)


def find_template(name, template_dirs):
    for directory in template_dirs:
        candidate = Path(directory) / name
        if candidate.is_file():
            return candidate
    raise RenderError(f"Template not found: {name}")


def missing_templates(template_dirs, targets=DEFAULT_TARGETS):
    missing = []
    for target in targets:
        try:
            find_template(target.template, template_dirs)
        except RenderError:
            missing.append(target.template)
    return missing


@dataclass
class ApplyResult:
    updated: List[Path] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self):
        return not self.failed


def apply_target(target, bindings, config_home, template_dirs):
    """Render one target and atomically replace its config file."""
    template = find_template(target.template, template_dirs)
    rendered = render_template(
        template.read_text(encoding="utf-8"), bindings, target.style, source=template.name
    )
    path = atomic_write_text(target.target_path(config_home), rendered)
    if target.after_write is not None:
        target.after_write(config_home)
    logger.info("Updated: %s", path)
    return path


def apply_targets(palette, config_home, template_dirs, targets=DEFAULT_TARGETS):
    """Render every target from ``palette``, continuing past failures."""
    bindings = template_bindings(palette)
    result = ApplyResult()
    for target in targets:
        if target.requires and not (Path(config_home) / target.requires).is_dir():
            logger.warning("%s config directory not found, skipping", target.name)
            result.skipped.append(target.name)
            continue
        logger.info("Updating %s configuration...", target.name)
        try:
            result.updated.append(apply_target(target, bindings, config_home, template_dirs))
        except (RenderError, OSError) as exc:
            logger.warning("Failed to update %s: %s", target.name, exc)
            result.failed.append((str(target.target_path(config_home)), str(exc)))
    return result
