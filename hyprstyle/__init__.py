"""Wallpaper-driven color themes for Hyprland desktops."""

__version__ = "0.1.0"
