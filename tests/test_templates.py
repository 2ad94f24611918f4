"""Tests for template bindings, rendering and application targets."""

import pytest

from hyprstyle.errors import RenderError, UnresolvedPlaceholders
from hyprstyle.export.targets import (
    DEFAULT_TARGETS,
    HYPRLAND_SOURCE_LINE,
    apply_targets,
    find_template,
    missing_templates,
)
from hyprstyle.export.templates import (
    PlaceholderStyle,
    has_unresolved_placeholders,
    render_template,
    template_bindings,
)
from hyprstyle.settings import BUILTIN_TEMPLATES_DIR


class TestBindings:
    def test_uppercase_roles_and_aliases(self, palette):
        bindings = template_bindings(palette)
        assert bindings["BACKGROUND"] == bindings["BG"] == "#1e1e2e"
        assert bindings["TEXT"] == palette.text
        assert "background" not in bindings

    def test_encoded_variants(self, palette):
        bindings = template_bindings(palette)
        assert bindings["BG_DARK_RGBA"].endswith("ff")
        assert bindings["BG_DARK_RGBA"] == bindings["BG_DARK_RGBA"][:6].upper() + "ff"
        r, g, b = (int(part) for part in bindings["TEXT_RGB"].split(", "))
        assert palette.text == f"#{r:02x}{g:02x}{b:02x}"

    def test_rgba_function_variant(self, palette):
        bindings = template_bindings(palette)
        r, g, b = (int(palette["primary"][i : i + 2], 16) for i in (1, 3, 5))
        assert bindings["PRIMARY_RGBA_FN"] == f"rgba({r}, {g}, {b}, 0xff)"
        assert "TEXT_RGBA_FN" not in bindings


class TestRender:
    def test_braced(self):
        out = render_template("bg=${BG};", {"BG": "#000000"}, PlaceholderStyle.BRACED)
        assert out == "bg=#000000;"

    def test_at_at(self):
        out = render_template("col = rgba(@@A@@)", {"A": "89B4FAff"}, PlaceholderStyle.AT_AT)
        assert out == "col = rgba(89B4FAff)"

    def test_other_style_is_left_alone(self):
        text = "keep @@A@@ but ${B}"
        out = render_template(text, {"B": "x"}, PlaceholderStyle.BRACED)
        assert out == "keep @@A@@ but x"
        assert has_unresolved_placeholders(out)
        assert not has_unresolved_placeholders(out, PlaceholderStyle.BRACED)

    def test_unresolved_raises(self):
        with pytest.raises(UnresolvedPlaceholders) as excinfo:
            render_template("${A} ${B} ${A}", {}, PlaceholderStyle.BRACED, source="t.css")
        assert excinfo.value.placeholders == ["A", "B"]
        assert "t.css" in str(excinfo.value)
        assert isinstance(excinfo.value, RenderError)

    def test_shell_variables_are_not_placeholders(self):
        assert not has_unresolved_placeholders("$TIME $primary")

    @pytest.mark.parametrize("target", DEFAULT_TARGETS, ids=lambda t: t.name)
    def test_builtin_templates_fully_render(self, palette, target):
        template = find_template(target.template, [BUILTIN_TEMPLATES_DIR])
        rendered = render_template(
            template.read_text(), template_bindings(palette), target.style
        )
        assert not has_unresolved_placeholders(rendered, target.style)


class TestApplyTargets:
    def test_all_builtin_templates_ship(self):
        assert missing_templates([BUILTIN_TEMPLATES_DIR]) == []

    def test_renders_installed_apps(self, installed_apps, palette):
        settings = installed_apps
        result = apply_targets(palette, settings.config_home, settings.template_dirs)
        assert result.ok
        assert result.skipped == []
        assert len(result.updated) == len(DEFAULT_TARGETS)
        kitty = (settings.config_home / "kitty" / "kitty.conf").read_text()
        assert palette["background"] in kitty
        assert not has_unresolved_placeholders(kitty)

    def test_hooks_added_once(self, installed_apps, palette):
        settings = installed_apps
        apply_targets(palette, settings.config_home, settings.template_dirs)
        apply_targets(palette, settings.config_home, settings.template_dirs)
        hyprland = (settings.config_home / "hypr" / "hyprland.conf").read_text()
        assert hyprland.count(HYPRLAND_SOURCE_LINE) == 1
        assert hyprland.startswith("monitor = ,preferred,auto,1\n")
        init_lua = (settings.config_home / "nvim" / "init.lua").read_text()
        assert init_lua.count("nvim-colors") == 2  # pcall + require in one hook

    def test_skips_uninstalled_apps(self, settings, palette):
        result = apply_targets(palette, settings.config_home, settings.template_dirs)
        assert result.ok
        assert set(result.skipped) == {"hyprland", "waybar", "nvim", "hyprlock"}
        assert (settings.config_home / "mako" / "config").is_file()
        assert (settings.config_home / "wofi" / "style.css").is_file()

    def test_user_template_overrides_builtin(self, settings, palette):
        override = settings.config_home / "hyprstyle" / "templates"
        override.mkdir(parents=True)
        (override / "kitty.conf").write_text("background ${BG}\n")
        apply_targets(palette, settings.config_home, settings.template_dirs)
        assert (settings.config_home / "kitty" / "kitty.conf").read_text() == "background #1e1e2e\n"

    def test_user_template_can_use_rgba_function(self, settings, palette):
        override = settings.config_home / "hyprstyle" / "templates"
        override.mkdir(parents=True)
        (override / "mako.config").write_text("border-color=${BG_DARK_RGBA_FN}\n")
        apply_targets(palette, settings.config_home, settings.template_dirs)
        mako = (settings.config_home / "mako" / "config").read_text()
        assert mako.startswith("border-color=rgba(")
        assert mako.endswith(", 0xff)\n")

    def test_bad_template_fails_without_touching_target(self, settings, palette):
        override = settings.config_home / "hyprstyle" / "templates"
        override.mkdir(parents=True)
        (override / "kitty.conf").write_text("background ${NOPE}\n")
        kitty = settings.config_home / "kitty" / "kitty.conf"
        kitty.parent.mkdir()
        kitty.write_text("font_size 11\n")

        result = apply_targets(palette, settings.config_home, settings.template_dirs)
        assert not result.ok
        assert result.failed[0][0] == str(kitty)
        assert kitty.read_text() == "font_size 11\n"

    def test_missing_init_lua_is_a_failure(self, settings, palette):
        (settings.config_home / "nvim").mkdir()
        result = apply_targets(palette, settings.config_home, settings.template_dirs)
        assert [path for path, _ in result.failed] == [
            str(settings.config_home / "nvim" / "lua" / "nvim-colors.lua")
        ]
