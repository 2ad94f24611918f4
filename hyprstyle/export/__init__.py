from .json_export import export_json, palette_to_record
from .report import format_palette, generate_readability_report, print_palette
from .targets import DEFAULT_TARGETS, TemplateTarget, apply_targets
from .templates import (
    PlaceholderStyle,
    has_unresolved_placeholders,
    render_template,
    template_bindings,
)

__all__ = [
    "DEFAULT_TARGETS",
    "PlaceholderStyle",
    "TemplateTarget",
    "apply_targets",
    "export_json",
    "format_palette",
    "generate_readability_report",
    "has_unresolved_placeholders",
    "palette_to_record",
    "print_palette",
    "render_template",
    "template_bindings",
]
