from ..color import contrast_ratio, relative_luminance
from ..palette.generator import MIN_TEXT_CONTRAST, MIN_UI_CONTRAST


def generate_readability_report(palette):
    """Generate a readability report for inspection

    Returns:
        tuple: (report text, list of (role, hex, achieved, required) failures
        against the background)
    """
    bg = palette["background"]
    bg_light = palette["bg_light"]
    dark = relative_luminance(bg) < 0.5

    report = []
    report.append("=" * 70)
    report.append("READABILITY REPORT")
    report.append("=" * 70)
    report.append(f"Palette: {palette.name} ({'DARK' if dark else 'LIGHT'})")
    report.append(f"Background:       {bg} (L: {relative_luminance(bg):.3f})")
    report.append(f"Background Light: {bg_light} (L: {relative_luminance(bg_light):.3f})")
    report.append("")

    categories = [
        ("TEXT", ["text"], MIN_TEXT_CONTRAST),
        ("ACCENTS", ["primary", "secondary", "accent"], MIN_UI_CONTRAST),
        ("SEMANTIC", ["error", "success", "warning"], MIN_UI_CONTRAST),
    ]

    issues = []

    for cat_name, keys, min_contrast in categories:
        report.append(f"\n{cat_name} (min: {min_contrast}:1)")
        report.append("-" * 50)
        for key in keys:
            c = palette[key]
            cr_bg = contrast_ratio(c, bg)
            cr_bg_light = contrast_ratio(c, bg_light)

            status = "✓" if cr_bg >= min_contrast else "✗ FAIL"
            if cr_bg < min_contrast:
                issues.append((key, c, cr_bg, min_contrast))

            report.append(
                f"  {key:10} {c}  vs bg: {cr_bg:4.1f}:1  vs bg_light: {cr_bg_light:4.1f}:1  {status}"
            )

    report.append("\n" + "=" * 70)
    if issues:
        report.append(f"ISSUES FOUND: {len(issues)}")
        for key, hex_val, achieved, required in issues:
            report.append(
                f"  - {key}: {hex_val} has {achieved:.1f}:1, needs {required}:1"
            )
    else:
        report.append("ALL COLORS PASS CONTRAST REQUIREMENTS ✓")
    report.append("=" * 70)

    return "\n".join(report), issues


def format_palette(palette):
    categories = [
        ("BACKGROUNDS", ["background", "bg_light", "bg_dark", "button_bg", "cursorline"]),
        ("FOREGROUND", ["text"]),
        ("ACCENTS", ["primary", "secondary", "accent"]),
        ("SEMANTIC", ["error", "success", "warning"]),
    ]

    lines = ["=" * 60, f"COLOR PALETTE: {palette.name}", "=" * 60]
    for cat_name, keys in categories:
        lines.append(f"\n{cat_name}:")
        for key in keys:
            lines.append(f"  {key:12} {palette[key]}")
    return "\n".join(lines)


def print_palette(palette):
    """Print palette info"""
    print("\n" + format_palette(palette))
