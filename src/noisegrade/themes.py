"""
Theme colors: the stylistic base hue handed to the pipeline.
"""

DEFAULT_THEME = (0.30, 0.60, 1.00)

THEME_PRESETS = {
    "blue": (0.30, 0.60, 1.00),
    "cyan": (0.20, 0.85, 0.85),
    "green": (0.20, 0.85, 0.40),
    "yellow": (0.95, 0.80, 0.20),
    "orange": (1.00, 0.55, 0.20),
    "red": (1.00, 0.30, 0.30),
    "pink": (1.00, 0.40, 0.70),
    "purple": (0.65, 0.35, 1.00),
    "violet": (0.50, 0.30, 0.90),
    "teal": (0.25, 0.70, 0.65),
    "lime": (0.55, 0.90, 0.20),
    "white": (0.85, 0.85, 0.85),
}


def parse_theme(value: str) -> tuple[float, float, float]:
    """
    Parse a theme from a preset name, ``#rrggbb`` hex, or ``r,g,b`` floats.

    Raises:
        ValueError: If the value matches none of the accepted forms.
    """
    text = value.strip()
    key = text.lower()
    if key in THEME_PRESETS:
        return THEME_PRESETS[key]

    if text.startswith("#"):
        digits = text[1:]
        if len(digits) != 6:
            raise ValueError(f"Hex theme must be #rrggbb, got {value!r}")
        try:
            channels = [int(digits[i:i + 2], 16) for i in (0, 2, 4)]
        except ValueError:
            raise ValueError(f"Invalid hex theme: {value!r}") from None
        return tuple(c / 255.0 for c in channels)

    parts = text.split(",")
    if len(parts) == 3:
        try:
            rgb = tuple(float(p) for p in parts)
        except ValueError:
            raise ValueError(f"Invalid RGB theme: {value!r}") from None
        if all(0.0 <= c <= 1.0 for c in rgb):
            return rgb
        raise ValueError(f"RGB theme channels must be in [0, 1], got {value!r}")

    raise ValueError(
        f"Unknown theme {value!r}; use #rrggbb, r,g,b or one of: "
        + ", ".join(sorted(THEME_PRESETS))
    )
