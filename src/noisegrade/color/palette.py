"""
Posterize: luminance bands mapped onto a hue ramp around a theme color.

Shadows lean cooler, mid-tones sit on the theme hue and highlights lean
warmer. The rich ramp can also bleed the complementary hue into the top
bands. The simple ramp is the earlier, narrower variant and is kept as
its own preset.
"""

import enum
from dataclasses import dataclass

import numpy as np

from noisegrade.color.colorspace import hsv2rgb, rgb2hsv
from noisegrade.core.shadermath import clamp, fract, mix, scalar, smoothstep, vec

MIN_BASE_SATURATION = 0.6
SHADOW_VALUE = 0.06
HIGHLIGHT_VALUE = 1.2  # overshoots so the top band clips to full brightness
COMPLEMENT_THRESHOLD = 0.001

SIMPLE_HUE_SPREAD = 0.08


class PaletteVariant(enum.Enum):
    RICH = "rich"
    SIMPLE = "simple"


@dataclass(frozen=True)
class PaletteConfig:
    """Tuning for the posterize ramp."""
    variant: PaletteVariant = PaletteVariant.RICH
    hue_spread: float = 0.10
    complement_mix: float = 0.0

    def apply(self, luminance, theme, levels) -> np.ndarray:
        if self.variant is PaletteVariant.SIMPLE:
            return posterize_simple(luminance, theme, levels)
        return posterize(
            luminance,
            theme,
            levels,
            hue_spread=self.hue_spread,
            complement_mix=self.complement_mix,
        )


RICH_PALETTE = PaletteConfig()
SIMPLE_PALETTE = PaletteConfig(variant=PaletteVariant.SIMPLE, hue_spread=SIMPLE_HUE_SPREAD)


def quantize(luminance, levels) -> np.ndarray:
    """Snap luminance down to ``levels`` bands. Non-positive levels give 0."""
    levels = scalar(levels)
    safe = np.where(levels > 0, levels, np.float32(1.0))
    q = np.floor(scalar(luminance) * safe) / safe
    return np.where(levels > 0, q, np.float32(0.0)).astype(np.float32)


def _theme_base(theme):
    theme_hsv = rgb2hsv(vec(theme, 3))
    base_hue = theme_hsv[..., 0]
    base_sat = np.maximum(theme_hsv[..., 1], np.float32(MIN_BASE_SATURATION))
    return base_hue, base_sat


def _band_value(q) -> np.ndarray:
    return clamp(mix(SHADOW_VALUE, HIGHLIGHT_VALUE, q), 0.0, 1.0)


def posterize(
    luminance,
    theme,
    levels,
    hue_spread: float = 0.10,
    complement_mix: float = 0.0,
) -> np.ndarray:
    """
    Map luminance to a banded analogous ramp around ``theme``.

    Args:
        luminance: (...) float array, nominally [0, 1].
        theme: (3,) or (..., 3) RGB theme color.
        levels: Number of bands.
        hue_spread: Hue rotation at the extreme bands, in turns.
        complement_mix: Weight of the complementary hue in the top bands.

    Returns:
        (..., 3) float32 RGB.
    """
    base_hue, base_sat = _theme_base(theme)
    q = quantize(luminance, levels)

    # q in [0, 1] -> hueT in [-1, 1]
    hue_t = q * 2.0 - 1.0
    hue = fract(base_hue + hue_t * np.float32(hue_spread))

    sat = base_sat * (1.0 - (hue_t * hue_t) * 0.5)
    sat = np.maximum(sat, base_sat * 0.3)
    sat = mix(sat * 1.15, sat, smoothstep(0.0, 0.4, q))

    val = _band_value(q)
    color = hsv2rgb(np.stack(np.broadcast_arrays(hue, sat, val), axis=-1))

    if complement_mix > COMPLEMENT_THRESHOLD:
        comp_hue = fract(base_hue + 0.5)
        comp_sat = base_sat * 0.85
        comp = hsv2rgb(np.stack(np.broadcast_arrays(comp_hue, comp_sat, val), axis=-1))
        blend = smoothstep(0.55, 1.0, q) * np.float32(complement_mix)
        color = mix(color, comp, blend[..., np.newaxis])

    return color.astype(np.float32)


def posterize_simple(luminance, theme, levels) -> np.ndarray:
    """
    Narrower ramp: +/-0.08 hue, no complement.

    Saturation is gated by two smoothsteps, muting the deepest shadows
    and the brightest highlights.
    """
    base_hue, base_sat = _theme_base(theme)
    q = quantize(luminance, levels)

    hue_t = q * 2.0 - 1.0
    hue = fract(base_hue + hue_t * np.float32(SIMPLE_HUE_SPREAD))

    sat = base_sat * mix(0.7, 1.0, smoothstep(0.0, 0.25, q))
    sat = sat * mix(1.0, 0.55, smoothstep(0.7, 1.0, q))

    val = _band_value(q)
    return hsv2rgb(np.stack(np.broadcast_arrays(hue, sat, val), axis=-1))
