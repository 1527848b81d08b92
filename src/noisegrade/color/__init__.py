"""Color-space conversion and posterize palettes."""

from noisegrade.color.colorspace import hsv2rgb, rgb2hsv
from noisegrade.color.palette import (
    RICH_PALETTE,
    SIMPLE_PALETTE,
    PaletteConfig,
    PaletteVariant,
    posterize,
    posterize_simple,
)
